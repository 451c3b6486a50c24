import os
import logging
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from signage.db import Base, engine
from signage.api import media, playlist, schedule, screen, group
from signage.services.clock import timezone_label
from signage.services.errors import ResolutionUnavailable
from signage.services.storage import STORAGE_DIR, ensure_storage

LOG_LEVEL = os.getenv("SIGNAGE_LOG_LEVEL", "INFO").strip().upper() or "INFO"
API_KEY = os.getenv("SIGNAGE_API_KEY", "").strip()
QUIET_ACCESS_LOG = os.getenv("SIGNAGE_QUIET_ACCESS_LOG", "1").strip().lower() in {"1", "true", "yes", "on"}

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if QUIET_ACCESS_LOG:
    # Devices poll every few seconds; keep warning/error lines only.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

Base.metadata.create_all(bind=engine)
ensure_storage()

app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ResolutionUnavailable)
async def resolution_unavailable_handler(request: Request, exc: ResolutionUnavailable):
    return JSONResponse(
        {"detail": "Schedule resolution unavailable", "screen_id": exc.screen_id},
        status_code=503,
    )


@app.get("/")
def root():
    return {
        "ok": True,
        "service": "signage-api",
        "time_utc": datetime.now(timezone.utc).isoformat(),
        "docs": "/docs",
    }


@app.get("/healthz")
def healthz():
    return {"ok": True, "schedule_timezone": timezone_label()}


@app.middleware("http")
async def api_key_middleware(request: Request, call_next):
    if not API_KEY:
        return await call_next(request)
    path = request.url.path
    if path.startswith("/docs") or path.startswith("/openapi.json") or path.startswith("/redoc") or path.startswith("/storage"):
        return await call_next(request)
    if request.headers.get("X-API-Key") != API_KEY:
        return JSONResponse({"detail": "Unauthorized"}, status_code=401)
    return await call_next(request)

app.include_router(screen.router)
app.include_router(group.router)
app.include_router(schedule.router)
app.include_router(playlist.router)
app.include_router(media.router)

app.mount("/storage", StaticFiles(directory=STORAGE_DIR), name="storage")
logger.info("Signage API ready (schedule timezone: %s)", timezone_label())
