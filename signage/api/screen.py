from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from signage.api.deps import get_clock, normalize_entity_id, require_account
from signage.db import get_db
from signage.models.group import ScreenGroup
from signage.models.playlist import Playlist
from signage.models.schedule import Schedule
from signage.models.screen import Screen
from signage.schemas.screen import ScreenGroupIn, ScreenOut, ScreenPairIn, ScreenPlaylistIn
from signage.services.assignment import get_assignment, schedules_apply_to
from signage.services.clock import timezone_label
from signage.services.pairing import code_expired, code_expiry, generate_code, generate_screen_token, normalize_code
from signage.services.playback import load_rules_for_screen, make_playlist_lookup, resolve_screen_assignment
from signage.services.resolver import resolve_active_rule
from signage.services.rules import ScreenRef
from signage.services.store import SqlRecordStore

router = APIRouter(prefix="/screens", tags=["screens"])
DEFAULT_SCREEN_NAME = "My Screen"
PAIRING_CODE_ATTEMPTS = 10


def _screen_ref(screen: Screen) -> ScreenRef:
    return ScreenRef(
        id=str(screen.id),
        group_id=screen.group_id or None,
        default_playlist_id=screen.default_playlist_id or None,
        owner_account=screen.owner_account or None,
    )


def _get_owned_screen(db: Session, screen_id: str, account_id: str) -> Screen:
    screen_id = normalize_entity_id(screen_id, "screen_id")
    screen = db.get(Screen, screen_id)
    if not screen or screen.owner_account != account_id:
        raise HTTPException(status_code=404, detail="Screen not found")
    return screen


def _group_name(db: Session, group_id: str | None) -> str | None:
    if not group_id:
        return None
    group = db.get(ScreenGroup, group_id)
    return group.name if group else None


def _unused_pairing_code(db: Session, now: datetime | None = None) -> str:
    """A fresh code not held by any unpaired screen whose code is still live."""
    now = now or datetime.utcnow()
    for _ in range(PAIRING_CODE_ATTEMPTS):
        code = generate_code()
        taken = (
            db.query(Screen.id)
            .filter(
                Screen.pairing_code == code,
                Screen.paired.is_(False),
                Screen.code_expires_at > now,
            )
            .first()
        )
        if taken is None:
            return code
    raise HTTPException(status_code=503, detail="Could not allocate a pairing code")


@router.post("/register")
def register_screen(db: Session = Depends(get_db)):
    screen = Screen(
        pairing_code=_unused_pairing_code(db),
        screen_token=generate_screen_token(),
        code_expires_at=code_expiry(),
        paired=False,
    )
    db.add(screen)
    db.commit()
    db.refresh(screen)
    return {
        "screen_id": str(screen.id),
        "pairing_code": screen.pairing_code,
        "screen_token": screen.screen_token,
        "expires_at": screen.code_expires_at,
    }


@router.get("/status")
def screen_status(
    token: str,
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    token = (token or "").strip()
    screen = db.query(Screen).filter(Screen.screen_token == token).first() if token else None
    if not screen:
        raise HTTPException(status_code=404, detail="Screen not found")

    now_utc = datetime.utcnow()
    if not screen.paired and code_expired(screen.code_expires_at, now_utc):
        screen.pairing_code = _unused_pairing_code(db, now_utc)
        screen.code_expires_at = code_expiry(now_utc)
    screen.last_seen = now_utc
    db.commit()
    db.refresh(screen)

    assignment = resolve_screen_assignment(SqlRecordStore(db), _screen_ref(screen), clock())
    return {
        "id": str(screen.id),
        "paired": bool(screen.paired),
        "pairing_code": None if screen.paired else screen.pairing_code,
        "name": screen.name,
        "group_id": screen.group_id,
        "group_name": _group_name(db, screen.group_id),
        **assignment.to_dict(),
    }


@router.post("/pair")
def pair_screen(
    payload: ScreenPairIn,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    code = normalize_code(payload.code)
    screen = (
        db.query(Screen)
        .filter(Screen.pairing_code == code, Screen.paired.is_(False))
        .order_by(Screen.code_expires_at.desc())
        .first()
    )
    if not screen:
        raise HTTPException(status_code=400, detail="Invalid code")
    if code_expired(screen.code_expires_at):
        raise HTTPException(status_code=400, detail="Code expired")

    screen.owner_account = account_id
    screen.name = (payload.name or "").strip() or DEFAULT_SCREEN_NAME
    screen.paired = True
    screen.paired_at = datetime.utcnow()
    screen.pairing_code = None
    screen.code_expires_at = None
    db.commit()
    return {"ok": True, "screen_id": str(screen.id)}


@router.get("", response_model=list[ScreenOut])
def list_screens(account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    return (
        db.query(Screen)
        .filter(Screen.owner_account == account_id)
        .order_by(Screen.created_at.asc())
        .all()
    )


@router.put("/{screen_id}/playlist", response_model=ScreenOut)
def set_default_playlist(
    screen_id: str,
    payload: ScreenPlaylistIn,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    screen = _get_owned_screen(db, screen_id, account_id)
    playlist_id = (payload.playlist_id or "").strip() or None
    if playlist_id is not None:
        playlist = db.get(Playlist, playlist_id)
        if not playlist or playlist.owner_account != account_id:
            raise HTTPException(status_code=404, detail="Playlist not found")
    screen.default_playlist_id = playlist_id
    db.commit()
    db.refresh(screen)
    return screen


@router.put("/{screen_id}/group", response_model=ScreenOut)
def set_screen_group(
    screen_id: str,
    payload: ScreenGroupIn,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    screen = _get_owned_screen(db, screen_id, account_id)
    group_id = (payload.group_id or "").strip() or None
    if group_id is not None:
        group = db.get(ScreenGroup, group_id)
        if not group or group.owner_account != account_id:
            raise HTTPException(status_code=404, detail="Group not found")
    screen.group_id = group_id
    db.commit()
    db.refresh(screen)
    return screen


@router.get("/{screen_id}/assignment")
def preview_assignment(
    screen_id: str,
    at: datetime | None = None,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    screen = _get_owned_screen(db, screen_id, account_id)
    # `at` is read as local wall-clock time; no zone conversion is applied.
    now = at.replace(tzinfo=None) if at is not None else clock()
    store = SqlRecordStore(db)
    ref = _screen_ref(screen)

    winner = None
    rules = []
    if schedules_apply_to(ref):
        rules = load_rules_for_screen(store, ref)
        winner = resolve_active_rule(ref, rules, now)
    assignment = get_assignment(ref, rules, make_playlist_lookup(store), now)
    return {
        "screen_id": str(screen.id),
        "evaluated_at": now.isoformat(),
        "timezone": timezone_label(),
        "schedule_id": winner.id if winner else None,
        **assignment.to_dict(),
    }


@router.delete("/{screen_id}")
def delete_screen(
    screen_id: str,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    screen = _get_owned_screen(db, screen_id, account_id)
    db.query(Schedule).filter(Schedule.screen_id == screen.id).delete(synchronize_session=False)
    db.delete(screen)
    db.commit()
    return {"ok": True}
