from datetime import datetime
from typing import Callable

from fastapi import HTTPException, Request

from signage.services.clock import local_now


def resolve_account_id(request: Request) -> str | None:
    header_account = (request.headers.get("X-Account-ID") or "").strip()
    if header_account:
        return header_account
    return None


def require_account(request: Request) -> str:
    account_id = resolve_account_id(request)
    if not account_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return account_id


def get_clock() -> Callable[[], datetime]:
    return local_now


def normalize_entity_id(value: str | None, field_name: str) -> str:
    normalized = (value or "").strip()
    if normalized.startswith("{") and normalized.endswith("}"):
        normalized = normalized[1:-1].strip()
    if not normalized:
        raise HTTPException(status_code=400, detail=f"{field_name} is required")
    return normalized
