import os
import secrets
import uuid
from datetime import datetime, timedelta

PAIRING_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PAIRING_CODE_LENGTH = 6
PAIRING_CODE_TTL_SEC = int(os.getenv("SIGNAGE_PAIRING_CODE_TTL_SEC", "900"))


def generate_code(length: int = PAIRING_CODE_LENGTH) -> str:
    return "".join(secrets.choice(PAIRING_CODE_ALPHABET) for _ in range(length))


def generate_screen_token() -> str:
    return str(uuid.uuid4())


def code_expiry(now: datetime | None = None) -> datetime:
    return (now or datetime.utcnow()) + timedelta(seconds=PAIRING_CODE_TTL_SEC)


def code_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    if expires_at is None:
        return True
    return (now or datetime.utcnow()) > expires_at


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()
