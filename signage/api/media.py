import logging

from fastapi import APIRouter, UploadFile, File, Depends, HTTPException
from sqlalchemy.orm import Session

from signage.api.deps import normalize_entity_id, require_account
from signage.db import get_db
from signage.models.media import Media
from signage.models.playlist import PlaylistItem
from signage.schemas.media import MediaOut
from signage.services.storage import delete_file, media_type_for, save_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])


def _resolved_media_name(name: str | None, file: UploadFile) -> str:
    candidate = (name or "").strip()
    if candidate and candidate.lower() != "unnamed":
        return candidate
    fallback = (file.filename or "").strip()
    if fallback:
        return fallback
    return "media-file"


def _get_owned_media(db: Session, media_id: str, account_id: str) -> Media:
    media_id = normalize_entity_id(media_id, "media_id")
    media = db.get(Media, media_id)
    if not media or media.owner_account != account_id:
        raise HTTPException(status_code=404, detail="Media not found")
    return media


@router.post("/upload", response_model=MediaOut)
def upload_media(
    file: UploadFile = File(...),
    name: str | None = None,
    type: str | None = None,
    duration_sec: int = 10,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    try:
        media_type = media_type_for(file.content_type, type)
        path, size, checksum = save_file(file, media_type)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    media = Media(
        owner_account=account_id,
        name=_resolved_media_name(name, file),
        type=media_type,
        path=path,
        duration_sec=duration_sec if duration_sec > 0 else None,
        size=size,
        checksum=checksum,
    )
    db.add(media)
    db.commit()
    db.refresh(media)
    return media


@router.get("", response_model=list[MediaOut])
def list_media(account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    return (
        db.query(Media)
        .filter(Media.owner_account == account_id)
        .order_by(Media.created_at.desc(), Media.id.desc())
        .all()
    )


@router.get("/{media_id}", response_model=MediaOut)
def get_media(media_id: str, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    return _get_owned_media(db, media_id, account_id)


@router.delete("/{media_id}")
def delete_media(media_id: str, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    media = _get_owned_media(db, media_id, account_id)
    media_path = media.path
    db.query(PlaylistItem).filter(PlaylistItem.media_id == media.id).delete(synchronize_session=False)
    db.delete(media)
    db.commit()
    try:
        delete_file(media_path)
    except OSError as exc:
        logger.warning("Could not remove media file %s: %s", media_path, exc)
    return {"ok": True}
