from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from signage.api.deps import normalize_entity_id, require_account
from signage.db import get_db
from signage.models.media import Media
from signage.models.playlist import Playlist, PlaylistItem
from signage.models.schedule import Schedule
from signage.models.screen import Screen
from signage.schemas.playlist import PlaylistIn, PlaylistItemIn, PlaylistItemOut, PlaylistItemUpdateIn, PlaylistOut

router = APIRouter(prefix="/playlists", tags=["playlists"])
DEFAULT_ITEM_DURATION_SEC = 10


def _get_owned_playlist(db: Session, playlist_id: str, account_id: str) -> Playlist:
    playlist_id = normalize_entity_id(playlist_id, "playlist_id")
    playlist = db.get(Playlist, playlist_id)
    if not playlist or playlist.owner_account != account_id:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist


def _get_item(db: Session, playlist: Playlist, item_id: str) -> PlaylistItem:
    item_id = normalize_entity_id(item_id, "item_id")
    item = db.get(PlaylistItem, item_id)
    if not item or item.playlist_id != playlist.id:
        raise HTTPException(status_code=404, detail="Playlist item not found")
    return item


def _ordered_items(db: Session, playlist_id: str) -> list[PlaylistItem]:
    return (
        db.query(PlaylistItem)
        .filter(PlaylistItem.playlist_id == playlist_id)
        .order_by(PlaylistItem.sort_order.asc(), PlaylistItem.created_at.asc(), PlaylistItem.id.asc())
        .all()
    )


@router.get("", response_model=list[PlaylistOut])
def list_playlists(account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    return (
        db.query(Playlist)
        .filter(Playlist.owner_account == account_id)
        .order_by(Playlist.created_at.asc())
        .all()
    )


@router.post("", response_model=PlaylistOut)
def create_playlist(payload: PlaylistIn, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Playlist name cannot be empty")
    playlist = Playlist(owner_account=account_id, name=name)
    db.add(playlist)
    db.commit()
    db.refresh(playlist)
    return playlist


@router.get("/{playlist_id}")
def get_playlist(playlist_id: str, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    playlist = _get_owned_playlist(db, playlist_id, account_id)
    return {
        "id": str(playlist.id),
        "name": playlist.name,
        "items": [PlaylistItemOut.model_validate(item) for item in _ordered_items(db, playlist.id)],
    }


@router.delete("/{playlist_id}")
def delete_playlist(playlist_id: str, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    playlist = _get_owned_playlist(db, playlist_id, account_id)
    db.query(PlaylistItem).filter(PlaylistItem.playlist_id == playlist.id).delete(synchronize_session=False)
    db.query(Schedule).filter(Schedule.playlist_id == playlist.id).delete(synchronize_session=False)
    db.query(Screen).filter(Screen.default_playlist_id == playlist.id).update(
        {"default_playlist_id": None},
        synchronize_session=False,
    )
    db.delete(playlist)
    db.commit()
    return {"ok": True}


@router.post("/{playlist_id}/items", response_model=PlaylistItemOut)
def add_item(
    playlist_id: str,
    payload: PlaylistItemIn,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    playlist = _get_owned_playlist(db, playlist_id, account_id)
    media_id = normalize_entity_id(payload.media_id, "media_id")
    media = db.get(Media, media_id)
    if not media or media.owner_account != account_id:
        raise HTTPException(status_code=404, detail="Media not found")

    count = db.query(PlaylistItem).filter(PlaylistItem.playlist_id == playlist.id).count()
    item = PlaylistItem(
        playlist_id=playlist.id,
        media_id=media.id,
        media_url=media.url,
        media_type=media.type,
        duration_sec=payload.duration or DEFAULT_ITEM_DURATION_SEC,
        sort_order=count + 1,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@router.put("/{playlist_id}/items/{item_id}", response_model=PlaylistItemOut)
def update_item(
    playlist_id: str,
    item_id: str,
    payload: PlaylistItemUpdateIn,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    playlist = _get_owned_playlist(db, playlist_id, account_id)
    item = _get_item(db, playlist, item_id)
    if payload.sort_order is not None:
        item.sort_order = payload.sort_order
    if payload.duration is not None:
        item.duration_sec = payload.duration
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{playlist_id}/items/{item_id}")
def delete_item(
    playlist_id: str,
    item_id: str,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    playlist = _get_owned_playlist(db, playlist_id, account_id)
    item = _get_item(db, playlist, item_id)
    db.delete(item)
    db.commit()
    return {"ok": True}
