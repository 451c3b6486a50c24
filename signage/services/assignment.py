"""Final playback assignment for one screen.

Combines the resolver's winner with the screen's default playlist and
attaches the playlist contents. Never raises for a broken playlist: the
worst case is an assignment with no playlist.
"""
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Iterable

from signage.services.resolver import resolve_active_playlist
from signage.services.rules import ScheduleRule, ScreenRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaylistItemView:
    id: str
    media_id: str
    media_url: str | None
    media_type: str | None
    duration: int | None
    sort_order: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "media_id": self.media_id,
            "media_url": self.media_url,
            "media_type": self.media_type,
            "duration": self.duration,
            "sort_order": self.sort_order,
        }


@dataclass(frozen=True)
class PlaylistView:
    id: str
    name: str
    items: tuple[PlaylistItemView, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class Assignment:
    active_playlist_id: str | None
    playlist: PlaylistView | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "active_playlist_id": self.active_playlist_id,
            "playlist": self.playlist.to_dict() if self.playlist else None,
        }


PlaylistLookup = Callable[[str], PlaylistView | None]

EMPTY_ASSIGNMENT = Assignment(active_playlist_id=None, playlist=None)


def schedules_apply_to(screen: ScreenRef) -> bool:
    """Ungrouped screens always play their default playlist; rules are not consulted."""
    return bool(screen.group_id)


def order_items(items: Iterable[PlaylistItemView]) -> tuple[PlaylistItemView, ...]:
    # sorted() is stable: equal sort_order keeps storage order.
    return tuple(sorted(items, key=lambda item: item.sort_order))


def get_assignment(
    screen: ScreenRef,
    rules: Iterable[ScheduleRule],
    playlist_lookup: PlaylistLookup,
    now: datetime,
) -> Assignment:
    active_playlist_id = None
    if schedules_apply_to(screen):
        active_playlist_id = resolve_active_playlist(screen, rules, now)

    effective_id = active_playlist_id or screen.default_playlist_id
    if not effective_id:
        return EMPTY_ASSIGNMENT

    try:
        playlist = playlist_lookup(effective_id)
    except Exception as exc:
        logger.warning("Playlist %s lookup failed for screen %s: %s", effective_id, screen.id, exc)
        playlist = None

    if playlist is None:
        return Assignment(active_playlist_id=effective_id, playlist=None)
    return Assignment(
        active_playlist_id=effective_id,
        playlist=replace(playlist, items=order_items(playlist.items)),
    )
