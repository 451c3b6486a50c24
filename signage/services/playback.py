import logging
from datetime import datetime
from typing import Any

from signage.services.assignment import (
    Assignment,
    PlaylistItemView,
    PlaylistLookup,
    PlaylistView,
    get_assignment,
    order_items,
    schedules_apply_to,
)
from signage.services.errors import ResolutionUnavailable, StoreError
from signage.services.rules import ScheduleRule, ScreenRef, rule_from_record
from signage.services.store import RecordStore

logger = logging.getLogger(__name__)


def load_rules_for_screen(store: RecordStore, screen: ScreenRef) -> list[ScheduleRule]:
    """Rules owned by the screen's account that target the screen or its group."""
    if not screen.owner_account:
        return []
    any_of: list[dict[str, Any]] = [{"screen_id": screen.id}]
    if screen.group_id:
        any_of.append({"group_id": screen.group_id})
    try:
        records = store.query(
            "schedules",
            where={"owner_account": screen.owner_account},
            any_of=any_of,
        )
    except StoreError as exc:
        logger.error("Could not load schedules for screen %s: %s", screen.id, exc)
        raise ResolutionUnavailable(screen.id, str(exc)) from exc

    rules = []
    for record in records:
        rule = rule_from_record(record)
        if rule is not None:
            rules.append(rule)
    return rules


def _item_view(record: dict[str, Any]) -> PlaylistItemView:
    return PlaylistItemView(
        id=str(record["id"]),
        media_id=str(record["media_id"]),
        media_url=record.get("media_url"),
        media_type=record.get("media_type"),
        duration=record.get("duration_sec"),
        sort_order=int(record.get("sort_order") or 0),
    )


def make_playlist_lookup(store: RecordStore) -> PlaylistLookup:
    def lookup(playlist_id: str) -> PlaylistView | None:
        playlists = store.query("playlists", where={"id": playlist_id})
        if not playlists:
            return None
        items = store.query("playlist_items", where={"playlist_id": playlist_id})
        return PlaylistView(
            id=str(playlists[0]["id"]),
            name=playlists[0].get("name") or "",
            items=order_items(_item_view(row) for row in items),
        )

    return lookup


def resolve_screen_assignment(store: RecordStore, screen: ScreenRef, now: datetime) -> Assignment:
    rules = load_rules_for_screen(store, screen) if schedules_apply_to(screen) else []
    return get_assignment(screen, rules, make_playlist_lookup(store), now)
