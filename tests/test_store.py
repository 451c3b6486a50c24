import json
from datetime import datetime, timedelta

import pytest

from conftest import ACCOUNT, MONDAY, OTHER_ACCOUNT
from signage.models.group import ScreenGroup
from signage.models.playlist import Playlist, PlaylistItem
from signage.models.schedule import Schedule
from signage.models.screen import Screen
from signage.services.errors import ResolutionUnavailable, StoreError
from signage.services.playback import load_rules_for_screen, make_playlist_lookup, resolve_screen_assignment
from signage.services.rules import ScreenRef
from signage.services.store import SqlRecordStore


def add_schedule(db, **fields) -> Schedule:
    values = {
        "owner_account": ACCOUNT,
        "playlist_id": "p-rule",
        "days": json.dumps([1]),
        "start_time": "08:00",
        "end_time": "18:00",
        "priority": 0,
    }
    values.update(fields)
    schedule = Schedule(**values)
    db.add(schedule)
    db.commit()
    return schedule


class FailingStore:
    def query(self, collection, where=None, any_of=None):
        raise StoreError("database is locked")


def test_query_filters_with_where_and_any_of(db_session):
    add_schedule(db_session, id="a", screen_id="s1")
    add_schedule(db_session, id="b", group_id="g1")
    add_schedule(db_session, id="c", screen_id="s2")
    add_schedule(db_session, id="d", screen_id="s1", owner_account=OTHER_ACCOUNT)

    store = SqlRecordStore(db_session)
    rows = store.query(
        "schedules",
        where={"owner_account": ACCOUNT},
        any_of=[{"screen_id": "s1"}, {"group_id": "g1"}],
    )
    assert sorted(row["id"] for row in rows) == ["a", "b"]
    assert rows[0]["days"] == "[1]"


def test_query_unknown_collection_or_field(db_session):
    store = SqlRecordStore(db_session)
    with pytest.raises(StoreError):
        store.query("users")
    with pytest.raises(StoreError):
        store.query("schedules", where={"colour": "red"})


def test_load_rules_for_screen_uses_owner_screen_and_group(db_session):
    add_schedule(db_session, id="by-screen", screen_id="s1")
    add_schedule(db_session, id="by-group", group_id="g1")
    add_schedule(db_session, id="foreign", group_id="g1", owner_account=OTHER_ACCOUNT)
    add_schedule(db_session, id="unrelated", group_id="g2")

    screen = ScreenRef(id="s1", group_id="g1", owner_account=ACCOUNT)
    rules = load_rules_for_screen(SqlRecordStore(db_session), screen)
    assert sorted(rule.id for rule in rules) == ["by-group", "by-screen"]


def test_load_rules_skips_unowned_screens(db_session):
    add_schedule(db_session, id="r", screen_id="s1")
    assert load_rules_for_screen(SqlRecordStore(db_session), ScreenRef(id="s1", group_id="g1")) == []


def test_malformed_days_record_is_loaded_but_never_active(db_session):
    add_schedule(db_session, id="bad", screen_id="s1", days="monday-friday", priority=50, playlist_id="p-bad")
    add_schedule(db_session, id="good", screen_id="s1", playlist_id="p-good")
    screen = ScreenRef(id="s1", group_id="g1", owner_account=ACCOUNT)
    store = SqlRecordStore(db_session)

    rules = load_rules_for_screen(store, screen)
    assert {rule.id for rule in rules} == {"bad", "good"}
    assignment = resolve_screen_assignment(store, screen, MONDAY.replace(hour=10))
    assert assignment.active_playlist_id == "p-good"


def test_rule_fetch_failure_raises_resolution_unavailable():
    screen = ScreenRef(id="s1", group_id="g1", owner_account=ACCOUNT)
    with pytest.raises(ResolutionUnavailable) as excinfo:
        load_rules_for_screen(FailingStore(), screen)
    assert excinfo.value.screen_id == "s1"


def test_playlist_lookup_orders_items(db_session):
    db_session.add(Playlist(id="p1", owner_account=ACCOUNT, name="Lobby"))
    db_session.commit()
    base = datetime(2026, 1, 1)
    for item_id, sort_order, offset in [("third", 3, 0), ("first", 1, 1), ("second-a", 2, 2), ("second-b", 2, 3)]:
        db_session.add(
            PlaylistItem(
                id=item_id,
                playlist_id="p1",
                media_id=f"m-{item_id}",
                media_url=f"/storage/media/{item_id}.png",
                media_type="image",
                duration_sec=5,
                sort_order=sort_order,
                created_at=base + timedelta(seconds=offset),
            )
        )
    db_session.commit()

    lookup = make_playlist_lookup(SqlRecordStore(db_session))
    playlist = lookup("p1")
    assert playlist.name == "Lobby"
    assert [i.id for i in playlist.items] == ["first", "second-a", "second-b", "third"]
    assert lookup("missing") is None


def test_resolve_screen_assignment_for_stored_screen(db_session):
    db_session.add(ScreenGroup(id="g1", owner_account=ACCOUNT, name="Lobby"))
    db_session.add(Playlist(id="p-default", owner_account=ACCOUNT, name="Default"))
    db_session.add(Playlist(id="p-rule", owner_account=ACCOUNT, name="Rule"))
    db_session.add(
        Screen(id="s1", owner_account=ACCOUNT, group_id="g1", default_playlist_id="p-default", paired=True)
    )
    db_session.commit()
    add_schedule(db_session, id="r1", group_id="g1", start_time="09:00", end_time="12:00")

    store = SqlRecordStore(db_session)
    screen = ScreenRef(id="s1", group_id="g1", default_playlist_id="p-default", owner_account=ACCOUNT)
    assert resolve_screen_assignment(store, screen, MONDAY.replace(hour=10)).playlist.name == "Rule"
    assert resolve_screen_assignment(store, screen, MONDAY.replace(hour=12)).playlist.name == "Default"


def test_ungrouped_screen_never_queries_rules():
    screen = ScreenRef(id="s1", default_playlist_id=None, owner_account=ACCOUNT)
    assignment = resolve_screen_assignment(FailingStore(), screen, MONDAY)
    assert assignment.playlist is None
