import json

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from signage.api.deps import normalize_entity_id, require_account
from signage.db import get_db
from signage.models.group import ScreenGroup
from signage.models.playlist import Playlist
from signage.models.schedule import Schedule
from signage.models.screen import Screen
from signage.schemas.schedule import ScheduleIn, ScheduleOut, ScheduleUpdateIn
from signage.services.rules import parse_clock, parse_days

router = APIRouter(prefix="/schedules", tags=["schedules"])


def _parse_time(value: str, field_name: str) -> int:
    minutes = parse_clock(value)
    if minutes is None:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name} format. Use HH:MM.")
    return minutes


def _normalize_days(days: list[int]) -> str:
    invalid = [day for day in days if not 0 <= day <= 6]
    if invalid:
        raise HTTPException(status_code=400, detail="days must be weekday numbers 0..6 (0 = Sunday).")
    if not days:
        raise HTTPException(status_code=400, detail="days cannot be empty.")
    return json.dumps(sorted(set(days)))


def _normalize_target(screen_id: str | None, group_id: str | None) -> tuple[str | None, str | None]:
    screen_id = (screen_id or "").strip() or None
    group_id = (group_id or "").strip() or None
    if (screen_id is None) == (group_id is None):
        raise HTTPException(status_code=400, detail="Provide exactly one of screen_id or group_id.")
    return screen_id, group_id


def _validate_rule(
    db: Session,
    account_id: str,
    playlist_id: str,
    screen_id: str | None,
    group_id: str | None,
    start_time: str,
    end_time: str,
) -> None:
    start = _parse_time(start_time, "start_time")
    end = _parse_time(end_time, "end_time")
    # Windows cannot cross midnight.
    if start >= end:
        raise HTTPException(status_code=400, detail="start_time must be before end_time.")

    playlist = db.get(Playlist, playlist_id)
    if not playlist or playlist.owner_account != account_id:
        raise HTTPException(status_code=404, detail="Playlist not found")
    if screen_id is not None:
        screen = db.get(Screen, screen_id)
        if not screen or screen.owner_account != account_id:
            raise HTTPException(status_code=404, detail="Screen not found")
    if group_id is not None:
        group = db.get(ScreenGroup, group_id)
        if not group or group.owner_account != account_id:
            raise HTTPException(status_code=404, detail="Group not found")


def _get_owned_schedule(db: Session, schedule_id: str, account_id: str) -> Schedule:
    schedule_id = normalize_entity_id(schedule_id, "schedule_id")
    schedule = db.get(Schedule, schedule_id)
    if not schedule or schedule.owner_account != account_id:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return schedule


@router.post("", response_model=ScheduleOut)
def create_schedule(
    payload: ScheduleIn,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    screen_id, group_id = _normalize_target(payload.screen_id, payload.group_id)
    playlist_id = normalize_entity_id(payload.playlist_id, "playlist_id")
    days = _normalize_days(payload.days)
    _validate_rule(db, account_id, playlist_id, screen_id, group_id, payload.start_time, payload.end_time)
    schedule = Schedule(
        owner_account=account_id,
        name=(payload.name or "").strip() or None,
        playlist_id=playlist_id,
        screen_id=screen_id,
        group_id=group_id,
        days=days,
        start_time=payload.start_time.strip(),
        end_time=payload.end_time.strip(),
        priority=payload.priority,
    )
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule


@router.get("", response_model=list[ScheduleOut])
def list_schedules(
    screen_id: str | None = None,
    group_id: str | None = None,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    query = db.query(Schedule).filter(Schedule.owner_account == account_id)
    if screen_id:
        query = query.filter(Schedule.screen_id == screen_id.strip())
    if group_id:
        query = query.filter(Schedule.group_id == group_id.strip())
    return query.order_by(Schedule.priority.desc(), Schedule.created_at.asc()).all()


@router.get("/{schedule_id}", response_model=ScheduleOut)
def get_schedule(schedule_id: str, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    return _get_owned_schedule(db, schedule_id, account_id)


@router.put("/{schedule_id}", response_model=ScheduleOut)
def update_schedule(
    schedule_id: str,
    payload: ScheduleUpdateIn,
    account_id: str = Depends(require_account),
    db: Session = Depends(get_db),
):
    schedule = _get_owned_schedule(db, schedule_id, account_id)

    if payload.screen_id is not None or payload.group_id is not None:
        new_screen_id, new_group_id = _normalize_target(payload.screen_id, payload.group_id)
    else:
        new_screen_id, new_group_id = schedule.screen_id, schedule.group_id
    new_playlist_id = (
        normalize_entity_id(payload.playlist_id, "playlist_id")
        if payload.playlist_id is not None
        else schedule.playlist_id
    )
    new_start = payload.start_time.strip() if payload.start_time is not None else schedule.start_time
    new_end = payload.end_time.strip() if payload.end_time is not None else schedule.end_time
    new_days = _normalize_days(payload.days) if payload.days is not None else json.dumps(sorted(parse_days(schedule.days)))
    _validate_rule(db, account_id, new_playlist_id, new_screen_id, new_group_id, new_start, new_end)

    schedule.screen_id = new_screen_id
    schedule.group_id = new_group_id
    schedule.playlist_id = new_playlist_id
    schedule.start_time = new_start
    schedule.end_time = new_end
    schedule.days = new_days
    if payload.name is not None:
        schedule.name = payload.name.strip() or None
    if payload.priority is not None:
        schedule.priority = payload.priority
    db.commit()
    db.refresh(schedule)
    return schedule


@router.delete("/{schedule_id}")
def delete_schedule(schedule_id: str, account_id: str = Depends(require_account), db: Session = Depends(get_db)):
    schedule = _get_owned_schedule(db, schedule_id, account_id)
    db.delete(schedule)
    db.commit()
    return {"ok": True}
