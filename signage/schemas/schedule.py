from pydantic import BaseModel, Field, field_validator

from signage.services.rules import parse_days

class ScheduleIn(BaseModel):
    name: str | None = None
    playlist_id: str = Field(..., min_length=1)
    screen_id: str | None = None
    group_id: str | None = None
    days: list[int]
    start_time: str
    end_time: str
    priority: int = 0

class ScheduleUpdateIn(BaseModel):
    name: str | None = None
    playlist_id: str | None = None
    screen_id: str | None = None
    group_id: str | None = None
    days: list[int] | None = None
    start_time: str | None = None
    end_time: str | None = None
    priority: int | None = None

class ScheduleOut(BaseModel):
    id: str
    name: str | None = None
    playlist_id: str
    screen_id: str | None = None
    group_id: str | None = None
    days: list[int]
    start_time: str
    end_time: str
    priority: int = 0

    @field_validator("days", mode="before")
    @classmethod
    def decode_days(cls, value):
        return sorted(parse_days(value))

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, value):
        return 0 if value is None else value

    class Config:
        from_attributes = True
