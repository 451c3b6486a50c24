from datetime import datetime
from pydantic import BaseModel, Field

class ScreenPairIn(BaseModel):
    code: str = Field(..., min_length=1)
    name: str | None = None

class ScreenPlaylistIn(BaseModel):
    playlist_id: str | None = None

class ScreenGroupIn(BaseModel):
    group_id: str | None = None

class ScreenOut(BaseModel):
    id: str
    name: str | None = None
    paired: bool
    group_id: str | None = None
    default_playlist_id: str | None = None
    paired_at: datetime | None = None
    last_seen: datetime | None = None

    class Config:
        from_attributes = True
