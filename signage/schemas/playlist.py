from pydantic import BaseModel, Field

class PlaylistIn(BaseModel):
    name: str = Field(..., min_length=1)

class PlaylistItemIn(BaseModel):
    media_id: str = Field(..., min_length=1)
    duration: int | None = Field(None, gt=0)

class PlaylistItemUpdateIn(BaseModel):
    sort_order: int | None = None
    duration: int | None = Field(None, gt=0)

class PlaylistItemOut(BaseModel):
    id: str
    playlist_id: str
    media_id: str
    media_url: str | None = None
    media_type: str | None = None
    duration_sec: int | None = None
    sort_order: int

    class Config:
        from_attributes = True

class PlaylistOut(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True
