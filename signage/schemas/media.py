from pydantic import BaseModel

class MediaOut(BaseModel):
    id: str
    name: str
    type: str
    path: str
    url: str
    duration_sec: int | None = None
    size: int
    checksum: str

    class Config:
        from_attributes = True
