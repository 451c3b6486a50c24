from datetime import datetime
from pydantic import BaseModel, Field

class GroupIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None

class GroupUpdateIn(BaseModel):
    name: str | None = None
    description: str | None = None

class GroupOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
