import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, String
from signage.db import Base


class ScreenGroup(Base):
    __tablename__ = "screen_group"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_account = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
