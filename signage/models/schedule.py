import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, String, Text
from signage.db import Base


class Schedule(Base):
    __tablename__ = "schedule"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_account = Column(String, nullable=False)
    name = Column(String, nullable=True)
    screen_id = Column(String(36), nullable=True)
    group_id = Column(String(36), nullable=True)
    playlist_id = Column(String(36), nullable=False)
    days = Column(Text, nullable=False, default="[]")  # JSON array: [0..6], Sunday=0
    start_time = Column(String(8), nullable=False)  # HH:MM
    end_time = Column(String(8), nullable=False)  # HH:MM
    priority = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
