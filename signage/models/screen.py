import uuid
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from signage.db import Base


class Screen(Base):
    __tablename__ = "screen"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_account = Column(String, nullable=True)
    name = Column(String, nullable=True)
    group_id = Column(String(36), ForeignKey("screen_group.id"), nullable=True)
    default_playlist_id = Column(String(36), nullable=True)
    pairing_code = Column(String(16), nullable=True)
    screen_token = Column(String(36), nullable=False, unique=True, default=lambda: str(uuid.uuid4()))
    code_expires_at = Column(DateTime, nullable=True)
    paired = Column(Boolean, nullable=False, default=False)
    paired_at = Column(DateTime, nullable=True)
    last_seen = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
