import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from signage.db import Base

class Playlist(Base):
    __tablename__ = "playlist"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_account = Column(String, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

class PlaylistItem(Base):
    __tablename__ = "playlist_item"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    playlist_id = Column(String(36), ForeignKey("playlist.id"), nullable=False)
    media_id = Column(String(36), ForeignKey("media.id"), nullable=False)
    media_url = Column(String, nullable=True)
    media_type = Column(String, nullable=True)
    duration_sec = Column(Integer, nullable=True)  # NULL: video plays its own length
    sort_order = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
