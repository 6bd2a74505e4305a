"""
SQLAlchemy models for games.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text

from .database import Base


class Game(Base):
    __tablename__ = "games"

    id = Column(String(36), primary_key=True)  # uuid
    name = Column(String(128), nullable=False)  # user-defined game name
    created_at = Column(DateTime, default=datetime.utcnow)
    player_count = Column(Integer, nullable=False)
    status = Column(String(32), nullable=False, default="active")  # active | finished
    game_state = Column(Text, nullable=False)  # JSON string of full game state
    config = Column(Text, nullable=True)  # JSON: setup_id and the board layout snapshot
