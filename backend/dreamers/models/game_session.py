from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from dreamers.db.base import Base


class GameSession(Base):
    __tablename__ = "game_sessions"

    # Opaque id handed to the client (uuid hex for server-created sessions)
    id = Column(String(64), primary_key=True, index=True)
    player_id = Column(String(255), nullable=True)

    character_type = Column(String(255), nullable=False, index=True)
    # Highest page stored so far; the terminal page means a finished playthrough
    current_page = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    pages = relationship(
        "StoryPage",
        back_populates="session",
        order_by="StoryPage.page_number",
    )
    achievements = relationship("Achievement", back_populates="session")
