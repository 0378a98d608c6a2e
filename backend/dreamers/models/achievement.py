from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from dreamers.db.base import Base


class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        String(64),
        ForeignKey("game_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    achievement_type = Column(String(255), nullable=False)
    unlocked_at = Column(DateTime, default=datetime.utcnow)

    session = relationship("GameSession", back_populates="achievements")
