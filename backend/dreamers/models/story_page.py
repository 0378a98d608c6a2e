from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from dreamers.db.base import Base


class StoryPage(Base):
    __tablename__ = "story_pages"
    __table_args__ = (
        UniqueConstraint("session_id", "page_number", name="uq_story_page_session_page"),
    )

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        String(64),
        ForeignKey("game_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    page_number = Column(Integer, nullable=False)

    story_text = Column(Text, nullable=False)
    choice1_text = Column(Text, nullable=True)
    choice2_text = Column(Text, nullable=True)
    choice3_text = Column(Text, nullable=True)

    # 1-based; stays NULL until the player picks
    choice_made = Column(Integer, nullable=True)
    image_url = Column(String(1024), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    session = relationship("GameSession", back_populates="pages")

    @property
    def choices(self):
        return [
            c
            for c in (self.choice1_text, self.choice2_text, self.choice3_text)
            if c is not None
        ]
