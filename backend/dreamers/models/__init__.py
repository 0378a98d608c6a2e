from dreamers.db.base import Base
from .game_session import GameSession
from .story_page import StoryPage
from .achievement import Achievement

__all__ = ["Base", "GameSession", "StoryPage", "Achievement"]
