from .story import (
    PreviousChoice,
    GenerateStoryRequest,
    GenerateStoryResponse,
    SaveChoiceRequest,
    SaveChoiceResponse,
    StoredPage,
)
from .session import SessionCreate, Session, SessionDetail, Playthroughs
from .achievement import AchievementCreate, Achievement
from .character import Character

__all__ = [
    "PreviousChoice",
    "GenerateStoryRequest",
    "GenerateStoryResponse",
    "SaveChoiceRequest",
    "SaveChoiceResponse",
    "StoredPage",
    "SessionCreate",
    "Session",
    "SessionDetail",
    "Playthroughs",
    "AchievementCreate",
    "Achievement",
    "Character",
]
