from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AchievementCreate(BaseModel):
    achievement_type: Optional[str] = Field(default=None, alias="achievementType")

    class Config:
        populate_by_name = True


class Achievement(BaseModel):
    id: int
    session_id: str = Field(alias="sessionId")
    achievement_type: str = Field(alias="achievementType")
    unlocked_at: datetime = Field(alias="unlockedAt")

    class Config:
        populate_by_name = True
