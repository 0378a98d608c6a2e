from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from .story import StoredPage


class SessionCreate(BaseModel):
    character: Optional[str] = None
    player_id: Optional[str] = Field(default=None, alias="playerId")

    class Config:
        populate_by_name = True


class Session(BaseModel):
    session_id: str = Field(alias="sessionId")
    character: str
    current_page: int = Field(alias="currentPage")
    created_at: datetime = Field(alias="createdAt")

    class Config:
        populate_by_name = True


class SessionDetail(Session):
    pages: List[StoredPage] = Field(default_factory=list)


class Playthroughs(BaseModel):
    character: str
    previous_playthroughs: int = Field(alias="previousPlaythroughs")

    class Config:
        populate_by_name = True
