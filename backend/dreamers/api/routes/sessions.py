from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dreamers import models, schemas
from dreamers.api.dependencies import get_context, get_db
from dreamers.api.routes.story import to_stored_page
from dreamers.characters import resolve_character
from dreamers.context import AppContext
from dreamers.core.errors import MissingParameter, NotFound
from dreamers.services.story import store

router = APIRouter(tags=["sessions"])


def _to_schema_session(session: models.GameSession) -> schemas.Session:
    return schemas.Session(
        session_id=session.id,
        character=session.character_type,
        current_page=session.current_page,
        created_at=session.created_at,
    )


def _to_schema_achievement(achievement: models.Achievement) -> schemas.Achievement:
    return schemas.Achievement(
        id=achievement.id,
        session_id=achievement.session_id,
        achievement_type=achievement.achievement_type,
        unlocked_at=achievement.unlocked_at,
    )


def _require_session(db: Session, session_id: str) -> models.GameSession:
    session = store.get_session(db, session_id)
    if not session:
        raise NotFound("Session not found")
    return session


@router.post("/sessions", response_model=schemas.Session, status_code=status.HTTP_201_CREATED)
def create_session(session_in: schemas.SessionCreate, db: Session = Depends(get_db)):
    if not session_in.character or not session_in.character.strip():
        raise MissingParameter("Character not provided")
    session = store.create_session(
        db, resolve_character(session_in.character), player_id=session_in.player_id
    )
    return _to_schema_session(session)


@router.get("/sessions/{session_id}", response_model=schemas.SessionDetail)
def get_session(session_id: str, db: Session = Depends(get_db)):
    session = _require_session(db, session_id)
    base = _to_schema_session(session)
    return schemas.SessionDetail(
        **base.model_dump(),
        pages=[to_stored_page(p) for p in session.pages],
    )


@router.get(
    "/sessions/{session_id}/achievements",
    response_model=List[schemas.Achievement],
)
def list_achievements(session_id: str, db: Session = Depends(get_db)):
    _require_session(db, session_id)
    return [_to_schema_achievement(a) for a in store.list_achievements(db, session_id)]


@router.post(
    "/sessions/{session_id}/achievements",
    response_model=schemas.Achievement,
    status_code=status.HTTP_201_CREATED,
)
def unlock_achievement(
    session_id: str,
    achievement_in: schemas.AchievementCreate,
    db: Session = Depends(get_db),
):
    if not achievement_in.achievement_type:
        raise MissingParameter("achievementType is required")
    _require_session(db, session_id)
    achievement = store.unlock_achievement(db, session_id, achievement_in.achievement_type)
    return _to_schema_achievement(achievement)


@router.get("/playthroughs/{character}", response_model=schemas.Playthroughs)
def get_playthroughs(
    character: str,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
):
    character = resolve_character(character)
    count = store.count_completed_playthroughs(db, character, context.settings.TERMINAL_PAGE)
    return schemas.Playthroughs(character=character, previous_playthroughs=count)
