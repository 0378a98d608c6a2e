# dreamers/services/story/store.py

import uuid
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from dreamers import models
from dreamers.core.errors import SessionMismatch

PLAYTHROUGH_COMPLETE = "playthrough_complete"


def new_session_id() -> str:
    return uuid.uuid4().hex


def create_session(
    db: Session, character: str, player_id: Optional[str] = None
) -> models.GameSession:
    session = models.GameSession(
        id=new_session_id(),
        player_id=player_id,
        character_type=character,
        current_page=0,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_session(db: Session, session_id: str) -> Optional[models.GameSession]:
    return db.query(models.GameSession).filter(models.GameSession.id == session_id).first()


def get_or_create_session(db: Session, session_id: str, character: str) -> models.GameSession:
    """Sessions the server has never seen are adopted on their first page."""
    session = get_session(db, session_id)
    if not session:
        session = models.GameSession(id=session_id, character_type=character, current_page=0)
        db.add(session)
        db.flush()
    return session


def count_completed_playthroughs(db: Session, character: str, terminal_page: int) -> int:
    return (
        db.query(func.count(func.distinct(models.GameSession.id)))
        .filter(
            models.GameSession.character_type == character,
            models.GameSession.current_page >= terminal_page,
        )
        .scalar()
        or 0
    )


def get_page(db: Session, session_id: str, page_number: int) -> Optional[models.StoryPage]:
    return (
        db.query(models.StoryPage)
        .filter(
            models.StoryPage.session_id == session_id,
            models.StoryPage.page_number == page_number,
        )
        .first()
    )


def store_page(
    db: Session,
    *,
    session_id: str,
    character: str,
    page_number: int,
    story_text: str,
    choices: Sequence[str],
    image_url: Optional[str],
    terminal_page: int,
) -> models.StoryPage:
    """
    Write the page for (session, page_number). A second write for the same
    pair replaces the content and clears the stored choice.
    """
    session = get_or_create_session(db, session_id, character)
    if session.character_type != character:
        raise SessionMismatch(
            f"Session {session_id} belongs to {session.character_type}, not {character}"
        )

    padded = list(choices[:3]) + [None] * (3 - len(choices[:3]))
    page = get_page(db, session_id, page_number)
    if page is None:
        page = models.StoryPage(session_id=session_id, page_number=page_number)
        db.add(page)

    page.story_text = story_text
    page.choice1_text, page.choice2_text, page.choice3_text = padded
    page.image_url = image_url
    page.choice_made = None

    if page_number > (session.current_page or 0):
        session.current_page = page_number

    if page_number >= terminal_page:
        _unlock(db, session_id, PLAYTHROUGH_COMPLETE)

    db.commit()
    db.refresh(page)
    return page


def save_choice(db: Session, session_id: str, page_number: int, choice_index: int) -> bool:
    """Returns False when there is no page to attach the choice to."""
    page = get_page(db, session_id, page_number)
    if page is None:
        return False
    page.choice_made = choice_index
    db.commit()
    return True


def list_achievements(db: Session, session_id: str) -> List[models.Achievement]:
    return (
        db.query(models.Achievement)
        .filter(models.Achievement.session_id == session_id)
        .order_by(models.Achievement.unlocked_at, models.Achievement.id)
        .all()
    )


def unlock_achievement(db: Session, session_id: str, achievement_type: str) -> models.Achievement:
    achievement = _unlock(db, session_id, achievement_type)
    db.commit()
    db.refresh(achievement)
    return achievement


def _unlock(db: Session, session_id: str, achievement_type: str) -> models.Achievement:
    existing = (
        db.query(models.Achievement)
        .filter(
            models.Achievement.session_id == session_id,
            models.Achievement.achievement_type == achievement_type,
        )
        .first()
    )
    if existing:
        return existing
    achievement = models.Achievement(session_id=session_id, achievement_type=achievement_type)
    db.add(achievement)
    db.flush()
    return achievement
