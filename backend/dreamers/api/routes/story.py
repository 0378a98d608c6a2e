import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dreamers import models, schemas
from dreamers.api.dependencies import get_context, get_db
from dreamers.context import AppContext
from dreamers.core.errors import DreamersError, InvalidParameter, MissingParameter, NotFound
from dreamers.services.story import store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["story"])


def to_stored_page(page: models.StoryPage) -> schemas.StoredPage:
    return schemas.StoredPage(
        story_id=page.id,
        page_number=page.page_number,
        story_text=page.story_text,
        choices=page.choices,
        image_url=page.image_url,
        choice_made=page.choice_made,
    )


@router.post("/generate-story", response_model=schemas.GenerateStoryResponse)
def generate_story(
    request_in: schemas.GenerateStoryRequest,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
):
    logger.info(
        "[API] Request received: character=%s page=%s choices=%d",
        request_in.character,
        request_in.page_number,
        len(request_in.previous_choices),
    )
    try:
        page = context.orchestrator.generate_page(
            db,
            request_in.character,
            page_number=request_in.page_number,
            previous_choices=[c.model_dump() for c in request_in.previous_choices],
            previous_story=request_in.previous_story,
            session_id=request_in.session_id,
        )
    except DreamersError:
        raise
    except Exception as e:
        logger.exception("[Server Error] generate-story failed")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "details": str(e)},
        )

    return schemas.GenerateStoryResponse(
        story_text=page.story_text,
        choices=page.choices,
        image_url=page.image_url,
        previous_playthroughs=page.previous_playthroughs,
    )


@router.post("/save-choice", response_model=schemas.SaveChoiceResponse)
def save_choice(choice_in: schemas.SaveChoiceRequest, db: Session = Depends(get_db)):
    if not choice_in.session_id or choice_in.page_number is None or choice_in.choice_index is None:
        raise MissingParameter("sessionId, pageNumber and choiceIndex are required")
    if not 1 <= choice_in.choice_index <= 3:
        raise InvalidParameter("choiceIndex must be 1, 2 or 3")

    try:
        saved = store.save_choice(
            db, choice_in.session_id, choice_in.page_number, choice_in.choice_index
        )
    except SQLAlchemyError:
        logger.exception("Error saving choice")
        db.rollback()
        return JSONResponse(status_code=500, content={"error": "Failed to save choice"})

    if not saved:
        raise NotFound("Story not found")
    return schemas.SaveChoiceResponse(success=True)


@router.get("/story/{session_id}/{page_number}", response_model=schemas.StoredPage)
def get_story(session_id: str, page_number: int, db: Session = Depends(get_db)):
    try:
        page = store.get_page(db, session_id, page_number)
    except SQLAlchemyError:
        logger.exception("Error retrieving story")
        return JSONResponse(status_code=500, content={"error": "Database error"})
    if not page:
        raise NotFound("Story not found")
    return to_stored_page(page)
