# dreamers/services/story/orchestrator.py

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dreamers.characters import resolve_character
from dreamers.core.errors import (
    ImageGenerationError,
    InvalidParameter,
    MissingParameter,
    SessionMismatch,
)
from dreamers.core.logging import truncate_text
from dreamers.services.image.base import BaseImageService
from dreamers.services.prompt_builder import FIRST_PAGE, LAST_PAGE, PromptBuilder
from dreamers.services.story import store
from dreamers.services.story_parser import parse_story_response
from dreamers.services.text.base import BaseTextService

logger = logging.getLogger(__name__)

REPLAY_FLAVOR = (
    "A sense of déjà vu washes over you...",
    "You've been here before, though something feels different this time...",
    "The digital realm seems to remember your previous adventures...",
    "Echoes of past decisions ripple through the code...",
)


@dataclass
class GeneratedPage:
    story_text: str
    choices: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    previous_playthroughs: int = 0


def add_replay_flavor(story_text: str, previous_playthroughs: int) -> str:
    if previous_playthroughs <= 0:
        return story_text
    flavor = REPLAY_FLAVOR[previous_playthroughs % len(REPLAY_FLAVOR)]
    return f"{flavor} {story_text}"


class StoryOrchestrator:
    """
    Prompt -> text API -> parse -> replay flavor -> comic panel -> store.

    Only the text call can fail the request; the image and the store are
    best effort.
    """

    def __init__(
        self,
        text_service: BaseTextService,
        image_service: Optional[BaseImageService] = None,
        *,
        terminal_page: int = LAST_PAGE,
    ):
        self.text_service = text_service
        self.image_service = image_service
        self.terminal_page = terminal_page
        self.prompt_builder = PromptBuilder()

    def generate_page(
        self,
        db: Session,
        character: Optional[str],
        page_number: Optional[int] = None,
        previous_choices: Optional[Sequence[dict]] = None,
        previous_story: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> GeneratedPage:
        if not character or not character.strip():
            raise MissingParameter("Character not provided")
        character = resolve_character(character)

        previous_choices = list(previous_choices or [])
        if page_number is None:
            page_number = len(previous_choices) + 1
        if not FIRST_PAGE <= page_number <= LAST_PAGE:
            raise InvalidParameter(
                f"pageNumber must be between {FIRST_PAGE} and {LAST_PAGE}"
            )

        # --- 1. Prompt + text API (failures propagate) ---
        prompt = self.prompt_builder.build_page_prompt(
            character, page_number, previous_choices, previous_story
        )
        raw = self.text_service.complete(prompt)
        logger.debug("Completion: %s", truncate_text(raw))

        # --- 2. Parse ---
        parsed = parse_story_response(raw)
        if len(parsed.choices) < 3:
            logger.warning(
                "Completion yielded %d choices",
                len(parsed.choices),
                extra={"character": character, "page_number": page_number},
            )

        # --- 3. Replay flavor ---
        previous_playthroughs = self._previous_playthroughs(db, character)
        story_text = add_replay_flavor(parsed.story_text, previous_playthroughs)

        # --- 4. Comic panel ---
        image_url = self._generate_image(story_text)

        # --- 5. Persist ---
        if session_id:
            self._store(
                db,
                session_id=session_id,
                character=character,
                page_number=page_number,
                story_text=story_text,
                choices=parsed.choices,
                image_url=image_url,
            )

        return GeneratedPage(
            story_text=story_text,
            choices=parsed.choices,
            image_url=image_url,
            previous_playthroughs=previous_playthroughs,
        )

    def _previous_playthroughs(self, db: Session, character: str) -> int:
        try:
            return store.count_completed_playthroughs(db, character, self.terminal_page)
        except SQLAlchemyError:
            logger.exception("Could not count previous playthroughs for %s", character)
            db.rollback()
            return 0

    def _generate_image(self, story_text: str) -> Optional[str]:
        if self.image_service is None:
            return None
        try:
            logger.info("Generating comic art...")
            return self.image_service.generate_image(story_text)
        except ImageGenerationError as e:
            logger.error("Comic art generation failed: %s", e)
            return None

    def _store(self, db: Session, **page) -> None:
        try:
            store.store_page(db, terminal_page=self.terminal_page, **page)
        except SQLAlchemyError:
            logger.exception(
                "Error storing story data",
                extra={"session_id": page["session_id"], "page_number": page["page_number"]},
            )
            db.rollback()
        except SessionMismatch as e:
            logger.warning("Page not stored: %s", e)
