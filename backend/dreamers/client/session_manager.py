# dreamers/client/session_manager.py

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, List, Optional

from dreamers.client.api_client import StoryApiClient, StoryApiError
from dreamers.client.storage import LocalStore

logger = logging.getLogger(__name__)

CREDITS_PAGE = "/pages/credits.html"
# The page counter reaching this value means the story is over
CREDITS_AT_PAGE = 6
LOAD_ERROR = "Error loading story. Please try again."

# localStorage keys, shared with the web front-end
SELECTED_CHARACTER = "selectedCharacter"
STORY_HISTORY = "storyHistory"
STORY_CHOICES = "storyChoices"
SESSION_ID = "sessionId"
CURRENT_PAGE = "currentPage"


class PlaythroughState(str, enum.Enum):
    uninitialized = "uninitialized"
    awaiting_character = "awaiting_character"
    displaying_page = "displaying_page"
    submitting = "submitting"
    finished = "finished"


def page_destination(page_number: int) -> str:
    if page_number >= CREDITS_AT_PAGE:
        return CREDITS_PAGE
    return f"/pages/page{page_number}.html"


class StoryManager:
    """
    Client-side playthrough state: which character, which story segments have
    been shown, which choices were made. The local store is only a cache of
    what the server generated.
    """

    def __init__(self, api: StoryApiClient, storage: LocalStore):
        self.api = api
        self.storage = storage
        self.state = PlaythroughState.uninitialized

        self.selected_character: Optional[str] = storage.get_item(SELECTED_CHARACTER)
        self.story_history: List[str] = storage.get_json(STORY_HISTORY, [])
        self.previous_choices: List[Dict[str, Any]] = storage.get_json(STORY_CHOICES, [])

        self.current_choices: List[str] = []
        self.image_url: Optional[str] = None
        self.previous_playthroughs = 0
        self.error: Optional[str] = None

    @property
    def session_id(self) -> Optional[str]:
        return self.storage.get_item(SESSION_ID)

    @property
    def current_page(self) -> int:
        return int(self.storage.get_item(CURRENT_PAGE) or "1")

    @property
    def latest_segment(self) -> Optional[str]:
        return self.story_history[-1] if self.story_history else None

    def select_character(self, character_id: str) -> None:
        """Start a fresh playthrough for `character_id`."""
        self.selected_character = character_id
        self.story_history = []
        self.previous_choices = []
        self.current_choices = []
        self.image_url = None
        self.error = None

        self.storage.set_item(SELECTED_CHARACTER, character_id)
        self.storage.set_item(STORY_HISTORY, [])
        self.storage.set_item(STORY_CHOICES, [])
        self.storage.set_item(CURRENT_PAGE, "1")
        self.storage.remove_item(SESSION_ID)

        try:
            session = self.api.create_session(character_id)
            self.storage.set_item(SESSION_ID, session["sessionId"])
        except (StoryApiError, OSError, KeyError) as e:
            # Pages still generate without a session; they just aren't stored
            logger.error("Could not start a server session: %s", e)

        self.state = PlaythroughState.uninitialized

    def initialize(self) -> bool:
        if not self.selected_character:
            logger.error("No character selected. Redirecting...")
            self.state = PlaythroughState.awaiting_character
            return False

        if self.current_page >= CREDITS_AT_PAGE:
            self.state = PlaythroughState.finished
            return True

        # One story segment per choice made, plus the page being shown
        if len(self.story_history) < len(self.previous_choices) + 1:
            self.generate_story_content()
        else:
            self.state = PlaythroughState.displaying_page
            self._restore_choices()
        return True

    def generate_story_content(self) -> None:
        self.error = None
        try:
            data = self.api.generate_story(
                self.selected_character,
                page_number=len(self.previous_choices) + 1,
                previous_choices=self.previous_choices,
                previous_story="\n\n".join(self.story_history),
                session_id=self.session_id,
            )
        except (StoryApiError, OSError) as e:
            logger.error("Error generating story: %s", e)
            self.error = LOAD_ERROR
            self.state = PlaythroughState.displaying_page
            return

        story_text = data.get("storyText")
        if story_text:
            self.story_history.append(story_text)
            self.storage.set_item(STORY_HISTORY, self.story_history)
        else:
            logger.error("No story content returned from API.")

        self.current_choices = list(data.get("choices") or [])
        self.image_url = data.get("imageUrl")
        self.previous_playthroughs = data.get("previousPlaythroughs", 0)
        self.state = PlaythroughState.displaying_page

    def handle_choice(self, choice_index: int) -> str:
        """Record the choice and return where the player goes next."""
        self.state = PlaythroughState.submitting
        text = None
        if 1 <= choice_index <= len(self.current_choices):
            text = self.current_choices[choice_index - 1]

        self.previous_choices.append(
            {"choice": choice_index, "character": self.selected_character, "text": text}
        )
        self.storage.set_item(STORY_CHOICES, self.previous_choices)

        session_id = self.session_id
        if session_id:
            try:
                self.api.save_choice(session_id, len(self.story_history), choice_index)
            except (StoryApiError, OSError) as e:
                logger.error("Error saving choice: %s", e)

        next_page = self.current_page + 1
        self.storage.set_item(CURRENT_PAGE, str(next_page))
        destination = page_destination(next_page)
        if destination == CREDITS_PAGE:
            self.state = PlaythroughState.finished
        return destination

    def _restore_choices(self) -> None:
        """Choices of the cached page come back from the server when possible."""
        session_id = self.session_id
        if self.current_choices or not session_id or not self.story_history:
            return
        try:
            page = self.api.get_page(session_id, len(self.story_history))
        except (StoryApiError, OSError) as e:
            logger.warning("Could not restore choices for the current page: %s", e)
            return
        self.current_choices = list(page.get("choices") or [])
        self.image_url = page.get("imageUrl")
