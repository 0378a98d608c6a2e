import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class StoryApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class StoryApiClient:
    """Thin wrapper over the story server's JSON endpoints."""

    def __init__(self, base_url: str = "http://localhost:3000", timeout: Optional[float] = 120):
        self.base_url = base_url.rstrip("/")
        # Page generation may poll the image API for up to a minute
        self.timeout = timeout

    def health(self) -> Dict[str, Any]:
        return self._get("/health")

    def list_characters(self) -> List[Dict[str, Any]]:
        return self._get("/api/characters")

    def create_session(self, character: str, player_id: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"character": character}
        if player_id:
            body["playerId"] = player_id
        return self._post("/api/sessions", body)

    def generate_story(
        self,
        character: str,
        *,
        page_number: Optional[int] = None,
        previous_choices: Optional[List[Dict[str, Any]]] = None,
        previous_story: str = "",
        session_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "character": character,
            "previousChoices": previous_choices or [],
            "previousStory": previous_story,
        }
        if page_number is not None:
            body["pageNumber"] = page_number
        if session_id:
            body["sessionId"] = session_id
        return self._post("/api/generate-story", body)

    def save_choice(self, session_id: str, page_number: int, choice_index: int) -> Dict[str, Any]:
        return self._post(
            "/api/save-choice",
            {"sessionId": session_id, "pageNumber": page_number, "choiceIndex": choice_index},
        )

    def get_page(self, session_id: str, page_number: int) -> Dict[str, Any]:
        return self._get(f"/api/story/{session_id}/{page_number}")

    def _get(self, path: str) -> Any:
        resp = requests.get(f"{self.base_url}{path}", timeout=self.timeout)
        return self._handle(resp)

    def _post(self, path: str, body: Dict[str, Any]) -> Any:
        resp = requests.post(f"{self.base_url}{path}", json=body, timeout=self.timeout)
        return self._handle(resp)

    @staticmethod
    def _handle(resp) -> Any:
        if not 200 <= resp.status_code < 300:
            try:
                message = resp.json().get("error", resp.text)
            except ValueError:
                message = resp.text
            raise StoryApiError(resp.status_code, message)
        return resp.json()
