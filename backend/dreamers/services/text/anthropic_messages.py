import logging
from typing import Any, Dict, Optional

import requests

from dreamers.core.errors import MalformedResponse, UpstreamTextError
from dreamers.services.text.base import BaseTextService

logger = logging.getLogger(__name__)


class AnthropicTextService(BaseTextService):
    """
    Story text via the Anthropic Messages API (single user turn, no streaming).
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.anthropic.com",
        model: str = "claude-3-opus-20240229",
        api_version: str = "2023-06-01",
        max_tokens: int = 1000,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_version = api_version
        self.max_tokens = max_tokens
        self.timeout = timeout

    def complete(self, prompt: str) -> str:
        url = f"{self.base_url}/v1/messages"
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }
        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        logger.info(
            "Sending prompt to text API",
            extra={"prompt_length": len(prompt)},
        )
        try:
            resp = requests.post(url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamTextError(502, f"Text API unreachable: {e}") from e

        if not 200 <= resp.status_code < 300:
            logger.error("Text API error %s: %s", resp.status_code, resp.text)
            raise UpstreamTextError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponse("Invalid response from text API") from e

        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, list) or not content:
            logger.error("Text API returned no content: %s", data)
            raise MalformedResponse("Invalid response from text API")

        first = content[0]
        text = first.get("text") if isinstance(first, dict) else None
        if not isinstance(text, str):
            raise MalformedResponse("Invalid response from text API")

        logger.info("Response received from text API", extra={"response_length": len(text)})
        return text
