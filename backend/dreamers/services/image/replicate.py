import logging
import time
from typing import Any, Callable, Dict

import requests

from dreamers.core.errors import GenerationFailed, GenerationTimeout
from dreamers.services.image.base import BaseImageService

logger = logging.getLogger(__name__)

NEGATIVE_PROMPT = "blurry, low quality, distorted, bad anatomy, text, word bubbles, watermark"


class ReplicateImageService(BaseImageService):
    """
    Comic panels via the Replicate predictions API (create, then poll).
    """

    def __init__(
        self,
        api_key: str,
        model_version: str,
        *,
        base_url: str = "https://api.replicate.com",
        poll_interval: float = 2.0,
        max_attempts: int = 30,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = api_key
        self.model_version = model_version
        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    def generate_image(self, prompt: str) -> str:
        # -----------------------------------------------------
        # STEP 1 - Create the prediction
        # -----------------------------------------------------
        url = f"{self.base_url}/v1/predictions"
        headers = {
            "Authorization": f"Token {self.api_key}",
            "Content-Type": "application/json",
        }
        payload: Dict[str, Any] = {
            "version": self.model_version,
            "input": {
                "prompt": f"comic book style art, detailed professional illustration of: {prompt}",
                "negative_prompt": NEGATIVE_PROMPT,
            },
        }

        try:
            resp = requests.post(url, headers=headers, json=payload)
        except requests.RequestException as e:
            raise GenerationFailed(f"Image API unreachable: {e}") from e

        if not 200 <= resp.status_code < 300:
            logger.error("Image API error %s: %s", resp.status_code, resp.text)
            raise GenerationFailed(f"Image API error: {resp.status_code}")

        try:
            prediction = resp.json()
        except ValueError as e:
            raise GenerationFailed("Invalid response from image API") from e
        if not isinstance(prediction, dict):
            raise GenerationFailed("Invalid response from image API")
        prediction_id = prediction.get("id")
        if not prediction_id:
            raise GenerationFailed(f"No prediction id returned: {resp.text}")
        logger.info("Prediction %s created (status=%s)", prediction_id, prediction.get("status"))

        # -----------------------------------------------------
        # STEP 2 - Poll until succeeded / failed / out of attempts
        # -----------------------------------------------------
        status_url = f"{self.base_url}/v1/predictions/{prediction_id}"
        poll_headers = {"Authorization": f"Token {self.api_key}"}

        for attempt in range(1, self.max_attempts + 1):
            try:
                poll_resp = requests.get(status_url, headers=poll_headers)
            except requests.RequestException as e:
                raise GenerationFailed(f"Failed to check prediction status: {e}") from e

            if not 200 <= poll_resp.status_code < 300:
                raise GenerationFailed(
                    f"Failed to check prediction status: {poll_resp.status_code}"
                )

            try:
                result = poll_resp.json()
            except ValueError as e:
                raise GenerationFailed("Invalid status response from image API") from e
            if not isinstance(result, dict):
                raise GenerationFailed("Invalid status response from image API")
            status = result.get("status")
            logger.debug("Prediction status: %s", status, extra={"attempt": attempt})

            if status == "succeeded":
                return _first_output(result)
            if status == "failed":
                raise GenerationFailed(result.get("error") or "Image generation failed")

            self._sleep(self.poll_interval)

        raise GenerationTimeout("Timeout waiting for image generation")


def _first_output(result: Dict[str, Any]) -> str:
    output = result.get("output")
    if isinstance(output, str) and output:
        return output
    if isinstance(output, list) and output:
        return output[0]
    raise GenerationFailed("Prediction succeeded without output")
