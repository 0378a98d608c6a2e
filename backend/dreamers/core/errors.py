from typing import Optional


class DreamersError(Exception):
    """Base error; `status_code` is what the API answers with."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingParameter(DreamersError):
    status_code = 400


class InvalidParameter(DreamersError):
    status_code = 400


class NotFound(DreamersError):
    status_code = 404


class UpstreamTextError(DreamersError):
    """The text API answered with a non-success status."""

    def __init__(self, status: int, body: str = ""):
        super().__init__(body or f"Text generation failed with status {status}", status)
        self.status = status
        self.body = body


class MalformedResponse(DreamersError):
    status_code = 500


class ImageGenerationError(DreamersError):
    """Never reaches the player; the page is served without an image."""


class GenerationFailed(ImageGenerationError):
    pass


class GenerationTimeout(ImageGenerationError):
    pass


class SessionMismatch(DreamersError):
    """A session id was reused for a different character."""

    status_code = 409
