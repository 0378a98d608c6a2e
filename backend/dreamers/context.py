import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from dreamers.core.config import Settings
from dreamers.db import Base, make_engine, make_session_factory
from dreamers.services.image.base import BaseImageService
from dreamers.services.image.replicate import ReplicateImageService
from dreamers.services.story.orchestrator import StoryOrchestrator
from dreamers.services.text.anthropic_messages import AnthropicTextService
from dreamers.services.text.base import BaseTextService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a request handler needs; built once per app."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    orchestrator: StoryOrchestrator
    started_at: float = field(default_factory=time.monotonic)

    def uptime(self) -> float:
        return time.monotonic() - self.started_at


def build_context(
    settings: Settings,
    *,
    text_service: Optional[BaseTextService] = None,
    image_service: Optional[BaseImageService] = None,
) -> AppContext:
    engine = make_engine(settings.DATABASE_URL)
    # Import so every model is registered before create_all
    from dreamers import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    if text_service is None:
        if not settings.ANTHROPIC_API_KEY:
            logger.warning("ANTHROPIC_API_KEY is not set; story generation will fail upstream")
        text_service = AnthropicTextService(
            settings.ANTHROPIC_API_KEY,
            base_url=settings.ANTHROPIC_BASE_URL,
            model=settings.ANTHROPIC_MODEL,
            api_version=settings.ANTHROPIC_VERSION,
            max_tokens=settings.ANTHROPIC_MAX_TOKENS,
            timeout=settings.TEXT_TIMEOUT_SECONDS,
        )

    if image_service is None and settings.REPLICATE_API_KEY:
        image_service = ReplicateImageService(
            settings.REPLICATE_API_KEY,
            settings.REPLICATE_MODEL_VERSION,
            base_url=settings.REPLICATE_BASE_URL,
            poll_interval=settings.IMAGE_POLL_INTERVAL_SECONDS,
            max_attempts=settings.IMAGE_POLL_MAX_ATTEMPTS,
        )
    if image_service is None:
        logger.info("REPLICATE_API_KEY is not set; pages are served without comic art")

    orchestrator = StoryOrchestrator(
        text_service,
        image_service,
        terminal_page=settings.TERMINAL_PAGE,
    )
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=make_session_factory(engine),
        orchestrator=orchestrator,
    )
