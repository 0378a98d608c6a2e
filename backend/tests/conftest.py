# backend/tests/conftest.py
import os
import tempfile

# Must be set BEFORE importing dreamers.main: the module builds an app on import
_TMP = tempfile.TemporaryDirectory()
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP.name, 'import.db')}"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["REPLICATE_API_KEY"] = ""
os.environ["LOG_TO_FILE"] = "false"

import pytest
from fastapi.testclient import TestClient

from dreamers.context import build_context
from dreamers.core.config import Settings
from dreamers.main import create_app
from dreamers.services.image.base import BaseImageService
from dreamers.services.text.base import BaseTextService

SAMPLE_COMPLETION = """STORY:
The terminal flickers and PIXL_DRIFT falls through a seam of green light.

CHOICES:
1. Help the lost program find its way home
2. Watch from the shadows and wait
3. Overwrite the program and take its access keys"""


class DummyResp:
    def __init__(self, status_code=200, json_data=None, text="OK"):
        self.status_code = status_code
        self._json = json_data if json_data is not None else {}
        self.text = text

    def json(self):
        return self._json


class FakeTextService(BaseTextService):
    def __init__(self, completion=SAMPLE_COMPLETION, error=None):
        self.completion = completion
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.completion


class FakeImageService(BaseImageService):
    def __init__(self, url="https://replicate.delivery/panel.png", error=None):
        self.url = url
        self.error = error
        self.prompts = []

    def generate_image(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.url


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'game.db'}",
        ANTHROPIC_API_KEY="",
        REPLICATE_API_KEY="",
        LOG_TO_FILE=False,
    )


@pytest.fixture()
def text_service():
    return FakeTextService()


@pytest.fixture()
def image_service():
    return FakeImageService()


@pytest.fixture()
def context(settings, text_service, image_service):
    ctx = build_context(settings, text_service=text_service, image_service=image_service)
    yield ctx
    ctx.engine.dispose()


@pytest.fixture()
def db(context):
    session = context.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(context):
    return TestClient(create_app(context=context))
