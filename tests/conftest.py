"""Pytest configuration and fixtures for interview_eval tests."""

import os
from typing import Callable, List, Optional

import pytest

# Keep developer .env values and real keys out of the test settings
for _var in (
    "CHUNK_SIZE",
    "CHUNK_UNIT",
    "TOP_K",
    "EMBEDDING_DIMENSION",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_BASE_DELAY",
    "ENVIRONMENT",
):
    os.environ.pop(_var, None)

from interview_eval import config
from interview_eval.config import RetrySettings, Settings


@pytest.fixture(autouse=True)
def settings():
    """Fresh global settings for every test."""
    test_settings = Settings()
    config._settings = test_settings
    yield test_settings
    config._settings = None


class FakeProvider:
    """
    Scripted model provider.

    ``completions`` is consumed one item per ``complete`` call; an item that
    is an exception is raised instead of returned. ``embed_fn`` maps text to
    a vector; ``embed_errors`` are raised (in order) before it is used.
    """

    def __init__(
        self,
        completions: Optional[list] = None,
        embed_fn: Optional[Callable[[str], List[float]]] = None,
        embed_errors: Optional[list] = None,
    ):
        self.completions = list(completions or [])
        self.embed_fn = embed_fn or (lambda text: [float(len(text)), 1.0, 0.0])
        self.embed_errors = list(embed_errors or [])
        self.complete_calls = []
        self.embed_calls = []

    async def embed(self, text: str) -> List[float]:
        self.embed_calls.append(text)
        if self.embed_errors:
            raise self.embed_errors.pop(0)
        return self.embed_fn(text)

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        return [await self.embed(text) for text in texts]

    async def complete(self, prompt: str, temperature: float = 0.7, max_tokens: Optional[int] = None) -> str:
        self.complete_calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        if not self.completions:
            raise AssertionError("unexpected complete() call")
        item = self.completions.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class AlwaysFailingProvider(FakeProvider):
    """Provider whose every call raises the same error."""

    def __init__(self, error: BaseException):
        super().__init__()
        self.error = error

    async def embed(self, text: str) -> List[float]:
        self.embed_calls.append(text)
        raise self.error

    async def complete(self, prompt: str, temperature: float = 0.7, max_tokens: Optional[int] = None) -> str:
        self.complete_calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        raise self.error


class RecordingSleep:
    """Async sleep stub that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_sleep():
    """Sleep stub so retry tests run instantly."""
    return RecordingSleep()


@pytest.fixture
def retry_settings():
    """Three attempts, 1s then 2s between them."""
    return RetrySettings(max_attempts=3, base_delay=1.0, max_delay=30.0)
