"""Shared fixtures: synthetic source images, a fake image provider and an API client."""

from __future__ import annotations

import asyncio
import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from creative_variants.config import settings
from creative_variants.providers.base import GeneratedImage
from creative_variants.session import CreativeSession


def png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def png_b64(img: Image.Image) -> str:
    return base64.b64encode(png_bytes(img)).decode("ascii")


class FakeImageProvider:
    """Stands in for the upstream image API; records every prompt it receives."""

    name = "fake"

    def __init__(
        self,
        b64: str | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.b64 = b64
        self.error = error
        self.gate = gate
        self.calls: list[str] = []

    async def generate(self, prompt: str, size: str | None = None, n: int = 1) -> GeneratedImage:
        self.calls.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return GeneratedImage(b64=self.b64 or "", prompt_used=prompt, provider=self.name, model="fake-model")


@pytest.fixture
def solid_image():
    def _make(size: tuple[int, int] = (64, 64), color=(255, 0, 0, 255)) -> Image.Image:
        return Image.new("RGBA", size, color)

    return _make


@pytest.fixture
def square_source_b64() -> str:
    return png_b64(Image.new("RGB", (1024, 1024), (20, 120, 200)))


@pytest.fixture
def fake_provider(square_source_b64) -> FakeImageProvider:
    return FakeImageProvider(b64=square_source_b64)


@pytest.fixture
def clean_settings(monkeypatch):
    """Known settings for every API test; secrets off unless a test turns them on."""
    monkeypatch.setattr(settings, "image_provider", "openai")
    monkeypatch.setattr(settings, "openai_api_key", None)
    monkeypatch.setattr(settings, "gemini_api_key", None)
    monkeypatch.setattr(settings, "basic_auth_user", None)
    monkeypatch.setattr(settings, "basic_auth_pass", None)
    monkeypatch.setattr(settings, "min_prompt_length", 8)
    return settings


@pytest.fixture
def app_module(clean_settings, monkeypatch):
    from creative_variants.api import app as module

    monkeypatch.setattr(module, "session", CreativeSession())
    return module


@pytest.fixture
def client(app_module) -> TestClient:
    return TestClient(app_module.app)


@pytest.fixture
def to_b64():
    return png_b64


@pytest.fixture
def make_provider():
    return FakeImageProvider
