"""Shared fixtures: an in-process client for the app and stand-in Gemini models."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from lesson_proxy.config import settings
from lesson_proxy.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def async_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def short_deadline(monkeypatch):
    monkeypatch.setattr(settings, "response_timeout_seconds", 0.05)
    return 0.05


def gemini_stub(text="", delay=0.0, error=None, calls=None, parts=None):
    """A FunctionModel that answers like Gemini after ``delay`` seconds."""

    async def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        if calls is not None:
            calls.append(info.model_settings)
        if delay:
            await asyncio.sleep(delay)
        if error is not None:
            raise error
        if parts is not None:
            return ModelResponse(parts=parts)
        return ModelResponse(parts=[TextPart(text)])

    return FunctionModel(respond)


@pytest.fixture
def gemini():
    return gemini_stub
