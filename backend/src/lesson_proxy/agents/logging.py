import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import TypeVar

from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from lesson_proxy.config import settings

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class AgentContext:
    """Context passed to all agent calls for logging and scoping."""

    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])


def log_agent_call(
    ctx: AgentContext,
    agent_name: str,
    prompt: str,
    status: str,
    duration_ms: int,
    input_tokens: int | None = None,
    output_tokens: int | None = None,
    model_name: str | None = None,
) -> None:
    logger.info(
        "agent=%s request=%s status=%s duration_ms=%d prompt_chars=%d "
        "input_tokens=%s output_tokens=%s model=%s",
        agent_name,
        ctx.request_id,
        status,
        duration_ms,
        len(prompt),
        input_tokens,
        output_tokens,
        model_name,
    )


class AgentTimer:
    """Simple context manager for timing agent calls."""

    def __enter__(self):
        self._start = time.monotonic()
        return self

    def __exit__(self, *args):
        pass

    @property
    def duration_ms(self) -> int:
        return int((time.monotonic() - self._start) * 1000)


async def run_agent(
    ctx: AgentContext,
    agent: Agent[None, T],
    agent_name: str,
    prompt: str,
    model_settings: ModelSettings | None = None,
) -> T:
    """Run a PydanticAI agent with timing and logging. Reduces per-agent boilerplate."""
    with AgentTimer() as timer:
        try:
            result = await agent.run(
                prompt, model=settings.default_model, model_settings=model_settings
            )
            usage = result.usage()
            log_agent_call(
                ctx,
                agent_name=agent_name,
                prompt=prompt,
                status="success",
                duration_ms=timer.duration_ms,
                input_tokens=usage.input_tokens,
                output_tokens=usage.output_tokens,
                model_name=settings.default_model,
            )
            return result.output
        except Exception:
            log_agent_call(
                ctx,
                agent_name=agent_name,
                prompt=prompt,
                status="error",
                duration_ms=timer.duration_ms,
                model_name=settings.default_model,
            )
            raise
        except asyncio.CancelledError:
            # Cancelled by the deadline race
            log_agent_call(
                ctx,
                agent_name=agent_name,
                prompt=prompt,
                status="cancelled",
                duration_ms=timer.duration_ms,
                model_name=settings.default_model,
            )
            raise
