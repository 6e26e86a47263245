"""Concurrent dispatch of the section prompts and aggregation of their results."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

from lesson_proxy.errors import GenerationError, UpstreamError
from lesson_proxy.schemas.generation import GenerationResult

logger = logging.getLogger(__name__)


class AggregationStrategy(str, Enum):
    ALL_OR_NOTHING = "all-or-nothing"
    BEST_EFFORT = "best-effort"


@dataclass
class FanOutResult:
    results: dict[str, GenerationResult] = field(default_factory=dict)

    @property
    def succeeded(self) -> dict[str, str]:
        return {slot: r.text for slot, r in self.results.items() if r.ok}

    @property
    def failed(self) -> dict[str, GenerationResult]:
        return {slot: r for slot, r in self.results.items() if not r.ok}

    def is_success(self, strategy: AggregationStrategy) -> bool:
        if strategy is AggregationStrategy.ALL_OR_NOTHING:
            return not self.failed
        return bool(self.succeeded)


def _to_result(outcome: str | BaseException) -> GenerationResult:
    if isinstance(outcome, GenerationError):
        return GenerationResult(error_kind=outcome.error_kind, message=outcome.message)
    if isinstance(outcome, BaseException):
        return GenerationResult(error_kind=UpstreamError.error_kind, message=str(outcome))
    return GenerationResult(text=outcome)


async def fan_out(
    prompts: dict[str, str],
    generate: Callable[[str], Awaitable[str]],
) -> FanOutResult:
    """Issue every prompt at once and wait for all of them to settle."""
    slots = list(prompts)
    outcomes = await asyncio.gather(
        *(generate(prompts[slot]) for slot in slots), return_exceptions=True
    )

    result = FanOutResult()
    for slot, outcome in zip(slots, outcomes):
        # Cancellation and interpreter exits are not per-slot failures
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome
        result.results[slot] = _to_result(outcome)
        if isinstance(outcome, Exception):
            logger.error("Generation for %s failed: %s", slot, outcome)

    logger.info(
        "Fan-out settled: %d succeeded, %d failed",
        len(result.succeeded),
        len(result.failed),
    )
    return result
