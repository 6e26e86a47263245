"""Race a single upstream generation call against a per-request deadline."""

import asyncio
import logging
from collections.abc import Awaitable

from lesson_proxy.config import settings
from lesson_proxy.services.request_lifecycle import Outcome, RequestLifecycle, RequestState

logger = logging.getLogger(__name__)


def timeout_message(timeout: float) -> str:
    return f"Nalampasan ang timeout ({timeout:g}s). Subukan ulit. (AI Service Unavailable)"


def upstream_error_message(exc: BaseException, limit: int | None = None) -> str:
    """Fixed message with only a short prefix of the upstream error text."""
    limit = settings.error_detail_limit if limit is None else limit
    detail = str(exc)[:limit]
    return f"Naganap ang internal server error sa pag-access sa AI service. ({detail}...)"


def _settle_from_upstream(lifecycle: RequestLifecycle, task: asyncio.Future) -> None:
    if task.cancelled():
        return

    exc = task.exception()
    if lifecycle.settled:
        logger.warning(
            "Discarding late upstream %s for request %s",
            "error" if exc else "result",
            lifecycle.request_id,
        )
        return

    if exc is not None:
        logger.error("Error during Gemini API call: %s", exc)
        lifecycle.settle(
            RequestState.RESPONDED_ERROR, 500, {"error": upstream_error_message(exc)}
        )
    else:
        lifecycle.settle(RequestState.RESPONDED_OK, 200, {"generatedText": task.result()})


def _settle_from_deadline(
    lifecycle: RequestLifecycle, task: asyncio.Future, timeout: float
) -> None:
    if task.cancelled():
        return

    logger.warning("Request %s timed out after %gs", lifecycle.request_id, timeout)
    lifecycle.settle(
        RequestState.RESPONDED_TIMEOUT,
        503,
        {"error": timeout_message(timeout)},
        headers={"Connection": "close"},
    )


async def race_deadline(
    lifecycle: RequestLifecycle,
    upstream: Awaitable[str],
    timeout: float | None = None,
) -> Outcome:
    """Run ``upstream`` against a deadline; the first to finish settles the request.

    The loser is cancelled. Both completion paths settle through the
    lifecycle, so a late finisher can never produce a second response.
    """
    timeout = settings.response_timeout_seconds if timeout is None else timeout
    lifecycle.transition(RequestState.CALLING_UPSTREAM)

    upstream_task = asyncio.ensure_future(upstream)
    deadline_task = asyncio.create_task(asyncio.sleep(timeout))
    upstream_task.add_done_callback(lambda t: _settle_from_upstream(lifecycle, t))
    deadline_task.add_done_callback(lambda t: _settle_from_deadline(lifecycle, t, timeout))

    try:
        await asyncio.wait({upstream_task, deadline_task}, return_when=asyncio.FIRST_COMPLETED)
        return await lifecycle.outcome()
    finally:
        for task in (upstream_task, deadline_task):
            if not task.done():
                task.cancel()
