import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class InvalidTransitionError(Exception):
    pass


class RequestState(str, Enum):
    RECEIVED = "received"
    VALIDATING = "validating"
    REJECTED = "rejected"
    CALLING_UPSTREAM = "calling_upstream"
    RESPONDED_OK = "responded_ok"
    RESPONDED_TIMEOUT = "responded_timeout"
    RESPONDED_ERROR = "responded_error"


TERMINAL_STATES = frozenset(
    {
        RequestState.REJECTED,
        RequestState.RESPONDED_OK,
        RequestState.RESPONDED_TIMEOUT,
        RequestState.RESPONDED_ERROR,
    }
)

# Valid transitions
TRANSITIONS: frozenset[tuple[RequestState, RequestState]] = frozenset(
    {
        (RequestState.RECEIVED, RequestState.VALIDATING),
        (RequestState.VALIDATING, RequestState.REJECTED),
        (RequestState.VALIDATING, RequestState.CALLING_UPSTREAM),
        (RequestState.CALLING_UPSTREAM, RequestState.RESPONDED_OK),
        (RequestState.CALLING_UPSTREAM, RequestState.RESPONDED_TIMEOUT),
        (RequestState.CALLING_UPSTREAM, RequestState.RESPONDED_ERROR),
    }
)


@dataclass(frozen=True)
class Outcome:
    """The single response written for a request."""

    state: RequestState
    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


class RequestLifecycle:
    """Per-request state machine whose terminal transition happens at most once.

    Settling resolves a one-shot future. Whoever settles first (deadline,
    upstream completion, or validation) owns the response; every later attempt
    is a no-op that returns False.
    """

    def __init__(self, request_id: str):
        self.request_id = request_id
        self.state = RequestState.RECEIVED
        self._outcome: asyncio.Future[Outcome] = asyncio.get_running_loop().create_future()

    @property
    def settled(self) -> bool:
        return self._outcome.done()

    def transition(self, target: RequestState) -> None:
        key = (self.state, target)
        if key not in TRANSITIONS:
            raise InvalidTransitionError(
                f"Cannot transition from '{self.state.value}' to '{target.value}'"
            )
        self.state = target

    def settle(
        self,
        target: RequestState,
        status_code: int,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> bool:
        if target not in TERMINAL_STATES:
            raise InvalidTransitionError(f"'{target.value}' is not a terminal state")
        if self._outcome.done():
            logger.info(
                "Request %s already responded (%s); suppressing %s",
                self.request_id,
                self.state.value,
                target.value,
            )
            return False

        self.transition(target)
        self._outcome.set_result(
            Outcome(state=target, status_code=status_code, body=body, headers=headers or {})
        )
        return True

    async def outcome(self) -> Outcome:
        return await asyncio.shield(self._outcome)
