import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from lesson_proxy.agents.lesson_generator import build_request, run_lesson_generator
from lesson_proxy.agents.logging import AgentContext
from lesson_proxy.errors import InvalidRequest
from lesson_proxy.schemas.generation import ErrorResponse, GenerateRequest, GenerateResponse
from lesson_proxy.services.deadline import race_deadline
from lesson_proxy.services.request_lifecycle import RequestLifecycle, RequestState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])

MISSING_PROMPT_MESSAGE = 'Missing "prompt" in request body.'


def validate_prompt(req: GenerateRequest) -> str:
    if not req.prompt:
        raise InvalidRequest(MISSING_PROMPT_MESSAGE)
    return req.prompt


@router.post(
    "/generate-lesson-plan",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def generate_lesson_plan(req: GenerateRequest):
    ctx = AgentContext()
    lifecycle = RequestLifecycle(ctx.request_id)
    lifecycle.transition(RequestState.VALIDATING)

    try:
        prompt = validate_prompt(req)
    except InvalidRequest as e:
        lifecycle.settle(RequestState.REJECTED, e.status_code, {"error": e.message})
        outcome = await lifecycle.outcome()
        return JSONResponse(outcome.body, status_code=outcome.status_code)

    logger.info("Received prompt for generation. Length: %d.", len(prompt))
    outcome = await race_deadline(lifecycle, run_lesson_generator(ctx, build_request(prompt)))
    return JSONResponse(outcome.body, status_code=outcome.status_code, headers=outcome.headers)
