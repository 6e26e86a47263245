import logging

from pydantic_ai import Agent, UnexpectedModelBehavior, capture_run_messages
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart, ToolCallPart

from lesson_proxy.agents.logging import AgentContext, run_agent
from lesson_proxy.config import settings
from lesson_proxy.schemas.generation import GenerationConstraints, GenerationRequest

logger = logging.getLogger(__name__)

FALLBACK_TEXT = "Hindi makabuo ng sagot. Subukan ulit. (AI generation failed)"

# Prompts arrive fully assembled from the form, so there is no system prompt.
# retries=0 keeps it to a single downstream attempt per incoming request.
lesson_generator = Agent(output_type=str, retries=0)


def default_constraints() -> GenerationConstraints:
    return GenerationConstraints(
        temperature=settings.temperature,
        max_output_tokens=settings.max_output_tokens,
    )


def build_request(prompt: str) -> GenerationRequest:
    return GenerationRequest(prompt=prompt, constraints=default_constraints())


def usable_text(output: str | None) -> str:
    """Substitute the fallback message when the model produced nothing usable."""
    if output is None or not output.strip():
        return FALLBACK_TEXT
    return output


def answered_without_text(messages: list[ModelMessage]) -> bool:
    """True when the last model response carried no text and no tool calls."""
    responses = [m for m in messages if isinstance(m, ModelResponse)]
    if not responses:
        return False
    return not any(
        isinstance(part, ToolCallPart) or (isinstance(part, TextPart) and part.content.strip())
        for part in responses[-1].parts
    )


async def run_lesson_generator(ctx: AgentContext, request: GenerationRequest) -> str:
    with capture_run_messages() as messages:
        try:
            output = await run_agent(
                ctx,
                lesson_generator,
                "lesson_generator",
                request.prompt,
                model_settings={
                    "temperature": request.constraints.temperature,
                    "max_tokens": request.constraints.max_output_tokens,
                },
            )
        except UnexpectedModelBehavior:
            # Gemini ends with no parts on MAX_TOKENS or SAFETY finishes
            if not answered_without_text(messages):
                raise
            logger.warning("Model returned no text for request %s", ctx.request_id)
            output = None
    return usable_text(output)
