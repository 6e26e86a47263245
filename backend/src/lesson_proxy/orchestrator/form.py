"""Turn one form submission into the eleven rendered lesson-plan sections."""

import html
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from lesson_proxy.orchestrator.context import LessonPlanContext
from lesson_proxy.orchestrator.fanout import AggregationStrategy, FanOutResult, fan_out
from lesson_proxy.orchestrator.prompts import OUTPUT_SLOTS, build_prompts

logger = logging.getLogger(__name__)

IDLE_LABEL = "Bumuo ng Lesson Plan"
BUSY_LABEL = "Bumubuo... Sandali lang!"
FAILURE_MESSAGE = (
    "May naganap na error sa pagbuo ng lesson plan. "
    "Paki-check ang console para sa detalye."
)


@dataclass
class SubmitButton:
    label: str = IDLE_LABEL
    disabled: bool = False

    def busy(self) -> None:
        self.label = BUSY_LABEL
        self.disabled = True

    def restore(self) -> None:
        self.label = IDLE_LABEL
        self.disabled = False


@dataclass
class OutputSection:
    slots: dict[str, str] = field(default_factory=dict)
    visible: bool = False
    reveal_count: int = 0

    def reset(self) -> None:
        self.slots = {}
        self.visible = False

    def reveal(self) -> None:
        self.visible = True
        self.reveal_count += 1

    def render_html(self) -> str:
        style = "block" if self.visible else "none"
        parts = [f'<section id="lessonPlanOutput" style="display: {style}">']
        for slot in OUTPUT_SLOTS:
            text = html.escape(self.slots.get(slot, ""))
            parts.append(f'  <div id="{slot}">{text}</div>')
        parts.append("</section>")
        return "\n".join(parts)

    def render_text(self) -> str:
        blocks = []
        for slot in OUTPUT_SLOTS:
            if slot in self.slots:
                blocks.append(f"## {slot}\n{self.slots[slot]}")
        return "\n\n".join(blocks)


@dataclass
class SubmissionOutcome:
    ok: bool
    result: FanOutResult
    error: str | None = None


class LessonPlanForm:
    """Holds the page state the original form kept in the DOM."""

    def __init__(
        self,
        generate: Callable[[str], Awaitable[str]],
        strategy: AggregationStrategy = AggregationStrategy.ALL_OR_NOTHING,
    ):
        self._generate = generate
        self.strategy = strategy
        self.button = SubmitButton()
        self.output = OutputSection()
        self.alerts: list[str] = []

    async def submit(self, context: LessonPlanContext) -> SubmissionOutcome:
        self.button.busy()
        self.output.reset()
        try:
            result = await fan_out(build_prompts(context), self._generate)

            if not result.is_success(self.strategy):
                logger.error("API Generation Error: %s", sorted(result.failed))
                self.alerts.append(FAILURE_MESSAGE)
                return SubmissionOutcome(ok=False, result=result, error=FAILURE_MESSAGE)

            self.output.slots = dict(result.succeeded)
            self.output.reveal()

            error = None
            if result.failed:
                error = f"{FAILURE_MESSAGE} ({', '.join(sorted(result.failed))})"
                self.alerts.append(error)
            return SubmissionOutcome(ok=True, result=result, error=error)
        finally:
            self.button.restore()
