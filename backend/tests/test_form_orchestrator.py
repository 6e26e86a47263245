import asyncio

import pytest

from lesson_proxy.errors import UpstreamTimeout
from lesson_proxy.orchestrator.context import LessonPlanContext
from lesson_proxy.orchestrator.fanout import AggregationStrategy
from lesson_proxy.orchestrator.form import (
    BUSY_LABEL,
    FAILURE_MESSAGE,
    IDLE_LABEL,
    LessonPlanForm,
)
from lesson_proxy.orchestrator.prompts import OUTPUT_SLOTS, SECTION_INSTRUCTIONS, build_prompts

CONTEXT = LessonPlanContext(
    teacherName="Gng. Santos",
    school="Paaralang Elementarya ng San Isidro",
    element="Agrikultura",
    quarter="Ikalawa",
    week="3",
    content="Pagtatanim ng gulay",
    contentStandards="Naipamamalas ang pag-unawa sa pagtatanim",
    learningCompetencies="Naisasagawa ang wastong paraan ng pagtatanim",
)


def slot_for(prompt: str) -> str:
    for slot, instruction in SECTION_INSTRUCTIONS.items():
        if prompt.endswith(instruction):
            return slot
    raise AssertionError(f"unknown prompt: {prompt!r}")


def test_eleven_distinct_prompts_share_the_context():
    prompts = build_prompts(CONTEXT)

    assert list(prompts) == list(OUTPUT_SLOTS)
    assert len(prompts) == 11
    assert len(set(prompts.values())) == 11
    for prompt in prompts.values():
        assert prompt.startswith(CONTEXT.render())
        assert "Nilalaman (Topic): Pagtatanim ng gulay" in prompt


def test_context_reads_form_field_ids():
    context = LessonPlanContext.model_validate({"schoolYear": "2025-2026", "subject": "EPP"})
    assert context.school_year == "2025-2026"
    assert context.subject == "EPP"
    assert context.materials == ""


@pytest.mark.anyio
async def test_all_requests_are_in_flight_together():
    in_flight = 0
    all_started = asyncio.Event()

    async def generate(prompt: str) -> str:
        nonlocal in_flight
        in_flight += 1
        if in_flight == 11:
            all_started.set()
        await asyncio.wait_for(all_started.wait(), timeout=1)
        return slot_for(prompt)

    form = LessonPlanForm(generate)
    outcome = await form.submit(CONTEXT)

    assert outcome.ok
    assert in_flight == 11


@pytest.mark.anyio
async def test_full_success_fills_every_slot_and_reveals_once():
    async def generate(prompt: str) -> str:
        return f"nilalaman para sa {slot_for(prompt)}"

    form = LessonPlanForm(generate)
    outcome = await form.submit(CONTEXT)

    assert outcome.ok
    assert outcome.error is None
    assert form.output.slots == {slot: f"nilalaman para sa {slot}" for slot in OUTPUT_SLOTS}
    assert form.output.visible
    assert form.output.reveal_count == 1
    assert form.alerts == []


@pytest.mark.anyio
async def test_one_failure_discards_every_slot_under_all_or_nothing():
    async def generate(prompt: str) -> str:
        if slot_for(prompt) == "assessmentOutput":
            raise UpstreamTimeout("Nalampasan ang timeout (60s).")
        return "ok"

    form = LessonPlanForm(generate)
    outcome = await form.submit(CONTEXT)

    assert not outcome.ok
    assert outcome.error == FAILURE_MESSAGE
    assert len(outcome.result.succeeded) == 10
    assert outcome.result.failed["assessmentOutput"].error_kind == "upstream_timeout"
    assert form.output.slots == {}
    assert not form.output.visible
    assert form.output.reveal_count == 0
    assert form.alerts == [FAILURE_MESSAGE]


@pytest.mark.anyio
async def test_best_effort_renders_partial_results():
    async def generate(prompt: str) -> str:
        if slot_for(prompt) == "vocabularyOutput":
            raise RuntimeError("boom")
        return "ok"

    form = LessonPlanForm(generate, strategy=AggregationStrategy.BEST_EFFORT)
    outcome = await form.submit(CONTEXT)

    assert outcome.ok
    assert "vocabularyOutput" in outcome.error
    assert "vocabularyOutput" not in form.output.slots
    assert len(form.output.slots) == 10
    assert form.output.reveal_count == 1


@pytest.mark.anyio
async def test_best_effort_fails_when_nothing_succeeds():
    async def generate(prompt: str) -> str:
        raise RuntimeError("down")

    form = LessonPlanForm(generate, strategy=AggregationStrategy.BEST_EFFORT)
    outcome = await form.submit(CONTEXT)

    assert not outcome.ok
    assert not form.output.visible


@pytest.mark.anyio
async def test_button_is_busy_in_flight_and_restored_after():
    form = None
    labels = []

    async def generate(prompt: str) -> str:
        labels.append((form.button.label, form.button.disabled))
        return "ok"

    form = LessonPlanForm(generate)
    await form.submit(CONTEXT)

    assert set(labels) == {(BUSY_LABEL, True)}
    assert form.button.label == IDLE_LABEL
    assert not form.button.disabled


@pytest.mark.anyio
async def test_button_is_restored_when_submission_is_cancelled():
    started = asyncio.Event()

    async def generate(prompt: str) -> str:
        started.set()
        await asyncio.sleep(10)
        return "never"

    form = LessonPlanForm(generate)
    task = asyncio.create_task(form.submit(CONTEXT))
    await started.wait()
    assert form.button.disabled

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert form.button.label == IDLE_LABEL
    assert not form.button.disabled


@pytest.mark.anyio
async def test_html_rendering_escapes_generated_text():
    async def generate(prompt: str) -> str:
        return '<b>"Tanong"</b>'

    form = LessonPlanForm(generate)
    await form.submit(CONTEXT)
    rendered = form.output.render_html()

    assert 'style="display: block"' in rendered
    assert '<div id="hookActivityOutput">&lt;b&gt;&quot;Tanong&quot;&lt;/b&gt;</div>' in rendered
