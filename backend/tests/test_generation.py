import json
import asyncio
import pytest

from realscene.config import settings
from realscene.generation.engine import (
    ScenarioGenerator, parse_scenario_response,
    GENERATION_METHOD_LLM, GENERATION_METHOD_FALLBACK, GENERATION_METHOD_MIXED
)
from realscene.generation.fallback import fallback_scenario
from realscene.core.balancer import shuffle_questions
from realscene.core.catalog import all_questions, get_question
from realscene.core.errors import ScenarioAssociationError

from conftest import FakeLLM


# --- Response parsing ---

def test_parse_locks_metadata_to_question():
    question = get_question("jp-9")
    content = json.dumps({
        "leftScenario": " plan ", "rightScenario": "adapt",
        "dimension": "EI", "polarity": "positive"
    })
    scenario = parse_scenario_response(content, question)
    assert scenario.left_scenario == "plan"
    assert scenario.dimension == question.dimension
    assert scenario.polarity == question.polarity


def test_parse_accepts_matching_question_id():
    question = get_question("ei-2")
    content = json.dumps({"questionId": "ei-2", "leftScenario": "a", "rightScenario": "b"})
    assert parse_scenario_response(content, question).question_id == "ei-2"


def test_parse_rejects_mismatched_question_id():
    with pytest.raises(ScenarioAssociationError):
        parse_scenario_response(
            json.dumps({"questionId": "sn-1", "leftScenario": "a", "rightScenario": "b"}),
            get_question("ei-2")
        )


@pytest.mark.parametrize("content", [
    "",
    "not json",
    "[1, 2]",
    json.dumps({"leftScenario": "only left"}),
    json.dumps({"leftScenario": "  ", "rightScenario": "b"}),
    json.dumps({"leftScenario": 3, "rightScenario": "b"}),
])
def test_parse_rejects_malformed_content(content):
    with pytest.raises(ValueError):
        parse_scenario_response(content, get_question("ei-1"))


def test_parse_accepts_content_parts():
    content = [{"type": "text", "text": json.dumps({"leftScenario": "a", "rightScenario": "b"})}]
    assert parse_scenario_response(content, get_question("ei-1")).right_scenario == "b"


# --- Generator ---

def test_generator_without_llm_is_fallback(catalog):
    generator = ScenarioGenerator(catalog=catalog)
    assert not generator.initialized
    assert generator.generation_method == GENERATION_METHOD_FALLBACK


def test_generation_disabled_ignores_api_key(catalog, monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(settings, "ENABLE_GENERATION", False)
    assert not ScenarioGenerator(catalog=catalog).initialized


@pytest.mark.asyncio
async def test_unavailable_generator_returns_fallback_for_all(catalog, student_profile):
    questions = shuffle_questions(all_questions())
    generator = ScenarioGenerator(catalog=catalog)
    scenarios = await generator.generate_scenarios(student_profile, questions, "en")
    assert scenarios == [fallback_scenario(q, student_profile, catalog, "en") for q in questions]


@pytest.mark.asyncio
async def test_llm_scenarios_in_input_order(catalog, student_profile):
    questions = shuffle_questions(all_questions())
    llm = FakeLLM(questions)
    generator = ScenarioGenerator(catalog=catalog, llm=llm)
    assert generator.generation_method == GENERATION_METHOD_LLM

    scenarios = await generator.generate_scenarios(student_profile, questions, "en")

    assert len(llm.calls) == len(questions)
    assert [s.question_id for s in scenarios] == [q.id for q in questions]
    for question, scenario in zip(questions, scenarios):
        assert scenario.dimension == question.dimension
        assert scenario.polarity == question.polarity
        assert scenario.left_scenario == f"LLM left for {question.id}"


@pytest.mark.asyncio
async def test_out_of_order_completion_keeps_input_order(catalog, professional_profile):
    questions = all_questions()[:8]

    class ReversedDelayLLM(FakeLLM):
        async def ainvoke(self, messages):
            question = self._question_for(messages[-1].content)
            await asyncio.sleep(0.001 * (8 - questions.index(question)))
            return await super().ainvoke(messages)

    generator = ScenarioGenerator(catalog=catalog, llm=ReversedDelayLLM(questions))
    scenarios = await generator.generate_scenarios(professional_profile, questions, "en")
    assert [s.question_id for s in scenarios] == [q.id for q in questions]


@pytest.mark.asyncio
async def test_single_failure_falls_back_for_that_question_only(catalog, student_profile):
    questions = all_questions()[:5]
    llm = FakeLLM(questions, replies={
        questions[1].id: RuntimeError("network down"),
        questions[3].id: "{malformed",
    })
    generator = ScenarioGenerator(catalog=catalog, llm=llm)

    scenarios = await generator.generate_scenarios(student_profile, questions, "en")

    assert scenarios[1] == fallback_scenario(questions[1], student_profile, catalog, "en")
    assert scenarios[3] == fallback_scenario(questions[3], student_profile, catalog, "en")
    for index in (0, 2, 4):
        assert scenarios[index].left_scenario.startswith("LLM left")


@pytest.mark.asyncio
async def test_mislabelled_reply_is_replaced_by_fallback(catalog, student_profile):
    questions = [get_question("ei-1"), get_question("tf-3")]
    llm = FakeLLM(questions, replies={
        "ei-1": json.dumps({"questionId": "tf-3", "leftScenario": "x", "rightScenario": "y"})
    })
    scenarios = await ScenarioGenerator(catalog=catalog, llm=llm).generate_scenarios(
        student_profile, questions, "en"
    )
    assert scenarios[0] == fallback_scenario(questions[0], student_profile, catalog, "en")
    assert scenarios[1].left_scenario == "LLM left for tf-3"


@pytest.mark.asyncio
async def test_timeout_falls_back(catalog, student_profile, monkeypatch):
    monkeypatch.setattr(settings, "GENERATION_TIMEOUT_SECONDS", 0.01)
    questions = all_questions()[:2]
    generator = ScenarioGenerator(catalog=catalog, llm=FakeLLM(questions, delay=0.5))
    scenarios = await generator.generate_scenarios(student_profile, questions, "en")
    assert scenarios == [fallback_scenario(q, student_profile, catalog, "en") for q in questions]


@pytest.mark.asyncio
async def test_concurrency_is_bounded(catalog, student_profile, monkeypatch):
    monkeypatch.setattr(settings, "MAX_CONCURRENT_GENERATIONS", 2)
    questions = all_questions()[:6]
    in_flight = {"now": 0, "peak": 0}

    class CountingLLM(FakeLLM):
        async def ainvoke(self, messages):
            in_flight["now"] += 1
            in_flight["peak"] = max(in_flight["peak"], in_flight["now"])
            try:
                await asyncio.sleep(0.01)
                return await super().ainvoke(messages)
            finally:
                in_flight["now"] -= 1

    await ScenarioGenerator(catalog=catalog, llm=CountingLLM(questions)).generate_scenarios(
        student_profile, questions, "en"
    )
    assert in_flight["peak"] == 2


@pytest.mark.asyncio
async def test_every_scenario_has_text_when_all_calls_fail(catalog, professional_profile):
    questions = all_questions()
    llm = FakeLLM(questions, replies={q.id: ValueError("boom") for q in questions})
    scenarios = await ScenarioGenerator(catalog=catalog, llm=llm).generate_scenarios(
        professional_profile, questions, "zh"
    )
    assert all(s.left_scenario and s.right_scenario for s in scenarios)
    assert [s.question_id for s in scenarios] == [q.id for q in questions]


@pytest.mark.asyncio
async def test_empty_question_list(catalog, student_profile):
    generator = ScenarioGenerator(catalog=catalog, llm=FakeLLM([]))
    assert await generator.generate_scenarios(student_profile, [], "en") == []


@pytest.mark.asyncio
async def test_resolve_reports_method_actually_used(catalog, student_profile):
    questions = all_questions()[:3]

    generator = ScenarioGenerator(catalog=catalog, llm=FakeLLM(questions))
    _, method = await generator.resolve_scenarios(student_profile, questions, "en")
    assert method == GENERATION_METHOD_LLM

    partial = FakeLLM(questions, replies={questions[0].id: RuntimeError("boom")})
    _, method = await ScenarioGenerator(catalog=catalog, llm=partial).resolve_scenarios(
        student_profile, questions, "en"
    )
    assert method == GENERATION_METHOD_MIXED

    failing = FakeLLM(questions, replies={q.id: RuntimeError("boom") for q in questions})
    generator = ScenarioGenerator(catalog=catalog, llm=failing)
    scenarios, method = await generator.resolve_scenarios(student_profile, questions, "en")
    assert method == GENERATION_METHOD_FALLBACK
    assert generator.generation_method == GENERATION_METHOD_LLM
    assert scenarios == [fallback_scenario(q, student_profile, catalog, "en") for q in questions]
