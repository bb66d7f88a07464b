import json
import asyncio
import pytest

from realscene.config import settings
from realscene.core.models import UserProfile, AgeGroup, Occupation, Answer
from realscene.core.catalog import get_question
from realscene.i18n.messages import MessageCatalog


@pytest.fixture(autouse=True)
def no_external_generation(monkeypatch):
    """Never let tests reach a real language model"""
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)


@pytest.fixture(scope="session")
def catalog():
    return MessageCatalog(settings.MESSAGES_DIR, "en")


@pytest.fixture
def student_profile():
    return UserProfile(
        age_group=AgeGroup.YOUNG_ADULT,
        occupation=Occupation.STUDENT,
        occupation_detail="Computer Science",
        interests=["music", "hiking"]
    )


@pytest.fixture
def professional_profile():
    return UserProfile(
        age_group=AgeGroup.ADULT,
        occupation=Occupation.PROFESSIONAL,
        occupation_detail="",
        interests=["reading", "travel"]
    )


def make_answer(question_id: str, value: int) -> Answer:
    """Answer a catalog question, copying its dimension and polarity"""
    question = get_question(question_id)
    return Answer(
        question_id=question.id,
        dimension=question.dimension,
        value=value,
        polarity=question.polarity
    )


class FakeMessage:
    def __init__(self, content):
        self.content = content


class FakeLLM:
    """
    Stand-in chat model

    `replies` maps a question id to the raw content returned for it, an
    Exception instance to raise, or a callable. Questions are matched by their
    text appearing in the prompt.
    """

    def __init__(self, questions, replies=None, delay=0.0):
        self.questions = questions
        self.replies = replies or {}
        self.delay = delay
        self.calls = []

    def _question_for(self, prompt):
        for question in self.questions:
            if question.text in prompt:
                return question
        raise AssertionError("prompt did not contain a known question")

    async def ainvoke(self, messages):
        prompt = messages[-1].content
        question = self._question_for(prompt)
        self.calls.append(question.id)
        if self.delay:
            await asyncio.sleep(self.delay)

        reply = self.replies.get(question.id)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return FakeMessage(reply(question))
        if reply is not None:
            return FakeMessage(reply)
        return FakeMessage(json.dumps({
            "leftScenario": f"LLM left for {question.id}",
            "rightScenario": f"LLM right for {question.id}"
        }))
