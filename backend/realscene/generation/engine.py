import json
import time
import asyncio
import logging
from typing import Any, List, Optional, Tuple

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from ..config import settings
from ..core.models import Question, Scenario, UserProfile
from ..core.errors import ScenarioAssociationError
from ..i18n.messages import MessageCatalog, get_catalog
from .fallback import fallback_scenario, fallback_scenarios
from .prompts import build_scenario_prompt

logger = logging.getLogger(__name__)

GENERATION_METHOD_LLM = "llm"
GENERATION_METHOD_FALLBACK = "fallback"
GENERATION_METHOD_MIXED = "mixed"


def _content_text(content: Any) -> str:
    """Flatten a chat message content payload into plain text"""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
        )
    raise ValueError(f"Unexpected response content type: {type(content).__name__}")


def parse_scenario_response(content: Any, question: Question) -> Scenario:
    """
    Turn a generator reply into a Scenario bound to the question it was asked for

    Dimension and polarity always come from the question. A reply that names a
    different questionId is rejected rather than relabelled.

    Raises:
        ValueError: the reply is not a JSON object with both scenario texts
        ScenarioAssociationError: the reply belongs to another question
    """
    text = _content_text(content).strip()
    if not text:
        raise ValueError("Empty response from generator")

    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("Generator response is not a JSON object")

    returned_id = parsed.get("questionId")
    if returned_id is not None and returned_id != question.id:
        raise ScenarioAssociationError(
            f"Generator returned scenario for {returned_id!r} while generating {question.id!r}"
        )

    left = parsed.get("leftScenario")
    right = parsed.get("rightScenario")
    for field_name, value in (("leftScenario", left), ("rightScenario", right)):
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Generator response missing {field_name}")

    return Scenario(
        question_id=question.id,
        left_scenario=left.strip(),
        right_scenario=right.strip(),
        dimension=question.dimension,
        polarity=question.polarity
    )


class ScenarioGenerator:
    """
    Resolves one scenario pair per question

    Uses the language model when it is configured and falls back to locale
    templates otherwise. Every question is generated independently, so a
    failed call only costs that question its generated text.
    """

    def __init__(self, catalog: Optional[MessageCatalog] = None, llm: Any = None):
        self.catalog = catalog or get_catalog()
        self.llm = llm

        if self.llm is None:
            if not settings.ENABLE_GENERATION:
                logger.info("Scenario generation disabled - using fallback scenarios")
            elif not settings.OPENAI_API_KEY:
                logger.info("OpenAI not configured - using fallback scenarios")
            else:
                try:
                    self.llm = self._create_llm()
                    logger.info(f"OpenAI scenario generator initialized with model: {settings.OPENAI_MODEL}")
                except Exception as e:
                    logger.error(f"Failed to initialize OpenAI client: {e}")
                    logger.info("Falling back to template scenarios")

        self.initialized = self.llm is not None

    def _create_llm(self):
        llm = ChatOpenAI(
            model=settings.OPENAI_MODEL,
            temperature=settings.GENERATION_TEMPERATURE,
            max_tokens=settings.GENERATION_MAX_TOKENS,
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.GENERATION_TIMEOUT_SECONDS,
            max_retries=0  # one attempt, then fallback
        )
        return llm.bind(response_format={"type": "json_object"})

    @property
    def generation_method(self) -> str:
        """Configured mode; see resolve_scenarios for what a batch actually used"""
        return GENERATION_METHOD_LLM if self.initialized else GENERATION_METHOD_FALLBACK

    async def generate_scenarios(
        self,
        profile: UserProfile,
        questions: List[Question],
        locale: Optional[str] = None
    ) -> List[Scenario]:
        """Generate scenarios for every question, in input order"""
        scenarios, _ = await self.resolve_scenarios(profile, questions, locale)
        return scenarios

    async def resolve_scenarios(
        self,
        profile: UserProfile,
        questions: List[Question],
        locale: Optional[str] = None
    ) -> Tuple[List[Scenario], str]:
        """
        Generate scenarios for every question and report how they were produced

        Args:
            profile: Respondent profile used to personalise the text
            questions: Ordered questions
            locale: Locale code for prompts and fallback text

        Returns:
            One Scenario per question, in input order, and the method used:
            "llm" when every scenario was generated, "fallback" when none was,
            "mixed" otherwise. Never raises for valid input.
        """
        locale = self.catalog.resolve_locale(locale)

        if not self.initialized:
            logger.warning("Scenario generator unavailable, using fallback scenarios")
            return fallback_scenarios(questions, profile, self.catalog, locale), GENERATION_METHOD_FALLBACK

        if not questions:
            return [], GENERATION_METHOD_LLM

        logger.info(f"Generating {len(questions)} scenarios in parallel (locale: {locale})...")
        start_time = time.time()
        semaphore = asyncio.Semaphore(max(1, settings.MAX_CONCURRENT_GENERATIONS))

        try:
            outcomes = await asyncio.gather(*[
                self._generate_single(profile, question, locale, semaphore)
                for question in questions
            ])
        except Exception as e:
            logger.error(f"Error in parallel generation, falling back: {e}")
            return fallback_scenarios(questions, profile, self.catalog, locale), GENERATION_METHOD_FALLBACK

        scenarios = [scenario for scenario, _ in outcomes]
        generated = sum(1 for _, from_llm in outcomes if from_llm)

        if generated == len(outcomes):
            method = GENERATION_METHOD_LLM
        elif generated == 0:
            method = GENERATION_METHOD_FALLBACK
        else:
            method = GENERATION_METHOD_MIXED

        duration = time.time() - start_time
        logger.info(f"Generated {generated}/{len(scenarios)} scenarios in {duration:.1f}s ({method})")
        return scenarios, method

    async def _generate_single(
        self,
        profile: UserProfile,
        question: Question,
        locale: str,
        semaphore: asyncio.Semaphore
    ) -> Tuple[Scenario, bool]:
        """Generate one question's scenarios, substituting the fallback on any failure"""
        try:
            system_prompt, user_prompt = build_scenario_prompt(profile, question, self.catalog, locale)
            async with semaphore:
                response = await asyncio.wait_for(
                    self.llm.ainvoke([
                        SystemMessage(content=system_prompt),
                        HumanMessage(content=user_prompt)
                    ]),
                    timeout=settings.GENERATION_TIMEOUT_SECONDS
                )
            return parse_scenario_response(response.content, question), True

        except Exception as e:
            logger.error(f"Error generating scenario for {question.id}: {e}")
            return fallback_scenario(question, profile, self.catalog, locale), False
