import logging
from typing import List, Optional

from ..core.models import Question, Scenario, UserProfile
from ..i18n.messages import MessageCatalog, get_catalog

logger = logging.getLogger(__name__)


def scenario_context(profile: UserProfile, catalog: MessageCatalog, locale: Optional[str] = None) -> str:
    """Localized word substituted into fallback templates: "class" for students, "meeting" otherwise"""
    context_key = "class" if profile.is_student else "meeting"
    return catalog.translate(locale, f"scenarios.context.{context_key}")


def fallback_scenario(
    question: Question,
    profile: UserProfile,
    catalog: Optional[MessageCatalog] = None,
    locale: Optional[str] = None
) -> Scenario:
    """Derive a scenario pair from the locale templates; never calls out"""
    catalog = catalog or get_catalog()
    template = catalog.fallback_templates(locale)[(question.dimension, question.polarity)]
    left, right = template.render(scenario_context(profile, catalog, locale))

    return Scenario(
        question_id=question.id,
        left_scenario=left,
        right_scenario=right,
        dimension=question.dimension,
        polarity=question.polarity
    )


def fallback_scenarios(
    questions: List[Question],
    profile: UserProfile,
    catalog: Optional[MessageCatalog] = None,
    locale: Optional[str] = None
) -> List[Scenario]:
    catalog = catalog or get_catalog()
    return [fallback_scenario(q, profile, catalog, locale) for q in questions]
