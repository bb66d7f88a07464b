from typing import Optional, Tuple

from ..core.models import Question, UserProfile
from ..i18n.messages import MessageCatalog


def describe_occupation(profile: UserProfile, catalog: MessageCatalog, locale: Optional[str]) -> str:
    base = catalog.translate(locale, f"scenarios.occupations.{profile.occupation.value}")
    if not profile.occupation_detail:
        return base
    return catalog.translate(
        locale, "scenarios.occupationDetailFormat",
        base=base, detail=profile.occupation_detail
    )


def build_scenario_prompt(
    profile: UserProfile,
    question: Question,
    catalog: MessageCatalog,
    locale: Optional[str] = None
) -> Tuple[str, str]:
    """
    Build the (system, user) prompt pair for one question

    The user prompt carries the respondent profile and the statement with its
    dimension and polarity so both scenarios are written around the same axis.
    """
    system_prompt = catalog.translate(locale, "scenarios.systemPrompt")
    user_prompt = catalog.translate(
        locale, "scenarios.singlePromptTemplate",
        ageDescription=catalog.translate(locale, f"scenarios.ageDescriptions.{profile.age_group.value}"),
        occupationDescription=describe_occupation(profile, catalog, locale),
        interests=", ".join(profile.interests),
        questionText=question.text,
        dimension=question.dimension.value,
        polarity=question.polarity.value
    )
    return system_prompt, user_prompt
