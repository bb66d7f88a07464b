from typing import Dict, List, Tuple

from .models import (
    Answer, AnswerInsight, MBTIResult, Dimension, Trait, TraitBreakdownRow,
    DIMENSION_ORDER
)
from .scoring import favored_trait, dominant_trait, NEUTRAL_PERCENTAGE
from .personalities import TRAIT_NAMES, TRAIT_LABELS, DIMENSION_DESCRIPTIONS

# Upper deviation bound (inclusive) for each strength bucket
STRENGTH_BUCKETS: List[Tuple[int, str]] = [
    (10, "Slight"),
    (25, "Moderate"),
    (40, "Clear"),
]
STRONGEST_LABEL = "Strong"

ANSWER_STRENGTH_WORDS: Dict[int, str] = {
    3: "strongly",
    2: "moderately",
}
DEFAULT_STRENGTH_WORD = "slightly"

SLIDER_LABELS: Dict[int, str] = {
    3: "Strongly",
    2: "Moderately",
    1: "Slightly",
    0: "Neutral",
}


def deviation(percentage: int) -> int:
    return abs(percentage - NEUTRAL_PERCENTAGE)


def strength_label(percentage: int) -> str:
    """
    Describe how far a dimension leans away from neutral

    Args:
        percentage: Share toward the first trait (0-100)

    Returns:
        "Slight" (deviation <= 10), "Moderate" (<= 25), "Clear" (<= 40) or "Strong"
    """
    distance = deviation(percentage)
    for upper_bound, label in STRENGTH_BUCKETS:
        if distance <= upper_bound:
            return label
    return STRONGEST_LABEL


def strongest_dimension(result: MBTIResult) -> Dimension:
    """Dimension furthest from 50%; ties go to the earlier one in EI, SN, TF, JP order"""
    best = DIMENSION_ORDER[0]
    for dimension in DIMENSION_ORDER[1:]:
        if deviation(result.scores[dimension].percentage) > deviation(result.scores[best].percentage):
            best = dimension
    return best


def strongest_trait(result: MBTIResult) -> Trait:
    """Dominant trait letter of the strongest dimension"""
    return dominant_trait(result.scores[strongest_dimension(result)])


def answer_strength_word(value: int) -> str:
    return ANSWER_STRENGTH_WORDS.get(abs(value), DEFAULT_STRENGTH_WORD)


def slider_strength_label(value: int) -> str:
    """Label shown under the slider for a given position"""
    return SLIDER_LABELS[abs(value)]


def answer_insight(answer: Answer) -> AnswerInsight:
    """Explain which trait a single answer leans toward and how firmly"""
    trait = favored_trait(answer.dimension, answer.polarity, answer.value)
    strength = answer_strength_word(answer.value)
    trait_name = TRAIT_NAMES[trait]
    return AnswerInsight(
        question_id=answer.question_id,
        strength=strength,
        favored_trait=trait,
        trait_name=trait_name,
        text=f"This choice {strength} indicates {trait_name} preference."
    )


def trait_breakdown(result: MBTIResult) -> List[TraitBreakdownRow]:
    """Per-dimension rows for the trait analytics display"""
    rows = []
    for dimension in DIMENSION_ORDER:
        score = result.scores[dimension]
        rows.append(TraitBreakdownRow(
            dimension=dimension,
            first_label=TRAIT_LABELS[score.first_trait],
            second_label=TRAIT_LABELS[score.second_trait],
            description=DIMENSION_DESCRIPTIONS[dimension],
            percentage=score.percentage,
            complement=100 - score.percentage,
            strength=strength_label(score.percentage),
            dominant_trait=dominant_trait(score)
        ))
    return rows


def dimension_strengths(result: MBTIResult) -> Dict[Dimension, str]:
    return {dim: strength_label(result.scores[dim].percentage) for dim in DIMENSION_ORDER}
