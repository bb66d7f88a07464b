import re
import logging
from typing import Dict, Iterable, List, Tuple

from .models import (
    Answer, DimensionScore, MBTIResult, MBTIType, Dimension, Polarity, Trait,
    DIMENSION_TRAITS, DIMENSION_ORDER
)

logger = logging.getLogger(__name__)

NEUTRAL_PERCENTAGE = 50


def resolve_traits(dimension: Dimension) -> Tuple[Trait, Trait]:
    """Return the (first, second) trait pair of a dimension"""
    return DIMENSION_TRAITS[Dimension(dimension)]


def favored_trait(dimension: Dimension, polarity: Polarity, value: int) -> Trait:
    """
    Trait that an answer value pushes toward

    Positive polarity: a value above zero favors the first trait (E, S, T, J),
    anything else the second. Negative polarity mirrors the mapping.
    """
    first, second = resolve_traits(dimension)
    polarity = Polarity(polarity)
    if polarity == Polarity.POSITIVE:
        return first if value > 0 else second
    return second if value > 0 else first


def round_half_up(value: float) -> int:
    """Round .5 upward, matching Math.round on non-negative numbers"""
    return int(value + 0.5)


def calculate_percentage(first_score: int, second_score: int) -> int:
    """Share of the first trait as an integer 0-100; 50 when nothing was scored"""
    total = first_score + second_score
    if total <= 0:
        return NEUTRAL_PERCENTAGE
    return round_half_up(first_score / total * 100)


def calculate_dimension_score(dimension: Dimension, first_score: int, second_score: int) -> DimensionScore:
    first, second = resolve_traits(dimension)
    return DimensionScore(
        dimension=dimension,
        first_trait=first,
        second_trait=second,
        first_score=first_score,
        second_score=second_score,
        percentage=calculate_percentage(first_score, second_score)
    )


def dominant_trait(score: DimensionScore) -> Trait:
    """First trait at 50% or above, otherwise the second"""
    return score.first_trait if score.percentage >= NEUTRAL_PERCENTAGE else score.second_trait


def determine_type(scores: Dict[Dimension, DimensionScore]) -> MBTIType:
    letters = "".join(dominant_trait(scores[dim]).value for dim in DIMENSION_ORDER)
    return MBTIType(letters)


def _natural_key(question_id: str) -> List:
    return [int(part) if part.isdigit() else part for part in re.split(r"(\d+)", question_id)]


def _answer_order(answer: Answer) -> Tuple:
    # raw id breaks ties between ids with the same natural key ("ei-01", "ei-1")
    return (_natural_key(answer.question_id), answer.question_id)


def deduplicate_answers(answers: Iterable[Answer]) -> List[Answer]:
    """Keep one answer per question id; a later answer replaces an earlier one"""
    by_question: Dict[str, Answer] = {}
    for answer in answers:
        by_question[answer.question_id] = answer
    return list(by_question.values())


def accumulate_trait_scores(answers: Iterable[Answer]) -> Dict[Trait, int]:
    """Sum answer magnitudes into one accumulator per trait"""
    totals: Dict[Trait, int] = {trait: 0 for trait in Trait}
    for answer in answers:
        magnitude = abs(answer.value)
        if magnitude == 0:
            continue
        totals[favored_trait(answer.dimension, answer.polarity, answer.value)] += magnitude
    return totals


def calculate_result(answers: Iterable[Answer]) -> MBTIResult:
    """
    Score a set of answers into a four-letter type

    The result depends only on the answer set, not on its order: answers are
    deduplicated by question id and stored sorted by id.

    Args:
        answers: Slider answers, at most one per question is used

    Returns:
        MBTIResult with one DimensionScore per dimension. An empty answer set
        is valid and yields 50% everywhere, which resolves to ESTJ.
    """
    unique_answers = sorted(deduplicate_answers(answers), key=_answer_order)
    totals = accumulate_trait_scores(unique_answers)

    scores: Dict[Dimension, DimensionScore] = {}
    for dimension in DIMENSION_ORDER:
        first, second = resolve_traits(dimension)
        scores[dimension] = calculate_dimension_score(dimension, totals[first], totals[second])

    mbti_type = determine_type(scores)
    logger.debug(f"Scored {len(unique_answers)} answers as {mbti_type.value}")

    return MBTIResult(type=mbti_type, scores=scores, answers=unique_answers)
