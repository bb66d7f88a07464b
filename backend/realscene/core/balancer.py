import random
from typing import Dict, List, Optional

from .models import Question, Dimension, DIMENSION_ORDER


def group_by_dimension(questions: List[Question]) -> Dict[Dimension, List[Question]]:
    """Partition questions by dimension, preserving input order within each group"""
    groups: Dict[Dimension, List[Question]] = {dim: [] for dim in DIMENSION_ORDER}
    for question in questions:
        groups[question.dimension].append(question)
    return groups


def shuffle_questions(questions: List[Question], rng: Optional[random.Random] = None) -> List[Question]:
    """
    Shuffle questions while keeping the dimensions interleaved

    Each dimension group is shuffled independently, then the groups are
    zipped round-robin in EI, SN, TF, JP order. Exhausted groups are
    skipped so the remaining ones keep cycling until everything is used.

    Args:
        questions: Questions to reorder (any subset of the catalog)
        rng: Random source, injectable for reproducible orderings

    Returns:
        A new list containing every input question exactly once
    """
    rng = rng or random.Random()
    groups = group_by_dimension(questions)

    for dimension in DIMENSION_ORDER:
        rng.shuffle(groups[dimension])

    result: List[Question] = []
    max_length = max((len(group) for group in groups.values()), default=0)
    for i in range(max_length):
        for dimension in DIMENSION_ORDER:
            group = groups[dimension]
            if i < len(group):
                result.append(group[i])

    return result
