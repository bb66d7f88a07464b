import logging
from typing import Dict, List

from .models import Question, Dimension, Polarity
from .errors import UnknownQuestionError

logger = logging.getLogger(__name__)

QUESTIONS_PER_DIMENSION = 15

_POS = Polarity.POSITIVE
_NEG = Polarity.NEGATIVE

# id, text, polarity
_RAW_CATALOG = {
    Dimension.EI: [
        ("ei-1", "You regularly make new friends.", _POS),
        ("ei-2", "You feel comfortable in large social gatherings.", _POS),
        ("ei-3", "You prefer working in a team rather than alone.", _POS),
        ("ei-4", "You enjoy being the center of attention.", _POS),
        ("ei-5", "You often initiate conversations with strangers.", _POS),
        ("ei-6", "You feel energized after spending time with others.", _POS),
        ("ei-7", "You need time alone to recharge after social events.", _NEG),
        ("ei-8", "You prefer deep conversations with one person over group discussions.", _NEG),
        ("ei-9", "You think before you speak in most situations.", _NEG),
        ("ei-10", "You feel drained after extended social interactions.", _NEG),
        ("ei-11", "You enjoy attending parties and social events.", _POS),
        ("ei-12", "You find it easy to approach new people.", _POS),
        ("ei-13", "You prefer to observe rather than participate in group activities.", _NEG),
        ("ei-14", "You feel more productive when working with others.", _POS),
        ("ei-15", "You enjoy spending weekends at home rather than going out.", _NEG),
    ],
    Dimension.SN: [
        ("sn-1", "You focus on practical, concrete information rather than abstract theories.", _POS),
        ("sn-2", "You prefer dealing with facts rather than possibilities.", _POS),
        ("sn-3", "You trust your direct experience more than theoretical knowledge.", _POS),
        ("sn-4", "You pay attention to details rather than the big picture.", _POS),
        ("sn-5", "You prefer step-by-step instructions over general guidelines.", _POS),
        ("sn-6", "You are more interested in what is happening now than what might happen.", _POS),
        ("sn-7", "You enjoy exploring abstract concepts and theories.", _NEG),
        ("sn-8", "You often think about future possibilities and scenarios.", _NEG),
        ("sn-9", "You trust your intuition when making decisions.", _NEG),
        ("sn-10", "You prefer to understand the underlying meaning rather than surface details.", _NEG),
        ("sn-11", "You enjoy learning through hands-on experience.", _POS),
        ("sn-12", "You focus on realistic and achievable goals.", _POS),
        ("sn-13", "You are drawn to new and innovative ideas.", _NEG),
        ("sn-14", "You prefer tried-and-true methods over experimental approaches.", _POS),
        ("sn-15", "You often see patterns and connections that others miss.", _NEG),
    ],
    Dimension.TF: [
        ("tf-1", "You make decisions based on logic rather than emotions.", _POS),
        ("tf-2", "You value truth over tact when giving feedback.", _POS),
        ("tf-3", "You prefer objective analysis over personal considerations.", _POS),
        ("tf-4", "You find it easy to remain detached in emotional situations.", _POS),
        ("tf-5", "You believe fairness means treating everyone the same way.", _POS),
        ("tf-6", "You prioritize efficiency over harmony in group settings.", _POS),
        ("tf-7", "You consider how decisions will affect others emotionally.", _NEG),
        ("tf-8", "You value harmony and avoid conflict when possible.", _NEG),
        ("tf-9", "You make decisions based on your personal values.", _NEG),
        ("tf-10", "You are sensitive to the emotional atmosphere in a room.", _NEG),
        ("tf-11", "You prefer to analyze problems objectively.", _POS),
        ("tf-12", "You can easily identify logical inconsistencies.", _POS),
        ("tf-13", "You prioritize being kind over being right.", _NEG),
        ("tf-14", "You find it difficult to criticize others even when necessary.", _NEG),
        ("tf-15", "You believe emotions should guide important life decisions.", _NEG),
    ],
    Dimension.JP: [
        ("jp-1", "You prefer having a detailed plan before starting a project.", _POS),
        ("jp-2", "You feel satisfied when tasks are completed and organized.", _POS),
        ("jp-3", "You prefer to make decisions quickly rather than keep options open.", _POS),
        ("jp-4", "You like having a structured daily routine.", _POS),
        ("jp-5", "You feel uncomfortable with last-minute changes to plans.", _POS),
        ("jp-6", "You prefer to finish one project before starting another.", _POS),
        ("jp-7", "You enjoy spontaneous activities and surprises.", _NEG),
        ("jp-8", "You prefer to keep your options open rather than commit early.", _NEG),
        ("jp-9", "You adapt easily to changing circumstances.", _NEG),
        ("jp-10", "You often start new projects before finishing old ones.", _NEG),
        ("jp-11", "You prefer deadlines and clear timelines.", _POS),
        ("jp-12", "You feel stressed when things are disorganized.", _POS),
        ("jp-13", "You enjoy exploring different approaches without committing.", _NEG),
        ("jp-14", "You prefer flexible schedules over fixed ones.", _NEG),
        ("jp-15", "You feel energized by last-minute deadlines.", _NEG),
    ],
}

MBTI_QUESTIONS: List[Question] = [
    Question(id=qid, text=text, dimension=dimension, polarity=polarity)
    for dimension, rows in _RAW_CATALOG.items()
    for qid, text, polarity in rows
]

_QUESTIONS_BY_ID: Dict[str, Question] = {q.id: q for q in MBTI_QUESTIONS}


def all_questions() -> List[Question]:
    """Return the full catalog in its canonical order"""
    return list(MBTI_QUESTIONS)


def questions_by_dimension(dimension: Dimension) -> List[Question]:
    """Return the catalog questions measuring one dimension"""
    dimension = Dimension(dimension)
    return [q for q in MBTI_QUESTIONS if q.dimension == dimension]


def get_question(question_id: str) -> Question:
    """Look up a catalog question by id"""
    question = _QUESTIONS_BY_ID.get(question_id)
    if question is None:
        raise UnknownQuestionError(f"Question not found: {question_id}")
    return question


def validate_catalog_coverage() -> Dict[str, int]:
    """Check that every dimension carries its full question set"""
    counts = {dim.value: len(questions_by_dimension(dim)) for dim in Dimension}
    short = {dim: count for dim, count in counts.items() if count != QUESTIONS_PER_DIMENSION}
    if short:
        raise RuntimeError(f"Catalog coverage mismatch: {short}")
    if len(_QUESTIONS_BY_ID) != len(MBTI_QUESTIONS):
        raise RuntimeError("Catalog contains duplicate question ids")
    logger.info(f"Question catalog validated: {len(MBTI_QUESTIONS)} questions")
    return counts
