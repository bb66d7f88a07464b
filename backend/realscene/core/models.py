from datetime import datetime
from typing import Dict, List, Optional, Tuple
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Dimension(str, Enum):
    """The four trait axes, in their fixed presentation order"""
    EI = "EI"
    SN = "SN"
    TF = "TF"
    JP = "JP"


class Trait(str, Enum):
    """One pole of a dimension"""
    E = "E"
    I = "I"
    S = "S"
    N = "N"
    T = "T"
    F = "F"
    J = "J"
    P = "P"


class Polarity(str, Enum):
    """Whether agreeing with a question favors the first or second trait"""
    POSITIVE = "positive"
    NEGATIVE = "negative"


class MBTIType(str, Enum):
    INTJ = "INTJ"
    INTP = "INTP"
    ENTJ = "ENTJ"
    ENTP = "ENTP"
    INFJ = "INFJ"
    INFP = "INFP"
    ENFJ = "ENFJ"
    ENFP = "ENFP"
    ISTJ = "ISTJ"
    ISFJ = "ISFJ"
    ESTJ = "ESTJ"
    ESFJ = "ESFJ"
    ISTP = "ISTP"
    ISFP = "ISFP"
    ESTP = "ESTP"
    ESFP = "ESFP"


class AgeGroup(str, Enum):
    TEEN = "teen"
    YOUNG_ADULT = "young-adult"
    ADULT = "adult"
    MATURE = "mature"


class Occupation(str, Enum):
    STUDENT = "student"
    PROFESSIONAL = "professional"
    FREELANCER = "freelancer"
    OTHER = "other"


# (first trait, second trait) per dimension; first trait wins ties
DIMENSION_TRAITS: Dict[Dimension, Tuple[Trait, Trait]] = {
    Dimension.EI: (Trait.E, Trait.I),
    Dimension.SN: (Trait.S, Trait.N),
    Dimension.TF: (Trait.T, Trait.F),
    Dimension.JP: (Trait.J, Trait.P),
}

DIMENSION_ORDER: List[Dimension] = [Dimension.EI, Dimension.SN, Dimension.TF, Dimension.JP]

ANSWER_MIN = -3
ANSWER_MAX = 3


class WireModel(BaseModel):
    """Immutable value object serialised with camelCase field names"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Question(WireModel):
    """Scored catalog statement"""
    id: str
    text: str
    dimension: Dimension
    polarity: Polarity


class Scenario(WireModel):
    """Pair of opposing scenario texts presented for one question"""
    question_id: str
    left_scenario: str = Field(..., description="Text for the -3 end of the slider")
    right_scenario: str = Field(..., description="Text for the +3 end of the slider")
    dimension: Dimension
    polarity: Polarity


class Answer(WireModel):
    """Slider answer to a single question"""
    question_id: str
    dimension: Dimension
    value: int = Field(..., ge=ANSWER_MIN, le=ANSWER_MAX, description="Slider position -3..3")
    polarity: Polarity


class DimensionScore(WireModel):
    dimension: Dimension
    first_trait: Trait
    second_trait: Trait
    first_score: int = Field(..., ge=0)
    second_score: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100, description="Share toward the first trait")


class MBTIResult(WireModel):
    type: MBTIType
    scores: Dict[Dimension, DimensionScore]
    answers: List[Answer]

    @model_validator(mode="after")
    def check_scores(self) -> "MBTIResult":
        missing = [dim.value for dim in DIMENSION_ORDER if dim not in self.scores]
        if missing:
            raise ValueError(f"Scores missing dimensions: {', '.join(missing)}")
        for dim, score in self.scores.items():
            if score.dimension != dim:
                raise ValueError(f"Score under {dim.value} is for {score.dimension.value}")
        return self


class UserProfile(WireModel):
    """Respondent context used to personalise scenarios"""
    age_group: AgeGroup
    occupation: Occupation
    occupation_detail: str = ""
    interests: List[str] = Field(default_factory=list)

    @property
    def is_student(self) -> bool:
        return self.occupation == Occupation.STUDENT


class PersonalityInfo(WireModel):
    type: MBTIType
    name: str
    nickname: str
    description: str


# API Request/Response Models
class GenerateScenariosRequest(WireModel):
    user_profile: Optional[UserProfile] = None
    questions: List[Question] = Field(default_factory=list)
    locale: Optional[str] = None


class GenerateScenariosResponse(WireModel):
    scenarios: List[Scenario]
    generation_method: str


class CalculateResultRequest(WireModel):
    answers: List[Answer] = Field(default_factory=list)


class CalculateResultResponse(WireModel):
    result: MBTIResult


class QuestionsResponse(WireModel):
    questions: List[Question]
    total: int


class AnswerInsight(WireModel):
    question_id: str
    strength: str
    favored_trait: Trait
    trait_name: str
    text: str


class TraitBreakdownRow(WireModel):
    dimension: Dimension
    first_label: str
    second_label: str
    description: str
    percentage: int
    complement: int
    strength: str
    dominant_trait: Trait


class InsightsRequest(WireModel):
    result: MBTIResult


class InsightsResponse(WireModel):
    type: MBTIType
    personality: PersonalityInfo
    strongest_trait: Trait
    strongest_dimension: Dimension
    strengths: Dict[Dimension, str]
    breakdown: List[TraitBreakdownRow]
    answer_insights: List[AnswerInsight]


class StartSessionRequest(WireModel):
    user_profile: UserProfile
    locale: Optional[str] = None


class SubmitAnswerRequest(WireModel):
    question_id: str
    value: int = Field(..., ge=ANSWER_MIN, le=ANSWER_MAX)


class SessionResponse(WireModel):
    session_id: str
    state: str
    current_question_index: int
    total_questions: int
    answered: int
    scenarios: List[Scenario]
    result: Optional[MBTIResult] = None
    generation_method: Optional[str] = None
    created_at: datetime
    last_activity: datetime
