import uuid
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .models import Answer, MBTIResult, Scenario, UserProfile
from .errors import UnknownQuestionError
from .scoring import calculate_result

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Session states for tracking assessment progress"""
    INITIALIZED = "initialized"
    PROFILE_SET = "profile_set"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class AssessmentSession(BaseModel):
    """Per-respondent assessment state, from profile submission to result"""
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    state: SessionState = SessionState.INITIALIZED
    profile: Optional[UserProfile] = None
    scenarios: List[Scenario] = Field(default_factory=list)
    answers: Dict[str, Answer] = Field(default_factory=dict)
    current_question_index: int = 0
    result: Optional[MBTIResult] = None
    generation_method: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    last_activity: datetime = Field(default_factory=datetime.now)

    def set_profile(self, profile: UserProfile):
        self.profile = profile
        self.state = SessionState.PROFILE_SET
        self.update_activity()

    def set_scenarios(self, scenarios: List[Scenario], generation_method: Optional[str] = None):
        self.scenarios = list(scenarios)
        self.generation_method = generation_method
        self.current_question_index = 0
        self.state = SessionState.IN_PROGRESS
        self.update_activity()

    def scenario_for(self, question_id: str) -> Scenario:
        for scenario in self.scenarios:
            if scenario.question_id == question_id:
                return scenario
        raise UnknownQuestionError(f"Question not in this session: {question_id}")

    def add_answer(self, question_id: str, value: int) -> Answer:
        """
        Record an answer; answering the same question again replaces it in place

        Changing an answer on a completed session discards its result and
        reopens it.
        """
        scenario = self.scenario_for(question_id)
        answer = Answer(
            question_id=question_id,
            dimension=scenario.dimension,
            value=value,
            polarity=scenario.polarity
        )
        self.answers[question_id] = answer
        if self.state == SessionState.COMPLETE:
            logger.info(f"Session {self.session_id} reopened by a changed answer")
            self.result = None
            self.state = SessionState.IN_PROGRESS
        self.update_activity()
        return answer

    def ordered_answers(self) -> List[Answer]:
        return list(self.answers.values())

    def next_question(self) -> int:
        self.current_question_index = min(self.current_question_index + 1, max(len(self.scenarios) - 1, 0))
        self.update_activity()
        return self.current_question_index

    def previous_question(self) -> int:
        self.current_question_index = max(self.current_question_index - 1, 0)
        self.update_activity()
        return self.current_question_index

    @property
    def is_fully_answered(self) -> bool:
        return bool(self.scenarios) and all(s.question_id in self.answers for s in self.scenarios)

    def complete(self) -> MBTIResult:
        """Score the recorded answers and close the session"""
        self.result = calculate_result(self.ordered_answers())
        self.state = SessionState.COMPLETE
        self.update_activity()
        return self.result

    def reset(self):
        """Clear everything but the session id, as on a retake"""
        self.state = SessionState.INITIALIZED
        self.profile = None
        self.scenarios = []
        self.answers = {}
        self.current_question_index = 0
        self.result = None
        self.generation_method = None
        self.update_activity()

    def update_activity(self):
        """Update last activity timestamp"""
        self.last_activity = datetime.now()


class SessionStore:
    """In-memory session registry"""

    def __init__(self):
        self.sessions: Dict[str, AssessmentSession] = {}

    def create(self) -> AssessmentSession:
        session = AssessmentSession()
        self.sessions[session.session_id] = session
        logger.info(f"Started session {session.session_id}")
        return session

    def get(self, session_id: str) -> Optional[AssessmentSession]:
        return self.sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None

    def cleanup_expired_sessions(self, max_age_hours: int = 24) -> int:
        """Drop sessions idle for longer than max_age_hours"""
        cutoff = datetime.now() - timedelta(hours=max_age_hours)

        expired_sessions = [
            sid for sid, session in self.sessions.items()
            if session.last_activity < cutoff
        ]
        for sid in expired_sessions:
            del self.sessions[sid]

        if expired_sessions:
            logger.info(f"Cleaned up {len(expired_sessions)} expired sessions")
        return len(expired_sessions)

    def __len__(self) -> int:
        return len(self.sessions)
