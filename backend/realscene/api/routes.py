from fastapi import APIRouter, HTTPException, Query, Depends, Cookie
from typing import Optional
import logging
from datetime import datetime

from ..core.catalog import all_questions, questions_by_dimension
from ..core.balancer import shuffle_questions
from ..core.scoring import calculate_result
from ..core.insights import (
    answer_insight, dimension_strengths, strongest_dimension, strongest_trait, trait_breakdown
)
from ..core.personalities import personality_info
from ..core.session import AssessmentSession, SessionStore
from ..core.errors import UnknownQuestionError
from ..core.models import (
    Dimension, GenerateScenariosRequest, GenerateScenariosResponse,
    CalculateResultRequest, CalculateResultResponse, QuestionsResponse,
    InsightsRequest, InsightsResponse, PersonalityInfo,
    StartSessionRequest, SubmitAnswerRequest, SessionResponse
)
from ..generation.engine import ScenarioGenerator
from ..config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Global state - initialized on first use
_generator: Optional[ScenarioGenerator] = None
_session_store = SessionStore()


def get_generator() -> ScenarioGenerator:
    """Dependency to get the scenario generator instance"""
    global _generator
    if _generator is None:
        _generator = ScenarioGenerator()
    return _generator


def get_session_store() -> SessionStore:
    """Dependency to get the session store"""
    return _session_store


def _get_session_or_404(store: SessionStore, session_id: str) -> AssessmentSession:
    session = store.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _session_response(session: AssessmentSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        state=session.state.value,
        current_question_index=session.current_question_index,
        total_questions=len(session.scenarios),
        answered=len(session.answers),
        scenarios=session.scenarios,
        result=session.result,
        generation_method=session.generation_method,
        created_at=session.created_at,
        last_activity=session.last_activity
    )

# QUESTION ENDPOINTS

@router.get("/questions", response_model=QuestionsResponse)
async def get_questions():
    """Return the full catalog, shuffled with dimensions interleaved"""
    questions = shuffle_questions(all_questions())
    return QuestionsResponse(questions=questions, total=len(questions))


@router.get("/questions/catalog", response_model=QuestionsResponse)
async def get_catalog_questions(
    dimension: Optional[Dimension] = Query(None, description="Only questions for this dimension")
):
    """Return the catalog in canonical order"""
    questions = questions_by_dimension(dimension) if dimension else all_questions()
    return QuestionsResponse(questions=questions, total=len(questions))

# SCENARIO ENDPOINTS

@router.post("/scenarios", response_model=GenerateScenariosResponse)
async def generate_scenarios(
    request: GenerateScenariosRequest,
    locale: Optional[str] = Cookie(None),
    generator: ScenarioGenerator = Depends(get_generator)
):
    """Generate one scenario pair per question, falling back to templates when needed"""
    if not request.user_profile or not request.questions:
        raise HTTPException(status_code=400, detail="Missing required fields")

    scenarios, method = await generator.resolve_scenarios(
        request.user_profile,
        request.questions,
        request.locale or locale
    )

    logger.info(f"Resolved {len(scenarios)} scenarios via {method}")
    return GenerateScenariosResponse(scenarios=scenarios, generation_method=method)

# SCORING ENDPOINTS

@router.post("/calculate", response_model=CalculateResultResponse)
async def calculate(request: CalculateResultRequest):
    """Score a completed set of answers"""
    if not request.answers:
        raise HTTPException(status_code=400, detail="No answers provided")

    result = calculate_result(request.answers)
    logger.info(f"Calculated result {result.type.value} from {len(result.answers)} answers")
    return CalculateResultResponse(result=result)


@router.post("/insights", response_model=InsightsResponse)
async def get_insights(request: InsightsRequest):
    """Strength labels, strongest preference and per-answer explanations for a result"""
    result = request.result
    return InsightsResponse(
        type=result.type,
        personality=personality_info(result.type.value),
        strongest_trait=strongest_trait(result),
        strongest_dimension=strongest_dimension(result),
        strengths=dimension_strengths(result),
        breakdown=trait_breakdown(result),
        answer_insights=[answer_insight(answer) for answer in result.answers]
    )


@router.get("/personalities/{mbti_type}", response_model=PersonalityInfo)
async def get_personality(mbti_type: str):
    """Metadata for one of the 16 types"""
    try:
        return personality_info(mbti_type)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown personality type: {mbti_type}")

# SESSION ENDPOINTS

@router.post("/sessions", response_model=SessionResponse)
async def start_session(
    request: StartSessionRequest,
    locale: Optional[str] = Cookie(None),
    generator: ScenarioGenerator = Depends(get_generator),
    store: SessionStore = Depends(get_session_store)
):
    """Create a session for a profile and prepare its scenarios"""
    session = store.create()
    session.set_profile(request.user_profile)

    questions = shuffle_questions(all_questions())
    scenarios, method = await generator.resolve_scenarios(
        request.user_profile, questions, request.locale or locale
    )
    session.set_scenarios(scenarios, method)

    return _session_response(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    return _session_response(_get_session_or_404(store, session_id))


@router.post("/sessions/{session_id}/answers", response_model=SessionResponse)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    store: SessionStore = Depends(get_session_store)
):
    """Record or replace the answer to one question"""
    session = _get_session_or_404(store, session_id)
    try:
        session.add_answer(request.question_id, request.value)
    except UnknownQuestionError as e:
        logger.warning(f"Invalid request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return _session_response(session)


@router.post("/sessions/{session_id}/next", response_model=SessionResponse)
async def next_question(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = _get_session_or_404(store, session_id)
    session.next_question()
    return _session_response(session)


@router.post("/sessions/{session_id}/previous", response_model=SessionResponse)
async def previous_question(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = _get_session_or_404(store, session_id)
    session.previous_question()
    return _session_response(session)


@router.post("/sessions/{session_id}/result", response_model=SessionResponse)
async def complete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Score the session's answers"""
    session = _get_session_or_404(store, session_id)
    if not session.answers:
        raise HTTPException(status_code=400, detail="No answers provided")

    result = session.complete()
    logger.info(f"Session {session_id} complete: {result.type.value}")
    return _session_response(session)


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
async def reset_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = _get_session_or_404(store, session_id)
    session.reset()
    return _session_response(session)

# MONITORING ENDPOINTS

@router.get("/health")
async def health_check(
    generator: ScenarioGenerator = Depends(get_generator),
    store: SessionStore = Depends(get_session_store)
):
    """Health check endpoint"""
    question_count = len(all_questions())
    return {
        "status": "healthy" if question_count > 0 else "unhealthy",
        "timestamp": datetime.now().isoformat(),
        "service": "MBTI Real Scene",
        "version": "1.0.0",
        "components": {
            "questions_loaded": question_count,
            "active_sessions": len(store),
            "scenario_generation": generator.generation_method,
            "locales": generator.catalog.supported_locales()
        },
        "configuration": {
            "generation_enabled": settings.ENABLE_GENERATION,
            "openai_configured": bool(settings.OPENAI_API_KEY),
            "model": settings.OPENAI_MODEL
        }
    }


@router.post("/admin/cleanup")
async def cleanup_sessions(
    max_age_hours: int = Query(settings.SESSION_MAX_AGE_HOURS, ge=1, le=168),
    store: SessionStore = Depends(get_session_store)
):
    """Clean up old sessions (admin endpoint)"""
    cleaned = store.cleanup_expired_sessions(max_age_hours)
    logger.info(f"Session cleanup: removed {cleaned} sessions older than {max_age_hours}h")
    return {
        "sessions_removed": cleaned,
        "sessions_remaining": len(store),
        "max_age_hours": max_age_hours,
        "timestamp": datetime.now().isoformat()
    }
