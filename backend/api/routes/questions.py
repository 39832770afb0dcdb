"""
Question API Routes

Endpoints that analyze a question against an inline dataset and turn
it into a chart-ready visualization.
"""

from fastapi import APIRouter, HTTPException

from analytics.orchestrator import analytics_orchestrator
from api.schemas.requests import QuestionRequest, VisualizeRequest
from api.schemas.responses import ErrorResponse, QuestionAnalysisModel, SessionResponse
from core.cache import session_store
from core.logging_config import api_logger as logger
from questions.processor import question_processor


router = APIRouter()


@router.post(
    "/questions/analyze",
    response_model=QuestionAnalysisModel,
    responses={400: {"model": ErrorResponse}},
)
def analyze_question(request: QuestionRequest) -> QuestionAnalysisModel:
    """
    Classify a question's intent and extract the columns it refers to.

    Returns the suggested chart type along with templated business
    context. No data transformation happens here.
    """
    question = request.question.strip()
    if not question:
        raise HTTPException(status_code=400, detail="Question must not be empty")

    try:
        analysis = question_processor.analyze_question(question, request.dataset.to_dataset())
        return QuestionAnalysisModel(**analysis.to_dict())
    except Exception as e:
        logger.exception("Question analysis failed")
        raise HTTPException(status_code=500, detail=f"Error analyzing question: {str(e)}")


@router.post(
    "/questions/visualize",
    response_model=SessionResponse,
    responses={400: {"model": ErrorResponse}},
)
def visualize_question(request: VisualizeRequest) -> SessionResponse:
    """
    Answer a question with a full visualization.

    Runs the whole pipeline (analysis, spec, chart payload, insights,
    business impact, graph insights) and keeps the resulting session
    available under its ID.
    """
    try:
        session = analytics_orchestrator.run(
            request.question,
            request.dataset.to_dataset(),
            seed=request.seed,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Visualization pipeline failed")
        raise HTTPException(status_code=500, detail=f"Error generating visualization: {str(e)}")

    session_store.save(session)
    logger.info(f"Session {session.id} created for {request.question!r}")
    return SessionResponse(**session.to_dict())
