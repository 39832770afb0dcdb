"""
Session API Routes

Read access to recently answered questions.
"""

from fastapi import APIRouter, HTTPException

from api.schemas.responses import ErrorResponse, SessionListResponse, SessionResponse
from core.cache import session_store


router = APIRouter()


@router.get("/sessions", response_model=SessionListResponse)
def list_sessions() -> SessionListResponse:
    """List active session IDs, most recently used first."""
    sessions = session_store.list_sessions()
    return SessionListResponse(sessions=sessions, count=len(sessions))


@router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_session(session_id: str) -> SessionResponse:
    """Get a previously generated session."""
    session = session_store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return SessionResponse(**session.to_dict())


@router.delete("/sessions/{session_id}", responses={404: {"model": ErrorResponse}})
def delete_session(session_id: str) -> dict:
    """Forget a session."""
    if not session_store.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"session_id": session_id, "deleted": True}
