"""
API Response Schemas

Pydantic models for API responses.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class QuestionAnalysisModel(BaseModel):
    """Analysis of a question."""

    original_question: str
    intent: str
    confidence: float = Field(..., ge=0, le=1)
    entities: list[str] = []
    metrics: list[str] = []
    dimensions: list[str] = []
    timeframe: Optional[str] = None
    suggested_visualization: str
    business_context: str
    executive_summary: str


class SessionResponse(BaseModel):
    """A question answered end to end."""

    id: str = Field(..., description="Session ID")
    question: str
    analysis: QuestionAnalysisModel
    spec: dict[str, Any] = Field(..., description="Visualization specification")
    visualization: dict[str, Any] = Field(..., description="Chart payload and metadata")
    graph_insights: list[dict[str, Any]] = []
    created_at: float


class SessionListResponse(BaseModel):
    """Active analytics sessions."""

    sessions: list[str]
    count: int


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: Optional[str] = None
    code: Optional[str] = None
