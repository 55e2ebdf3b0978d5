"""
API Schemas (DTOs) for the clipgrade HTTP surface.

The evaluation itself is returned as `Evaluation.to_dict()` so that the
camelCase keys stay identical to what persistence and UI layers consume.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ParseEvaluationRequest(BaseModel):
    """Raw model output plus the submission metadata used by the language policy."""
    response_text: str = Field(..., description="Free-form model output")
    video_url: Optional[str] = Field(None, description="Submission URL (never fetched)")
    caption: Optional[str] = Field(None, description="User-authored caption")


class PolicyCheckRequest(BaseModel):
    """Inputs for a metadata-only language policy check."""
    response_text: str = ""
    video_url: Optional[str] = None
    caption: Optional[str] = None


class PolicyCheckResponse(BaseModel):
    """Outcome of the metadata-stage language policy."""
    compliant: bool
    reason: Optional[str] = None
    rule: Optional[str] = None
    outcome: Optional[str] = None
    language: Optional[str] = None
    evidence: Optional[str] = None
    adjusted_score: Optional[int] = None


class ParseErrorDetail(BaseModel):
    """Body of a 422 response for an unparseable model output."""
    reason: str
    missing: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    policy_rules: int = 0


class PolicyResponse(BaseModel):
    """Current policy configuration."""
    status: str = "success"
    policy: Dict[str, Any]
