"""
HTTP routes exposing the response parser and the language policy.
"""
from fastapi import APIRouter, HTTPException

from clipgrade.api.schemas import (
    HealthResponse,
    ParseErrorDetail,
    ParseEvaluationRequest,
    PolicyCheckRequest,
    PolicyCheckResponse,
    PolicyResponse,
)
from clipgrade.core.config import settings, get_policy_config, get_policy_presets
from clipgrade.core.logging import get_logger
from clipgrade.evaluation.errors import ParseError
from clipgrade.parser.response_parser import get_parser

logger = get_logger("api")

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.version,
        policy_rules=len(get_parser().policy.rules),
    )


# ===== EVALUATION ENDPOINTS =====

@router.post("/evaluations/parse")
async def parse_evaluation(request: ParseEvaluationRequest):
    """
    Parse model output into an evaluation.

    Language policy rejections are successful responses with zero scores and
    a `rejectionReason`. Unusable model output returns 422 so the caller can
    retry the upstream model call.
    """
    try:
        evaluation = get_parser().parse(
            request.response_text,
            video_url=request.video_url,
            caption=request.caption,
        )
    except ParseError as e:
        logger.warning(f"Rejecting parse request with 422: {e.reason}")
        detail = ParseErrorDetail(reason=e.reason, missing=getattr(e, "missing", []))
        raise HTTPException(status_code=422, detail=detail.model_dump())
    return evaluation.to_dict()


# ===== POLICY ENDPOINTS =====

@router.post("/policy/check", response_model=PolicyCheckResponse)
async def check_policy(request: PolicyCheckRequest):
    """Run only the metadata rules (language token, caption, phrasing, URL)."""
    decision = get_parser().policy.check(
        request.response_text,
        caption=request.caption,
        video_url=request.video_url,
    )
    return PolicyCheckResponse(**decision.to_dict())


@router.get("/policy/presets")
async def get_presets():
    """Get available policy presets."""
    return {"status": "success", "presets": get_policy_presets()}


@router.get("/policy/current", response_model=PolicyResponse)
async def get_current_policy():
    """Get current policy configuration."""
    return PolicyResponse(policy=get_policy_config())
