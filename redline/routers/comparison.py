"""
Document Comparison - API Router
================================
REST API endpoints for the legal document comparison engine.

The server keeps no redline state: review endpoints take both document
versions plus the caller's current decisions, recompute the comparison
(change ids are deterministic) and return the updated decisions.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from redline.core.config import Settings, get_settings
from redline.services.comparison import (
    ChangeNotFoundError,
    ChangeType,
    ComparisonResult,
    RedlineDocument,
    RedlineEngine,
    accept_change,
    format_comparison_report,
    generate_redline,
    get_change_type_name,
    get_clause_categories,
    get_high_risk_patterns,
    reject_change,
    resolve_redline,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/comparison", tags=["Document Comparison"])


# =============================================================================
# Request/Response Models
# =============================================================================

class CompareRequest(BaseModel):
    """Two versions of a document to compare."""
    original: str = Field(..., description="Original document text")
    new: str = Field(..., description="Revised document text")
    original_name: str = Field("Original", max_length=255, description="Display name of the original")
    new_name: str = Field("Revised", max_length=255, description="Display name of the revision")


class BatchCompareRequest(BaseModel):
    """Several document pairs compared concurrently."""
    pairs: List[CompareRequest] = Field(..., min_length=1, description="Document pairs to compare")


class RedlineStateRequest(CompareRequest):
    """A comparison plus the reviewer's decisions so far."""
    accepted_changes: List[str] = Field(default_factory=list)
    rejected_changes: List[str] = Field(default_factory=list)


class ChangeDecisionRequest(RedlineStateRequest):
    """Accept or reject one change."""
    change_id: str = Field(..., description="Change id, e.g. change_001")


class SegmentResponse(BaseModel):
    id: str
    text: str
    start_index: int
    end_index: int
    line_number: int
    paragraph_number: int


class ChangeResponse(BaseModel):
    id: str
    type: str
    severity: str
    original_segment: Optional[SegmentResponse] = None
    new_segment: Optional[SegmentResponse] = None
    original_text: str
    new_text: str
    clause_category: str
    risk_score: float
    legal_implication: Optional[str] = None
    description: str
    suggested_action: Optional[str] = None
    similarity: float
    comments: List[str] = []


class ClauseRiskResponse(BaseModel):
    level: str
    reason: str


class ClauseComparisonResponse(BaseModel):
    category: str
    name: str
    original_present: bool
    new_present: bool
    change_ids: List[str]
    overall_change: str
    risk_assessment: ClauseRiskResponse


class SummaryResponse(BaseModel):
    total_changes: int
    added_count: int
    removed_count: int
    modified_count: int
    formatting_count: int
    moved_count: int
    critical_changes: int
    major_changes: int
    minor_changes: int
    cosmetic_changes: int
    overall_risk_score: float
    risk_level: str
    key_findings: List[str]
    recommendations: List[str]


class DocumentResponse(BaseModel):
    name: str
    word_count: int
    character_count: int
    segment_count: int


class ComparisonResponse(BaseModel):
    """Full comparison result (document bodies omitted)."""
    id: str
    original_document: DocumentResponse
    new_document: DocumentResponse
    changes: List[ChangeResponse]
    clause_comparisons: List[ClauseComparisonResponse]
    summary: SummaryResponse
    created_at: str
    processing_time_ms: float


class BatchCompareResponse(BaseModel):
    results: List[ComparisonResponse]
    total_pairs: int


class RedlineResponse(BaseModel):
    comparison_id: str
    content: str
    html_content: str
    report: str
    changes: List[ChangeResponse]
    accepted_changes: List[str]
    rejected_changes: List[str]
    pending_changes: List[str]


class ReportResponse(BaseModel):
    comparison_id: str
    report: str


class DecisionResponse(BaseModel):
    change_id: Optional[str] = None
    accepted_changes: List[str]
    rejected_changes: List[str]
    pending_changes: List[str]


class ResolveResponse(BaseModel):
    content: str
    accepted_changes: List[str]
    rejected_changes: List[str]
    pending_changes: List[str]


# =============================================================================
# Module State
# =============================================================================

# One engine per distinct engine configuration
_engines: Dict[Tuple[Tuple[str, Any], ...], RedlineEngine] = {}


def get_engine(settings: Optional[Settings] = None) -> RedlineEngine:
    """Get or create the comparison engine for the given settings."""
    config = (settings or get_settings()).engine_config()
    key = tuple(sorted(config.items()))
    engine = _engines.get(key)
    if engine is None:
        engine = RedlineEngine(config)
        _engines[key] = engine
    return engine


# =============================================================================
# Helper Functions
# =============================================================================

def check_document_size(request: CompareRequest, settings: Settings) -> None:
    """Reject documents above the configured size limit (413)."""
    for label, text in (("original", request.original), ("new", request.new)):
        if len(text) > settings.max_document_chars:
            raise HTTPException(
                status_code=413,
                detail=(
                    f"The {label} document is {len(text)} characters; "
                    f"the limit is {settings.max_document_chars}"
                ),
            )


async def run_comparison(request: CompareRequest, settings: Settings) -> ComparisonResult:
    """Run the engine in the thread pool under the configured time limit."""
    check_document_size(request, settings)
    engine = get_engine(settings)

    try:
        return await asyncio.wait_for(
            run_in_threadpool(
                engine.compare,
                request.original,
                request.new,
                request.original_name,
                request.new_name,
            ),
            timeout=settings.comparison_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning(
            f"Comparison of '{request.original_name}' vs '{request.new_name}' "
            f"exceeded {settings.comparison_timeout_seconds}s"
        )
        raise HTTPException(status_code=504, detail="Comparison timed out")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Comparison failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Comparison failed: {str(e)}")


def result_to_response(result: ComparisonResult) -> ComparisonResponse:
    """Convert ComparisonResult to API response."""
    return ComparisonResponse(**result.to_dict(include_content=False))


async def build_redline_state(request: RedlineStateRequest, settings: Settings) -> RedlineDocument:
    """Recompute the redline and replay the caller's decisions onto it."""
    result = await run_comparison(request, settings)
    redline = generate_redline(result)
    try:
        for change_id in request.accepted_changes:
            accept_change(redline, change_id)
        for change_id in request.rejected_changes:
            reject_change(redline, change_id)
    except ChangeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return redline


def decision_response(redline: RedlineDocument, change_id: Optional[str] = None) -> DecisionResponse:
    return DecisionResponse(
        change_id=change_id,
        accepted_changes=redline.accepted_changes,
        rejected_changes=redline.rejected_changes,
        pending_changes=redline.pending_changes,
    )


# =============================================================================
# API Endpoints - Comparison
# =============================================================================

@router.post("/compare", response_model=ComparisonResponse)
async def compare(
    request: CompareRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Compare two versions of a document.

    Returns every change with its type, severity, clause category and
    risk score, plus clause-level and document-level summaries.
    """
    result = await run_comparison(request, settings)
    return result_to_response(result)


@router.post("/compare/batch", response_model=BatchCompareResponse)
async def compare_batch(
    request: BatchCompareRequest,
    settings: Settings = Depends(get_settings),
):
    """Compare several document pairs concurrently."""
    if len(request.pairs) > settings.max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"Batch of {len(request.pairs)} pairs exceeds the limit of {settings.max_batch_size}",
        )

    # Every pair runs to completion; the first failure decides the response
    outcomes = await asyncio.gather(
        *(run_comparison(pair, settings) for pair in request.pairs),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome

    return BatchCompareResponse(
        results=[result_to_response(r) for r in outcomes],
        total_pairs=len(outcomes),
    )



@router.post("/report", response_model=ReportResponse)
async def report(
    request: CompareRequest,
    settings: Settings = Depends(get_settings),
):
    """Plain-text comparison report."""
    result = await run_comparison(request, settings)
    return ReportResponse(comparison_id=result.id, report=format_comparison_report(result))


# =============================================================================
# API Endpoints - Redline Review
# =============================================================================

@router.post("/redline", response_model=RedlineResponse)
async def redline(
    request: CompareRequest,
    settings: Settings = Depends(get_settings),
):
    """HTML redline with tracked changes and an empty decision set."""
    result = await run_comparison(request, settings)
    document = generate_redline(result)
    return RedlineResponse(comparison_id=result.id, **document.to_dict())


@router.post("/redline/accept", response_model=DecisionResponse)
async def accept(
    request: ChangeDecisionRequest,
    settings: Settings = Depends(get_settings),
):
    """Accept a change; clears any earlier rejection of it."""
    document = await build_redline_state(request, settings)
    try:
        accept_change(document, request.change_id)
    except ChangeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return decision_response(document, request.change_id)


@router.post("/redline/reject", response_model=DecisionResponse)
async def reject(
    request: ChangeDecisionRequest,
    settings: Settings = Depends(get_settings),
):
    """Reject a change; clears any earlier acceptance of it."""
    document = await build_redline_state(request, settings)
    try:
        reject_change(document, request.change_id)
    except ChangeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return decision_response(document, request.change_id)


@router.post("/redline/resolve", response_model=ResolveResponse)
async def resolve(
    request: RedlineStateRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Final text for the supplied decisions.

    Accepted and undecided changes take the revised text; rejected
    changes keep the original.
    """
    document = await build_redline_state(request, settings)
    return ResolveResponse(
        content=resolve_redline(document),
        accepted_changes=document.accepted_changes,
        rejected_changes=document.rejected_changes,
        pending_changes=document.pending_changes,
    )


# =============================================================================
# API Endpoints - Catalogs
# =============================================================================

@router.get("/categories")
async def list_categories() -> List[Dict[str, Any]]:
    """Clause categories in classification priority order."""
    return get_clause_categories()


@router.get("/risk-patterns")
async def list_risk_patterns() -> List[Dict[str, Any]]:
    """High-risk provisions the engine looks for."""
    return get_high_risk_patterns()


@router.get("/change-types")
async def list_change_types() -> List[Dict[str, str]]:
    """Change types with display names."""
    return [
        {"type": change_type.value, "name": get_change_type_name(change_type)}
        for change_type in ChangeType
    ]
