"""Evidence search endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.models.claim import Claim
from ...domain.models.evidence import SearchMetrics, SearchOutcome
from ...domain.services.evidence_gatherer import EvidenceGatherer
from ...infrastructure.dependencies import get_evidence_gatherer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/websearch", tags=["websearch"])


class WebSearchRequest(BaseModel):
    """Request model for claim search."""

    claims: List[Claim] = Field(..., description="Claims to find sources for")
    source_url: Optional[str] = Field(None, description="Article under analysis, excluded from results")


class ClaimSearchResult(BaseModel):
    claim: str
    urls: List[str]
    source: str


class WebSearchResponse(BaseModel):
    """Response model for claim search."""

    results: List[ClaimSearchResult]
    metrics: SearchMetrics


@router.post("", response_model=WebSearchResponse)
async def search_claims(
    request: WebSearchRequest,
    gatherer: EvidenceGatherer = Depends(get_evidence_gatherer),
) -> WebSearchResponse:
    """Find up to three source URLs per claim."""
    if not request.claims:
        raise HTTPException(status_code=400, detail="No claims provided")
    try:
        outcomes, metrics = await gatherer.search_claims(request.claims, request.source_url)
    except Exception as e:
        logger.error(f"❌ Web search failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")

    return WebSearchResponse(
        results=[_result(claim, outcome) for claim, outcome in zip(request.claims, outcomes)],
        metrics=metrics,
    )


def _result(claim: Claim, outcome: SearchOutcome) -> ClaimSearchResult:
    return ClaimSearchResult(claim=claim.text, urls=outcome.urls, source=outcome.source)
