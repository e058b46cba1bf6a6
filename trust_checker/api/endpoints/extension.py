"""Endpoints for the in-browser heuristic analysis."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ...domain.errors import InvalidRequestError
from ...domain.heuristics.trust_analyzer import TrustAnalyzer
from ...domain.models.trust_analysis import PageAnalysis
from ...infrastructure.dependencies import get_history, get_trust_analyzer
from ...infrastructure.storage.history import AnalysisHistory, HistoryEntry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["extension"])


class PageAnalysisRequest(BaseModel):
    """Snapshot of a page as seen by the browser."""

    page_text: str = Field(..., description="Visible text of the page")
    domain: str = Field(..., description="Hostname the page was served from")
    url: Optional[str] = Field(None, description="Page URL")
    title: Optional[str] = Field(None, description="Page title")


class PageAnalysisResponse(BaseModel):
    analysis: PageAnalysis
    credible: int
    questionable: int
    suspicious: int


@router.post("/extension/analyze", response_model=PageAnalysisResponse)
async def analyze_page(
    request: PageAnalysisRequest,
    analyzer: TrustAnalyzer = Depends(get_trust_analyzer),
    history: AnalysisHistory = Depends(get_history),
) -> PageAnalysisResponse:
    """Score the claims of a page without any network calls."""
    try:
        analysis = analyzer.analyze(request.page_text, request.domain, url=request.url, title=request.title)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Page analysis failed for {request.domain}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")

    history.add(analysis)
    return PageAnalysisResponse(
        analysis=analysis,
        credible=analysis.credible_count,
        questionable=analysis.questionable_count,
        suspicious=analysis.suspicious_count,
    )


@router.get("/history", response_model=List[HistoryEntry])
async def get_recent_history(
    limit: Optional[int] = Query(None, ge=1, le=50, description="Number of entries"),
    history: AnalysisHistory = Depends(get_history),
) -> List[HistoryEntry]:
    """Most recent analyses first."""
    return history.entries(limit)
