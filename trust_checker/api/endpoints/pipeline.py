"""Full article verification endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.errors import InvalidRequestError
from ...domain.models.report import AggregateReport
from ...domain.services.pipeline_coordinator import PipelineCoordinator
from ...infrastructure.dependencies import get_history, get_pipeline_coordinator
from ...infrastructure.storage.history import AnalysisHistory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pipeline", tags=["pipeline"])


class PipelineRequest(BaseModel):
    """Request model for a full article analysis."""

    url: str = Field(..., description="Article URL")


@router.post("", response_model=AggregateReport)
async def run_pipeline(
    request: PipelineRequest,
    coordinator: PipelineCoordinator = Depends(get_pipeline_coordinator),
    history: AnalysisHistory = Depends(get_history),
) -> AggregateReport:
    """Extract, classify, search and judge every claim of an article."""
    try:
        report = await coordinator.run(request.url)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Pipeline failed for {request.url}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")

    if report.error is None:
        history.add(report)
    return report
