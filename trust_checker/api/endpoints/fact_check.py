"""Fact-checking API endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.errors import InvalidRequestError
from ...domain.models.verdict import VerificationItem, VerificationReport
from ...domain.services.verdict_engine import VerdictEngine
from ...infrastructure.dependencies import get_verdict_engine

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fact-check", tags=["fact-check"])


class FactCheckRequest(BaseModel):
    """Request model for verifying claims against supplied evidence."""

    items: List[VerificationItem] = Field(..., description="Claims with their evidence texts")


@router.post("", response_model=VerificationReport)
async def fact_check(
    request: FactCheckRequest,
    engine: VerdictEngine = Depends(get_verdict_engine),
) -> VerificationReport:
    """Verify claims against evidence.

    Args:
        request: Claims and the evidence gathered for each

    Returns:
        One verdict per claim and the average trust score
    """
    logger.info(f"🔍 Starting fact-check for {len(request.items)} claims")
    try:
        report = await engine.verify(request.items)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Fact-check failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")

    logger.info(f"✅ Fact-check complete, average trust score {report.average_trust_score:.1f}")
    return report
