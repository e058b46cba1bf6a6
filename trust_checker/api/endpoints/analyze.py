"""Article extraction endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.errors import ExtractionFailure, InvalidRequestError
from ...domain.models.evidence import BatchExtractionResult, ExtractionRequest
from ...domain.services.evidence_gatherer import EvidenceGatherer
from ...infrastructure.dependencies import get_article_extractor, get_evidence_gatherer
from ...infrastructure.extraction.article_extractor import WebArticleExtractor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    """Request model for single article extraction."""

    url: str = Field(..., description="Article URL")


class ArticleMetadata(BaseModel):
    """Size and origin of the extracted text."""

    word_count: int
    char_count: int
    source: str = Field(..., description="Extraction method that produced the text")


class AnalyzeResponse(BaseModel):
    """Response model for single article extraction."""

    url: str
    title: Optional[str] = None
    excerpt: Optional[str] = None
    content: str
    metadata: ArticleMetadata


class BatchAnalyzeRequest(BaseModel):
    """Request model for batch extraction."""

    urls: List[ExtractionRequest] = Field(..., description="URLs to extract, optionally with their claim")


@router.post("", response_model=AnalyzeResponse)
async def analyze_article(
    request: AnalyzeRequest,
    extractor: WebArticleExtractor = Depends(get_article_extractor),
) -> AnalyzeResponse:
    """Extract the main text of one article.

    Raises:
        HTTPException: 400 on an invalid URL, 422 when nothing could be extracted
    """
    logger.info(f"🔍 Extracting article: {request.url}")
    try:
        article = await extractor.extract(request.url)
    except ExtractionFailure as e:
        status_code = 400 if "Invalid URL" in str(e) else 422
        logger.warning(f"⚠️ Extraction failed for {request.url}: {e}")
        raise HTTPException(status_code=status_code, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Extraction error for {request.url}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")

    return AnalyzeResponse(
        url=article.url,
        title=article.title,
        excerpt=article.excerpt,
        content=article.content,
        metadata=ArticleMetadata(
            word_count=article.word_count,
            char_count=article.char_count,
            source=article.source,
        ),
    )


@router.post("/batch", response_model=BatchExtractionResult)
async def analyze_batch(
    request: BatchAnalyzeRequest,
    gatherer: EvidenceGatherer = Depends(get_evidence_gatherer),
) -> BatchExtractionResult:
    """Extract many URLs concurrently. Every URL yields one result."""
    try:
        return await gatherer.extract_many(request.urls)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Batch extraction failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")
