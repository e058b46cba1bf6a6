"""Sentence classification endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.errors import ExtractionFailure, InvalidRequestError
from ...domain.models.claim import ClassificationResult
from ...domain.services.sentence_classifier import SentenceClassifier
from ...infrastructure.dependencies import ServiceContainer, get_service_container

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sentences", tags=["sentences"])


class SentencesRequest(BaseModel):
    """Request model for sentence classification."""

    url: Optional[str] = Field(None, description="Article to extract and classify")
    text: Optional[str] = Field(None, description="Text to classify instead of fetching a URL")
    categorize: bool = Field(default=True, description="Run verifiability categorization")
    disambiguate: Optional[bool] = Field(None, description="Run disambiguation, server default when omitted")


class SentencesResponse(BaseModel):
    """Response model for sentence classification."""

    url: Optional[str] = None
    title: Optional[str] = None
    result: ClassificationResult


@router.post("", response_model=SentencesResponse)
async def classify_sentences(
    request: SentencesRequest,
    container: ServiceContainer = Depends(get_service_container),
) -> SentencesResponse:
    """Split an article into sentences and turn the checkable ones into claims.

    With ``categorize`` off only segmentation runs and no LLM provider is needed.
    """
    if not request.text and not request.url:
        raise HTTPException(status_code=400, detail="Either url or text is required")

    classifier: SentenceClassifier
    if request.categorize:
        classifier = await container.get_sentence_classifier()
    else:
        classifier = container.get_sentence_splitter()

    try:
        title = None
        text = request.text
        if not text:
            extractor = await container.get_article_extractor()
            article = await extractor.extract(request.url)
            text, title = article.content, article.title

        result = await classifier.classify(
            text,
            categorize=request.categorize,
            disambiguate=request.disambiguate,
        )
        logger.info(f"✅ Classified {len(result.sentences)} sentences into {len(result.claims)} claims")
        return SentencesResponse(url=request.url, title=title, result=result)
    except (InvalidRequestError, ExtractionFailure) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Sentence classification failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {str(e)}")
