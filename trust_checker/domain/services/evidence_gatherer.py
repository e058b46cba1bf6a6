"""Service that searches for and extracts external evidence for claims."""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from ..errors import InvalidRequestError
from ..models.claim import Claim
from ..models.evidence import (
    BatchExtractionResult,
    ClaimEvidence,
    EvidenceSource,
    ExtractionRequest,
    SearchMetrics,
    SearchOutcome,
)
from ..ports.article_extractor import ArticleExtractor
from ..ports.search_provider import ClaimSearch
from .chunk_selector import ChunkSelector

logger = logging.getLogger(__name__)


class GathererConfig(BaseModel):
    """Configuration for evidence gathering."""

    max_concurrency: int = Field(default=10, ge=1, description="Concurrent fetches allowed")
    batch_size: int = Field(default=10, ge=1, description="Fetches per batch; a batch settles before the next starts")
    fetch_timeout: float = Field(default=30.0, gt=0, description="Seconds allowed per fetch")
    max_sources_per_claim: int = Field(default=3, ge=1, description="Evidence sources kept per claim")
    max_content_chars: int = Field(default=4000, ge=1, description="Characters of content kept per source")
    cancel_on_timeout: bool = Field(
        default=False, description="Cancel timed-out fetches instead of leaving them to finish in the background"
    )


class GatheringResult(BaseModel):
    """Evidence for every claim plus per-stage metrics."""

    evidence: List[ClaimEvidence] = Field(default_factory=list)
    search: SearchMetrics = Field(default_factory=SearchMetrics)
    extraction: BatchExtractionResult = Field(default_factory=BatchExtractionResult)


def hostname_of(url: Optional[str]) -> Optional[str]:
    """Hostname of a URL, or None when it has none."""
    if not url:
        return None
    return urlparse(url).hostname


def _consume_result(task: "asyncio.Task[Any]") -> None:
    # Retrieve the outcome of a detached task so its failure is never reported as unhandled
    if not task.cancelled():
        task.exception()


class EvidenceGatherer:
    """Finds up to three external sources per claim and extracts their text."""

    def __init__(
        self,
        search: ClaimSearch,
        extractor: ArticleExtractor,
        chunk_selector: Optional[ChunkSelector] = None,
        config: Optional[GathererConfig] = None,
    ):
        self.search = search
        self.extractor = extractor
        self.chunk_selector = chunk_selector
        self.config = config or GathererConfig()
        logger.info("🔧 EvidenceGatherer initialized")

    async def search_claims(
        self,
        claims: List[Claim],
        source_url: Optional[str] = None,
    ) -> Tuple[List[SearchOutcome], SearchMetrics]:
        """Search for every claim in parallel.

        Args:
            claims: Claims to search for
            source_url: URL of the article under analysis, excluded from results

        Returns:
            One outcome per claim, in claim order, and the search metrics
        """
        exclude = [h for h in [hostname_of(source_url)] if h]
        logger.info(f"🔍 Searching evidence for {len(claims)} claims")

        raw = await asyncio.gather(
            *(self.search.find(claim.search_query, exclude) for claim in claims),
            return_exceptions=True,
        )
        outcomes = []
        for claim, outcome in zip(claims, raw):
            if isinstance(outcome, BaseException):
                logger.warning(f"⚠️ Search failed for claim '{claim.text[:60]}': {outcome}")
                outcome = SearchOutcome()
            outcomes.append(outcome)

        metrics = SearchMetrics.from_outcomes([c.text for c in claims], outcomes)
        logger.info(
            f"📊 Search complete: {metrics.successful_searches}/{metrics.total_searches} claims found sources "
            f"{metrics.sources}"
        )
        return outcomes, metrics

    async def extract_many(self, requests: List[ExtractionRequest]) -> BatchExtractionResult:
        """Fetch and extract many URLs under a concurrency bound.

        Every request yields exactly one result, in request order. Failed
        and timed-out fetches become sources with ``error`` set.

        Raises:
            InvalidRequestError: If no URLs were submitted
        """
        if not requests:
            raise InvalidRequestError("No URLs provided")

        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        batch_size = self.config.batch_size
        logger.info(f"🔍 Extracting {len(requests)} URLs in batches of {batch_size}")

        sources: List[EvidenceSource] = []
        for start in range(0, len(requests), batch_size):
            batch = requests[start:start + batch_size]
            sources.extend(await asyncio.gather(*(self._extract_one(r, semaphore) for r in batch)))

        result = BatchExtractionResult.from_sources(sources)
        logger.info(f"📊 Extraction complete: {result.successful} succeeded, {result.failed} failed")
        return result

    async def gather(self, claims: List[Claim], source_url: Optional[str] = None) -> GatheringResult:
        """Search, extract and select relevant chunks for every claim.

        A claim with no search results or no extractable source simply ends
        up with an empty evidence list.
        """
        if not claims:
            return GatheringResult()

        outcomes, search_metrics = await self.search_claims(claims, source_url)

        requests = []
        owners = []
        for index, (claim, outcome) in enumerate(zip(claims, outcomes)):
            for url in outcome.urls[: self.config.max_sources_per_claim]:
                requests.append(ExtractionRequest(url=url, claim=claim.text))
                owners.append(index)

        extraction = await self.extract_many(requests) if requests else BatchExtractionResult()

        evidence = [
            ClaimEvidence(claim=claim.text, search_source=outcome.source) for claim, outcome in zip(claims, outcomes)
        ]
        for owner, source in zip(owners, extraction.results):
            evidence[owner].sources.append(source)

        if self.chunk_selector is not None:
            await asyncio.gather(*(self._select_chunks(e) for e in evidence))

        return GatheringResult(evidence=evidence, search=search_metrics, extraction=extraction)

    async def _select_chunks(self, evidence: ClaimEvidence) -> None:
        usable = [s for s in evidence.sources if s.ok]
        if not usable:
            return
        chunks = await self.chunk_selector.select_many(evidence.claim, [s.extracted_content for s in usable])
        for source, selected in zip(usable, chunks):
            source.chunks = selected

    async def _extract_one(self, request: ExtractionRequest, semaphore: asyncio.Semaphore) -> EvidenceSource:
        async with semaphore:
            try:
                article = await self._race(self.extractor.extract(request.url), self.config.fetch_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"⚠️ Extraction timed out after {self.config.fetch_timeout:.0f}s: {request.url}")
                return EvidenceSource(
                    url=request.url,
                    claim=request.claim,
                    error=f"Extraction timed out after {self.config.fetch_timeout:.0f}s",
                )
            except Exception as e:
                logger.warning(f"⚠️ Extraction failed for {request.url}: {e}")
                return EvidenceSource(url=request.url, claim=request.claim, error=str(e) or type(e).__name__)

        content = article.content[: self.config.max_content_chars]
        if not content:
            return EvidenceSource(url=request.url, claim=request.claim, error="No content extracted")
        return EvidenceSource(
            url=request.url,
            claim=request.claim,
            extracted_content=content,
            title=article.title,
            excerpt=article.excerpt,
        )

    async def _race(self, operation: Awaitable[Any], timeout: float) -> Any:
        """Await ``operation`` for at most ``timeout`` seconds.

        On timeout the operation is detached rather than awaited further.
        Its eventual result is discarded.
        """
        task = asyncio.ensure_future(operation)
        done, _ = await asyncio.wait({task}, timeout=timeout)
        if task in done:
            return task.result()

        if self.config.cancel_on_timeout:
            task.cancel()
        task.add_done_callback(_consume_result)
        raise asyncio.TimeoutError(f"Operation timed out after {timeout}s")
