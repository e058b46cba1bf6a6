"""Domain models for externally fetched evidence."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class EvidenceChunk(BaseModel):
    """A sentence-level span of a source selected for relevance to a claim."""

    text: str
    similarity: float = 0.0
    position: int = Field(..., description="Index of the span within its source")


class EvidenceSource(BaseModel):
    """One externally fetched document tied to one claim."""

    url: str = Field(..., description="Source URL")
    extracted_content: str = Field(default="", description="Extracted text, truncated to the content budget")
    title: Optional[str] = Field(None, description="Document title")
    excerpt: Optional[str] = Field(None, description="Short description of the document")
    error: Optional[str] = Field(None, description="Why the fetch or extraction failed")
    claim: Optional[str] = Field(None, description="Claim this source was fetched for")
    chunks: List[EvidenceChunk] = Field(default_factory=list, description="Sentences selected as relevant to the claim")

    @property
    def ok(self) -> bool:
        """Whether the source produced usable content."""
        return not self.error and bool(self.extracted_content)


class ExtractionRequest(BaseModel):
    """A URL to fetch, optionally tied to the claim it should evidence."""

    url: str
    claim: Optional[str] = None


class StageError(BaseModel):
    """A per-item failure recorded in stage metrics."""

    claim: str
    stage: str
    error: str
    source: Optional[str] = None


class BatchExtractionResult(BaseModel):
    """Result of the batch "analyze many URLs" operation."""

    results: List[EvidenceSource] = Field(default_factory=list)
    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: List[StageError] = Field(default_factory=list)

    @classmethod
    def from_sources(cls, sources: List[EvidenceSource]) -> "BatchExtractionResult":
        """Build the result and its counts from extracted sources."""
        successful = sum(1 for s in sources if s.ok)
        errors = [
            StageError(claim=s.claim or "Unknown claim", stage="extraction", error=s.error)
            for s in sources
            if s.error
        ]
        return cls(
            results=sources,
            total=len(sources),
            successful=successful,
            failed=len(sources) - successful,
            errors=errors,
        )


class SearchOutcome(BaseModel):
    """URLs found for one claim and the provider that found them."""

    urls: List[str] = Field(default_factory=list)
    source: str = "none"


class SearchMetrics(BaseModel):
    """Aggregate metrics for one search stage."""

    total_searches: int = 0
    successful_searches: int = 0
    failed_searches: int = 0
    sources: Dict[str, int] = Field(default_factory=dict)
    errors: List[StageError] = Field(default_factory=list)

    @classmethod
    def from_outcomes(cls, claims: List[str], outcomes: List[SearchOutcome]) -> "SearchMetrics":
        """Summarize per-claim search outcomes."""
        sources: Dict[str, int] = {}
        errors = []
        for claim, outcome in zip(claims, outcomes):
            sources[outcome.source] = sources.get(outcome.source, 0) + 1
            if not outcome.urls:
                errors.append(
                    StageError(
                        claim=claim,
                        stage="search",
                        source=outcome.source,
                        error=f"No search results found (tried: {outcome.source})",
                    )
                )
        successful = sum(1 for o in outcomes if o.urls)
        return cls(
            total_searches=len(outcomes),
            successful_searches=successful,
            failed_searches=len(outcomes) - successful,
            sources=sources,
            errors=errors,
        )


class ClaimEvidence(BaseModel):
    """All evidence gathered for one claim."""

    claim: str
    sources: List[EvidenceSource] = Field(default_factory=list)
    search_source: str = "none"

    @property
    def texts(self) -> List[str]:
        """Usable evidence per source, in source order.

        Selected chunks are preferred over the full extracted content.
        """
        return [
            " ".join(c.text for c in s.chunks) if s.chunks else s.extracted_content
            for s in self.sources
            if s.ok
        ]
