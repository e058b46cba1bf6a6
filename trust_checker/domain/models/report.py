"""Domain models for article-level reports and pipeline progress."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .claim import Claim
from .evidence import EvidenceSource, SearchMetrics, StageError
from .verdict import Verdict, VerdictResult


class TrustVerdict(str, Enum):
    """Five-tier label summarizing an article's overall score."""

    HIGHLY_TRUSTWORTHY = "HIGHLY TRUSTWORTHY"
    GENERALLY_RELIABLE = "GENERALLY RELIABLE"
    MIXED_CREDIBILITY = "MIXED CREDIBILITY"
    QUESTIONABLE = "QUESTIONABLE"
    LIKELY_UNRELIABLE = "LIKELY UNRELIABLE"


def trust_verdict_for(score: float) -> TrustVerdict:
    """Map an overall score in [0, 1] onto the five-tier label."""
    if score >= 0.75:
        return TrustVerdict.HIGHLY_TRUSTWORTHY
    if score >= 0.60:
        return TrustVerdict.GENERALLY_RELIABLE
    if score >= 0.45:
        return TrustVerdict.MIXED_CREDIBILITY
    if score >= 0.30:
        return TrustVerdict.QUESTIONABLE
    return TrustVerdict.LIKELY_UNRELIABLE


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PipelineStage(str, Enum):
    """Stage the pipeline coordinator is currently in."""

    PENDING = "pending"
    EXTRACTING = "extracting"
    CLASSIFYING = "classifying"
    SEARCHING = "searching"
    JUDGING = "judging"
    COMPLETED = "completed"


class AnalysisProgress(BaseModel):
    """Incremental progress metrics for one analysis request."""

    stage: PipelineStage = PipelineStage.PENDING
    total_claims: int = 0
    analyzed_count: int = 0
    verdicts: Dict[str, int] = Field(default_factory=lambda: {v.value: 0 for v in Verdict})
    average_trust_score: Optional[float] = None

    def record(self, results: List[VerdictResult]) -> None:
        """Fold finished verdicts into the histogram and counters."""
        for result in results:
            self.verdicts[result.verdict.value] = self.verdicts.get(result.verdict.value, 0) + 1
        self.analyzed_count += len(results)


class ClaimReport(BaseModel):
    """A claim together with its evidence and verdict."""

    claim: Claim
    result: VerdictResult
    sources: List[EvidenceSource] = Field(default_factory=list)
    search_source: str = "none"


class PipelineMetrics(BaseModel):
    """Per-stage counters collected while building a report."""

    sentences: int = 0
    search: SearchMetrics = Field(default_factory=SearchMetrics)
    total_extractions: int = 0
    successful_extractions: int = 0
    failed_extractions: int = 0
    extraction_errors: List[StageError] = Field(default_factory=list)
    duration_ms: int = 0


class AggregateReport(BaseModel):
    """One analysis run over one article."""

    url: str
    title: Optional[str] = None
    category: str = "general"
    claims: List[ClaimReport] = Field(default_factory=list)
    overall_score: float = Field(default=0.0, ge=0.0, le=1.0)
    average_trust_score: float = Field(default=0.0, ge=0.0, le=100.0)
    verdict_label: TrustVerdict = TrustVerdict.LIKELY_UNRELIABLE
    progress: AnalysisProgress = Field(default_factory=AnalysisProgress)
    metrics: PipelineMetrics = Field(default_factory=PipelineMetrics)
    analyzed_at: datetime = Field(default_factory=utc_now)
    error: Optional[str] = None

    class Config:
        """Pydantic model configuration."""
        frozen = True  # A rerun produces a new report
