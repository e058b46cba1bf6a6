"""Domain models for the heuristic (offline) page trust analysis."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .report import TrustVerdict


class AnalysisState(str, Enum):
    """Lifecycle of one heuristic page analysis."""

    IDLE = "idle"
    CATEGORIZING = "categorizing"
    EXTRACTING_CLAIMS = "extracting_claims"
    VERIFYING_CLAIMS = "verifying_claims"
    SCORED = "scored"


class ClaimStatus(str, Enum):
    """Credibility band of a heuristically scored claim."""

    HIGHLY_CREDIBLE = "Highly Credible"
    LIKELY_TRUE = "Likely True"
    MIXED = "Mixed/Uncertain"
    QUESTIONABLE = "Questionable"
    LIKELY_FALSE = "Likely False"


class TrustLevel(str, Enum):
    """Whether the page domain is on the category allowlist."""

    TRUSTED = "trusted"
    UNTRUSTED = "untrusted"


class CandidateClaim(BaseModel):
    """A sentence that passed factual-indicator scoring."""

    text: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    types: List[str] = Field(default_factory=list)
    raw_score: float = 0.0


class ScoredClaim(BaseModel):
    """A candidate claim after domain-trust and language scoring."""

    text: str
    score: float = Field(..., ge=0.0, le=1.0)
    confidence: float = 1.0
    types: List[str] = Field(default_factory=list)
    status: ClaimStatus
    trust_level: TrustLevel = TrustLevel.UNTRUSTED
    verified_by: List[str] = Field(default_factory=list)
    reasoning: List[str] = Field(default_factory=list)


class PageAnalysis(BaseModel):
    """Result of analyzing one page's text."""

    category: str = "general"
    overall_score: float = Field(default=0.5, ge=0.0, le=1.0)
    verdict: TrustVerdict
    claims: List[ScoredClaim] = Field(default_factory=list)
    domain: str = ""
    url: Optional[str] = None
    title: Optional[str] = None
    text_length: int = 0
    state: AnalysisState = AnalysisState.SCORED
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def credible_count(self) -> int:
        return sum(1 for c in self.claims if c.score >= 0.7)

    @property
    def questionable_count(self) -> int:
        return sum(1 for c in self.claims if 0.4 <= c.score < 0.7)

    @property
    def suspicious_count(self) -> int:
        return sum(1 for c in self.claims if c.score < 0.4)
