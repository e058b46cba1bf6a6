"""Domain models for claim verdicts and their normalization."""

import math
import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Verdict(str, Enum):
    """Closed set of verdicts a claim can receive against its evidence."""

    SUPPORT = "Support"
    PARTIALLY_SUPPORT = "Partially Support"
    UNCLEAR = "Unclear"
    CONTRADICT = "Contradict"
    REFUTE = "Refute"


# Used whenever the generator does not supply a valid score
VERDICT_SCORES: Dict[Verdict, float] = {
    Verdict.SUPPORT: 100.0,
    Verdict.PARTIALLY_SUPPORT: 65.0,
    Verdict.UNCLEAR: 50.0,
    Verdict.CONTRADICT: 0.0,
    Verdict.REFUTE: 0.0,
}

_LABEL_LOOKUP = {re.sub(r"[\s_\-]+", " ", v.value).lower(): v for v in Verdict}


def normalize_verdict(label: Any) -> Verdict:
    """Map a raw label onto the closed verdict set.

    Casing and separator differences (``partially_support``, ``SUPPORT``) are
    tolerated; anything else collapses to ``Unclear``.
    """
    if isinstance(label, Verdict):
        return label
    if not isinstance(label, str):
        return Verdict.UNCLEAR
    key = re.sub(r"[\s_\-]+", " ", label).strip().lower()
    return _LABEL_LOOKUP.get(key, Verdict.UNCLEAR)


def clamp_trust_score(score: float) -> float:
    """Clamp a trust score into [0, 100]."""
    return max(0.0, min(100.0, score))


def normalize_trust_score(value: Any, verdict: Verdict) -> float:
    """Return a valid trust score, recomputing it from the verdict if needed."""
    if isinstance(value, bool):
        value = None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            value = None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return clamp_trust_score(float(value))
    return VERDICT_SCORES[verdict]


class VerdictResult(BaseModel):
    """Terminal enrichment of a claim: verdict, quotes and trust score."""

    claim: str = Field(..., description="Claim text the verdict applies to")
    verdict: Verdict = Field(default=Verdict.UNCLEAR)
    reference_quotes: List[str] = Field(default_factory=list, description="Up to 3 quotes from the evidence")
    trust_score: float = Field(default=50.0, ge=0.0, le=100.0)
    error: Optional[str] = Field(None, description="Set on synthetic placeholder results")
    has_evidence: bool = Field(default=True, description="Whether any evidence reached the generator")
    suspect_quotes: List[str] = Field(
        default_factory=list,
        description="Quotes that could not be found verbatim in the supplied evidence",
    )

    @classmethod
    def placeholder(
        cls,
        claim: str,
        reason: str,
        *,
        reference: str = "Error processing claim",
        has_evidence: bool = True,
    ) -> "VerdictResult":
        """Synthetic result for a claim whose verdict could not be generated."""
        return cls(
            claim=claim,
            verdict=Verdict.UNCLEAR,
            reference_quotes=[reference],
            trust_score=0.0,
            error=reason,
            has_evidence=has_evidence,
        )


class VerificationItem(BaseModel):
    """Input to the verify-claims-against-evidence operation."""

    claim: str
    evidence_texts: List[str] = Field(default_factory=list)


class VerificationReport(BaseModel):
    """Output of the verify-claims-against-evidence operation."""

    results: List[VerdictResult] = Field(default_factory=list)
    average_trust_score: float = 0.0


def average_trust_score(results: List[VerdictResult]) -> float:
    """Arithmetic mean of every valid trust score, placeholders included; 0 if none."""
    scores = [r.trust_score for r in results if isinstance(r.trust_score, (int, float)) and math.isfinite(r.trust_score)]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)
