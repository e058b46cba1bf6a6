"""Domain-trust and language heuristics for scoring a single claim."""

import logging
import math
from typing import Optional

from ..models.trust_analysis import CandidateClaim, ClaimStatus, ScoredClaim, TrustLevel
from .keyword_tables import NEGATIVE_INDICATORS, POSITIVE_INDICATORS, RESEARCH_MENTION
from .trusted_sources import TrustedSourceTable, get_trusted_sources

logger = logging.getLogger(__name__)

TRUSTED_BASE = 0.75
UNTRUSTED_BASE = 0.30
TRUSTED_RESEARCH_BONUS = 0.10
MULTI_TYPE_BONUS = 0.05
QUALITY_TYPE_BONUS = 0.08


def round_score(score: float) -> float:
    """Round half-up to 2 decimals."""
    return math.floor(score * 100 + 0.5) / 100


def clamp_unit(score: float) -> float:
    return max(0.0, min(1.0, score))


def status_for(score: float) -> ClaimStatus:
    """Map a claim score in [0, 1] onto a credibility band."""
    if score >= 0.75:
        return ClaimStatus.HIGHLY_CREDIBLE
    if score >= 0.60:
        return ClaimStatus.LIKELY_TRUE
    if score >= 0.45:
        return ClaimStatus.MIXED
    if score >= 0.30:
        return ClaimStatus.QUESTIONABLE
    return ClaimStatus.LIKELY_FALSE


def base_score(is_trusted: bool, category_weight: float) -> float:
    """Starting score before any language adjustment."""
    return TRUSTED_BASE * category_weight if is_trusted else UNTRUSTED_BASE


class ClaimVerifier:
    """Scores claims against the trusted source table and language cues."""

    def __init__(self, table: Optional[TrustedSourceTable] = None):
        self.table = table or get_trusted_sources()

    def verify(self, claim: CandidateClaim, category: str, domain: str) -> ScoredClaim:
        """Score one claim found on a page of ``domain`` about ``category``.

        Args:
            claim: Candidate produced by the claim extractor
            category: Detected page category
            domain: Hostname of the page

        Returns:
            The scored claim with its status and reasoning tags
        """
        logger.debug(f"🔍 Verifying claim: \"{claim.text[:60]}...\"")

        entry = self.table.for_category(category)
        if entry is None or not entry.sources:
            logger.warning(f"⚠️ No trusted sources found for category: {category}")
            return ScoredClaim(
                text=claim.text,
                score=0.5,
                confidence=claim.confidence,
                types=claim.types,
                status=ClaimStatus.MIXED,
                reasoning=["-no trusted sources for category"],
            )

        match = self.table.find_match(domain, category)
        is_trusted = match is not None
        logger.debug(f"  📍 Domain {domain} is {'TRUSTED' if is_trusted else 'NOT TRUSTED'} for {category}")

        score = base_score(is_trusted, entry.weight)
        reasons = []

        for indicator in POSITIVE_INDICATORS:
            if indicator.pattern.search(claim.text):
                score += indicator.score
                reasons.append(f"+{indicator.label}")
        for indicator in NEGATIVE_INDICATORS:
            if indicator.pattern.search(claim.text):
                score += indicator.score
                reasons.append(f"-{indicator.label}")

        verified_by = []
        if is_trusted:
            verified_by.append(domain)
            if RESEARCH_MENTION.search(claim.text):
                score += TRUSTED_RESEARCH_BONUS
                reasons.append("+research from trusted source")

        if len(claim.types) >= 3:
            score += MULTI_TYPE_BONUS
            reasons.append("+multiple verification types")
        if "research" in claim.types or "attributed" in claim.types:
            score += QUALITY_TYPE_BONUS
            reasons.append("+high-quality claim type")

        score = clamp_unit(score)
        status = status_for(score)
        logger.debug(f"  📊 Final score: {score * 100:.1f}% - {status.value}")

        return ScoredClaim(
            text=claim.text,
            score=round_score(score),
            confidence=claim.confidence,
            types=claim.types,
            status=status,
            trust_level=TrustLevel.TRUSTED if is_trusted else TrustLevel.UNTRUSTED,
            verified_by=verified_by,
            reasoning=reasons,
        )
