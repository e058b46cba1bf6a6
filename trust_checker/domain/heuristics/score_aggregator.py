"""Page-level aggregation of heuristic claim scores."""

import logging
from typing import List, Optional, Sequence

from ..models.trust_analysis import ScoredClaim
from .claim_verifier import clamp_unit, round_score
from .trusted_sources import TrustedSourceTable, get_trusted_sources

logger = logging.getLogger(__name__)

NO_CLAIMS_SCORE = 0.5
TRUSTED_DOMAIN_BONUS = 0.10
UNKNOWN_DOMAIN_PENALTY = -0.05
CONSISTENCY_BONUS = 0.05
CONSISTENCY_MAX_VARIANCE = 0.05
QUALITY_BONUS = 0.05
QUALITY_MIN_RATIO = 0.6
HIGH_QUALITY_SCORE = 0.7


def calculate_variance(numbers: Sequence[float]) -> float:
    """Population variance; 0 for empty input."""
    if not numbers:
        return 0.0
    mean = sum(numbers) / len(numbers)
    return sum((n - mean) ** 2 for n in numbers) / len(numbers)


class ScoreAggregator:
    """Combines claim scores into one overall page score in [0, 1]."""

    def __init__(self, table: Optional[TrustedSourceTable] = None):
        self.table = table or get_trusted_sources()

    def aggregate(self, claims: List[ScoredClaim], domain: str) -> float:
        if not claims:
            logger.warning("⚠️ No claims found, defaulting to 0.5")
            return NO_CLAIMS_SCORE

        total_score = 0.0
        total_weight = 0.0
        for claim in claims:
            weight = claim.confidence or 1.0
            total_score += claim.score * weight
            total_weight += weight
        average = total_score / total_weight if total_weight > 0 else NO_CLAIMS_SCORE

        trusted_in = self.table.trusted_anywhere(domain)
        if trusted_in:
            domain_modifier = TRUSTED_DOMAIN_BONUS
            logger.debug(f"  ✅ Domain {domain} is trusted in {trusted_in} (+{domain_modifier})")
        else:
            domain_modifier = UNKNOWN_DOMAIN_PENALTY
            logger.debug(f"  ⚠️ Domain {domain} not in trusted sources ({domain_modifier})")

        variance = calculate_variance([c.score for c in claims])
        consistency = CONSISTENCY_BONUS if variance < CONSISTENCY_MAX_VARIANCE else 0.0

        high_quality = sum(1 for c in claims if c.score >= HIGH_QUALITY_SCORE)
        quality = QUALITY_BONUS if high_quality / len(claims) >= QUALITY_MIN_RATIO else 0.0

        final = round_score(clamp_unit(average + domain_modifier + consistency + quality))
        logger.info(
            f"🎯 Overall score {final * 100:.1f}% from {len(claims)} claims "
            f"(base {average:.3f}, domain {domain_modifier:+.2f}, "
            f"consistency {consistency:+.2f}, quality {quality:+.2f})"
        )
        return final
