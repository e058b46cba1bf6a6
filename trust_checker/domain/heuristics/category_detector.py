"""Weighted keyword topic detection."""

import logging
from typing import Dict, List, Optional, Pattern, Tuple

from .keyword_tables import CATEGORY_KEYWORDS, CategoryKeywords, keyword_pattern

logger = logging.getLogger(__name__)

PRIMARY_WEIGHT = 3
SECONDARY_WEIGHT = 1
MIN_CATEGORY_SCORE = 3.0
DEFAULT_CATEGORY = "general"


class CategoryDetector:
    """Detects the topic of a page from keyword hits.

    Every keyword occurrence counts: primary keywords are worth 3 points,
    secondary keywords 1 point, and the sum is scaled by the category
    multiplier. The best category wins unless it scores below 3.
    """

    def __init__(
        self,
        categories: Optional[Dict[str, CategoryKeywords]] = None,
        threshold: float = MIN_CATEGORY_SCORE,
    ):
        self.categories = categories or CATEGORY_KEYWORDS
        self.threshold = threshold
        self._compiled: Dict[str, Tuple[List[Pattern[str]], List[Pattern[str]]]] = {
            name: (
                [keyword_pattern(k) for k in keywords.primary],
                [keyword_pattern(k) for k in keywords.secondary],
            )
            for name, keywords in self.categories.items()
        }

    def scores(self, text: str) -> Dict[str, float]:
        """Weighted score of every category for ``text``."""
        result = {}
        for name, (primary, secondary) in self._compiled.items():
            raw = sum(len(p.findall(text)) * PRIMARY_WEIGHT for p in primary)
            raw += sum(len(p.findall(text)) * SECONDARY_WEIGHT for p in secondary)
            result[name] = raw * self.categories[name].weight
        return result

    def detect(self, text: str) -> str:
        """Return the best-scoring category, or ``general`` below the threshold."""
        scores = self.scores(text)
        detected, best = DEFAULT_CATEGORY, 0.0
        for name, score in scores.items():
            if score > best:
                detected, best = name, score

        if best < self.threshold:
            detected = DEFAULT_CATEGORY

        logger.debug(f"📊 Category scores: {scores}")
        logger.info(f"✅ Detected category: {detected} (score: {best})")
        return detected
