"""Candidate claim extraction by factual-indicator scoring."""

import logging
import re
from typing import List, Tuple

from ..models.trust_analysis import CandidateClaim
from .keyword_tables import FACTUAL_INDICATORS, OPINION_INDICATORS

logger = logging.getLogger(__name__)

_SENTENCE_BREAK = re.compile(r"[.!?]+")


def match_factual_indicators(sentence: str) -> Tuple[float, List[str]]:
    """Sum the weights of factual indicators found in a sentence.

    Returns:
        The summed weight and the matched indicator types, in table order
    """
    score = 0.0
    types = []
    for indicator in FACTUAL_INDICATORS:
        if indicator.pattern.search(sentence):
            score += indicator.score
            types.append(indicator.label)
    return score, types


def opinion_penalty(sentence: str) -> float:
    """Total (negative) adjustment for hedging and subjective wording."""
    return sum(i.score for i in OPINION_INDICATORS if i.pattern.search(sentence))


class ClaimExtractor:
    """Picks the sentences of a page most likely to be checkable claims."""

    def __init__(
        self,
        min_length: int = 30,
        max_length: int = 300,
        min_score: float = 0.7,
        max_claims: int = 10,
    ):
        self.min_length = min_length
        self.max_length = max_length
        self.min_score = min_score
        self.max_claims = max_claims

    def split_sentences(self, text: str) -> List[str]:
        """Split on terminal punctuation and keep spans strictly within the length bounds."""
        spans = (s.strip() for s in _SENTENCE_BREAK.split(text))
        return [s for s in spans if self.min_length < len(s) < self.max_length]

    def extract(self, text: str) -> List[CandidateClaim]:
        """Score every sentence and return the top claims, best first."""
        sentences = self.split_sentences(text)
        claims = []
        for sentence in sentences:
            score, types = match_factual_indicators(sentence)
            score += opinion_penalty(sentence)
            if score >= self.min_score:
                claims.append(
                    CandidateClaim(
                        text=sentence,
                        confidence=min(1.0, score),
                        types=types,
                        raw_score=score,
                    )
                )

        # Stable sort keeps document order among equal scores
        claims.sort(key=lambda c: c.confidence, reverse=True)
        top = claims[: self.max_claims]

        logger.info(f"📝 Extracted {len(top)} high-confidence claims from {len(sentences)} sentences")
        for i, claim in enumerate(top, 1):
            logger.debug(f"  {i}. [{claim.confidence * 100:.0f}%] {claim.text[:80]}...")
        return top
