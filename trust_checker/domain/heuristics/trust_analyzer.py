"""Offline trust analysis of a page's text."""

import logging
from typing import List, Optional

from ..errors import InvalidRequestError
from ..models.report import trust_verdict_for
from ..models.trust_analysis import AnalysisState, PageAnalysis
from .category_detector import CategoryDetector
from .claim_extractor import ClaimExtractor
from .claim_verifier import ClaimVerifier
from .score_aggregator import ScoreAggregator
from .trusted_sources import TrustedSourceTable, get_trusted_sources

logger = logging.getLogger(__name__)

MIN_PAGE_TEXT = 200


class TrustAnalyzer:
    """Runs category detection, claim extraction, claim scoring and aggregation.

    The analyzer is synchronous and holds no per-page data besides its
    current state, so one instance can serve many pages in sequence.
    """

    def __init__(
        self,
        table: Optional[TrustedSourceTable] = None,
        detector: Optional[CategoryDetector] = None,
        extractor: Optional[ClaimExtractor] = None,
        min_text_length: int = MIN_PAGE_TEXT,
    ):
        table = table or get_trusted_sources()
        self.detector = detector or CategoryDetector()
        self.extractor = extractor or ClaimExtractor()
        self.verifier = ClaimVerifier(table)
        self.aggregator = ScoreAggregator(table)
        self.min_text_length = min_text_length
        self.state = AnalysisState.IDLE
        self.transitions: List[AnalysisState] = []

    def _enter(self, state: AnalysisState) -> None:
        self.state = state
        self.transitions.append(state)

    def analyze(
        self,
        page_text: str,
        domain: str,
        url: Optional[str] = None,
        title: Optional[str] = None,
    ) -> PageAnalysis:
        """Analyze one page snapshot.

        Args:
            page_text: Visible text of the page
            domain: Hostname the page was served from
            url: Page URL, echoed in the result
            title: Page title, echoed in the result

        Returns:
            Category, overall score, verdict label and scored claims

        Raises:
            InvalidRequestError: If the text is too short to analyze
        """
        text = page_text or ""
        if len(text.strip()) < self.min_text_length:
            raise InvalidRequestError(
                f"Page text too short to analyze ({len(text.strip())} < {self.min_text_length} characters)"
            )

        self.transitions = []
        logger.info(f"📊 Starting page analysis for {domain} ({len(text)} characters)")

        self._enter(AnalysisState.CATEGORIZING)
        category = self.detector.detect(text)

        self._enter(AnalysisState.EXTRACTING_CLAIMS)
        candidates = self.extractor.extract(text)

        self._enter(AnalysisState.VERIFYING_CLAIMS)
        claims = [self.verifier.verify(c, category, domain) for c in candidates]
        overall = self.aggregator.aggregate(claims, domain)

        self._enter(AnalysisState.SCORED)
        result = PageAnalysis(
            category=category,
            overall_score=overall,
            verdict=trust_verdict_for(overall),
            claims=claims,
            domain=domain,
            url=url,
            title=title,
            text_length=len(text),
            state=self.state,
        )
        logger.info(
            f"✅ Analysis complete: {result.verdict.value} ({overall * 100:.1f}%), "
            f"{len(claims)} claims, category {category}"
        )
        return result
