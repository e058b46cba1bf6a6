"""Service that runs the full article verification pipeline."""

import inspect
import logging
import time
from typing import Awaitable, Callable, List, Optional, Union

from ..errors import InvalidRequestError, TrustCheckerError
from ..heuristics.category_detector import CategoryDetector
from ..models.claim import Claim
from ..models.evidence import ClaimEvidence
from ..models.report import (
    AggregateReport,
    AnalysisProgress,
    ClaimReport,
    PipelineMetrics,
    PipelineStage,
    trust_verdict_for,
)
from ..models.verdict import VerdictResult, VerificationItem, average_trust_score
from ..ports.article_extractor import ArticleExtractor
from .evidence_gatherer import EvidenceGatherer
from .sentence_classifier import SentenceClassifier
from .verdict_engine import VerdictEngine

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[AnalysisProgress], Union[None, Awaitable[None]]]


class PipelineCoordinator:
    """Sequences classification, evidence gathering and verdict generation.

    Every stage tolerates partial failure: a claim that loses its evidence or
    its verdict ends up ``Unclear`` and the other claims carry on.
    """

    def __init__(
        self,
        extractor: ArticleExtractor,
        classifier: SentenceClassifier,
        gatherer: EvidenceGatherer,
        verdict_engine: VerdictEngine,
        detector: Optional[CategoryDetector] = None,
    ):
        self.extractor = extractor
        self.classifier = classifier
        self.gatherer = gatherer
        self.verdict_engine = verdict_engine
        self.detector = detector or CategoryDetector()
        logger.info("🔧 PipelineCoordinator initialized")

    async def run(self, url: str, on_progress: Optional[ProgressCallback] = None) -> AggregateReport:
        """Analyze one article.

        Args:
            url: Article URL
            on_progress: Called with a snapshot of the progress after every step

        Returns:
            The immutable report for this run

        Raises:
            InvalidRequestError: If no URL was given
        """
        if not url or not url.strip():
            raise InvalidRequestError("No URL provided")
        url = url.strip()

        started = time.monotonic()
        progress = AnalysisProgress()
        metrics = PipelineMetrics()
        logger.info(f"🔍 Starting analysis of {url}")

        await self._advance(progress, PipelineStage.EXTRACTING, on_progress)
        try:
            article = await self.extractor.extract(url)
        except TrustCheckerError as e:
            logger.warning(f"⚠️ Could not extract article {url}: {e}")
            await self._advance(progress, PipelineStage.COMPLETED, on_progress)
            metrics.duration_ms = _elapsed_ms(started)
            return AggregateReport(url=url, progress=progress, metrics=metrics, error=str(e))

        category = self.detector.detect(article.content)

        await self._advance(progress, PipelineStage.CLASSIFYING, on_progress)
        classification = await self.classifier.classify(article.content)
        claims = classification.claims
        metrics.sentences = len(classification.sentences)
        progress.total_claims = len(claims)
        logger.info(f"📝 {len(claims)} claims found in {metrics.sentences} sentences")

        if not claims:
            await self._advance(progress, PipelineStage.COMPLETED, on_progress)
            metrics.duration_ms = _elapsed_ms(started)
            return self._report(url, article.title, category, [], [], [], progress, metrics)

        await self._advance(progress, PipelineStage.SEARCHING, on_progress)
        gathering = await self.gatherer.gather(claims, source_url=url)
        metrics.search = gathering.search
        metrics.total_extractions = gathering.extraction.total
        metrics.successful_extractions = gathering.extraction.successful
        metrics.failed_extractions = gathering.extraction.failed
        metrics.extraction_errors = gathering.extraction.errors

        await self._advance(progress, PipelineStage.JUDGING, on_progress)

        async def record(results: List[VerdictResult]) -> None:
            progress.record(results)
            await self._emit(progress, on_progress)

        items = [VerificationItem(claim=e.claim, evidence_texts=e.texts) for e in gathering.evidence]
        verification = await self.verdict_engine.verify(items, on_results=record)

        progress.average_trust_score = verification.average_trust_score
        await self._advance(progress, PipelineStage.COMPLETED, on_progress)
        metrics.duration_ms = _elapsed_ms(started)

        return self._report(
            url, article.title, category, claims, gathering.evidence, verification.results, progress, metrics
        )

    def _report(
        self,
        url: str,
        title: Optional[str],
        category: str,
        claims: List[Claim],
        evidence: List[ClaimEvidence],
        results: List[VerdictResult],
        progress: AnalysisProgress,
        metrics: PipelineMetrics,
    ) -> AggregateReport:
        reports = [
            ClaimReport(claim=claim, result=result, sources=ev.sources, search_source=ev.search_source)
            for claim, ev, result in zip(claims, evidence, results)
        ]
        average = average_trust_score(results)
        overall = round(average / 100, 2)
        report = AggregateReport(
            url=url,
            title=title,
            category=category,
            claims=reports,
            overall_score=overall,
            average_trust_score=average,
            verdict_label=trust_verdict_for(overall),
            progress=progress.model_copy(deep=True),
            metrics=metrics,
        )
        logger.info(
            f"✅ Analysis of {url} complete: {report.verdict_label.value} "
            f"({len(reports)} claims, average trust {average:.1f}, {metrics.duration_ms}ms)"
        )
        return report

    async def _advance(
        self,
        progress: AnalysisProgress,
        stage: PipelineStage,
        on_progress: Optional[ProgressCallback],
    ) -> None:
        progress.stage = stage
        await self._emit(progress, on_progress)

    async def _emit(self, progress: AnalysisProgress, on_progress: Optional[ProgressCallback]) -> None:
        if on_progress is None:
            return
        try:
            outcome = on_progress(progress.model_copy(deep=True))
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.warning(f"⚠️ Progress callback failed at stage {progress.stage.value}: {e}")


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
