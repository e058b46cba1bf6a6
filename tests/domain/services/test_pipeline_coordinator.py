"""Tests for the pipeline coordinator."""

from unittest.mock import AsyncMock

import pytest

from conftest import FakeArticleExtractor, FakeClaimSearch
from trust_checker.domain.errors import InvalidRequestError
from trust_checker.domain.models.claim import Claim, ClassificationResult
from trust_checker.domain.models.report import PipelineStage, TrustVerdict
from trust_checker.domain.models.verdict import Verdict
from trust_checker.domain.services.evidence_gatherer import EvidenceGatherer
from trust_checker.domain.services.pipeline_coordinator import PipelineCoordinator
from trust_checker.domain.services.verdict_engine import VerdictEngine

ARTICLE_URL = "https://www.origin.com/story"
ARTICLE = (
    "The hospital opened a new vaccine clinic for every patient in 2023. "
    "The clinic treated 500 patients during its first month."
)
OPENED = Claim(text="The hospital opened a new vaccine clinic in 2023", search_date="2024-01-01")
TREATED = Claim(text="The clinic treated 500 patients during its first month", search_date="2024-01-01")


def make_coordinator(claims, verdict_response=None, pages=None):
    extractor = FakeArticleExtractor(
        {
            ARTICLE_URL: ARTICLE,
            "https://health.gov/clinic": "The new vaccine clinic opened in 2023 at the hospital.",
            **(pages or {}),
        }
    )
    classifier = AsyncMock()
    classifier.classify.return_value = ClassificationResult(sentences=["a", "b"], claims=claims)
    search = FakeClaimSearch({OPENED.text: ["https://health.gov/clinic"]})
    gatherer = EvidenceGatherer(search, extractor)
    llm = AsyncMock()
    llm.complete.return_value = verdict_response or {"results": []}
    engine = VerdictEngine(llm)
    return PipelineCoordinator(extractor, classifier, gatherer, engine), llm


@pytest.mark.asyncio
async def test_empty_url_is_rejected():
    coordinator, _ = make_coordinator([])
    with pytest.raises(InvalidRequestError):
        await coordinator.run("  ")


@pytest.mark.asyncio
async def test_extraction_failure_produces_error_report():
    coordinator, llm = make_coordinator([])

    report = await coordinator.run("https://unknown.com/page")

    assert report.error == "Failed to extract content from the URL"
    assert report.claims == []
    assert report.progress.stage == PipelineStage.COMPLETED
    llm.complete.assert_not_called()


@pytest.mark.asyncio
async def test_article_without_claims_scores_zero():
    coordinator, _ = make_coordinator([])

    report = await coordinator.run(ARTICLE_URL)

    assert report.claims == []
    assert report.overall_score == 0.0
    assert report.verdict_label == TrustVerdict.LIKELY_UNRELIABLE
    assert report.category == "health"
    assert report.title == f"Title of {ARTICLE_URL}"


@pytest.mark.asyncio
async def test_full_run():
    coordinator, llm = make_coordinator(
        [OPENED, TREATED],
        verdict_response={
            "results": [
                {
                    "claim": OPENED.text,
                    "verdict": "Support",
                    "trustScore": 90,
                    "reference": ["[Source 1] The new vaccine clinic opened in 2023 at the hospital."],
                }
            ]
        },
    )
    stages = []

    report = await coordinator.run(ARTICLE_URL, on_progress=lambda p: stages.append(p.stage))

    opened, treated = report.claims
    assert opened.result.verdict == Verdict.SUPPORT
    assert opened.sources[0].url == "https://health.gov/clinic"
    assert opened.search_source == "tavily"
    assert treated.result.verdict == Verdict.UNCLEAR
    assert treated.result.has_evidence is False

    # The claim without evidence counts as 0
    assert report.average_trust_score == 45.0
    assert report.overall_score == 0.45
    assert report.verdict_label == TrustVerdict.MIXED_CREDIBILITY
    assert report.progress.analyzed_count == 2
    assert report.progress.verdicts["Support"] == 1
    assert report.progress.verdicts["Unclear"] == 1
    assert report.metrics.sentences == 2
    assert report.metrics.search.successful_searches == 1
    assert report.metrics.successful_extractions == 1
    assert llm.complete.await_count == 1

    assert stages[:4] == [
        PipelineStage.EXTRACTING,
        PipelineStage.CLASSIFYING,
        PipelineStage.SEARCHING,
        PipelineStage.JUDGING,
    ]
    assert stages[-1] == PipelineStage.COMPLETED


@pytest.mark.asyncio
async def test_no_evidence_anywhere_scores_zero():
    coordinator, llm = make_coordinator([TREATED])

    report = await coordinator.run(ARTICLE_URL)

    assert report.overall_score == 0.0
    assert report.average_trust_score == 0.0
    llm.complete.assert_not_called()


@pytest.mark.asyncio
async def test_failing_progress_callback_does_not_break_run():
    coordinator, _ = make_coordinator([])

    def explode(progress):
        raise ValueError("listener crashed")

    report = await coordinator.run(ARTICLE_URL, on_progress=explode)

    assert report.error is None
