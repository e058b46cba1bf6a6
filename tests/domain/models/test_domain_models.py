"""Tests for domain models and their normalization helpers."""

import math

import pytest
from pydantic import ValidationError

from trust_checker.domain.models.claim import (
    CategorizedSentence,
    Claim,
    DisambiguationResult,
    VerifiabilityCategory,
)
from trust_checker.domain.models.evidence import (
    ClaimEvidence,
    EvidenceChunk,
    EvidenceSource,
    SearchMetrics,
    SearchOutcome,
)
from trust_checker.domain.models.report import AnalysisProgress, TrustVerdict, trust_verdict_for
from trust_checker.domain.models.verdict import (
    Verdict,
    VerdictResult,
    average_trust_score,
    normalize_trust_score,
    normalize_verdict,
)


def test_claim_is_frozen():
    claim = Claim(text="The bridge opened in 2022", search_date="2024-01-01")
    assert claim.search_query == "The bridge opened in 2022 2024-01-01"
    with pytest.raises(ValidationError):
        claim.text = "changed"


def test_partially_verifiable_sentence_uses_rewrite():
    sentence = CategorizedSentence(
        sentence="The beloved mayor opened the bridge in 2022",
        category=VerifiabilityCategory.PARTIALLY_VERIFIABLE,
        rewritten_verifiable_part="  ",
    )
    assert sentence.verifiable_text is None
    sentence.rewritten_verifiable_part = "The mayor opened the bridge in 2022"
    assert sentence.verifiable_text == "The mayor opened the bridge in 2022"


def test_disambiguation_resolution():
    unresolved = DisambiguationResult(sentence="He did it", is_ambiguous=True, can_be_disambiguated=False)
    assert unresolved.resolved_sentence == "He did it"
    resolved = DisambiguationResult(
        sentence="He did it",
        is_ambiguous=True,
        can_be_disambiguated=True,
        disambiguated_sentence="The mayor signed the bill",
    )
    assert resolved.resolved_sentence == "The mayor signed the bill"


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Support", Verdict.SUPPORT),
        ("PARTIALLY SUPPORT", Verdict.PARTIALLY_SUPPORT),
        ("partially-support", Verdict.PARTIALLY_SUPPORT),
        ("refute", Verdict.REFUTE),
        ("True", Verdict.UNCLEAR),
        (None, Verdict.UNCLEAR),
    ],
)
def test_normalize_verdict(label, expected):
    assert normalize_verdict(label) == expected


def test_normalize_trust_score():
    assert normalize_trust_score(-5, Verdict.SUPPORT) == 0.0
    assert normalize_trust_score("72.5", Verdict.SUPPORT) == 72.5
    assert normalize_trust_score(math.nan, Verdict.PARTIALLY_SUPPORT) == 65.0
    assert normalize_trust_score(True, Verdict.UNCLEAR) == 50.0
    assert normalize_trust_score("high", Verdict.CONTRADICT) == 0.0


def test_average_counts_every_scored_claim():
    results = [
        VerdictResult(claim="a", verdict=Verdict.SUPPORT, trust_score=90),
        VerdictResult(claim="b", verdict=Verdict.CONTRADICT, trust_score=10),
        VerdictResult.placeholder("c", "No evidence available", has_evidence=False),
    ]
    assert average_trust_score(results) == pytest.approx(100 / 3)
    assert average_trust_score([]) == 0.0


def test_trust_verdict_tiers():
    assert trust_verdict_for(0.75) == TrustVerdict.HIGHLY_TRUSTWORTHY
    assert trust_verdict_for(0.6) == TrustVerdict.GENERALLY_RELIABLE
    assert trust_verdict_for(0.45) == TrustVerdict.MIXED_CREDIBILITY
    assert trust_verdict_for(0.3) == TrustVerdict.QUESTIONABLE
    assert trust_verdict_for(0.29) == TrustVerdict.LIKELY_UNRELIABLE


def test_progress_record():
    progress = AnalysisProgress(total_claims=3)
    progress.record([VerdictResult(claim="a", verdict=Verdict.SUPPORT), VerdictResult(claim="b")])
    assert progress.analyzed_count == 2
    assert progress.verdicts["Support"] == 1
    assert progress.verdicts["Unclear"] == 1
    assert progress.verdicts["Refute"] == 0


def test_source_prefers_chunks_and_skips_failures():
    evidence = ClaimEvidence(
        claim="c",
        sources=[
            EvidenceSource(
                url="https://a.com",
                extracted_content="Full text. Second sentence.",
                chunks=[EvidenceChunk(text="Second sentence.", position=1)],
            ),
            EvidenceSource(url="https://b.com", extracted_content="Only text."),
            EvidenceSource(url="https://c.com", error="Extraction timed out after 30s"),
        ],
    )
    assert evidence.texts == ["Second sentence.", "Only text."]


def test_search_metrics():
    metrics = SearchMetrics.from_outcomes(
        ["a", "b", "c"],
        [
            SearchOutcome(urls=["https://x.com"], source="tavily"),
            SearchOutcome(urls=["https://y.com"], source="duckduckgo"),
            SearchOutcome(),
        ],
    )
    assert metrics.total_searches == 3
    assert metrics.successful_searches == 2
    assert metrics.sources == {"tavily": 1, "duckduckgo": 1, "none": 1}
    assert metrics.errors[0].claim == "c"
    assert metrics.errors[0].stage == "search"
