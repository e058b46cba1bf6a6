"""Tests for heuristic claim scoring."""

import pytest
from pydantic import ValidationError

from trust_checker.domain.heuristics.claim_verifier import ClaimVerifier, base_score, round_score, status_for
from trust_checker.domain.heuristics.keyword_tables import CATEGORY_KEYWORDS, NEGATIVE_INDICATORS
from trust_checker.domain.heuristics.trusted_sources import TrustedCategory, TrustedSourceTable
from trust_checker.domain.models.trust_analysis import CandidateClaim, ClaimStatus, TrustLevel


def test_base_score():
    assert base_score(True, 0.9) == pytest.approx(0.675)
    assert base_score(False, 0.9) == 0.30


def test_round_score_is_half_up():
    assert round_score(0.125) == 0.13
    assert round_score(0.5) == 0.5


def test_status_bands():
    assert status_for(0.75) == ClaimStatus.HIGHLY_CREDIBLE
    assert status_for(0.6) == ClaimStatus.LIKELY_TRUE
    assert status_for(0.45) == ClaimStatus.MIXED
    assert status_for(0.3) == ClaimStatus.QUESTIONABLE
    assert status_for(0.29) == ClaimStatus.LIKELY_FALSE


def test_trusted_research_claim_scores_high(trusted_table):
    verifier = ClaimVerifier(trusted_table)
    claim = CandidateClaim(
        text="According to a 2022 study, 45% of patients showed improvement",
        confidence=1.0,
        types=["percentage", "year", "attributed"],
    )

    result = verifier.verify(claim, "health", "who.int")

    assert result.score >= 0.75
    assert result.status == ClaimStatus.HIGHLY_CREDIBLE
    assert result.trust_level == TrustLevel.TRUSTED
    assert result.verified_by == ["who.int"]
    assert "+has attribution" in result.reasoning
    assert "+research from trusted source" in result.reasoning
    assert "+multiple verification types" in result.reasoning
    assert "+high-quality claim type" in result.reasoning


def test_sensational_claim_on_unknown_domain_scores_low(trusted_table):
    verifier = ClaimVerifier(trusted_table)
    claim = CandidateClaim(
        text="Shocking secret cure that doctors never tell you about was exposed in 2023",
        confidence=0.7,
        types=["year"],
    )

    result = verifier.verify(claim, "health", "randomblog.net")

    assert result.score < 0.30
    assert result.status == ClaimStatus.LIKELY_FALSE
    assert result.trust_level == TrustLevel.UNTRUSTED
    assert result.verified_by == []
    assert "-sensational language" in result.reasoning
    assert "-exaggeration" in result.reasoning


def test_trusted_domain_without_indicators_uses_weighted_base(trusted_table):
    verifier = ClaimVerifier(trusted_table)
    claim = CandidateClaim(text="The telescope team published its full dataset", confidence=0.7)

    result = verifier.verify(claim, "science", "www.nature.com")

    assert result.score == pytest.approx(0.68)
    assert result.status == ClaimStatus.LIKELY_TRUE
    assert result.reasoning == []


def test_unknown_category_uses_general_sources(trusted_table):
    verifier = ClaimVerifier(trusted_table)
    claim = CandidateClaim(text="The ministry signed the agreement last week", confidence=0.8)

    result = verifier.verify(claim, "sports", "reuters.com")

    assert result.trust_level == TrustLevel.TRUSTED


def test_category_without_sources_is_mixed():
    table = TrustedSourceTable({"health": TrustedCategory(sources=[], weight=1.0)})
    verifier = ClaimVerifier(table)
    claim = CandidateClaim(text="The clinic treated 300 patients in 2020", confidence=1.0)

    result = verifier.verify(claim, "health", "who.int")

    assert result.score == 0.5
    assert result.status == ClaimStatus.MIXED
    assert result.reasoning == ["-no trusted sources for category"]


def test_sensational_punctuation_on_untrusted_domain(trusted_table):
    verifier = ClaimVerifier(trusted_table)
    claim = CandidateClaim(
        text="This is shocking and unbelievable, they don't want you to know!!",
        confidence=0.7,
    )

    result = verifier.verify(claim, "general", "randomblog.net")

    assert result.score < 0.30
    assert result.status == ClaimStatus.LIKELY_FALSE
    assert "-sensational language" in result.reasoning
    assert "-excessive punctuation" in result.reasoning


def test_indicator_tables_are_immutable():
    with pytest.raises(ValidationError):
        NEGATIVE_INDICATORS[0].score = 0.0
    with pytest.raises(ValidationError):
        CATEGORY_KEYWORDS["health"].weight = 2.0
