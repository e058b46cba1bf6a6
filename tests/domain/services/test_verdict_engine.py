"""Tests for the verdict generation service."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from trust_checker.domain.errors import GenerationFailure, InvalidRequestError
from trust_checker.domain.models.verdict import Verdict, VerificationItem
from trust_checker.domain.services.verdict_engine import (
    BATCH_FAILED,
    NO_EVIDENCE,
    VerdictEngine,
    VerdictEngineConfig,
    find_suspect_quotes,
    format_evidence,
)

BUDGET = "The council approved the budget"
BRIDGE = "The bridge opened in 2022"
BUDGET_EVIDENCE = "The budget was approved on Monday. It totals five million dollars."


def llm_returning(*responses) -> AsyncMock:
    llm = AsyncMock()
    llm.complete.side_effect = list(responses)
    return llm


def test_format_evidence():
    assert format_evidence(["first", " ", "second", "third", "fourth"]) == [
        "[Source 1] first",
        "[Source 2] second",
        "[Source 3] third",
    ]


def test_find_suspect_quotes_ignores_source_tags_and_spacing():
    evidence = ["[Source 1] The budget was approved   on Monday."]
    quotes = ["[Source 1] The budget was approved on Monday.", "[Source 2] Nobody voted."]
    assert find_suspect_quotes(quotes, evidence) == ["[Source 2] Nobody voted."]


@pytest.mark.asyncio
async def test_empty_input_is_rejected():
    engine = VerdictEngine(llm_returning())
    with pytest.raises(InvalidRequestError):
        await engine.verify([])


@pytest.mark.asyncio
async def test_claims_without_evidence_skip_the_llm():
    llm = llm_returning()
    engine = VerdictEngine(llm)

    report = await engine.verify([VerificationItem(claim=BRIDGE, evidence_texts=["", "  "])])

    result = report.results[0]
    assert result.verdict == Verdict.UNCLEAR
    assert result.has_evidence is False
    assert result.reference_quotes == [NO_EVIDENCE]
    assert report.average_trust_score == 0.0
    llm.complete.assert_not_called()


@pytest.mark.asyncio
async def test_claims_without_evidence_count_in_the_average():
    llm = llm_returning(
        {"results": [{"claim": BUDGET, "verdict": "Support", "trustScore": 100, "reference": [BUDGET_EVIDENCE]}]}
    )
    engine = VerdictEngine(llm)

    report = await engine.verify(
        [
            VerificationItem(claim=BRIDGE, evidence_texts=[]),
            VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE]),
        ]
    )

    missing, judged = report.results
    assert missing.has_evidence is False
    assert missing.trust_score == 0.0
    assert judged.trust_score == 100.0
    assert report.average_trust_score == 50.0


@pytest.mark.asyncio
async def test_response_is_normalized():
    llm = llm_returning(
        {
            "Results": [
                {
                    "Claim": BUDGET,
                    "Verdict": "partially_support",
                    "Trust_Score": "140",
                    "Reference": "[Source 1] The budget was approved on Monday.",
                }
            ]
        }
    )
    engine = VerdictEngine(llm)

    report = await engine.verify([VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE])])

    result = report.results[0]
    assert result.verdict == Verdict.PARTIALLY_SUPPORT
    assert result.trust_score == 100.0
    assert result.reference_quotes == ["[Source 1] The budget was approved on Monday."]
    assert result.suspect_quotes == []
    assert report.average_trust_score == 100.0


@pytest.mark.asyncio
async def test_invalid_score_falls_back_to_verdict_score():
    llm = llm_returning(
        {"results": [{"claim": BUDGET, "verdict": "REFUTE", "trustScore": None, "reference": ["made up"]}]}
    )
    engine = VerdictEngine(llm)

    report = await engine.verify([VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE])])

    result = report.results[0]
    assert result.verdict == Verdict.REFUTE
    assert result.trust_score == 0.0
    assert result.suspect_quotes == ["made up"]


@pytest.mark.asyncio
async def test_unknown_verdict_becomes_unclear():
    llm = llm_returning({"results": [{"claim": BUDGET, "verdict": "Probably", "reference": []}]})
    engine = VerdictEngine(llm)

    report = await engine.verify([VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE])])

    assert report.results[0].verdict == Verdict.UNCLEAR
    assert report.results[0].trust_score == 50.0


@pytest.mark.asyncio
async def test_quotes_are_capped():
    quotes = [f"quote {i}" for i in range(5)]
    llm = llm_returning({"results": [{"claim": BUDGET, "verdict": "Support", "trustScore": 90, "reference": quotes}]})
    engine = VerdictEngine(llm)

    report = await engine.verify([VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE])])

    assert report.results[0].reference_quotes == quotes[:3]


@pytest.mark.asyncio
async def test_failed_batch_gets_placeholders_and_later_batches_run():
    llm = llm_returning(
        GenerationFailure("model returned garbage"),
        {"results": [{"claim": BRIDGE, "verdict": "Support", "trustScore": 80, "reference": ["x"]}]},
    )
    engine = VerdictEngine(llm, config=VerdictEngineConfig(batch_size=1))
    items = [
        VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE]),
        VerificationItem(claim=BRIDGE, evidence_texts=["The bridge opened in 2022."]),
    ]

    report = await engine.verify(items)

    failed, judged = report.results
    assert failed.verdict == Verdict.UNCLEAR
    assert failed.trust_score == 0.0
    assert failed.reference_quotes == [BATCH_FAILED]
    assert failed.error == "model returned garbage"
    assert judged.verdict == Verdict.SUPPORT
    # Failed batches still count towards the average
    assert report.average_trust_score == 40.0


@pytest.mark.asyncio
async def test_batch_timeout():
    async def slow(*args, **kwargs):
        await asyncio.sleep(1)

    llm = AsyncMock()
    llm.complete.side_effect = slow
    engine = VerdictEngine(llm, config=VerdictEngineConfig(batch_timeout=0.05))

    report = await engine.verify([VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE])])

    assert report.results[0].reference_quotes == [BATCH_FAILED]
    assert report.results[0].error == "TimeoutError"


@pytest.mark.asyncio
async def test_results_matched_by_position_when_claim_text_differs():
    llm = llm_returning(
        {
            "results": [
                {"claim": "council budget", "verdict": "Support", "trustScore": 90, "reference": ["a"]},
                {"claim": "bridge", "verdict": "Contradict", "trustScore": 10, "reference": ["b"]},
            ]
        }
    )
    engine = VerdictEngine(llm)
    items = [
        VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE]),
        VerificationItem(claim=BRIDGE, evidence_texts=["The bridge opened in 2021."]),
    ]

    report = await engine.verify(items)

    assert [r.claim for r in report.results] == [BUDGET, BRIDGE]
    assert [r.verdict for r in report.results] == [Verdict.SUPPORT, Verdict.CONTRADICT]


@pytest.mark.asyncio
async def test_missing_result_gets_placeholder():
    llm = llm_returning(
        {
            "results": [
                {"claim": BRIDGE, "verdict": "Support", "trustScore": 90, "reference": ["a"]},
                {"claim": "something else", "verdict": "Support", "trustScore": 90, "reference": ["a"]},
                {"claim": "another", "verdict": "Support", "trustScore": 90, "reference": ["a"]},
            ]
        }
    )
    engine = VerdictEngine(llm)
    items = [
        VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE]),
        VerificationItem(claim=BRIDGE, evidence_texts=["The bridge opened in 2022."]),
    ]

    report = await engine.verify(items)

    assert report.results[0].error == "Missing from model response"
    assert report.results[1].verdict == Verdict.SUPPORT


@pytest.mark.asyncio
async def test_results_callback_receives_each_group():
    llm = llm_returning({"results": [{"claim": BUDGET, "verdict": "Support", "trustScore": 90, "reference": ["a"]}]})
    engine = VerdictEngine(llm)
    groups = []

    await engine.verify(
        [
            VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE]),
            VerificationItem(claim=BRIDGE),
        ],
        on_results=lambda results: groups.append([r.claim for r in results]),
    )

    assert groups == [[BRIDGE], [BUDGET]]


@pytest.mark.asyncio
async def test_evidence_is_tagged_in_prompt():
    llm = llm_returning({"results": [{"claim": BUDGET, "verdict": "Support", "trustScore": 90, "reference": ["a"]}]})
    engine = VerdictEngine(llm)

    await engine.verify([VerificationItem(claim=BUDGET, evidence_texts=[BUDGET_EVIDENCE, "Second source."])])

    prompt = llm.complete.call_args.args[0]
    assert "[Source 1] The budget was approved on Monday." in prompt
    assert "[Source 2] Second source." in prompt
