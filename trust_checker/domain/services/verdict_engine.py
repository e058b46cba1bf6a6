"""Service that turns claims and their evidence into verdicts and trust scores."""

import asyncio
import json
import logging
import re
import inspect
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..errors import GenerationFailure, InvalidRequestError, ValidationFailure
from ..models.verdict import (
    Verdict,
    VerdictResult,
    VerificationItem,
    VerificationReport,
    average_trust_score,
    normalize_trust_score,
    normalize_verdict,
)
from ..ports.llm_provider import LLMProvider
from .chunk_selector import ChunkSelector
from .normalization import as_text, canonicalize, extract_list, pick

logger = logging.getLogger(__name__)

_SOURCE_TAG = re.compile(r"^\s*\[Source\s*\d+\]\s*", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

SYSTEM_PROMPT = "You are an expert fact-checking assistant. Always answer with a single JSON object."

VERDICT_PROMPT = """For each claim, analyze the evidence snippets from up to 3 sources.
Each snippet is prefixed with [Source N] to indicate its origin.

For each claim provide:
- "claim": the original claim text
- "verdict": one of "Support", "Partially Support", "Unclear", "Contradict", "Refute"
- "reference": 1 to 3 exact quotes copied verbatim from the evidence, prefixed with their [Source N] tag
- "trustScore": number from 0 to 100 based on the strength of the evidence
  - 100: strong support from multiple reliable sources
  - 65-99: partial support or a single source
  - 50: unclear or conflicting evidence
  - 0-49: the evidence contradicts the claim

Example:
{{"results": [
  {{"claim": "Example claim", "verdict": "Support",
    "reference": ["[Source 1] Supporting evidence quote."], "trustScore": 85}}
]}}

Claims:
{claims}"""

VERDICT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "results": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "claim": {"type": "string"},
                    "verdict": {"enum": [v.value for v in Verdict]},
                    "reference": {"type": "array", "items": {"type": "string"}, "minItems": 1, "maxItems": 3},
                    "trustScore": {"type": "number", "minimum": 0, "maximum": 100},
                },
                "required": ["claim", "verdict", "reference", "trustScore"],
            },
        }
    },
    "required": ["results"],
}

ResultsCallback = Callable[[List[VerdictResult]], Union[None, Awaitable[None]]]

NO_EVIDENCE = "No evidence found"
BATCH_FAILED = "Error processing claim"


class VerdictEngineConfig(BaseModel):
    """Configuration for verdict generation."""

    batch_size: int = Field(default=5, ge=1, description="Claims per LLM call")
    batch_timeout: float = Field(default=120.0, gt=0, description="Seconds allowed per batch call")
    max_sources_per_claim: int = Field(default=3, ge=1, description="Evidence sources shown per claim")
    max_quotes: int = Field(default=3, ge=1, description="Reference quotes kept per verdict")


def format_evidence(texts: List[str], max_sources: int = 3) -> List[str]:
    """Prefix each non-empty source text with its ``[Source N]`` tag."""
    usable = [t.strip() for t in texts if t and t.strip()][:max_sources]
    return [f"[Source {i}] {text}" for i, text in enumerate(usable, 1)]


def _squash(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def find_suspect_quotes(quotes: List[str], evidence: List[str]) -> List[str]:
    """Quotes that do not appear verbatim in any evidence snippet."""
    haystack = [_squash(_SOURCE_TAG.sub("", e)) for e in evidence]
    suspects = []
    for quote in quotes:
        needle = _squash(_SOURCE_TAG.sub("", quote))
        if needle and not any(needle in h for h in haystack):
            suspects.append(quote)
    return suspects


def _as_quotes(value: Any) -> List[str]:
    if isinstance(value, list):
        return [as_text(v) for v in value if v is not None and as_text(v)]
    if value:
        return [as_text(value)]
    return []


class VerdictEngine:
    """Judges claims against evidence in batches of LLM calls."""

    def __init__(
        self,
        llm: LLMProvider,
        chunk_selector: Optional[ChunkSelector] = None,
        config: Optional[VerdictEngineConfig] = None,
    ):
        self.llm = llm
        self.config = config or VerdictEngineConfig()
        self.chunk_selector = chunk_selector or ChunkSelector()
        logger.info("🔧 VerdictEngine initialized")

    async def verify(
        self,
        items: List[VerificationItem],
        on_results: Optional[ResultsCallback] = None,
    ) -> VerificationReport:
        """Produce one verdict per item, in item order.

        ``on_results`` is called with each group of finished verdicts as it
        becomes available.

        Claims without evidence get an ``Unclear`` placeholder without calling
        the LLM. A batch whose call fails gets ``Unclear`` placeholders with a
        score of 0, and the remaining batches still run.

        Raises:
            InvalidRequestError: If no claims were submitted
        """
        if not items:
            raise InvalidRequestError("No claims provided")

        evidence = await asyncio.gather(*(self._prepare(item) for item in items))

        results: List[Optional[VerdictResult]] = [None] * len(items)
        pending = []
        for index, (item, snippets) in enumerate(zip(items, evidence)):
            if snippets:
                pending.append(index)
            else:
                results[index] = VerdictResult.placeholder(
                    item.claim, "No evidence available", reference=NO_EVIDENCE, has_evidence=False
                )

        unsupported = [r for r in results if r is not None]
        if unsupported:
            await _notify(on_results, unsupported)

        size = self.config.batch_size
        batches = [pending[i:i + size] for i in range(0, len(pending), size)]
        for number, batch in enumerate(batches, 1):
            logger.info(f"🔍 Processing verdict batch {number} of {len(batches)} ({len(batch)} claims)")
            batch_results = await self._judge_batch([items[i].claim for i in batch], [evidence[i] for i in batch])
            for index, result in zip(batch, batch_results):
                results[index] = result
            await _notify(on_results, batch_results)

        final = [r for r in results if r is not None]
        average = average_trust_score(final)
        logger.info(f"✅ Verified {len(final)} claims, average trust score {average:.1f}")
        return VerificationReport(results=final, average_trust_score=average)

    async def _prepare(self, item: VerificationItem) -> List[str]:
        texts = [t for t in item.evidence_texts if t and t.strip()][: self.config.max_sources_per_claim]
        if not texts:
            return []
        chunks = await self.chunk_selector.select_many(item.claim, texts)
        joined = [" ".join(c.text for c in selected) for selected in chunks]
        return format_evidence(joined, self.config.max_sources_per_claim)

    async def _judge_batch(self, claims: List[str], evidence: List[List[str]]) -> List[VerdictResult]:
        payload = [{"claim": c, "evidence": e} for c, e in zip(claims, evidence)]
        prompt = VERDICT_PROMPT.format(claims=json.dumps(payload, indent=2, ensure_ascii=False))
        try:
            response = await asyncio.wait_for(
                self.llm.complete(prompt, VERDICT_SCHEMA, system=SYSTEM_PROMPT),
                timeout=self.config.batch_timeout,
            )
            items = [canonicalize(i) for i in extract_list(response, "results")]
        except (GenerationFailure, ValidationFailure, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"⚠️ Verdict batch of {len(claims)} claims failed: {reason}")
            return [VerdictResult.placeholder(c, reason, reference=BATCH_FAILED) for c in claims]

        by_claim = {}
        for item in items:
            text = as_text(pick(item, "claim"))
            if text and text not in by_claim:
                by_claim[text] = item

        results = []
        for index, (claim, snippets) in enumerate(zip(claims, evidence)):
            item = by_claim.get(claim.strip())
            if item is None and len(items) == len(claims):
                item = items[index]
            if item is None:
                logger.warning(f"⚠️ No verdict returned for claim '{claim[:60]}'")
                results.append(VerdictResult.placeholder(claim, "Missing from model response", reference=BATCH_FAILED))
                continue
            results.append(self._normalize(claim, item, snippets))
        return results

    def _normalize(self, claim: str, item: Dict[str, Any], snippets: List[str]) -> VerdictResult:
        verdict = normalize_verdict(pick(item, "verdict"))
        score = normalize_trust_score(pick(item, "trustScore"), verdict)
        quotes = _as_quotes(pick(item, "reference", "referenceQuotes", "references"))[: self.config.max_quotes]
        return VerdictResult(
            claim=claim,
            verdict=verdict,
            reference_quotes=quotes,
            trust_score=score,
            suspect_quotes=find_suspect_quotes(quotes, snippets),
        )


async def _notify(callback: Optional[ResultsCallback], results: List[VerdictResult]) -> None:
    if callback is None:
        return
    outcome = callback(results)
    if inspect.isawaitable(outcome):
        await outcome
