"""Service that splits article text into sentences and finds the checkable ones."""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..errors import GenerationFailure, InvalidRequestError, ValidationFailure
from ..heuristics.claim_extractor import match_factual_indicators
from ..models.claim import (
    AmbiguityType,
    CategorizedSentence,
    Claim,
    ClassificationResult,
    DisambiguationResult,
    VerifiabilityCategory,
    today_iso,
)
from ..ports.llm_provider import LLMProvider
from .normalization import as_bool, as_text, canonicalize, extract_list, normalize_category, pick

logger = logging.getLogger(__name__)

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z\"“])")
_HAS_LETTER = re.compile(r"[^\W\d_]")

CATEGORIZATION_FAILED = "categorization failed"
DISAMBIGUATION_FAILED = "service error"

SYSTEM_PROMPT = "You are an assistant to a fact-checker. Always answer with a single JSON object."

CATEGORIZE_PROMPT = """Categorize each sentence by how verifiable it is.

Categories:
- "Verifiable": makes a specific, factual claim that can be objectively verified
- "Partially Verifiable": contains verifiable elements mixed with subjective or vague language
- "Not Verifiable": opinion, speculation, or too vague to verify

For every sentence return "sentence", "category" and a short "reasoning".

Example:
{{"sentences": [
  {{"sentence": "The company was founded in 2010", "category": "Verifiable",
    "reasoning": "A founding year can be checked against company records."}},
  {{"sentence": "The company, known for its innovative products, was founded in 2010",
    "category": "Partially Verifiable",
    "reasoning": "The founding year is verifiable; 'innovative products' is subjective."}},
  {{"sentence": "This is the best product on the market", "category": "Not Verifiable",
    "reasoning": "A subjective opinion."}}
]}}

Sentences:
{sentences}"""

REWRITE_PROMPT = """Each item is a partially verifiable sentence and the reasoning for that label.
Rewrite each sentence to keep ONLY its verifiable part, removing subjective, vague or
opinionated content. If nothing verifiable remains, return an empty string.

Return "originalSentence", "reasoning" and "rewrittenSentence" for every item.

Example:
{{"items": [
  {{"originalSentence": "Experts say the policy is terrible, passed in 2021",
    "reasoning": "'Terrible' is opinion; 'passed in 2021' is verifiable.",
    "rewrittenSentence": "The policy was passed in 2021."}}
]}}

Items:
{items}"""

DISAMBIGUATE_PROMPT = """Analyze each sentence for ambiguity.

For every sentence return:
- "sentence": the original sentence
- "isAmbiguous": boolean
- "reasoning": general reasoning about the analysis
If ambiguous, also:
- "ambiguityType": "referential" (pronouns, vague references) or "structural" (grammar/syntax)
- "ambiguityReasoning": why it is ambiguous
- "canBeDisambiguated": whether the ambiguity can be resolved
- "disambiguationReasoning": why it can or cannot be resolved
- "disambiguatedSentence": a clearer version, only if it can be resolved
If not ambiguous, also:
- "clarityReasoning": why the sentence is clear

Example:
{{"sentences": [
  {{"sentence": "He said it was important", "isAmbiguous": true,
    "reasoning": "Unclear references.", "ambiguityType": "referential",
    "ambiguityReasoning": "'He' and 'it' have no referent.", "canBeDisambiguated": true,
    "disambiguationReasoning": "Context names the speaker and topic.",
    "disambiguatedSentence": "John said the meeting was important."}},
  {{"sentence": "The meeting will be at 3 PM in the conference room.", "isAmbiguous": false,
    "reasoning": "Clear and specific.", "clarityReasoning": "Time and place are explicit."}}
]}}

Sentences:
{sentences}"""

CATEGORIZE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "sentences": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "sentence": {"type": "string"},
                    "category": {"enum": [c.value for c in VerifiabilityCategory]},
                    "reasoning": {"type": "string"},
                },
                "required": ["sentence", "category", "reasoning"],
            },
        }
    },
    "required": ["sentences"],
}

REWRITE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "originalSentence": {"type": "string"},
                    "reasoning": {"type": "string"},
                    "rewrittenSentence": {"type": "string"},
                },
                "required": ["originalSentence", "rewrittenSentence"],
            },
        }
    },
    "required": ["items"],
}

DISAMBIGUATE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "sentences": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "sentence": {"type": "string"},
                    "isAmbiguous": {"type": "boolean"},
                    "reasoning": {"type": "string"},
                    "ambiguityType": {"enum": [t.value for t in AmbiguityType]},
                    "ambiguityReasoning": {"type": "string"},
                    "canBeDisambiguated": {"type": "boolean"},
                    "disambiguationReasoning": {"type": "string"},
                    "disambiguatedSentence": {"type": "string"},
                    "clarityReasoning": {"type": "string"},
                },
                "required": ["sentence", "isAmbiguous", "reasoning"],
            },
        }
    },
    "required": ["sentences"],
}


class ClassifierConfig(BaseModel):
    """Configuration for sentence classification."""

    min_sentence_chars: int = Field(default=30, description="Shortest sentence considered a claim")
    max_sentence_chars: int = Field(default=300, description="Longest sentence considered a claim")
    disambiguate: bool = Field(default=True, description="Run the disambiguation pass")
    rewritten_confidence: float = Field(
        default=0.75, ge=0.0, le=1.0, description="Confidence given to claims rewritten from partial sentences"
    )


def split_into_sentences(text: str, min_chars: int = 30, max_chars: int = 300) -> List[str]:
    """Split text at sentence boundaries and keep substantive spans.

    Args:
        text: Cleaned article text
        min_chars: Shortest span kept
        max_chars: Longest span kept

    Returns:
        Sentences in document order
    """
    spans = (s.strip() for s in _SENTENCE_BOUNDARY.split(text or ""))
    return [s for s in spans if min_chars <= len(s) <= max_chars and _HAS_LETTER.search(s)]


def _match_by_sentence(items: List[Dict[str, Any]], sentences: List[str], key: str) -> List[Optional[Dict[str, Any]]]:
    """Line up response items with the sentences they describe.

    Items are matched by their echoed sentence text, falling back to
    position when the response has exactly one item per sentence.
    """
    by_text = {}
    for item in items:
        text = as_text(pick(item, key))
        if text and text not in by_text:
            by_text[text] = item

    matched = []
    for index, sentence in enumerate(sentences):
        item = by_text.get(sentence.strip())
        if item is None and len(items) == len(sentences):
            item = items[index]
        matched.append(item)
    return matched


class SentenceClassifier:
    """Finds the verifiable claims in an article.

    Without an LLM provider only segmentation is available.
    """

    def __init__(self, llm: Optional[LLMProvider] = None, config: Optional[ClassifierConfig] = None):
        self.llm = llm
        self.config = config or ClassifierConfig()
        logger.info("🔧 SentenceClassifier initialized")

    def split(self, text: str) -> List[str]:
        return split_into_sentences(text, self.config.min_sentence_chars, self.config.max_sentence_chars)

    async def classify(
        self,
        text: str,
        categorize: bool = True,
        disambiguate: Optional[bool] = None,
        search_date: Optional[str] = None,
    ) -> ClassificationResult:
        """Split, categorize, rewrite and disambiguate the sentences of a text.

        Args:
            text: Cleaned article text
            categorize: Run the LLM stages; when False only segmentation is done
            disambiguate: Override the configured disambiguation setting
            search_date: Date attached to every claim, today by default

        Returns:
            Sentences, their categories and the resulting claim list

        Raises:
            InvalidRequestError: If the text is empty
            RuntimeError: If categorization is requested without an LLM provider
        """
        if not text or not text.strip():
            raise InvalidRequestError("No text to classify")

        sentences = self.split(text)
        logger.info(f"🔍 Split text into {len(sentences)} sentences")
        if not categorize or not sentences:
            return ClassificationResult(sentences=sentences)
        if self.llm is None:
            raise RuntimeError("LLM provider unavailable: set OPENAI_API_KEY")

        categorized = await self.categorize(sentences)

        partials = [s for s in categorized if s.category == VerifiabilityCategory.PARTIALLY_VERIFIABLE]
        if partials:
            rewrites = await self.rewrite_partials(partials)
            for sentence, rewritten in zip(partials, rewrites):
                sentence.rewritten_verifiable_part = rewritten

        if disambiguate is None:
            disambiguate = self.config.disambiguate
        if disambiguate:
            candidates = [s for s in categorized if s.verifiable_text]
            if candidates:
                results = await self.disambiguate([s.verifiable_text for s in candidates])
                for sentence, result in zip(candidates, results):
                    sentence.disambiguation = result

        claims = self._build_claims(categorized, search_date or today_iso())
        logger.info(
            f"✅ Classification complete: {len(claims)} claims from {len(sentences)} sentences "
            f"({len(partials)} partially verifiable)"
        )
        return ClassificationResult(sentences=sentences, categorized=categorized, claims=claims)

    async def categorize(self, sentences: List[str]) -> List[CategorizedSentence]:
        """Assign a verifiability category to every sentence in one LLM call."""
        prompt = CATEGORIZE_PROMPT.format(sentences=json.dumps(sentences, indent=2, ensure_ascii=False))
        try:
            payload = await self.llm.complete(prompt, CATEGORIZE_SCHEMA, system=SYSTEM_PROMPT)
            items = [canonicalize(i) for i in extract_list(payload, "sentences")]
        except (GenerationFailure, ValidationFailure) as e:
            logger.warning(f"⚠️ Categorization failed for {len(sentences)} sentences: {e}")
            return [
                CategorizedSentence(
                    sentence=s, category=VerifiabilityCategory.NOT_VERIFIABLE, reasoning=CATEGORIZATION_FAILED
                )
                for s in sentences
            ]

        result = []
        for sentence, item in zip(sentences, _match_by_sentence(items, sentences, "sentence")):
            category = normalize_category(pick(item, "category")) if item else None
            if category is None:
                result.append(
                    CategorizedSentence(
                        sentence=sentence,
                        category=VerifiabilityCategory.NOT_VERIFIABLE,
                        reasoning=CATEGORIZATION_FAILED,
                    )
                )
                continue
            result.append(
                CategorizedSentence(sentence=sentence, category=category, reasoning=as_text(pick(item, "reasoning")))
            )
        return result

    async def rewrite_partials(self, partials: List[CategorizedSentence]) -> List[str]:
        """Keep only the verifiable part of each partially verifiable sentence.

        Returns:
            One rewritten sentence per input, ``""`` when nothing verifiable remains
        """
        items = [{"sentence": p.sentence, "reasoning": p.reasoning} for p in partials]
        prompt = REWRITE_PROMPT.format(items=json.dumps(items, indent=2, ensure_ascii=False))
        try:
            payload = await self.llm.complete(prompt, REWRITE_SCHEMA, system=SYSTEM_PROMPT)
            response = [canonicalize(i) for i in extract_list(payload, "items", "rewrites")]
        except (GenerationFailure, ValidationFailure) as e:
            logger.warning(f"⚠️ Rewrite failed for {len(partials)} partial sentences: {e}")
            return ["" for _ in partials]

        originals = [p.sentence for p in partials]
        return [
            as_text(pick(item, "rewrittenSentence", "rewritten")) if item else ""
            for item in _match_by_sentence(response, originals, "originalSentence")
        ]

    async def disambiguate(self, sentences: List[str]) -> List[DisambiguationResult]:
        """Judge every sentence for referential or structural ambiguity in one LLM call."""
        prompt = DISAMBIGUATE_PROMPT.format(sentences=json.dumps(sentences, indent=2, ensure_ascii=False))
        try:
            payload = await self.llm.complete(prompt, DISAMBIGUATE_SCHEMA, system=SYSTEM_PROMPT)
            items = [canonicalize(i) for i in extract_list(payload, "sentences")]
        except (GenerationFailure, ValidationFailure) as e:
            logger.warning(f"⚠️ Disambiguation failed for {len(sentences)} sentences: {e}")
            return [_unambiguous(s, DISAMBIGUATION_FAILED) for s in sentences]

        results = []
        for sentence, item in zip(sentences, _match_by_sentence(items, sentences, "sentence")):
            if item is None:
                results.append(_unambiguous(sentence, DISAMBIGUATION_FAILED))
                continue
            try:
                results.append(_disambiguation_from(sentence, item))
            except ValidationError as e:
                logger.warning(f"⚠️ Invalid disambiguation for sentence '{sentence[:60]}': {e}")
                results.append(_unambiguous(sentence, DISAMBIGUATION_FAILED))
        return results

    def _build_claims(self, categorized: List[CategorizedSentence], search_date: str) -> List[Claim]:
        claims = []
        for sentence in categorized:
            text = sentence.verifiable_text
            if not text:
                continue
            if sentence.disambiguation is not None:
                text = sentence.disambiguation.resolved_sentence
            _, types = match_factual_indicators(text)
            confidence = (
                1.0 if sentence.category == VerifiabilityCategory.VERIFIABLE else self.config.rewritten_confidence
            )
            claims.append(Claim(text=text, search_date=search_date, confidence=confidence, types=types))
        return claims


def _unambiguous(sentence: str, reasoning: str) -> DisambiguationResult:
    return DisambiguationResult(sentence=sentence, is_ambiguous=False, reasoning=reasoning)


def _disambiguation_from(sentence: str, item: Dict[str, Any]) -> DisambiguationResult:
    ambiguity_type = as_text(pick(item, "ambiguityType")).lower() or None
    if ambiguity_type not in (None, *(t.value for t in AmbiguityType)):
        ambiguity_type = None
    return DisambiguationResult(
        sentence=sentence,
        is_ambiguous=bool(as_bool(pick(item, "isAmbiguous"))),
        reasoning=as_text(pick(item, "reasoning")),
        ambiguity_type=ambiguity_type,
        ambiguity_reasoning=pick(item, "ambiguityReasoning"),
        can_be_disambiguated=as_bool(pick(item, "canBeDisambiguated")),
        disambiguation_reasoning=pick(item, "disambiguationReasoning"),
        disambiguated_sentence=pick(item, "disambiguatedSentence"),
        clarity_reasoning=pick(item, "clarityReasoning"),
    )
