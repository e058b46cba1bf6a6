"""Domain models for sentences and the claims extracted from them."""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class VerifiabilityCategory(str, Enum):
    """Verifiability of a single sentence."""

    VERIFIABLE = "Verifiable"
    PARTIALLY_VERIFIABLE = "Partially Verifiable"
    NOT_VERIFIABLE = "Not Verifiable"


class AmbiguityType(str, Enum):
    """Kind of ambiguity found in a sentence."""

    REFERENTIAL = "referential"
    STRUCTURAL = "structural"


def today_iso() -> str:
    """Current date in ISO 8601 format (YYYY-MM-DD)."""
    return date.today().isoformat()


class Claim(BaseModel):
    """A single extracted, independently fact-checkable assertion."""

    text: str = Field(..., description="The claim text to be verified")
    search_date: str = Field(default_factory=today_iso, description="Date used to bias search recency")
    confidence: float = Field(default=1.0, ge=0.0, le=1.0, description="Extraction-stage confidence")
    types: List[str] = Field(default_factory=list, description="Matched factual-indicator tags")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Claim text never changes once extracted
        json_schema_extra = {
            "example": {
                "text": "The company was founded in 2010.",
                "search_date": "2025-01-15",
                "confidence": 1.0,
                "types": ["year"],
            }
        }

    @property
    def search_query(self) -> str:
        """Query sent to the search collaborator."""
        return f"{self.text} {self.search_date or ''}".strip()


class DisambiguationResult(BaseModel):
    """Referential/structural ambiguity judgment for one sentence."""

    sentence: str
    is_ambiguous: bool = False
    reasoning: str = ""
    ambiguity_type: Optional[AmbiguityType] = None
    ambiguity_reasoning: Optional[str] = None
    can_be_disambiguated: Optional[bool] = None
    disambiguation_reasoning: Optional[str] = None
    disambiguated_sentence: Optional[str] = None
    clarity_reasoning: Optional[str] = None

    @property
    def resolved_sentence(self) -> str:
        """Sentence to carry forward: the disambiguated form when one exists."""
        if self.is_ambiguous and self.can_be_disambiguated and self.disambiguated_sentence:
            candidate = self.disambiguated_sentence.strip()
            if candidate:
                return candidate
        return self.sentence


class CategorizedSentence(BaseModel):
    """A raw sentence with its verifiability category."""

    sentence: str
    category: VerifiabilityCategory
    reasoning: str = ""
    # Only set for partially verifiable sentences; "" means nothing verifiable survived
    rewritten_verifiable_part: Optional[str] = None
    disambiguation: Optional[DisambiguationResult] = None

    @property
    def verifiable_text(self) -> Optional[str]:
        """Text that becomes a claim, or None if the sentence yields no claim."""
        if self.category == VerifiabilityCategory.VERIFIABLE:
            return self.sentence
        if self.category == VerifiabilityCategory.PARTIALLY_VERIFIABLE:
            rewritten = (self.rewritten_verifiable_part or "").strip()
            return rewritten or None
        return None


class ClassificationResult(BaseModel):
    """Output of the sentence classification stage."""

    sentences: List[str] = Field(default_factory=list)
    categorized: List[CategorizedSentence] = Field(default_factory=list)
    claims: List[Claim] = Field(default_factory=list)

    @property
    def disambiguated(self) -> List[DisambiguationResult]:
        """All disambiguation results in sentence order."""
        return [s.disambiguation for s in self.categorized if s.disambiguation is not None]
