"""Per-category allowlist of trusted domains and the domain matcher."""

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).with_name("trusted_sources.json")


class DomainMatch(str, Enum):
    """How a page domain matched a trusted entry, strongest first."""

    EXACT = "exact"
    SUFFIX = "suffix"
    SUBSTRING = "substring"


class TrustedCategory(BaseModel):
    """Trusted domains for one topic and the weight of that topic's trust."""

    sources: List[str] = Field(default_factory=list)
    weight: float = Field(default=0.8, gt=0.0, le=1.0)


FALLBACK_TABLE: Dict[str, TrustedCategory] = {
    "general": TrustedCategory(sources=["reuters.com", "apnews.com", "bbc.com"], weight=0.8),
}


def _normalize_domain(domain: str) -> str:
    domain = (domain or "").strip().lower().rstrip(".")
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def match_domain(
    domain: str,
    trusted: str,
    strict: bool = False,
    include_base_domain: bool = True,
) -> Optional[DomainMatch]:
    """Match a page domain against one trusted entry.

    Args:
        domain: Hostname of the analyzed page
        trusted: Entry from the trusted source table
        strict: Only accept exact or dot-bounded suffix matches
        include_base_domain: Also compare the last two labels of ``domain``

    Returns:
        The strongest match kind, or None if the entry does not match
    """
    domain = _normalize_domain(domain)
    trusted = _normalize_domain(trusted)
    if not domain or not trusted:
        return None

    if domain == trusted:
        return DomainMatch.EXACT
    if domain.endswith("." + trusted):
        return DomainMatch.SUFFIX
    if strict:
        return None

    # The base domain is the last two labels, so on multi-part public suffixes
    # it can be "co.uk" and any *.co.uk page matches bbc.co.uk. Strict mode
    # skips this step.
    if include_base_domain:
        base_domain = ".".join(domain.split(".")[-2:])
        if base_domain == trusted or trusted.endswith(base_domain):
            return DomainMatch.SUFFIX
    if trusted in domain or domain in trusted:
        return DomainMatch.SUBSTRING
    return None


class TrustedSourceTable:
    """Read-only mapping of category to trusted domains."""

    def __init__(self, categories: Dict[str, TrustedCategory], strict: bool = False):
        self._categories = dict(categories)
        self.strict = strict

    def __contains__(self, category: str) -> bool:
        return category in self._categories

    def __iter__(self) -> Iterator[Tuple[str, TrustedCategory]]:
        return iter(self._categories.items())

    @property
    def categories(self) -> List[str]:
        return list(self._categories)

    def for_category(self, category: str) -> Optional[TrustedCategory]:
        """Trusted entry for a category, falling back to ``general``."""
        return self._categories.get(category) or self._categories.get("general")

    def find_match(
        self,
        domain: str,
        category: str,
    ) -> Optional[Tuple[str, DomainMatch]]:
        """Best-matching trusted entry for ``domain`` within one category."""
        entry = self.for_category(category)
        if entry is None:
            return None

        best: Optional[Tuple[str, DomainMatch]] = None
        ranking = list(DomainMatch)
        for source in entry.sources:
            kind = match_domain(domain, source, strict=self.strict)
            if kind is None:
                continue
            if best is None or ranking.index(kind) < ranking.index(best[1]):
                best = (source, kind)
                if kind == DomainMatch.EXACT:
                    break
        return best

    def trusted_anywhere(self, domain: str) -> Optional[str]:
        """First category whose list contains ``domain``, or None."""
        for name, entry in self._categories.items():
            for source in entry.sources:
                if match_domain(domain, source, strict=self.strict, include_base_domain=False):
                    return name
        return None

    def with_strict(self, strict: bool) -> "TrustedSourceTable":
        return TrustedSourceTable(self._categories, strict=strict)


def load_trusted_sources(path: Optional[Path] = None, strict: bool = False) -> TrustedSourceTable:
    """Load the trusted source table from JSON.

    Falls back to a minimal built-in table when the file is missing or
    malformed, so analysis keeps working with reduced coverage.
    """
    path = Path(path) if path else DEFAULT_TABLE_PATH
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        categories = {name: TrustedCategory.model_validate(data) for name, data in raw.items()}
        logger.info(f"✅ Loaded trusted sources: {list(categories)}")
        return TrustedSourceTable(categories, strict=strict)
    except (OSError, json.JSONDecodeError, ValidationError, AttributeError) as e:
        logger.error(f"❌ Failed to load trusted sources from {path}: {e}")
        return TrustedSourceTable(FALLBACK_TABLE, strict=strict)


@lru_cache()
def get_trusted_sources(path: Optional[str] = None, strict: bool = False) -> TrustedSourceTable:
    """Process-wide trusted source table, loaded once."""
    return load_trusted_sources(Path(path) if path else None, strict=strict)
