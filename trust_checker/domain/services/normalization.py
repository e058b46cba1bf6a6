"""Ingress normalization for loosely shaped collaborator responses.

LLM output arrives with inconsistent key casing (``verdict``/``Verdict``,
``trustScore``/``Trust_Score``) and sometimes wraps arrays in an object.
Everything is converted to one canonical shape here so the services never
branch on spelling.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from ..errors import ValidationFailure
from ..models.claim import VerifiabilityCategory

_SEPARATORS = re.compile(r"[\s_\-]+")


def canonical_key(key: str) -> str:
    """``Trust_Score``, ``trustScore`` and ``trust score`` all become ``trustscore``."""
    return _SEPARATORS.sub("", str(key)).lower()


def canonicalize(item: Any) -> Dict[str, Any]:
    """Re-key a mapping by canonical key.

    Raises:
        ValidationFailure: If ``item`` is not a mapping
    """
    if not isinstance(item, Mapping):
        raise ValidationFailure(f"Expected an object, got {type(item).__name__}")
    return {canonical_key(k): v for k, v in item.items()}


def pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present value among ``keys`` in a canonicalized mapping."""
    for key in keys:
        value = data.get(canonical_key(key))
        if value is not None:
            return value
    return default


def extract_list(payload: Any, *keys: str) -> List[Any]:
    """Pull the item array out of a response.

    Accepts a bare array, an object holding the array under one of ``keys``,
    or an object with exactly one array value.

    Raises:
        ValidationFailure: If no array can be found
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        data = canonicalize(payload)
        for key in keys:
            value = data.get(canonical_key(key))
            if isinstance(value, list):
                return value
        lists = [v for v in payload.values() if isinstance(v, list)]
        if len(lists) == 1:
            return lists[0]
    raise ValidationFailure(f"Expected a list of items, got {type(payload).__name__}")


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else str(value).strip()


def as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes"):
            return True
        if lowered in ("false", "no"):
            return False
    return None


_CATEGORY_LOOKUP = {canonical_key(c.value): c for c in VerifiabilityCategory}


def normalize_category(value: Any) -> Optional[VerifiabilityCategory]:
    """Map ``PartiallyVerifiable``, ``partially_verifiable`` etc. to the enum."""
    if isinstance(value, VerifiabilityCategory):
        return value
    if not isinstance(value, str):
        return None
    return _CATEGORY_LOOKUP.get(canonical_key(value))
