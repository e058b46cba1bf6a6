"""Domain error taxonomy for the claim verification pipeline.

Collaborator failures (extraction, search, generation, validation) are
recovered at the smallest scope that owns them and turned into placeholder
results. Only ``InvalidRequestError`` is allowed to reject a whole request.
"""

from typing import Optional


class TrustCheckerError(Exception):
    """Base class for all trust checker errors."""


class ExtractionFailure(TrustCheckerError):
    """No usable content could be extracted from a URL."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class SearchFailure(TrustCheckerError):
    """A search provider failed or returned nothing usable."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class GenerationFailure(TrustCheckerError):
    """An LLM call timed out, errored, or returned malformed JSON."""


class ValidationFailure(TrustCheckerError):
    """A collaborator response parsed but violates the expected shape."""


class InvalidRequestError(TrustCheckerError):
    """The pipeline input itself is structurally invalid (e.g. no URLs)."""
