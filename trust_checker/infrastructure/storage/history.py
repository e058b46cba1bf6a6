"""In-memory, most-recent-first history of analyses."""

import threading
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional, Union

from pydantic import BaseModel

from ...domain.models.report import AggregateReport
from ...domain.models.trust_analysis import PageAnalysis

DEFAULT_HISTORY_SIZE = 50


class HistoryEntry(BaseModel):
    """Summary of one analysis, with the full result attached."""

    kind: str
    url: Optional[str] = None
    title: Optional[str] = None
    category: str = "general"
    overall_score: float
    verdict: str
    claim_count: int
    analyzed_at: datetime
    result: Union[AggregateReport, PageAnalysis]

    @classmethod
    def from_result(cls, result: Union[AggregateReport, PageAnalysis]) -> "HistoryEntry":
        if isinstance(result, AggregateReport):
            return cls(
                kind="pipeline",
                url=result.url,
                title=result.title,
                category=result.category,
                overall_score=result.overall_score,
                verdict=result.verdict_label.value,
                claim_count=len(result.claims),
                analyzed_at=result.analyzed_at,
                result=result,
            )
        return cls(
            kind="extension",
            url=result.url,
            title=result.title,
            category=result.category,
            overall_score=result.overall_score,
            verdict=result.verdict.value,
            claim_count=len(result.claims),
            analyzed_at=result.analyzed_at,
            result=result,
        )


class AnalysisHistory:
    """Bounded list of past analyses; the oldest entries drop off first."""

    def __init__(self, max_entries: int = DEFAULT_HISTORY_SIZE):
        self._entries: Deque[HistoryEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def add(self, result: Union[AggregateReport, PageAnalysis]) -> HistoryEntry:
        entry = HistoryEntry.from_result(result)
        with self._lock:
            self._entries.appendleft(entry)
        return entry

    def entries(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """Entries, most recent first."""
        with self._lock:
            items = list(self._entries)
        return items[:limit] if limit is not None else items

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
