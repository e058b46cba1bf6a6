"""Selection of the evidence sentences most relevant to a claim."""

import asyncio
import logging
import math
import re
from typing import List, Optional, Sequence

from ..models.evidence import EvidenceChunk
from ..ports.embedding_provider import EmbeddingProvider

logger = logging.getLogger(__name__)

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def split_evidence_sentences(text: str) -> List[str]:
    """Split source text after terminal punctuation, dropping empty spans."""
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity, 0 for empty, mismatched or zero-length vectors."""
    if not a or not b or len(a) != len(b):
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


def _leading(sentences: List[str], k: int) -> List[EvidenceChunk]:
    return [EvidenceChunk(text=s, position=i) for i, s in enumerate(sentences[:k])]


class ChunkSelector:
    """Picks the top-K sentences of each source by embedding similarity.

    Chunks are returned in the order they appear in the source. When any
    embedding cannot be generated the first K sentences are used instead,
    so a source is never dropped for that reason. At most ``max_concurrency``
    embedding requests are in flight at once across all callers.
    """

    def __init__(
        self,
        embedder: Optional[EmbeddingProvider] = None,
        max_chunks: int = 3,
        max_concurrency: int = 10,
    ):
        self.embedder = embedder
        self.max_chunks = max_chunks
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def _embed(self, text: str) -> List[float]:
        async with self._semaphore:
            return await self.embedder.embed(text)

    async def select(self, claim: str, text: str, claim_embedding: Optional[List[float]] = None) -> List[EvidenceChunk]:
        """Select up to ``max_chunks`` sentences of ``text`` relevant to ``claim``."""
        sentences = split_evidence_sentences(text)
        if len(sentences) <= self.max_chunks:
            return _leading(sentences, self.max_chunks)
        if self.embedder is None:
            return _leading(sentences, self.max_chunks)

        if claim_embedding is None:
            claim_embedding = await self._embed(claim)
        if not claim_embedding:
            logger.warning(f"⚠️ No embedding for claim '{claim[:60]}', using leading sentences")
            return _leading(sentences, self.max_chunks)

        vectors = await asyncio.gather(*(self._embed(s) for s in sentences))
        if any(not v for v in vectors):
            logger.warning(f"⚠️ Embedding failed for some evidence sentences of '{claim[:60]}', using leading sentences")
            return _leading(sentences, self.max_chunks)

        scored = [
            EvidenceChunk(text=s, similarity=cosine_similarity(claim_embedding, v), position=i)
            for i, (s, v) in enumerate(zip(sentences, vectors))
        ]
        top = sorted(scored, key=lambda c: c.similarity, reverse=True)[: self.max_chunks]
        return sorted(top, key=lambda c: c.position)

    async def select_many(self, claim: str, texts: List[str]) -> List[List[EvidenceChunk]]:
        """Select chunks from several sources, embedding the claim once."""
        claim_embedding = None
        if self.embedder is not None and any(len(split_evidence_sentences(t)) > self.max_chunks for t in texts):
            claim_embedding = await self._embed(claim)
        return list(await asyncio.gather(*(self.select(claim, t, claim_embedding) for t in texts)))
