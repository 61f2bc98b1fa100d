"""
Semantic retriever - best-matching knowledge entry for a query embedding.

Retrievers take an already-computed query vector and an already-loaded
corpus and return the single best entry when its cosine similarity is
strictly above the threshold. Callers only see ``retrieve``; the scan
strategy behind it can be swapped (linear scan, sharded scan, an ANN index).
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.knowledge_base import MalformedCorpusError
from modules.models import KnowledgeEntry, RetrievalResult
from utils.logger import get_logger

logger = get_logger("retriever")

MATCH_THRESHOLD = 0.7


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors.

    A zero vector has no direction, so its similarity to anything is 0.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise MalformedCorpusError(f"Vector dimensions differ: {a.shape[0]} vs {b.shape[0]}")

    norm = np.linalg.norm(a) * np.linalg.norm(b)
    if norm == 0:
        return 0.0
    return float(np.clip(np.dot(a, b) / norm, -1.0, 1.0))


def _as_query(query: Sequence[float]) -> np.ndarray:
    vector = np.asarray(query, dtype=float)
    if vector.ndim != 1 or vector.size == 0:
        raise MalformedCorpusError("Query embedding must be a non-empty 1-D vector")
    return vector


def _similarities(query: np.ndarray, corpus: Sequence[KnowledgeEntry]) -> np.ndarray:
    """Cosine similarity of query against every entry, in corpus order."""
    for position, entry in enumerate(corpus):
        if entry.dimension != query.shape[0]:
            raise MalformedCorpusError(
                f"Entry {position} ({entry.topic!r}) has dimension {entry.dimension}, "
                f"query has {query.shape[0]}"
            )

    matrix = np.asarray([entry.vector for entry in corpus], dtype=float)
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query

    scores = np.zeros(len(corpus), dtype=float)
    nonzero = norms > 0
    scores[nonzero] = dots[nonzero] / norms[nonzero]
    return np.clip(scores, -1.0, 1.0)


class Retriever(ABC):
    """Corpus in, best match out."""

    def __init__(self, threshold: float = MATCH_THRESHOLD):
        self.threshold = threshold

    @abstractmethod
    def best_match(
        self,
        query: Sequence[float],
        corpus: Sequence[KnowledgeEntry],
    ) -> Optional[Tuple[int, float]]:
        """
        Highest-scoring corpus position and its similarity.

        Exact ties resolve to the lowest corpus position. Returns None for
        an empty corpus.
        """

    def retrieve(
        self,
        query: Sequence[float],
        corpus: Sequence[KnowledgeEntry],
    ) -> Optional[RetrievalResult]:
        """
        Best entry when its similarity is strictly above the threshold.

        Raises:
            MalformedCorpusError: when any entry's dimension differs from the query's
        """
        if not corpus:
            logger.debug("Empty corpus; no match")
            return None

        best = self.best_match(query, corpus)
        if best is None:
            return None

        position, score = best
        entry = corpus[position]
        if score > self.threshold:
            logger.info(f"Found relevant insight: {entry.topic!r} (similarity: {score:.2f})")
            return RetrievalResult(entry=entry, similarity=score)

        logger.info(f"No highly relevant insight (best score: {score:.2f})")
        return None


class LinearScanRetriever(Retriever):
    """Scores every entry and keeps the first maximum."""

    def best_match(self, query, corpus):
        if not corpus:
            return None
        scores = _similarities(_as_query(query), corpus)
        # argmax returns the first occurrence of the maximum
        position = int(np.argmax(scores))
        return position, float(scores[position])


class ShardedRetriever(Retriever):
    """
    Splits the corpus into contiguous shards scanned on a thread pool.

    Shard results merge by higher score, then lower corpus position, so the
    answer equals LinearScanRetriever's.
    """

    def __init__(self, threshold: float = MATCH_THRESHOLD, shards: int = 4, max_workers: Optional[int] = None):
        super().__init__(threshold)
        if shards < 1:
            raise ValueError("shards must be at least 1")
        self.shards = shards
        self.max_workers = max_workers or shards
        self._scanner = LinearScanRetriever(threshold)

    def _bounds(self, size: int) -> List[Tuple[int, int]]:
        step = -(-size // self.shards)
        return [(start, min(start + step, size)) for start in range(0, size, step)]

    def best_match(self, query, corpus):
        if not corpus:
            return None
        query = _as_query(query)

        def scan(bounds):
            start, stop = bounds
            found = self._scanner.best_match(query, corpus[start:stop])
            return start + found[0], found[1]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            results = list(pool.map(scan, self._bounds(len(corpus))))

        return min(results, key=lambda item: (-item[1], item[0]))


def build_retriever(config: Optional[dict] = None) -> Retriever:
    """Pick a retriever from the ``retrieval`` config section."""
    section = (config or {}).get("retrieval") or {}
    threshold = float(section.get("threshold", MATCH_THRESHOLD))
    shards = int(section.get("shards", 1))
    if shards > 1:
        return ShardedRetriever(threshold, shards=shards)
    return LinearScanRetriever(threshold)


def retrieve(
    query: Sequence[float],
    corpus: Sequence[KnowledgeEntry],
    threshold: float = MATCH_THRESHOLD,
) -> Optional[RetrievalResult]:
    """Linear-scan retrieval over a materialized corpus."""
    return LinearScanRetriever(threshold).retrieve(query, corpus)
