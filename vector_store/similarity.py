"""
Cosine similarity ranking for the local linear-scan store.

Every stored vector is scored against the query (brute-force scan),
results are sorted by ascending cosine distance (1 - similarity) with
ties kept in insertion order, and the list is truncated to top_k.
"""

import math
from typing import Sequence

from .exceptions import DegenerateVectorError, DimensionMismatchError
from .models import StoredVector


def _magnitude(vector: Sequence[float]) -> float:
    return math.sqrt(math.fsum(value * value for value in vector))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors: dot(a, b) / (|a| * |b|).

    Raises:
        DimensionMismatchError: If the vectors differ in length.
        DegenerateVectorError: If either vector has zero magnitude.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(expected=len(a), actual=len(b))
    norm_a = _magnitude(a)
    norm_b = _magnitude(b)
    if norm_a == 0.0 or norm_b == 0.0:
        raise DegenerateVectorError()
    dot = math.fsum(x * y for x, y in zip(a, b))
    return dot / (norm_a * norm_b)


def cosine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """1 - cosine similarity, clamped to [0, 2] against rounding noise."""
    return min(2.0, max(0.0, 1.0 - cosine_similarity(a, b)))


def rank(
    query: Sequence[float],
    candidates: Sequence[StoredVector],
    top_k: int,
) -> list[tuple[StoredVector, float]]:
    """
    Rank candidates by cosine distance to the query.

    Args:
        query: Query embedding.
        candidates: Stored vectors in insertion order.
        top_k: Maximum number of results.

    Returns:
        (candidate, distance) pairs, closest first,
        length min(top_k, len(candidates)).
    """
    if top_k <= 0 or not candidates:
        return []

    if _magnitude(query) == 0.0:
        raise DegenerateVectorError("query")

    scored: list[tuple[StoredVector, float]] = []
    for candidate in candidates:
        try:
            distance = cosine_distance(query, candidate.embedding)
        except DegenerateVectorError as e:
            raise DegenerateVectorError(candidate.id) from e
        scored.append((candidate, distance))

    # sorted() is stable: equal distances keep insertion order
    scored = sorted(scored, key=lambda pair: pair[1])
    return scored[:top_k]
