"""Tests for vector_store.similarity - cosine scoring and ranking."""

import pytest

from vector_store.exceptions import DegenerateVectorError, DimensionMismatchError
from vector_store.models import StoredVector
from vector_store.similarity import cosine_distance, cosine_similarity, rank


def _vec(id: str, embedding: list[float]) -> StoredVector:
    return StoredVector(id=id, text=f"text {id}", embedding=embedding)


class TestCosine:
    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)
        assert cosine_distance([1.0, 2.0, 3.0], [2.0, 4.0, 6.0]) == pytest.approx(0.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
        assert cosine_distance([1.0, 0.0], [0.0, 1.0]) == pytest.approx(1.0)

    def test_opposite_vectors(self):
        assert cosine_distance([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(2.0)

    def test_distance_is_bounded(self):
        distance = cosine_distance([1e-8, 3.0], [1e-8, 3.0])
        assert 0.0 <= distance <= 2.0

    def test_zero_vector_raises(self):
        with pytest.raises(DegenerateVectorError):
            cosine_similarity([0.0, 0.0], [1.0, 0.0])

    def test_length_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 3


class TestRank:
    def test_sorted_by_ascending_distance(self):
        candidates = [
            _vec("far", [0.0, 1.0]),
            _vec("near", [1.0, 0.1]),
            _vec("mid", [1.0, 1.0]),
        ]
        ranked = rank([1.0, 0.0], candidates, top_k=3)

        assert [c.id for c, _ in ranked] == ["near", "mid", "far"]
        distances = [d for _, d in ranked]
        assert distances == sorted(distances)

    def test_truncated_to_top_k(self):
        candidates = [_vec(str(i), [1.0, float(i)]) for i in range(10)]
        assert len(rank([1.0, 0.0], candidates, top_k=3)) == 3

    def test_top_k_larger_than_collection(self):
        candidates = [_vec("a", [1.0, 0.0]), _vec("b", [0.0, 1.0])]
        assert len(rank([1.0, 0.0], candidates, top_k=50)) == 2

    def test_ties_keep_insertion_order(self):
        candidates = [
            _vec("first", [1.0, 0.0]),
            _vec("second", [2.0, 0.0]),
            _vec("third", [3.0, 0.0]),
        ]
        ranked = rank([5.0, 0.0], candidates, top_k=3)
        assert [c.id for c, _ in ranked] == ["first", "second", "third"]

    @pytest.mark.parametrize("top_k", [0, -1])
    def test_non_positive_top_k(self, top_k):
        assert rank([1.0, 0.0], [_vec("a", [1.0, 0.0])], top_k=top_k) == []

    def test_no_candidates(self):
        assert rank([1.0, 0.0], [], top_k=5) == []

    def test_zero_query_raises(self):
        with pytest.raises(DegenerateVectorError) as exc_info:
            rank([0.0, 0.0], [_vec("a", [1.0, 0.0])], top_k=1)
        assert exc_info.value.vector_id == "query"

    def test_zero_candidate_names_offender(self):
        candidates = [_vec("ok", [1.0, 0.0]), _vec("zero", [0.0, 0.0])]
        with pytest.raises(DegenerateVectorError) as exc_info:
            rank([1.0, 0.0], candidates, top_k=2)
        assert exc_info.value.vector_id == "zero"
