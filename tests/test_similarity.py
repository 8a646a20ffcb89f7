"""Tests for vector similarity helpers."""

from __future__ import annotations

import math

import pytest

from semantic_search.similarity import cosine_similarity, euclidean_distance


@pytest.mark.parametrize(
    "vector",
    [[1.0, 2.0, 3.0], [0.5, -0.25], [1e-3, 4.0, -7.5, 2.0]],
)
def test_cosine_of_vector_with_itself_is_one(vector: list[float]) -> None:
    assert cosine_similarity(vector, vector) == pytest.approx(1.0)


def test_cosine_is_symmetric() -> None:
    a = [0.3, -1.2, 4.0]
    b = [2.0, 0.1, -0.5]

    assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_cosine_orthogonal_and_opposite() -> None:
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)


def test_cosine_neutral_on_mismatch_absent_or_zero() -> None:
    assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity(None, [1.0]) == 0.0
    assert cosine_similarity([1.0], None) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


def test_euclidean_distance() -> None:
    assert euclidean_distance([1.0, 2.0], [1.0, 2.0]) == 0.0
    assert euclidean_distance([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)


def test_euclidean_infinite_on_mismatch_or_absent() -> None:
    assert euclidean_distance([1.0], [1.0, 2.0]) == math.inf
    assert euclidean_distance(None, [1.0]) == math.inf


def test_nan_components_propagate() -> None:
    assert math.isnan(cosine_similarity([float("nan"), 1.0], [1.0, 1.0]))
