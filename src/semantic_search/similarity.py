"""
Vector similarity helpers used to score chunks against a query.
"""

from __future__ import annotations

import math
from typing import Sequence


Vector = Sequence[float]


def _comparable(vec_a: Vector | None, vec_b: Vector | None) -> bool:
    return vec_a is not None and vec_b is not None and len(vec_a) == len(vec_b)


def cosine_similarity(vec_a: Vector | None, vec_b: Vector | None) -> float:
    """
    Cosine of the angle between two vectors.

    Absent vectors, mismatched lengths and zero vectors score 0.0.
    """
    if not _comparable(vec_a, vec_b):
        return 0.0

    dot_product = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for a, b in zip(vec_a, vec_b):  # type: ignore[arg-type]
        dot_product += a * b
        norm_a += a * a
        norm_b += b * b

    magnitude = math.sqrt(norm_a) * math.sqrt(norm_b)
    if magnitude == 0:
        return 0.0
    return dot_product / magnitude


def euclidean_distance(vec_a: Vector | None, vec_b: Vector | None) -> float:
    """L2 distance; ``math.inf`` for absent vectors or mismatched lengths."""
    if not _comparable(vec_a, vec_b):
        return math.inf

    total = 0.0
    for a, b in zip(vec_a, vec_b):  # type: ignore[arg-type]
        total += (a - b) ** 2
    return math.sqrt(total)
