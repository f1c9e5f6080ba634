"""Vector math helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


def cosine(a: ArrayLike, b: ArrayLike) -> float:
    """
    Cosine similarity: dot(a, b) / (||a|| * ||b||).

    Raises:
        ValueError: if the vectors differ in length, either has zero magnitude,
            or the similarity is not finite (nan or inf features).
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"vector dimension mismatch: {a.size} != {b.size}")

    norm = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if norm == 0.0:
        raise ValueError("cosine similarity is undefined for zero-magnitude vectors")
    similarity = float(np.dot(a, b)) / norm
    if not np.isfinite(similarity):
        raise ValueError(f"cosine similarity is not finite ({similarity})")
    return similarity


__all__ = ["cosine"]
