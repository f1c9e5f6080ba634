"""
Softmax normalisation of scored concepts.

Scores are shifted by their maximum before exponentiating, so large raw
scores cannot overflow:
    softmax(v_i) = exp(v_i - max(v)) / sum_j exp(v_j - max(v))
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Concept:
    """A CUI with a score relative to some target CUI."""

    cui: str
    value: float


def softmax(concepts: Sequence[Concept]) -> list[Concept]:
    """Normalise concept values into a distribution that sums to 1, keeping input order."""
    if not concepts:
        return []
    values = np.array([concept.value for concept in concepts], dtype=np.float64)
    exp = np.exp(values - values.max())
    probabilities = exp / exp.sum()
    return [
        Concept(cui=concept.cui, value=float(p))
        for concept, p in zip(concepts, probabilities)
    ]


__all__ = ["Concept", "softmax"]
