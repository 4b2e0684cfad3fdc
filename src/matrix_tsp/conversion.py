"""Similarity to distance conversion."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

# Any callable float -> float can serve as a distance function for the encoder.
SimilarityToDistance = Callable[[float], float]


@dataclass(frozen=True)
class SigmoidSimilarityToDistance:
    """distance = factor / (summand + exp(-|1 - similarity|)), NaN -> nan_replacement.

    Similarities of well matched pairs sit close to 1.0; pairs further away
    from 1.0 get larger, but bounded, distances.
    """
    factor: float
    summand: float = 0.0
    nan_replacement: float = 0.0

    def convert(self, similarity: float) -> float:
        if math.isnan(similarity):
            return self.nan_replacement
        denominator = self.summand + math.exp(-abs(1.0 - similarity))
        if denominator == 0.0:
            return math.inf
        return self.factor * 1.0 / denominator

    __call__ = convert

    def convert_array(self, similarities) -> np.ndarray:
        s = np.asarray(similarities, dtype=float)
        with np.errstate(divide='ignore'):
            out = self.factor * 1.0 / (self.summand + np.exp(-np.abs(1.0 - s)))
        out = np.where(np.isnan(s), self.nan_replacement, out)
        return out
