"""Removal of empty rows/columns from a similarity matrix."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

import numpy as np

from .matrix import SimilarityMatrix, as_similarity_matrix


@dataclass(frozen=True)
class CleanResult:
    matrix: SimilarityMatrix
    removed: List[int]
    kept: List[int]

    @property
    def changed(self) -> bool:
        return bool(self.removed)


def is_empty_row(row) -> bool:
    """True if every value is NaN or exactly 0.0."""
    for value in row:
        value = float(value)
        if not math.isnan(value) and value != 0.0:
            return False
    return True


def clean_matrix(matrix) -> CleanResult:
    """Drop every row i (and column i) holding only NaN/0.0 values.

    If nothing has to go and matrix already is a SimilarityMatrix, the result
    carries that very instance. Other array-likes are wrapped in a copy first.
    """
    matrix = as_similarity_matrix(matrix)
    n = matrix.n

    removed: List[int] = []
    kept: List[int] = []
    for i in range(n):
        if is_empty_row(matrix.row(i)):
            removed.append(i)
        else:
            kept.append(i)

    if not removed:
        return CleanResult(matrix=matrix, removed=removed, kept=kept)

    idx = np.asarray(kept, dtype=np.intp)
    compacted = matrix.values[np.ix_(idx, idx)].copy()
    return CleanResult(matrix=SimilarityMatrix._wrap(compacted), removed=removed, kept=kept)
