"""Immutable square similarity matrix."""
from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from .errors import ShapeError


class SimilarityMatrix:
    """Read-only n x n grid of floats, indexed by (row, col).

    The constructor copies the caller's data, so later changes to the source
    array never show up here. Values may be NaN.
    """

    __slots__ = ('_values',)

    def __init__(self, values):
        arr = np.array(values, dtype=float, copy=True)
        if arr.ndim != 2:
            raise ShapeError(f"Need two-dimensional matrix, got {arr.ndim} dimension(s)")
        if arr.shape[0] != arr.shape[1]:
            raise ShapeError(f"Matrix needs to be quadratic, got shape {arr.shape}")
        arr.setflags(write=False)
        self._values = arr

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> 'SimilarityMatrix':
        # arr is freshly allocated by the caller and owned by the new instance
        obj = cls.__new__(cls)
        arr.setflags(write=False)
        obj._values = arr
        return obj

    @property
    def n(self) -> int:
        return int(self._values.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.n, self.n)

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        return self._values

    def dimension(self, axis: int) -> int:
        return int(self._values.shape[axis])

    def row(self, i: int) -> np.ndarray:
        return self._values[i]

    def rows(self) -> Iterator[np.ndarray]:
        for i in range(self.n):
            yield self._values[i]

    def to_array(self) -> np.ndarray:
        """Writable copy."""
        return self._values.copy()

    def __getitem__(self, index):
        return self._values[index]

    def __len__(self) -> int:
        return self.n

    def __array__(self, dtype=None, copy=None):
        if dtype is not None:
            return self._values.astype(dtype)
        if copy:
            return self._values.copy()
        return self._values

    def __eq__(self, other) -> bool:
        if not isinstance(other, SimilarityMatrix):
            return NotImplemented
        return np.array_equal(self._values, other._values, equal_nan=True)

    __hash__ = None

    def __repr__(self) -> str:
        return f"SimilarityMatrix(n={self.n})"


def as_similarity_matrix(matrix) -> SimilarityMatrix:
    """Return matrix unchanged if it already is a SimilarityMatrix, otherwise wrap a copy."""
    if isinstance(matrix, SimilarityMatrix):
        return matrix
    return SimilarityMatrix(matrix)
