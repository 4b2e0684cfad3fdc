"""Reordering matrices by a permutation."""
from __future__ import annotations

from typing import List, Optional

import numpy as np

from .cleaning import CleanResult
from .errors import ShapeError
from .matrix import SimilarityMatrix, as_similarity_matrix
from .tour import validate_permutation


def rearrange_matrix(matrix, permutation, out: Optional[np.ndarray] = None):
    """out[x, y] = matrix[permutation[x], permutation[y]].

    Without out a new SimilarityMatrix is returned. A caller supplied out
    must be a writable ndarray; it is filled and returned.
    """
    matrix = as_similarity_matrix(matrix)
    p = np.asarray(permutation, dtype=np.intp)
    if p.ndim != 1 or len(p) != matrix.n:
        raise ShapeError(f"Permutation of length {len(p)} does not fit matrix of size {matrix.n}")

    if out is None:
        return SimilarityMatrix._wrap(matrix.values[np.ix_(p, p)])
    if not isinstance(out, np.ndarray) or not out.flags.writeable:
        raise TypeError(f"out must be a writable numpy array, got {type(out).__name__}")
    if out.shape != matrix.shape:
        raise ShapeError(f"Output shape {out.shape} does not match input shape {matrix.shape}")
    out[...] = matrix.values[np.ix_(p, p)]
    return out


def expand_permutation(permutation, clean: CleanResult) -> np.ndarray:
    """Lift a permutation over the cleaned matrix to the original indices.

    Removed indices stay where they were; the other positions receive
    kept[permutation[k]] in order.
    """
    m = len(clean.kept)
    p = validate_permutation(permutation, m)
    n = m + len(clean.removed)
    removed = set(clean.removed)

    order: List[int] = []
    sorted_kept = iter(clean.kept[k] for k in p)
    for position in range(n):
        if position in removed:
            order.append(position)
        else:
            order.append(next(sorted_kept))
    return np.asarray(order, dtype=np.intp)


def restore_removed(original, permutation, clean: CleanResult) -> SimilarityMatrix:
    """Reorder the uncleaned matrix, leaving removed rows/columns in place."""
    original = as_similarity_matrix(original)
    order = expand_permutation(permutation, clean)
    if len(order) != original.n:
        raise ShapeError(
            f"Cleaning covered {len(order)} indices but the original matrix has size {original.n}"
        )
    return rearrange_matrix(original, order)
