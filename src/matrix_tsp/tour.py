"""Parsing solver tours into permutations of the real (non-dummy) nodes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from .errors import PermutationError, TourParseError


@dataclass(frozen=True)
class TourResult:
    permutation: np.ndarray    # permutation[i] = source index shown at position i
    dummy_index: int           # number of real nodes visited before the dummy

    @property
    def n(self) -> int:
        return int(len(self.permutation))


def validate_permutation(permutation, n: int) -> np.ndarray:
    """Return permutation as an int array, or raise PermutationError."""
    p = np.asarray(permutation)
    if p.ndim != 1 or len(p) != n:
        raise PermutationError(f"Permutation needs length {n}, got shape {p.shape}")
    if n and not np.issubdtype(p.dtype, np.integer):
        raise PermutationError(f"Permutation needs integer entries, got {p.dtype}")
    p = p.astype(np.intp, copy=False)
    if n and (p.min() < 0 or p.max() >= n):
        raise PermutationError(f"Permutation entries must lie in [0, {n})")
    if len(np.unique(p)) != n:
        raise PermutationError("Permutation contains duplicate entries")
    return p


def invert_permutation(permutation) -> np.ndarray:
    p = validate_permutation(permutation, len(permutation))
    inverse = np.empty_like(p)
    inverse[p] = np.arange(len(p), dtype=p.dtype)
    return inverse


def strip_dummy(tour: Iterable[int], n: int) -> TourResult:
    """Drop the dummy node n from a tour over [0, n]."""
    permutation: List[int] = []
    dummy_index = -1
    for node in tour:
        if node == n:
            dummy_index = len(permutation)
        else:
            permutation.append(int(node))
    if dummy_index < 0:
        raise TourParseError(f"Dummy node {n} missing from tour")
    return TourResult(permutation=np.asarray(permutation, dtype=np.intp), dummy_index=dummy_index)


def rotate(permutation, k: int) -> np.ndarray:
    """out[(i - k) mod n] = permutation[i]."""
    p = np.asarray(permutation)
    if len(p) == 0:
        return p.copy()
    return np.roll(p, -k)


def normalize_to_dummy(result: TourResult) -> TourResult:
    """Rotate so the node right after the dummy comes first.

    Where the solver places the dummy depends on its starting point, so
    this gives the same linear order for equivalent tours.
    """
    return TourResult(permutation=rotate(result.permutation, result.dummy_index), dummy_index=0)


def _check_tour(tour: List[int], n: int, filename: str) -> TourResult:
    if len(tour) != n + 1:
        raise TourParseError(f"Expected {n + 1} tour entries in {filename}, found {len(tour)}")
    try:
        validate_permutation(tour, n + 1)
    except PermutationError as e:
        raise TourParseError(f"Tour in {filename} is not a permutation of [0, {n}]: {e}") from e
    return strip_dummy(tour, n)


def _read_lines(filename: str) -> List[str]:
    try:
        with open(filename, 'r') as f:
            return f.read().splitlines()
    except OSError as e:
        raise TourParseError(f"Could not read tour file {filename}: {e}") from e


def parse_tour_file(filename: str, n: int) -> TourResult:
    """Parse a concorde result file for an instance of n real nodes plus dummy.

    First line is the node count, which must be n + 1, followed by the tour as
    whitespace separated node indices spread over any number of lines.
    """
    lines = _read_lines(filename)
    if not lines:
        raise TourParseError(f"Tour file {filename} is empty")

    try:
        count = int(lines[0].strip())
    except ValueError as e:
        raise TourParseError(f"Malformed node count {lines[0]!r} in {filename}") from e
    if count != n + 1:
        raise TourParseError(f"Node count mismatch in {filename}: expected {n + 1}, found {count}")

    tour: List[int] = []
    for line in lines[1:]:
        for tok in line.split():
            try:
                tour.append(int(tok))
            except ValueError as e:
                raise TourParseError(f"Malformed node index {tok!r} in {filename}") from e
    return _check_tour(tour, n, filename)


def parse_tsplib_tour_file(filename: str, n: int) -> TourResult:
    """Parse a TSPLIB .tour file (as written by LKH); node ids are 1-based."""
    lines = _read_lines(filename)

    dimension = None
    tour: List[int] = []
    in_tour = False
    for line in lines:
        line = line.strip()
        if not line:
            continue
        if not in_tour:
            if line.startswith('DIMENSION'):
                try:
                    dimension = int(line.split(':', 1)[1].strip())
                except (IndexError, ValueError) as e:
                    raise TourParseError(f"Malformed DIMENSION line in {filename}: {line!r}") from e
            elif line.startswith('TOUR_SECTION'):
                in_tour = True
            continue
        if line == 'EOF':
            break
        done = False
        for tok in line.split():
            try:
                node = int(tok)
            except ValueError as e:
                raise TourParseError(f"Malformed node id {tok!r} in {filename}") from e
            if node == -1:
                done = True
                break
            tour.append(node - 1)
        if done:
            break

    if dimension is None:
        raise TourParseError(f"Could not find DIMENSION in {filename}")
    if dimension != n + 1:
        raise TourParseError(f"Node count mismatch in {filename}: expected {n + 1}, found {dimension}")
    if not in_tour:
        raise TourParseError(f"Could not find TOUR_SECTION in {filename}")
    return _check_tour(tour, n, filename)
