"""Exceptions raised by the matrix sorting pipeline."""
from __future__ import annotations

from typing import Optional


class ShapeError(ValueError):
    """Matrix is not two-dimensional and square, or sizes do not line up."""


class TourParseError(ValueError):
    """Solver tour file is missing, malformed or inconsistent."""


class PermutationError(ValueError):
    """Array is not a bijection over [0, n)."""


class SolverError(RuntimeError):
    """External TSP solver could not be run or produced no tour."""

    def __init__(self, message: str, returncode: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output
