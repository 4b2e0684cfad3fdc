"""Sort a similarity matrix by solving a TSP over its rows."""
from __future__ import annotations

import os
import tempfile
import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .cleaning import CleanResult, clean_matrix
from .config import SortConfig
from .matrix import SimilarityMatrix, as_similarity_matrix
from .rearrange import expand_permutation, rearrange_matrix, restore_removed
from .solver import ExternalSolver, make_solver
from .tour import TourResult, normalize_to_dummy, validate_permutation
from .tsplib import write_tsplib_file

INSTANCE_FILE = "sort.tsp"
TOUR_FILE = "sort.tour"


@dataclass
class SortResult:
    original: SimilarityMatrix
    clean: CleanResult
    tour: TourResult
    permutation: np.ndarray        # over the cleaned matrix
    matrix: SimilarityMatrix       # cleaned matrix, sorted
    order: np.ndarray              # over the original indices
    restored: Optional[SimilarityMatrix] = None
    runtime: float = 0.0
    files: dict = field(default_factory=dict)

    @property
    def kept_order(self) -> np.ndarray:
        """Original indices of the kept rows, in sorted order."""
        return np.asarray(self.clean.kept, dtype=np.intp)[self.permutation]


def _trivial_tour(n: int) -> TourResult:
    return TourResult(permutation=np.arange(n, dtype=np.intp), dummy_index=n)


def solve_order(matrix: SimilarityMatrix, solver: ExternalSolver, cfg: SortConfig, workdir: str) -> TourResult:
    """Write the instance for matrix into workdir, run solver and parse its tour."""
    instance_path = os.path.join(workdir, INSTANCE_FILE)
    tour_path = os.path.join(workdir, TOUR_FILE)
    dimension = write_tsplib_file(
        instance_path, matrix, cfg.distance(), name=cfg.instance_name, comment=cfg.comment
    )
    if cfg.verbose:
        print(f"[info] Wrote instance with {dimension} nodes to {instance_path}")
    return solver.solve(instance_path, tour_path, matrix.n)


def sort_similarity_matrix(matrix, solver: Optional[ExternalSolver] = None,
                           cfg: Optional[SortConfig] = None) -> SortResult:
    cfg = cfg or SortConfig()
    solver = solver or make_solver(cfg)
    start = time.time()

    original = as_similarity_matrix(matrix)
    clean = clean_matrix(original)
    if cfg.verbose and clean.changed:
        print(f"[info] Removed {len(clean.removed)} empty rows/columns: {clean.removed}")

    cleaned = clean.matrix
    files = {}
    if cleaned.n < 2:
        if cfg.verbose:
            print(f"[info] {cleaned.n} non-empty row(s) left, nothing to sort")
        tour = _trivial_tour(cleaned.n)
    elif cfg.workdir:
        os.makedirs(cfg.workdir, exist_ok=True)
        tour = solve_order(cleaned, solver, cfg, cfg.workdir)
        files = {
            'instance': os.path.join(cfg.workdir, INSTANCE_FILE),
            'tour': os.path.join(cfg.workdir, TOUR_FILE),
        }
    else:
        with tempfile.TemporaryDirectory(prefix="matrix_tsp_") as tmp:
            tour = solve_order(cleaned, solver, cfg, tmp)

    permutation = validate_permutation(tour.permutation, cleaned.n)
    if cfg.normalize:
        permutation = normalize_to_dummy(tour).permutation

    sorted_matrix = rearrange_matrix(cleaned, permutation)
    order = expand_permutation(permutation, clean)
    restored = restore_removed(original, permutation, clean) if cfg.restore_removed else None

    runtime = time.time() - start
    if cfg.verbose:
        print(f"✓ Sorted {cleaned.n} rows in {runtime:.3f}s (dummy at position {tour.dummy_index})")
    return SortResult(
        original=original,
        clean=clean,
        tour=tour,
        permutation=permutation,
        matrix=sorted_matrix,
        order=order,
        restored=restored,
        runtime=runtime,
        files=files,
    )
