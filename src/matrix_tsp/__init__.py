"""Sort similarity matrices by reducing them to a TSP with a dummy node."""
from .cleaning import CleanResult, clean_matrix
from .config import SortConfig, load_config
from .conversion import SigmoidSimilarityToDistance
from .errors import PermutationError, ShapeError, SolverError, TourParseError
from .matrix import SimilarityMatrix
from .pipeline import SortResult, sort_similarity_matrix
from .rearrange import expand_permutation, rearrange_matrix, restore_removed
from .solver import ConcordeSolver, ExternalSolver, LKHSolver, make_solver
from .tour import (
    TourResult,
    invert_permutation,
    normalize_to_dummy,
    parse_tour_file,
    parse_tsplib_tour_file,
    rotate,
    validate_permutation,
)
from .tsplib import encode_tsplib, write_tsplib, write_tsplib_file

__version__ = "0.1.0"
