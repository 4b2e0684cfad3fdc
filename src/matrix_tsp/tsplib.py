"""TSPLIB explicit full-matrix instances with an appended dummy node.

The dummy node has distance 0 to every other node. An optimal tour through
it is a shortest Hamiltonian path through the real nodes, which is exactly
the linear order wanted for sorting the matrix. The dummy cuts the cycle.
"""
from __future__ import annotations

import io
import math
from typing import List, TextIO, Tuple

import numpy as np

from .conversion import SimilarityToDistance
from .matrix import as_similarity_matrix

DUMMY_VALUE = 0.0

HEADER_TEMPLATE = (
    "NAME: {name}\n"
    "TYPE: TSP\n"
    "COMMENT: {comment}\n"
    "DIMENSION: {dimension}\n"
    "EDGE_WEIGHT_TYPE: EXPLICIT\n"
    "EDGE_DATA_FORMAT: EDGE_LIST\n"
    "EDGE_WEIGHT_FORMAT: FULL_MATRIX\n"
    "NODE_COORD_TYPE: NO_COORDS\n"
    "DISPLAY_DATA_TYPE: NO_DISPLAY\n"
    "EDGE_WEIGHT_SECTION\n"
)


def _to_weight(distance: float, i: int, j: int) -> int:
    if not math.isfinite(distance):
        raise ValueError(f"Non-finite distance {distance} for pair ({i}, {j})")
    # TSPLIB wants integer weights; truncate toward zero
    return int(distance)


def _row_weights(row: np.ndarray, distance: SimilarityToDistance, i: int) -> List[int]:
    convert_array = getattr(distance, "convert_array", None)
    if convert_array is None:
        return [_to_weight(distance(float(value)), i, j) for j, value in enumerate(row)]

    distances = np.asarray(convert_array(row), dtype=float)
    bad = np.flatnonzero(~np.isfinite(distances))
    if len(bad):
        j = int(bad[0])
        raise ValueError(f"Non-finite distance {distances[j]} for pair ({i}, {j})")
    return distances.astype(np.int64).tolist()


def write_tsplib(matrix, distance: SimilarityToDistance, out: TextIO,
                 name: str = "SORT", comment: str = "") -> int:
    """Stream the instance for matrix to out, one row at a time.

    Returns the instance dimension (n + 1).
    """
    matrix = as_similarity_matrix(matrix)
    n = matrix.n
    dummy_weight = int(DUMMY_VALUE)

    out.write(HEADER_TEMPLATE.format(name=name, comment=comment, dimension=n + 1))
    for i, row in enumerate(matrix.rows()):
        weights = _row_weights(row, distance, i)
        weights.append(dummy_weight)
        out.write(" ".join(map(str, weights)))
        out.write("\n")
    out.write(" ".join([str(dummy_weight)] * (n + 1)))
    out.write("\n")
    out.write("EOF\n")
    return n + 1


def encode_tsplib(matrix, distance: SimilarityToDistance, name: str = "SORT", comment: str = "") -> str:
    buf = io.StringIO()
    write_tsplib(matrix, distance, buf, name=name, comment=comment)
    return buf.getvalue()


def write_tsplib_file(path: str, matrix, distance: SimilarityToDistance,
                      name: str = "SORT", comment: str = "") -> int:
    with open(path, 'w') as f:
        return write_tsplib(matrix, distance, f, name=name, comment=comment)


def _read_header(lines: List[str]) -> Tuple[dict, int]:
    header = {}
    for idx, line in enumerate(lines):
        line = line.strip()
        if not line:
            continue
        if line.startswith('EDGE_WEIGHT_SECTION'):
            return header, idx + 1
        if line == 'EOF':
            break
        if ':' in line:
            key, value = line.split(':', 1)
            header[key.strip()] = value.strip()
    return header, len(lines)


def read_tsplib_dimension(filename: str) -> int:
    """DIMENSION entry of a TSPLIB file."""
    with open(filename, 'r') as f:
        for line in f:
            line = line.strip()
            if line.startswith('DIMENSION'):
                try:
                    return int(line.split(':')[1].strip())
                except (IndexError, ValueError):
                    raise ValueError(f"Malformed DIMENSION line in {filename}: {line!r}")
    raise ValueError(f"Could not find DIMENSION in {filename}")


def read_tsplib_matrix(filename: str) -> np.ndarray:
    """Read an EXPLICIT / FULL_MATRIX instance back into an integer array."""
    with open(filename, 'r') as f:
        lines = f.readlines()

    header, start = _read_header(lines)
    if 'DIMENSION' not in header:
        raise ValueError(f"Could not find DIMENSION in {filename}")
    dimension = int(header['DIMENSION'])
    if header.get('EDGE_WEIGHT_TYPE') != 'EXPLICIT':
        raise ValueError(f"Unsupported EDGE_WEIGHT_TYPE: {header.get('EDGE_WEIGHT_TYPE')}")
    if header.get('EDGE_WEIGHT_FORMAT') != 'FULL_MATRIX':
        raise ValueError(f"Unsupported EDGE_WEIGHT_FORMAT: {header.get('EDGE_WEIGHT_FORMAT')}")

    weights: List[int] = []
    for line in lines[start:]:
        line = line.strip()
        if line == 'EOF':
            break
        for tok in line.split():
            try:
                weights.append(int(tok))
            except ValueError:
                raise ValueError(f"Malformed edge weight {tok!r} in {filename}")

    if len(weights) != dimension * dimension:
        raise ValueError(
            f"Expected {dimension * dimension} edge weights in {filename}, found {len(weights)}"
        )
    return np.array(weights, dtype=np.int64).reshape(dimension, dimension)
