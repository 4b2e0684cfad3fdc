"""Quality measures for a computed order and CSV run reports."""
from __future__ import annotations

import os
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from scipy.stats import kendalltau

from .conversion import SimilarityToDistance
from .matrix import as_similarity_matrix


def ordering_cost(matrix, order, distance: SimilarityToDistance) -> float:
    """Sum of distances between consecutive items of order."""
    matrix = as_similarity_matrix(matrix)
    order = [int(i) for i in order]
    return float(sum(distance(float(matrix[a, b])) for a, b in zip(order[:-1], order[1:])))


def order_agreement(order, reference, absolute: bool = False) -> float:
    """Kendall tau between the positions items take in order and in reference.

    A linear order and its reverse describe the same sorting, pass
    absolute=True to ignore the direction.
    """
    order = np.asarray(order, dtype=np.intp)
    reference = np.asarray(reference, dtype=np.intp)
    if sorted(order.tolist()) != sorted(reference.tolist()):
        raise ValueError("order and reference must contain the same items")
    if len(order) < 2:
        return 1.0

    position = np.empty(int(order.max()) + 1, dtype=np.intp)
    position[order] = np.arange(len(order))
    reference_position = np.empty_like(position)
    reference_position[reference] = np.arange(len(reference))

    items = np.sort(order)
    tau, _ = kendalltau(position[items], reference_position[items])
    tau = float(tau)
    return abs(tau) if absolute else tau


def summarize_runs(records: List[Dict]) -> pd.DataFrame:
    """One row per run record."""
    if not records:
        return pd.DataFrame()
    return pd.DataFrame(records)


def append_report(path: str, record: Dict) -> pd.DataFrame:
    """Append record to the CSV report at path, creating it if missing."""
    row = summarize_runs([record])
    if os.path.exists(path):
        existing = pd.read_csv(path)
        df = pd.concat([existing, row], ignore_index=True)
    else:
        df = row
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    df.to_csv(path, index=False)
    return df


def run_record(result, distance: SimilarityToDistance, name: str = "",
               reference: Optional[np.ndarray] = None) -> Dict:
    """Flatten a SortResult into a report row."""
    record = {
        'matrix': name,
        'n': result.original.n,
        'kept': len(result.clean.kept),
        'removed': len(result.clean.removed),
        'dummy_index': result.tour.dummy_index,
        'cost': ordering_cost(result.clean.matrix, result.permutation, distance),
        'runtime': result.runtime,
        'timestamp': pd.Timestamp.now().strftime('%Y-%m-%d %H:%M:%S'),
    }
    if reference is not None:
        record['kendall_tau'] = order_agreement(result.order, reference, absolute=True)
    return record
