"""Loading and saving matrices and orders."""
from __future__ import annotations

import os

import numpy as np
import pandas as pd

from .matrix import SimilarityMatrix


def load_matrix(path: str) -> SimilarityMatrix:
    ext = os.path.splitext(path)[1].lower()
    if ext == '.npy':
        values = np.load(path)
    elif ext == '.csv':
        values = pd.read_csv(path, header=None).to_numpy(dtype=float)
    else:
        values = np.loadtxt(path, dtype=float, ndmin=2)
    return SimilarityMatrix(values)


def save_matrix(path: str, matrix) -> None:
    values = np.asarray(matrix, dtype=float)
    ext = os.path.splitext(path)[1].lower()
    if ext == '.npy':
        np.save(path, values)
    elif ext == '.csv':
        pd.DataFrame(values).to_csv(path, header=False, index=False)
    else:
        np.savetxt(path, values)


def save_order(path: str, order) -> None:
    with open(path, 'w') as f:
        for idx in order:
            f.write(f"{int(idx)}\n")


def load_order(path: str) -> np.ndarray:
    with open(path, 'r') as f:
        return np.array([int(line) for line in f if line.strip()], dtype=np.intp)
