"""Defaults and run configuration."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from typing import Optional

from .conversion import SigmoidSimilarityToDistance

# Distance transform
DEFAULT_FACTOR = 1000.0
DEFAULT_SUMMAND = 0.0
DEFAULT_NAN_REPLACEMENT = 1000000.0

# Solver binaries, looked up on PATH unless absolute
CONCORDE_CMD = "concorde"
LKH_CMD = "LKH"
SOLVERS = ["concorde", "lkh"]
TIME_LIMIT = None                  # seconds, None waits for the solver

INSTANCE_NAME = "SORT"


@dataclass
class SortConfig:
    factor: float = DEFAULT_FACTOR
    summand: float = DEFAULT_SUMMAND
    nan_replacement: float = DEFAULT_NAN_REPLACEMENT
    solver: str = "concorde"
    solver_path: Optional[str] = None
    solver_args: str = ""
    seed: Optional[int] = None
    timeout: Optional[float] = TIME_LIMIT
    normalize: bool = True
    restore_removed: bool = False
    instance_name: str = INSTANCE_NAME
    comment: str = ""
    workdir: Optional[str] = None
    verbose: bool = False

    def __post_init__(self):
        if not isinstance(self.solver, str):
            raise ValueError(f"Solver must be a name, got {self.solver!r}")
        self.solver = self.solver.lower()
        if self.solver not in SOLVERS:
            raise ValueError(f"Unknown solver: {self.solver}")

    def distance(self) -> SigmoidSimilarityToDistance:
        return SigmoidSimilarityToDistance(
            factor=self.factor, summand=self.summand, nan_replacement=self.nan_replacement
        )

    def resolved_solver_path(self) -> str:
        if self.solver_path:
            return self.solver_path
        return LKH_CMD if self.solver == "lkh" else CONCORDE_CMD

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'SortConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return cls(**data)


def load_config(path: str) -> SortConfig:
    """Read a SortConfig from a JSON object."""
    with open(path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return SortConfig.from_dict(data)
