"""Runners for external TSP solvers (concorde, LKH).

A runner knows how to build the command line, run it to completion and
read back the tour it wrote. The pipeline only talks to that interface, so
tests can swap in a runner that copies a prepared tour file.
"""
from __future__ import annotations

import os
import shlex
import subprocess
from typing import Dict, List, Optional

from . import config
from .errors import SolverError
from .tour import TourResult, parse_tour_file, parse_tsplib_tour_file


class ExternalSolver:
    name = "solver"

    def __init__(self, executable: str, extra_args: str = "", seed: Optional[int] = None,
                 timeout: Optional[float] = None, verbose: bool = False):
        self.executable = executable
        self.extra_args = extra_args
        self.seed = seed
        self.timeout = timeout
        self.verbose = verbose

    def build_command(self, instance_path: str, tour_path: str) -> List[str]:
        raise NotImplementedError

    def read_tour(self, tour_path: str, n: int) -> TourResult:
        raise NotImplementedError

    def prepare(self, instance_path: str, tour_path: str) -> None:
        """Hook for writing auxiliary input files before the run."""

    def cleanup(self, instance_path: str) -> None:
        """Hook for removing solver by-products after the run."""

    def run(self, instance_path: str, tour_path: str) -> str:
        """Run the solver until it exits; returns its combined stdout/stderr."""
        instance_path = os.path.abspath(instance_path)
        tour_path = os.path.abspath(tour_path)
        if os.path.exists(tour_path):
            os.remove(tour_path)

        self.prepare(instance_path, tour_path)
        cmd = self.build_command(instance_path, tour_path)
        if self.verbose:
            print(f"[info] Running {self.name}: {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout,
                universal_newlines=True,
                cwd=os.path.dirname(tour_path),
            )
        except FileNotFoundError as e:
            raise SolverError(f"{self.name} binary not found at {self.executable}") from e
        except subprocess.TimeoutExpired as e:
            output = e.output if isinstance(e.output, str) else ""
            raise SolverError(f"{self.name} timed out after {self.timeout} seconds", output=output) from e
        except OSError as e:
            raise SolverError(f"{self.name} could not be started: {e}") from e
        finally:
            self.cleanup(instance_path)

        if proc.returncode != 0:
            raise SolverError(
                f"{self.name} failed with return code {proc.returncode}",
                returncode=proc.returncode,
                output=proc.stdout,
            )
        if not os.path.exists(tour_path):
            raise SolverError(
                f"{self.name} exited normally but wrote no tour to {tour_path}",
                returncode=proc.returncode,
                output=proc.stdout,
            )
        return proc.stdout

    def solve(self, instance_path: str, tour_path: str, n: int) -> TourResult:
        self.run(instance_path, tour_path)
        return self.read_tour(tour_path, n)


class ConcordeSolver(ExternalSolver):
    """concorde [extra args] [-s seed] -o <tour> <instance>"""
    name = "concorde"

    def __init__(self, executable: str = config.CONCORDE_CMD, **kwargs):
        super().__init__(executable, **kwargs)

    def build_command(self, instance_path: str, tour_path: str) -> List[str]:
        cmd = [self.executable]
        cmd.extend(shlex.split(self.extra_args))
        if self.seed is not None:
            cmd.extend(["-s", str(self.seed)])
        cmd.extend(["-o", tour_path, instance_path])
        return cmd

    def read_tour(self, tour_path: str, n: int) -> TourResult:
        return parse_tour_file(tour_path, n)

    def cleanup(self, instance_path: str) -> None:
        # concorde leaves <name>.mas/.pul/.sav/.res (sometimes O-prefixed) in its cwd
        workdir = os.path.dirname(instance_path)
        instance_name = os.path.splitext(os.path.basename(instance_path))[0]
        for prefix in ("", "O"):
            for ext in (".mas", ".pul", ".sav", ".res"):
                path = os.path.join(workdir, f"{prefix}{instance_name}{ext}")
                if os.path.exists(path):
                    os.remove(path)


class LKHSolver(ExternalSolver):
    """LKH <par file>; extra args are KEY=VALUE parameter file entries."""
    name = "LKH"

    def __init__(self, executable: str = config.LKH_CMD, runs: int = 1, **kwargs):
        super().__init__(executable, **kwargs)
        self.runs = runs

    def par_path(self, tour_path: str) -> str:
        return os.path.splitext(tour_path)[0] + ".par"

    def parameters(self, instance_path: str, tour_path: str) -> Dict[str, str]:
        params = {
            "PROBLEM_FILE": instance_path,
            "OUTPUT_TOUR_FILE": tour_path,
            "RUNS": str(self.runs),
        }
        if self.seed is not None:
            params["SEED"] = str(self.seed)
        for tok in shlex.split(self.extra_args):
            if "=" not in tok:
                raise ValueError(f"LKH parameter must look like KEY=VALUE, got {tok!r}")
            key, value = tok.split("=", 1)
            params[key.strip().upper()] = value.strip()
        return params

    def prepare(self, instance_path: str, tour_path: str) -> None:
        with open(self.par_path(tour_path), "w") as f:
            for key, value in self.parameters(instance_path, tour_path).items():
                f.write(f"{key} = {value}\n")

    def build_command(self, instance_path: str, tour_path: str) -> List[str]:
        return [self.executable, self.par_path(tour_path)]

    def read_tour(self, tour_path: str, n: int) -> TourResult:
        return parse_tsplib_tour_file(tour_path, n)


def make_solver(cfg: config.SortConfig) -> ExternalSolver:
    kwargs = dict(extra_args=cfg.solver_args, seed=cfg.seed, timeout=cfg.timeout, verbose=cfg.verbose)
    if cfg.solver == "lkh":
        return LKHSolver(cfg.resolved_solver_path(), **kwargs)
    elif cfg.solver == "concorde":
        return ConcordeSolver(cfg.resolved_solver_path(), **kwargs)
    else:
        raise ValueError(f"Unknown solver: {cfg.solver}")
