import shlex
import shutil
import sys
import textwrap

import numpy as np
import pytest

from matrix_tsp.solver import ExternalSolver
from matrix_tsp.tour import parse_tour_file
from matrix_tsp.tsplib import read_tsplib_dimension


FAKE_CONCORDE = textwrap.dedent('''
    import shutil
    import sys

    # usage: fake_concorde.py <prepared tour> [-s seed] -o <output> <instance>
    args = sys.argv[1:]
    source = args[0]
    output = args[args.index("-o") + 1]
    shutil.copyfile(source, output)
''')


class CopyTourSolver(ExternalSolver):
    """Copies a prepared concorde tour file instead of solving anything."""
    name = "copy"

    def __init__(self, source):
        super().__init__("copy")
        self.source = str(source)
        self.calls = []

    def run(self, instance_path, tour_path):
        self.calls.append((instance_path, read_tsplib_dimension(instance_path)))
        shutil.copyfile(self.source, tour_path)
        return ""

    def read_tour(self, tour_path, n):
        return parse_tour_file(tour_path, n)


class FailingSolver(ExternalSolver):
    def __init__(self):
        super().__init__("never")

    def run(self, instance_path, tour_path):
        raise AssertionError("solver must not run")


def write_concorde_tour(path, tour, count=None):
    count = len(tour) if count is None else count
    lines = [str(count)]
    for start in range(0, len(tour), 10):
        lines.append(" ".join(str(t) for t in tour[start:start + 10]))
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def fake_concorde(tmp_path):
    script = tmp_path / "fake_concorde.py"
    script.write_text(FAKE_CONCORDE)

    def solver_args(tour_file):
        return f"{shlex.quote(str(script))} {shlex.quote(str(tour_file))}"

    return sys.executable, solver_args


@pytest.fixture
def gapped_matrix():
    # five sections, section 2 has no similarity data at all
    return np.array([
        [1.0, 0.2, 0.0, 0.9, 0.1],
        [0.2, 1.0, 0.0, 0.3, 0.8],
        [0.0, 0.0, 0.0, 0.0, np.nan],
        [0.9, 0.3, 0.0, 1.0, 0.4],
        [0.1, 0.8, np.nan, 0.4, 1.0],
    ])
