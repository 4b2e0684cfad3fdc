"""Command line entry point: sort a similarity matrix with concorde or LKH.

Examples:
  matrix-tsp-sort similarity.csv -o sorted.csv --order-out order.txt
  matrix-tsp-sort similarity.npy --solver lkh --solver-path ~/LKH-2.0.11/LKH --seed 10
  matrix-tsp-sort similarity.txt --restore-removed --reference truth.txt --report results/runs.csv
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List, Optional

from .cleaning import clean_matrix
from .config import SOLVERS, SortConfig, load_config
from .errors import SolverError
from .evaluate import append_report, run_record
from .matrix_io import load_matrix, load_order, save_matrix, save_order
from .pipeline import sort_similarity_matrix
from .tsplib import write_tsplib_file

# argparse dest -> SortConfig field
OVERRIDES = {
    'factor': 'factor',
    'summand': 'summand',
    'nan_replacement': 'nan_replacement',
    'solver': 'solver',
    'solver_path': 'solver_path',
    'solver_args': 'solver_args',
    'seed': 'seed',
    'timeout': 'timeout',
    'workdir': 'workdir',
    'name': 'instance_name',
    'comment': 'comment',
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog='matrix-tsp-sort',
        description="Reorder a similarity matrix so similar items are adjacent, via a TSP solver",
    )
    ap.add_argument('matrix', help='Similarity matrix (.npy, .csv or whitespace separated text)')
    ap.add_argument('-o', '--output', help='Write the sorted matrix here')
    ap.add_argument('--order-out', help='Write the order (original indices, one per line) here')
    ap.add_argument('--instance-out', help='Only write the TSPLIB instance for the cleaned matrix and exit')
    ap.add_argument('--config', help='JSON file with SortConfig values')
    ap.add_argument('--solver', choices=SOLVERS)
    ap.add_argument('--solver-path', help='Solver binary (default: concorde / LKH on PATH)')
    ap.add_argument('--solver-args', help='Extra solver arguments (LKH: KEY=VALUE entries)')
    ap.add_argument('--seed', type=int)
    ap.add_argument('--timeout', type=float, help='Seconds before the solver is killed')
    ap.add_argument('--factor', type=float)
    ap.add_argument('--summand', type=float)
    ap.add_argument('--nan-replacement', type=float)
    ap.add_argument('--name', help='NAME entry of the instance')
    ap.add_argument('--comment', help='COMMENT entry of the instance')
    ap.add_argument('--workdir', help='Keep instance and tour files in this directory')
    ap.add_argument('--no-normalize', action='store_true', help='Keep the solver rotation instead of starting after the dummy')
    ap.add_argument('--restore-removed', action='store_true', help='Output the full matrix with empty rows left in place')
    ap.add_argument('--reference', help='Reference order file; reports Kendall tau against it')
    ap.add_argument('--report', help='Append a run record to this CSV file')
    ap.add_argument('--json', action='store_true', help='Emit a JSON summary to stdout instead of plain text lines')
    ap.add_argument('--quiet', action='store_true')
    return ap


def config_from_args(args: argparse.Namespace) -> SortConfig:
    data = load_config(args.config).to_dict() if args.config else {}
    for dest, key in OVERRIDES.items():
        value = getattr(args, dest)
        if value is not None:
            data[key] = value
    if args.no_normalize:
        data['normalize'] = False
    if args.restore_removed:
        data['restore_removed'] = True
    data['verbose'] = not (args.json or args.quiet)
    return SortConfig.from_dict(data)


def run(args: argparse.Namespace) -> int:
    cfg = config_from_args(args)
    matrix = load_matrix(args.matrix)
    if cfg.verbose:
        print(f"[info] Loaded {matrix.n}x{matrix.n} matrix from {args.matrix}")

    if args.instance_out:
        clean = clean_matrix(matrix)
        dimension = write_tsplib_file(
            args.instance_out, clean.matrix, cfg.distance(), name=cfg.instance_name, comment=cfg.comment
        )
        if cfg.verbose:
            print(f"✓ Instance with {dimension} nodes written to {args.instance_out}")
        return 0

    result = sort_similarity_matrix(matrix, cfg=cfg)

    if args.output:
        out = result.restored if result.restored is not None else result.matrix
        save_matrix(args.output, out)
        if cfg.verbose:
            print(f"✓ Sorted matrix saved to {args.output}")
    if args.order_out:
        save_order(args.order_out, result.order)
        if cfg.verbose:
            print(f"✓ Order saved to {args.order_out}")

    reference = load_order(args.reference) if args.reference else None
    record = run_record(result, cfg.distance(), name=os.path.basename(args.matrix), reference=reference)
    if args.report:
        append_report(args.report, record)
        if cfg.verbose:
            print(f"✓ Appended run record to {args.report}")

    if args.json:
        summary = dict(record)
        summary['order'] = [int(i) for i in result.order]
        summary['removed_indices'] = list(result.clean.removed)
        print(json.dumps(summary))
    elif not args.quiet:
        print(f"Order: {' '.join(str(int(i)) for i in result.order)}")
        print(f"Cost: {record['cost']:.1f}")
        if 'kendall_tau' in record:
            print(f"Kendall tau vs reference: {record['kendall_tau']:.3f}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except (SolverError, OSError, ValueError) as e:
        # ShapeError, TourParseError and PermutationError are ValueErrors
        print(f"ERROR {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
