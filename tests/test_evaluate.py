"""Tests for ordering metrics and reports."""
import numpy as np
import pandas as pd
import pytest

from conftest import CopyTourSolver, write_concorde_tour
from matrix_tsp.config import SortConfig
from matrix_tsp.evaluate import append_report, order_agreement, ordering_cost, run_record, summarize_runs
from matrix_tsp.pipeline import sort_similarity_matrix


class TestOrderingCost:
    def test_sum_of_adjacent_distances(self):
        m = np.array([[1.0, 0.9, 0.1], [0.9, 1.0, 0.6], [0.1, 0.6, 1.0]])
        assert ordering_cost(m, [0, 1, 2], lambda s: 1 - s) == pytest.approx(0.1 + 0.4)
        assert ordering_cost(m, [1, 0, 2], lambda s: 1 - s) == pytest.approx(0.1 + 0.9)

    def test_single_item(self):
        assert ordering_cost(np.eye(1), [0], lambda s: 1 - s) == 0.0


class TestOrderAgreement:
    def test_identical(self):
        assert order_agreement([2, 0, 1, 3], [2, 0, 1, 3]) == pytest.approx(1.0)

    def test_reversed(self):
        assert order_agreement([3, 2, 1, 0], [0, 1, 2, 3]) == pytest.approx(-1.0)
        assert order_agreement([3, 2, 1, 0], [0, 1, 2, 3], absolute=True) == pytest.approx(1.0)

    def test_different_items(self):
        with pytest.raises(ValueError):
            order_agreement([0, 1, 2], [0, 1, 3])


class TestReports:
    def test_append_report(self, tmp_path):
        path = str(tmp_path / "results" / "runs.csv")
        append_report(path, {'matrix': 'a', 'cost': 1.0})
        df = append_report(path, {'matrix': 'b', 'cost': 2.0})
        assert df['matrix'].tolist() == ['a', 'b']
        assert pd.read_csv(path)['cost'].tolist() == [1.0, 2.0]

    def test_summarize_empty(self):
        assert summarize_runs([]).empty

    def test_run_record(self, tmp_path, gapped_matrix):
        tour = write_concorde_tour(tmp_path / "prepared.sol", [1, 4, 3, 0, 2])
        cfg = SortConfig()
        result = sort_similarity_matrix(gapped_matrix, CopyTourSolver(tour), cfg)
        record = run_record(result, cfg.distance(), name="gapped", reference=np.array([4, 0, 2, 3, 1]))
        assert record['matrix'] == "gapped"
        assert record['n'] == 5
        assert record['kept'] == 4
        assert record['removed'] == 1
        assert record['dummy_index'] == 1
        assert record['kendall_tau'] == pytest.approx(1.0)
        assert record['cost'] > 0
