"""Tests for matrix and order files."""
import numpy as np
import pytest

from matrix_tsp.errors import ShapeError
from matrix_tsp.matrix_io import load_matrix, load_order, save_matrix, save_order

VALUES = np.array([[1.0, 0.5, np.nan], [0.5, 1.0, 0.0], [np.nan, 0.0, 1.0]])


class TestMatrixFiles:
    @pytest.mark.parametrize("ext", [".npy", ".csv", ".txt"])
    def test_save_and_load(self, tmp_path, ext):
        path = str(tmp_path / f"matrix{ext}")
        save_matrix(path, VALUES)
        m = load_matrix(path)
        np.testing.assert_array_equal(m.values, VALUES)

    def test_single_value_text(self, tmp_path):
        path = tmp_path / "one.txt"
        path.write_text("0.7\n")
        assert load_matrix(str(path)).shape == (1, 1)

    def test_non_square_csv(self, tmp_path):
        path = tmp_path / "wide.csv"
        path.write_text("1,2,3\n4,5,6\n")
        with pytest.raises(ShapeError):
            load_matrix(str(path))


class TestOrderFiles:
    def test_save_and_load(self, tmp_path):
        path = str(tmp_path / "order.txt")
        save_order(path, np.array([3, 0, 2, 1]))
        assert load_order(path).tolist() == [3, 0, 2, 1]
