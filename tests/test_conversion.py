"""Tests for the sigmoid similarity to distance transform."""
import math

import numpy as np
import pytest

from matrix_tsp.conversion import SigmoidSimilarityToDistance


class TestSigmoidSimilarityToDistance:
    def test_perfect_similarity(self):
        d = SigmoidSimilarityToDistance(1000.0)
        assert d.convert(1.0) == pytest.approx(1000.0)

    def test_zero_similarity(self):
        d = SigmoidSimilarityToDistance(1000.0)
        assert d.convert(0.0) == pytest.approx(1000.0 * math.e)

    def test_symmetric_around_one(self):
        d = SigmoidSimilarityToDistance(1000.0)
        assert d.convert(0.25) == pytest.approx(d.convert(1.75))

    def test_summand(self):
        d = SigmoidSimilarityToDistance(1000.0, summand=1.0)
        assert d.convert(1.0) == pytest.approx(500.0)

    def test_nan_replacement(self):
        d = SigmoidSimilarityToDistance(1000.0, 0.0, 1000000.0)
        assert d.convert(float('nan')) == 1000000.0

    def test_defaults(self):
        d = SigmoidSimilarityToDistance(10.0)
        assert d.summand == 0.0
        assert d.convert(float('nan')) == 0.0

    def test_dissimilar_pairs_are_further_apart(self):
        d = SigmoidSimilarityToDistance(1000.0)
        assert d(0.9) < d(0.5) < d(0.1)

    def test_zero_denominator_gives_inf(self):
        d = SigmoidSimilarityToDistance(1.0, summand=-1.0)
        assert d.convert(1.0) == math.inf

    def test_convert_array_matches_scalar(self):
        d = SigmoidSimilarityToDistance(1000.0, 0.5, 7.0)
        values = [float('nan'), 0.0, 0.5, 1.0, 2.0]
        expected = [d.convert(v) for v in values]
        np.testing.assert_allclose(d.convert_array(values), expected)
