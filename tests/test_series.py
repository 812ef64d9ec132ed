"""Tests for the oscillatory series evaluator."""

import math
import warnings

import numpy as np
import pytest

from crooksfield.series import evaluate, series_field


class TestEvaluate:
    def test_empty_sum(self):
        assert evaluate(0, 2.0, 3.0, 0.7) == 0.0
        assert evaluate(0, -5.0, 0.5, 123.0) == 0.0

    def test_reference_at_zero_phase(self):
        # sin(2*pi*i) is rounding noise, so the whole sum is vanishingly small
        assert evaluate(100, 2.0, 3.0, 0.0) == pytest.approx(-6.1240661355634177e-54, abs=1e-9)

    @pytest.mark.parametrize(
        "args, expected",
        [
            ((100, 2.0, 3.0, 0.5), 1.0248066948016753e-08),
            ((100, 2.0, 3.0, -3.0), -9.4516196729534513e-06),
            ((5, 1.5, 2.0, 1.0), 3.0076515907449184e-06),
        ],
    )
    def test_reference_values(self, args, expected):
        assert evaluate(*args) == pytest.approx(expected, rel=1e-9)

    def test_first_term_by_hand(self):
        arg = 2 * math.pi + 0.25
        expected = (0.8 * math.sin(arg) / math.cosh(arg)) ** 2
        assert evaluate(1, 0.8, 2.0, 0.25) == pytest.approx(expected, rel=1e-12)

    def test_deterministic(self):
        first = evaluate(100, 2.0, 3.0, 1.2345)
        for _ in range(5):
            assert evaluate(100, 2.0, 3.0, 1.2345) == first

    def test_returns_float(self):
        assert type(evaluate(3, 2.0, 3.0, 0.1)) is float

    def test_negative_base_fractional_exponent_is_nan(self):
        # sin(2*pi*i + 4.0) < 0, so every scaled term is negative
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = evaluate(10, 2.0, 0.5, 4.0)
        assert math.isnan(result)

    def test_cosh_overflow_gives_zero_terms(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = evaluate(100, 2.0, 3.0, 1000.0)
        assert result == 0.0

    def test_negative_terms_rejected(self):
        with pytest.raises(ValueError):
            evaluate(-1, 2.0, 3.0, 0.0)


class TestSeriesField:
    def test_shape_and_dtype(self):
        phase = np.zeros((6, 9))
        result = series_field(10, 2.0, 3.0, phase)
        assert result.shape == (6, 9)
        assert result.dtype == np.float64

    def test_matches_scalar(self):
        phase = np.linspace(-4.0, 12.0, 57).reshape(3, 19)
        result = series_field(40, 2.0, 3.0, phase)
        expected = [[evaluate(40, 2.0, 3.0, p) for p in row] for row in phase]
        np.testing.assert_allclose(result, expected, rtol=1e-12, atol=0.0)

    def test_zero_terms(self):
        np.testing.assert_array_equal(series_field(0, 2.0, 3.0, np.ones((2, 2))), np.zeros((2, 2)))

    def test_mixed_finite_and_nan(self):
        phase = np.array([0.5, 4.0])
        result = series_field(10, 2.0, 0.5, phase)
        assert np.isfinite(result[0])
        assert np.isnan(result[1])
