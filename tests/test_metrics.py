"""
Unit tests for goodness-of-fit measures.
"""

import numpy as np
import pytest

from dbh_height.nls.metrics import (
    calculate_aic,
    calculate_bias,
    calculate_bic,
    calculate_mae,
    calculate_rmse,
    gaussian_log_likelihood,
)


class TestErrorMeasures:
    """Test RMSE, bias and MAE."""

    observed = np.array([10.0, 12.0, 14.0, 16.0])
    predicted = np.array([11.0, 11.0, 15.0, 17.0])

    def test_rmse(self):
        assert calculate_rmse(self.observed, self.predicted) == pytest.approx(1.0)

    def test_bias_sign(self):
        # predictions are above observations on average
        assert calculate_bias(self.observed, self.predicted) == pytest.approx(0.5)
        assert calculate_bias(self.predicted, self.observed) == pytest.approx(-0.5)

    def test_mae(self):
        assert calculate_mae(self.observed, self.predicted) == pytest.approx(1.0)

    def test_perfect_prediction(self):
        assert calculate_rmse(self.observed, self.observed) == 0.0
        assert calculate_mae(self.observed, self.observed) == 0.0
        assert calculate_bias(self.observed, self.observed) == 0.0


class TestInformationCriteria:
    """Test log-likelihood, AIC and BIC."""

    def test_log_likelihood(self):
        n, rss = 4, 2.0
        expected = -n / 2 * (np.log(2 * np.pi) + 1 - np.log(n) + np.log(rss))
        assert gaussian_log_likelihood(rss, n) == pytest.approx(expected)

    def test_aic_counts_variance_parameter(self):
        n, rss, k = 4, 2.0, 2
        expected = -2 * gaussian_log_likelihood(rss, n) + 2 * (k + 1)
        assert calculate_aic(rss, n, k) == pytest.approx(expected)

    def test_bic(self):
        n, rss, k = 50, 3.0, 3
        expected = -2 * gaussian_log_likelihood(rss, n) + np.log(n) * (k + 1)
        assert calculate_bic(rss, n, k) == pytest.approx(expected)

    def test_extra_parameter_penalized(self):
        assert calculate_aic(5.0, 100, 3) - calculate_aic(5.0, 100, 2) == pytest.approx(2.0)

    def test_zero_rss_is_finite(self):
        assert np.isfinite(calculate_aic(0.0, 10, 2))
