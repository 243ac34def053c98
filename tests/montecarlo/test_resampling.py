"""
Tests for the nonparametric bootstrap driver and resampling primitives.

Verifies the resampling invariant (length n, indices in [0, n)),
centering of resample t-statistics at the original estimate, seed
reproducibility, order-statistic critical values and the bootstrap
confidence intervals.
"""

import math

import numpy as np
import pytest

from pysimstudy.core.exceptions import (
    InsufficientReplicationsError,
    InvalidParameterError,
    NumericalError,
    PySimStudyError,
    ResamplingFault,
    ValidationError,
)
from pysimstudy.dgp import Sample
from pysimstudy.estimators import StatisticConfig
from pysimstudy.montecarlo import BootstrapDesign, run_bootstrap
from pysimstudy.montecarlo._resample import (
    bootstrap_critical_value,
    check_indices,
    is_exact_level,
    nested_bootstrap_statistics,
    order_statistic_rank,
    resample_indices,
)

MEAN = StatisticConfig.mean_test()
DATA = np.arange(1.0, 101.0)


# ---------------------------------------------------------------------------
# Tests: resampling primitives
# ---------------------------------------------------------------------------

class TestResampleIndices:

    def test_range_and_shape(self, rng):
        idx = resample_indices(rng, 17)
        assert idx.shape == (17,)
        assert idx.min() >= 0
        assert idx.max() < 17

    def test_matrix(self, rng):
        idx = resample_indices(rng, 5, size=300)
        assert idx.shape == (300, 5)
        assert set(np.unique(idx)) == {0, 1, 2, 3, 4}

    def test_out_of_range_index_is_a_fault(self):
        with pytest.raises(ResamplingFault) as exc_info:
            check_indices(np.array([0, 3, 5]), 3)
        assert exc_info.value.n == 3
        assert list(exc_info.value.bad_indices) == [3, 5]

    def test_negative_index_is_a_fault(self):
        with pytest.raises(ResamplingFault):
            check_indices(np.array([0, -1, 1]), 3)

    def test_wrong_length_is_a_fault(self):
        with pytest.raises(ResamplingFault, match="length"):
            check_indices(np.array([0, 1]), 3)

    def test_fault_escapes_user_error_handlers(self):
        """A handler for configuration errors does not catch driver faults."""
        with pytest.raises(ResamplingFault):
            try:
                check_indices(np.array([9]), 1)
            except PySimStudyError:
                pytest.fail("ResamplingFault caught as a PySimStudyError")


class TestOrderStatistic:

    @pytest.mark.parametrize("B, alpha, k", [
        (199, 0.05, 190),
        (999, 0.05, 950),
        (99, 0.01, 99),
        (19, 0.05, 19),
        (200, 0.05, 191),
    ])
    def test_rank(self, B, alpha, k):
        assert order_statistic_rank(B, alpha) == k

    def test_rank_clamped(self):
        assert order_statistic_rank(9, 0.01) == 9

    def test_exact_level(self):
        assert is_exact_level(199, 0.05)
        assert is_exact_level(999, 0.01)
        assert not is_exact_level(200, 0.05)

    def test_two_sided_value(self, rng):
        t = rng.standard_normal(199)
        expected = np.sort(np.abs(t))[189]
        assert bootstrap_critical_value(t, 0.05) == expected

    def test_one_sided_values(self, rng):
        t = rng.standard_normal(199)
        ordered = np.sort(t)
        assert bootstrap_critical_value(t, 0.05, "greater") == ordered[189]
        assert bootstrap_critical_value(t, 0.05, "less") == -ordered[9]

    def test_one_sided_values_are_magnitudes(self):
        """A symmetric t* sample gives the same c for both tails."""
        t = np.concatenate([np.arange(1.0, 100.0), -np.arange(1.0, 100.0), [0.0]])
        greater = bootstrap_critical_value(t, 0.05, "greater")
        less = bootstrap_critical_value(t, 0.05, "less")
        assert greater > 0.0
        assert less == greater

    def test_infinite_statistics(self):
        t = np.concatenate([np.full(20, np.inf), np.zeros(179)])
        assert bootstrap_critical_value(t, 0.05) == np.inf
        assert bootstrap_critical_value(t, 0.2) == 0.0


class TestNestedBootstrap:

    def test_centered_at_estimate(self, univariate_sample):
        """Vectorized and per-resample paths agree on centered statistics."""
        estimate = float(np.mean(univariate_sample.y))
        fast = nested_bootstrap_statistics(
            univariate_sample, MEAN, estimate, 50, np.random.default_rng(1),
        )
        custom = StatisticConfig.custom(
            lambda s, c: MEAN.compute(s, center=c),
        )
        slow = nested_bootstrap_statistics(
            univariate_sample, custom, estimate, 50, np.random.default_rng(1),
        )
        np.testing.assert_allclose(fast, slow, rtol=1e-10, atol=1e-12)

    def test_constant_sample_gives_zeros(self):
        sample = Sample.from_arrays(np.full(10, 3.0))
        t = nested_bootstrap_statistics(sample, MEAN, 3.0, 10, np.random.default_rng(0))
        np.testing.assert_array_equal(t, 0.0)

    def test_constant_resamples_give_infinities(self):
        sample = Sample.from_arrays([1.0, 2.0, 4.0])
        t = nested_bootstrap_statistics(sample, MEAN, 7.0 / 3.0, 500, np.random.default_rng(3))
        assert not np.any(np.isnan(t))
        assert np.any(np.isinf(t))
        assert bootstrap_critical_value(t, 0.05) > 0.0

    def test_nan_statistic_fails(self):
        stat = StatisticConfig.custom(lambda s, c: (0.0, np.nan))
        with pytest.raises(NumericalError, match="NaN"):
            nested_bootstrap_statistics(
                Sample.from_arrays(DATA[:5]), stat, 0.0, 10, np.random.default_rng(0),
            )


# ---------------------------------------------------------------------------
# Tests: run_bootstrap
# ---------------------------------------------------------------------------

class TestRunBootstrap:

    def test_basic_mean(self):
        result = run_bootstrap(DATA, 999, MEAN, seed=42)
        assert result.t0 == pytest.approx(50.5, rel=1e-12)
        assert result.estimates.shape == (999,)
        assert result.statistics.shape == (999,)
        assert result.R == 999
        assert result.indices is None
        assert abs(result.bias) < 0.5
        # sd / sqrt(n) = 2.90
        assert result.se == pytest.approx(2.9, rel=0.1)
        assert result.backend_name == 'cpu_bootstrap'

    def test_indices_invariant(self):
        result = run_bootstrap(DATA[:12], 200, MEAN, seed=1, return_indices=True)
        idx = result.indices
        assert idx.shape == (200, 12)
        assert idx.min() >= 0
        assert idx.max() < 12

    def test_statistics_centered_at_t0(self):
        data = DATA[:15]
        result = run_bootstrap(data, 50, MEAN, seed=3, return_indices=True)
        for b in range(0, 50, 7):
            resample = data[result.indices[b]]
            se = resample.std(ddof=1) / math.sqrt(15)
            assert result.estimates[b] == pytest.approx(resample.mean(), rel=1e-12)
            assert result.statistics[b] == pytest.approx(
                (resample.mean() - result.t0) / se, rel=1e-9
            )

    def test_statistic0_against_null(self):
        result = run_bootstrap(DATA, 99, StatisticConfig.mean_test(null_value=50.0), seed=1)
        expected = 0.5 / (DATA.std(ddof=1) / 10.0)
        assert result.statistic0 == pytest.approx(expected, rel=1e-10)

    def test_reproducible(self):
        a = run_bootstrap(DATA, 300, MEAN, seed=42)
        b = run_bootstrap(DATA, 300, MEAN, seed=42)
        np.testing.assert_array_equal(a.estimates, b.estimates)

    def test_worker_count_does_not_matter(self):
        a = run_bootstrap(DATA, 300, MEAN, seed=42)
        b = run_bootstrap(DATA, 300, MEAN, seed=42, n_jobs=4)
        np.testing.assert_array_equal(a.statistics, b.statistics)

    def test_regression_pairs(self, regression_sample):
        stat = StatisticConfig.ols_test(coef_index=1, null_value=-2.0, variance="hc1")
        result = run_bootstrap(regression_sample, 199, stat, seed=11)
        assert result.t0 == pytest.approx(-2.0, abs=0.2)
        assert 0.0 < result.se < 0.2
        assert np.all(np.isfinite(result.statistics))

    def test_custom_scalar_statistic(self):
        stat = StatisticConfig.custom(lambda s, c: float(np.median(s.y)), name="median")
        result = run_bootstrap(DATA, 199, stat, seed=2)
        assert result.t0 == 50.5
        assert np.isnan(result.std_error0)
        assert result.info['statistic'] == "median"

    def test_too_few_replications(self):
        with pytest.raises(InsufficientReplicationsError):
            run_bootstrap(DATA, 1, MEAN, seed=1)

    def test_ols_without_design(self):
        with pytest.raises(ValidationError):
            run_bootstrap(DATA, 99, StatisticConfig.ols_test(), seed=1)

    def test_constant_sample(self):
        result = run_bootstrap(np.ones(10), 99, MEAN, seed=1)
        np.testing.assert_array_equal(result.statistics, 0.0)
        assert result.se == 0.0
        assert result.statistic0 == np.inf
        assert result.reject(0.05)

    def test_three_observations(self):
        """About one resample in nine is constant at n=3."""
        result = run_bootstrap([1.0, 2.0, 4.0], 999, MEAN, seed=1)
        assert not np.any(np.isnan(result.statistics))
        assert np.any(np.isinf(result.statistics))
        assert np.isfinite(result.se)
        lo, hi = result.conf_int("perc")["perc"]
        assert 1.0 <= lo <= hi <= 4.0
        assert not np.isnan(result.critical_value(0.05))

    def test_summary_and_repr(self):
        result = run_bootstrap(DATA, 99, MEAN, seed=1)
        assert "ORDINARY NONPARAMETRIC BOOTSTRAP" in result.summary()
        assert "BootstrapSolution" in repr(result)


class TestBootstrapInference:

    @pytest.fixture
    def result(self):
        return run_bootstrap(DATA, 999, StatisticConfig.mean_test(null_value=40.0), seed=7)

    def test_critical_value(self, result):
        expected = np.sort(np.abs(result.statistics))[949]
        assert result.critical_value(0.05) == expected

    def test_reject(self, result):
        # t against 40 is about 3.6, well beyond any sensible critical value
        assert result.reject(0.05)
        assert result.reject(0.05, "greater")
        assert not result.reject(0.05, "less")

    def test_reject_lower_tail(self):
        result = run_bootstrap(DATA, 999, StatisticConfig.mean_test(null_value=60.0), seed=7)
        assert result.statistic0 < 0.0
        c = result.critical_value(0.05, "less")
        assert c > 0.0
        assert result.reject(0.05, "less") == (result.statistic0 < -c)
        assert result.reject(0.05, "less")
        assert not result.reject(0.05, "greater")

    def test_invalid_alpha(self, result):
        with pytest.raises(InvalidParameterError):
            result.critical_value(0.0)

    def test_conf_int_types(self, result):
        ci = result.conf_int(("normal", "basic", "perc", "stud"))
        assert set(ci) == {"normal", "basic", "perc", "stud"}
        for lo, hi in ci.values():
            assert lo < result.t0 < hi
            assert hi - lo == pytest.approx(2 * 1.96 * 2.9, rel=0.2)

    def test_conf_int_string(self, result):
        assert set(result.conf_int("perc")) == {"perc"}

    def test_percentile_matches_quantiles(self, result):
        lo, hi = result.conf_int(("perc",), conf_level=0.9)["perc"]
        assert lo == pytest.approx(np.quantile(result.estimates, 0.05))
        assert hi == pytest.approx(np.quantile(result.estimates, 0.95))

    def test_unknown_type(self, result):
        with pytest.raises(ValidationError):
            result.conf_int(("bca",))

    def test_stud_needs_std_error(self):
        stat = StatisticConfig.custom(lambda s, c: float(np.mean(s.y)))
        result = run_bootstrap(DATA, 99, stat, seed=1)
        with pytest.raises(ValidationError):
            result.conf_int(("stud",))


class TestBootstrapDesign:

    def test_array_input(self):
        design = BootstrapDesign.for_bootstrap([1.0, 2.0, 3.0], 10, MEAN, seed=1)
        assert design.sample.n == 3
        assert design.seed == 1

    def test_bad_statistic(self):
        with pytest.raises(ValidationError):
            BootstrapDesign.for_bootstrap(DATA, 10, "mean", seed=1)
