"""
Tests for the data-generating processes.

Validates:
    - Constructors reject invalid parameters with InvalidParameterError
    - Population moments and labels of each family
    - Draw shape, reproducibility and support
    - RegressionDGP design layout and heteroskedastic errors
    - Sample immutability
"""

import math

import numpy as np
import pytest

from pysimstudy.core.exceptions import (
    DimensionError,
    InvalidParameterError,
    ValidationError,
)
from pysimstudy.dgp import DGPConfig, DGPKind, RegressionDGP, Sample


# ═══════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════


class TestConstructors:

    def test_kinds(self):
        assert DGPConfig.normal().kind is DGPKind.NORMAL
        assert DGPConfig.student_t(3).kind is DGPKind.STUDENT_T
        assert DGPConfig.cauchy().kind is DGPKind.STUDENT_T
        assert DGPConfig.chi_square(3).kind is DGPKind.CHI_SQUARE
        assert DGPConfig.pareto(1.5).kind is DGPKind.PARETO

    @pytest.mark.parametrize("build", [
        lambda: DGPConfig.normal(sd=0.0),
        lambda: DGPConfig.normal(sd=-1.0),
        lambda: DGPConfig.normal(mean=np.nan),
        lambda: DGPConfig.student_t(0),
        lambda: DGPConfig.student_t(-2),
        lambda: DGPConfig.chi_square(0),
        lambda: DGPConfig.pareto(0),
        lambda: DGPConfig.pareto(1.5, scale=-1.0),
    ])
    def test_invalid_parameters(self, build):
        with pytest.raises(InvalidParameterError):
            build()

    def test_error_names_parameter(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            DGPConfig.student_t(df=-1)
        assert exc_info.value.parameter == "df"
        assert exc_info.value.value == -1

    def test_equality_ignores_kernel(self):
        assert DGPConfig.student_t(3) == DGPConfig.student_t(3)
        assert DGPConfig.student_t(3) != DGPConfig.student_t(4)
        assert DGPConfig.cauchy() == DGPConfig.student_t(1)


# ═══════════════════════════════════════════════════════════════════════
# Moments and labels
# ═══════════════════════════════════════════════════════════════════════


class TestMoments:

    def test_normal(self):
        dgp = DGPConfig.normal(2.0, 3.0)
        assert dgp.mean == 2.0
        assert dgp.variance == 9.0

    def test_student_t(self):
        assert DGPConfig.student_t(5).variance == pytest.approx(5.0 / 3.0)
        assert DGPConfig.student_t(2).variance == math.inf
        assert math.isnan(DGPConfig.cauchy().mean)
        assert math.isnan(DGPConfig.cauchy().variance)

    def test_chi_square(self):
        assert DGPConfig.chi_square(3).mean == 3.0
        assert DGPConfig.chi_square(3, center=True).mean == 0.0
        assert DGPConfig.chi_square(3, center=True).variance == 6.0

    def test_pareto(self):
        dgp = DGPConfig.pareto(1.5)
        assert dgp.mean == pytest.approx(3.0)
        assert dgp.variance == math.inf
        assert DGPConfig.pareto(3.0, scale=2.0).variance == pytest.approx(3.0)
        assert DGPConfig.pareto(1.0).mean == math.inf


class TestLabels:

    @pytest.mark.parametrize("dgp, label", [
        (DGPConfig.normal(), "N(0, 1)"),
        (DGPConfig.cauchy(), "Cauchy"),
        (DGPConfig.student_t(3), "t(3)"),
        (DGPConfig.student_t(3, loc=1.0), "t(3) + 1"),
        (DGPConfig.chi_square(3, center=True), "chi2(3) centered"),
        (DGPConfig.pareto(1.5), "Pareto(1.5)"),
    ])
    def test_label(self, dgp, label):
        assert dgp.label == label
        assert str(dgp) == label

    def test_regression_label(self):
        reg = RegressionDGP.build(DGPConfig.pareto(1.5), DGPConfig.normal())
        assert reg.label == "y = Xb + u; x ~ Pareto(1.5), u ~ N(0, 1)"


# ═══════════════════════════════════════════════════════════════════════
# Draws
# ═══════════════════════════════════════════════════════════════════════


class TestDraws:

    @pytest.mark.parametrize("dgp", [
        DGPConfig.normal(),
        DGPConfig.student_t(3),
        DGPConfig.cauchy(),
        DGPConfig.chi_square(3, center=True),
        DGPConfig.pareto(1.5),
    ])
    def test_shape_and_reproducibility(self, dgp):
        a = dgp.draw(50, np.random.default_rng(3))
        b = dgp.draw(50, np.random.default_rng(3))
        assert a.shape == (50,)
        assert a.dtype == np.float64
        np.testing.assert_array_equal(a, b)

    def test_invalid_size(self, rng):
        with pytest.raises(InvalidParameterError):
            DGPConfig.normal().draw(0, rng)

    def test_pareto_support(self, rng):
        x = DGPConfig.pareto(1.5, scale=2.0).draw(10_000, rng)
        assert x.min() >= 2.0

    def test_chi_square_centered_mean(self, rng):
        x = DGPConfig.chi_square(3, center=True).draw(200_000, rng)
        assert abs(x.mean()) < 0.05

    def test_normal_moments(self, rng):
        x = DGPConfig.normal(1.0, 2.0).draw(200_000, rng)
        assert x.mean() == pytest.approx(1.0, abs=0.03)
        assert x.std() == pytest.approx(2.0, rel=0.02)

    def test_student_t_loc(self, rng):
        x = DGPConfig.student_t(5, loc=10.0).draw(100_000, rng)
        assert np.median(x) == pytest.approx(10.0, abs=0.05)

    def test_sample_is_univariate(self, rng):
        sample = DGPConfig.normal().sample(10, rng)
        assert sample.n == 10
        assert sample.X is None
        assert not sample.has_design


# ═══════════════════════════════════════════════════════════════════════
# RegressionDGP
# ═══════════════════════════════════════════════════════════════════════


class TestRegressionDGP:

    def test_design_layout(self, rng):
        reg = RegressionDGP.build(DGPConfig.normal(), DGPConfig.normal(), (1.0, 2.0, -1.0))
        sample = reg.sample(25, rng)
        assert reg.p == 3
        assert sample.X.shape == (25, 3)
        np.testing.assert_array_equal(sample.X[:, 0], 1.0)
        assert sample.y.shape == (25,)

    def test_noise_free_response(self, rng):
        """Degenerate errors are not allowed, but tiny ones reproduce X beta."""
        reg = RegressionDGP.build(
            DGPConfig.normal(), DGPConfig.normal(sd=1e-12), (1.0, 2.0),
        )
        sample = reg.sample(10, rng)
        np.testing.assert_allclose(sample.y, 1.0 + 2.0 * sample.X[:, 1], atol=1e-9)

    def test_reproducible(self):
        reg = RegressionDGP.build(DGPConfig.pareto(1.5), DGPConfig.student_t(3))
        a = reg.sample(30, np.random.default_rng(9))
        b = reg.sample(30, np.random.default_rng(9))
        np.testing.assert_array_equal(a.X, b.X)
        np.testing.assert_array_equal(a.y, b.y)

    def test_heteroskedastic_scales_errors(self):
        reg = RegressionDGP.build(
            DGPConfig.normal(), DGPConfig.normal(), (0.0, 0.0), heteroskedastic=True,
        )
        homo = RegressionDGP.build(DGPConfig.normal(), DGPConfig.normal(), (0.0, 0.0))
        het_sample = reg.sample(40, np.random.default_rng(2))
        homo_sample = homo.sample(40, np.random.default_rng(2))
        np.testing.assert_allclose(
            het_sample.y, homo_sample.y * np.abs(homo_sample.X[:, 1])
        )

    def test_intercept_only(self, rng):
        reg = RegressionDGP.build(DGPConfig.normal(), DGPConfig.normal(), (5.0,))
        assert reg.p == 1
        assert reg.sample(8, rng).X.shape == (8, 1)

    def test_empty_coefficients(self):
        with pytest.raises(InvalidParameterError):
            RegressionDGP.build(DGPConfig.normal(), DGPConfig.normal(), ())

    def test_heteroskedastic_needs_regressor(self):
        with pytest.raises(InvalidParameterError):
            RegressionDGP.build(
                DGPConfig.normal(), DGPConfig.normal(), (1.0,), heteroskedastic=True,
            )

    def test_non_config_rejected(self):
        with pytest.raises(InvalidParameterError):
            RegressionDGP.build("normal", DGPConfig.normal())

    def test_non_finite_coefficient(self):
        with pytest.raises(InvalidParameterError):
            RegressionDGP.build(DGPConfig.normal(), DGPConfig.normal(), (1.0, np.inf))


# ═══════════════════════════════════════════════════════════════════════
# Sample
# ═══════════════════════════════════════════════════════════════════════


class TestSample:

    def test_read_only(self, rng):
        sample = DGPConfig.normal().sample(5, rng)
        with pytest.raises(ValueError):
            sample.y[0] = 1.0

    def test_from_arrays_copies(self):
        y = np.array([1.0, 2.0, 3.0])
        sample = Sample.from_arrays(y)
        y[0] = 100.0
        assert sample.y[0] == 1.0

    def test_from_arrays_column_vector(self):
        sample = Sample.from_arrays([[1.0], [2.0], [3.0]])
        assert sample.y.shape == (3,)
        assert len(sample) == 3

    def test_from_arrays_1d_design(self):
        sample = Sample.from_arrays([1.0, 2.0, 3.0], [4.0, 5.0, 6.0])
        assert sample.X.shape == (3, 1)

    def test_length_mismatch(self):
        with pytest.raises(DimensionError):
            Sample.from_arrays([1.0, 2.0, 3.0], np.ones((4, 2)))

    def test_non_finite(self):
        with pytest.raises(ValidationError):
            Sample.from_arrays([1.0, np.nan])

    def test_empty(self):
        with pytest.raises(ValidationError):
            Sample.from_arrays([])

    def test_take(self, regression_sample):
        idx = np.array([0, 0, 5])
        sub = regression_sample.take(idx)
        assert sub.n == 3
        np.testing.assert_array_equal(sub.y, regression_sample.y[idx])
        np.testing.assert_array_equal(sub.X, regression_sample.X[idx])
        assert not sub.y.flags.writeable
