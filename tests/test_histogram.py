"""
Tests for the histogram (binned empirical distribution) model.

Run with: pytest tests/test_histogram.py -v
"""

import numpy as np
import pytest
import jax.random as random

from bayesup import Data, Model, SettingsNotFoundError, model_copy, model_draw, model_p, model_estimate
from bayesup.models import histogram, histogram_estimate, DEFAULT_BINS
from bayesup.models.histogram import histogram_settings_alloc, HistogramSettings, InverseCDF
from bayesup.settings import settings_get_group


# ============================================================================
# BUILD
# ============================================================================

class TestBuild:

    @pytest.mark.parametrize("bins", [1, 3, 10, 250])
    def test_bins_sum_to_one(self, bins):
        values = np.random.default_rng(0).normal(size=500)
        hp = histogram_settings_alloc(values, bins)
        assert hp.pdf.n == bins + 2
        assert hp.pdf.bins.sum() == pytest.approx(1.0)

    def test_tails_are_infinite(self):
        hp = histogram_settings_alloc([1.0, 2.0, 3.0], 4)
        assert hp.pdf.edges[0] == -np.inf
        assert hp.pdf.edges[-1] == np.inf
        assert hp.pdf.bins[0] == 0
        assert hp.pdf.bins[-1] == 0

    def test_max_lands_in_finite_bin(self):
        values = np.array([0.0, 0.5, 1.0, 1.0])
        hp = histogram_settings_alloc(values, 2)
        idx = hp.pdf.find(values)
        assert np.all(idx >= 1)
        assert np.all(idx <= 2)
        assert hp.pdf.bins[2] == pytest.approx(0.75)

    def test_constant_data(self):
        hp = histogram_settings_alloc([4.0, 4.0, 4.0], 5)
        assert hp.pdf.bins.sum() == pytest.approx(1.0)
        assert hp.pdf.bins[0] == 0 and hp.pdf.bins[-1] == 0

    def test_matrix_and_vector_entries_all_count(self):
        d = Data(vector=[1.0, 2.0], matrix=[[3.0, 4.0]])
        hp = histogram_settings_alloc(d, 4)
        assert np.count_nonzero(hp.pdf.bins) == 4

    @pytest.mark.parametrize("values,bins", [([], 5), ([1.0, np.nan], 5), ([1.0, 2.0], 0)])
    def test_invalid_input_raises(self, values, bins):
        with pytest.raises(ValueError):
            histogram_settings_alloc(np.array(values), bins)


# ============================================================================
# DENSITY
# ============================================================================

class TestDensity:

    def test_single_value_is_bin_mass(self):
        m = histogram_estimate([0.0, 0.0, 1.0, 1.0], bins=2)
        assert model_p(Data(vector=[0.0]), m) == pytest.approx(0.5)

    def test_multi_element_density_is_sum(self):
        m = histogram_estimate([0.0, 0.0, 0.0, 1.0], bins=2)
        p0 = model_p(Data(vector=[0.0]), m)
        p1 = model_p(Data(vector=[1.0]), m)
        assert model_p(Data(vector=[0.0, 1.0]), m) == pytest.approx(p0 + p1)
        assert model_p(Data(vector=[0.0, 1.0]), m) == pytest.approx(1.0)

    def test_outside_range_is_zero(self):
        m = histogram_estimate([0.0, 1.0], bins=2)
        assert model_p(Data(vector=[5.0]), m) == 0.0
        assert model_p(Data(vector=[-5.0]), m) == 0.0

    def test_unestimated_model_raises(self):
        with pytest.raises(SettingsNotFoundError):
            model_p(Data(vector=[0.0]), histogram)


# ============================================================================
# DRAWS
# ============================================================================

class TestDraws:

    def test_draws_within_observed_range(self, key):
        values = np.linspace(2.0, 3.0, 50)
        m = histogram_estimate(values, bins=10)
        for k in random.split(key, 25):
            x = model_draw(k, m)
            assert x.shape == (1,)
            assert 2.0 <= x[0] <= 3.0 + 1e-12

    def test_inverse_cdf_built_once(self, key):
        m = histogram_estimate([0.0, 1.0, 2.0], bins=3)
        hp = settings_get_group(m, "histogram")
        assert hp.cdf is None
        model_draw(key, m)
        cdf = hp.cdf
        assert cdf is not None
        model_draw(random.split(key)[0], m)
        assert hp.cdf is cdf

    def test_copy_drops_inverse_cdf(self, key):
        m = histogram_estimate([0.0, 1.0, 2.0], bins=3)
        model_draw(key, m)
        c = model_copy(m)
        hp = settings_get_group(c, "histogram")
        assert hp.cdf is None
        assert hp.pdf is not settings_get_group(m, "histogram").pdf

    def test_inverse_cdf_interpolates_within_bin(self):
        hp = histogram_settings_alloc([0.0, 1.0], 1)
        cdf = InverseCDF.from_density(hp.pdf)
        assert cdf.sample(0.5) == pytest.approx(0.5)


# ============================================================================
# ESTIMATE
# ============================================================================

class TestEstimate:

    def test_estimate_uses_default_bins(self):
        m = model_estimate(np.arange(10.0), histogram)
        hp = settings_get_group(m, "histogram")
        assert isinstance(hp, HistogramSettings)
        assert hp.pdf.n == DEFAULT_BINS + 2

    def test_prototype_untouched(self):
        histogram_estimate([1.0, 2.0], bins=2)
        assert isinstance(histogram, Model)
        assert settings_get_group(histogram, "histogram") is None
