"""
Tests for the conjugate table and the closed-form updates.

Run with: pytest tests/test_conjugates.py -v
"""

import numpy as np
import pytest
from scipy import stats

from bayesup import update, model_set_parameters, register_conjugate, get_conjugate, list_conjugates
from bayesup.models import beta, binomial, bernoulli, gamma, exponential, poisson, normal
from bayesup.registry import BUILTIN_CONJUGATES
import importlib
update_module = importlib.import_module("bayesup.update")


# ============================================================================
# TABLE
# ============================================================================

class TestConjugateTable:

    def test_builtin_pairs(self):
        assert set(list_conjugates()) >= {
            ('beta', 'binomial'), ('beta', 'bernoulli'), ('gamma', 'exponential'),
            ('gamma', 'poisson'), ('normal', 'normal'),
        }
        assert len(BUILTIN_CONJUGATES) == 5

    def test_lookup_matches_parametrized_copies(self):
        prior = model_set_parameters(beta, 2.0, 3.0)
        assert get_conjugate(prior, binomial) is BUILTIN_CONJUGATES[('beta', 'binomial')]

    def test_miss_returns_none(self):
        assert get_conjugate(normal, bernoulli) is None

    def test_register_and_duplicate(self, clean_registry):
        def fn(data, prior, likelihood):
            return prior
        register_conjugate('normal', 'bernoulli', fn)
        assert get_conjugate(normal, bernoulli) is fn
        with pytest.raises(ValueError, match="already registered"):
            register_conjugate('normal', 'bernoulli', fn)

    def test_register_empty_kind_raises(self, clean_registry):
        with pytest.raises(ValueError):
            register_conjugate('', 'bernoulli', lambda d, p, l: p)


# ============================================================================
# CLOSED-FORM UPDATES
# ============================================================================

class TestBetaBinomial:

    def test_hand_computed(self, key):
        prior = model_set_parameters(beta, 1.0, 1.0)
        post = update(np.array([[3.0, 7.0]]), prior, binomial, key)
        np.testing.assert_allclose(post.parameters.vector, [8.0, 4.0])
        assert post.kind == 'beta'

    def test_prior_untouched(self, key):
        prior = model_set_parameters(beta, 1.0, 1.0)
        update(np.array([[3.0, 7.0]]), prior, binomial, key)
        np.testing.assert_allclose(prior.parameters.vector, [1.0, 1.0])

    def test_parametrized_likelihood_without_data(self, key):
        prior = model_set_parameters(beta, 1.0, 1.0)
        like = model_set_parameters(binomial, 10.0, 0.3)
        post = update(None, prior, like, key)
        np.testing.assert_allclose(post.parameters.vector, [4.0, 8.0])

    def test_never_samples(self, key, monkeypatch):
        calls = []

        def counting_metropolis(*args, **kwargs):
            calls.append(args)
            raise AssertionError("sampler should not run for a conjugate pair")

        monkeypatch.setattr(update_module, "model_metropolis", counting_metropolis)
        prior = model_set_parameters(beta, 1.0, 1.0)
        update(np.array([[3.0, 7.0]]), prior, binomial, key)
        assert calls == []


class TestOtherPairs:

    def test_beta_bernoulli(self, key):
        prior = model_set_parameters(beta, 2.0, 2.0)
        post = update(np.array([1.0, 0.0, 1.0, 1.0]), prior, bernoulli, key)
        np.testing.assert_allclose(post.parameters.vector, [5.0, 3.0])

    def test_gamma_exponential(self, key):
        prior = model_set_parameters(gamma, 2.0, 0.5)
        x = np.array([1.0, 2.0, 3.0])
        post = update(x, prior, exponential, key)
        np.testing.assert_allclose(post.parameters.vector, [5.0, 1.0 / (2.0 + 6.0)])

    def test_gamma_poisson(self, key):
        prior = model_set_parameters(gamma, 1.0, 2.0)
        x = np.array([2.0, 4.0])
        post = update(x, prior, poisson, key)
        np.testing.assert_allclose(post.parameters.vector, [7.0, 2.0 / (2.0 * 2 + 1)])

    def test_gamma_poisson_matches_rate_posterior(self, key):
        # Gamma(shape, scale) prior on the rate: the posterior is Gamma(a + sum x, b/(b n + 1))
        prior = model_set_parameters(gamma, 3.0, 1.5)
        x = np.array([0.0, 1.0, 5.0, 2.0])
        post = update(x, prior, poisson, key)
        shape, scale = post.parameters.vector
        expected = stats.gamma(3.0 + x.sum(), scale=1.5 / (1.5 * x.size + 1))
        assert shape * scale == pytest.approx(expected.mean())

    def test_normal_normal_with_fixed_sigma(self, key):
        prior = model_set_parameters(normal, 0.0, 1.0)
        like = model_set_parameters(normal, 0.0, 2.0)
        x = np.array([1.0, 2.0, 3.0, 4.0])
        post = update(x, prior, like, key)
        precision = 1.0 + 4 / 4.0
        np.testing.assert_allclose(post.parameters.vector,
                                   [(4 * 2.5 / 4.0) / precision, precision ** -0.5])

    def test_normal_normal_sample_variance(self, key):
        prior = model_set_parameters(normal, 0.0, 1.0)
        x = np.array([1.0, 2.0, 3.0, 4.0])
        var = x.var(ddof=1)
        post = update(x, prior, normal, key)
        precision = 1.0 + 4 / var
        np.testing.assert_allclose(post.parameters.vector,
                                   [(4 * 2.5 / var) / precision, precision ** -0.5])

    def test_normal_normal_no_data_counts_once(self, key):
        prior = model_set_parameters(normal, 0.0, 1.0)
        like = model_set_parameters(normal, 2.0, 1.0)
        post = update(None, prior, like, key)
        np.testing.assert_allclose(post.parameters.vector, [1.0, 0.5 ** 0.5])
