"""
Pytest configuration and shared fixtures for bayesup tests.
"""

import pytest
import numpy as np
import jax.random as random

from bayesup import model_set_parameters, model_add_group, MCMCSettings
from bayesup.models import beta, normal, bernoulli
from bayesup.registry import reset_registry


@pytest.fixture
def rng_seed():
    """Default RNG seed for reproducible tests."""
    return 42


@pytest.fixture
def key(rng_seed):
    """JAX PRNG key for reproducible tests."""
    return random.PRNGKey(rng_seed)


@pytest.fixture
def small_mcmc():
    """Short sampler run, enough for bookkeeping checks."""
    return MCMCSettings(periods=200, burnin=0.1)


@pytest.fixture
def normal_target():
    """Normal(2, 1) with its parameters as the sampled quantity, data = 0."""
    return model_set_parameters(normal, 2.0, 1.0)


@pytest.fixture
def flat_beta():
    """Beta(1, 1) prior."""
    return model_set_parameters(beta, 1.0, 1.0)


@pytest.fixture
def bernoulli_data():
    """700 successes and 300 failures."""
    return np.concatenate([np.ones(700), np.zeros(300)])


@pytest.fixture
def normal_prior_on_p():
    """Normal prior over a Bernoulli p; not in the conjugate table."""
    prior = model_set_parameters(normal, 0.5, 1.0)
    model_add_group(prior, MCMCSettings(periods=400, burnin=0.1))
    return prior


@pytest.fixture
def clean_registry():
    """Restore the conjugate table after a test registers pairs."""
    yield
    reset_registry()
