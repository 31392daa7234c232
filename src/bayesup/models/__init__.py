"""
Stock Models

Prototype models used as priors, likelihoods, proposals, and posteriors:
- univariate: beta, binomial, bernoulli, gamma, exponential, poisson, normal
- multivariate_normal: the sampler's proposal distribution
- pmf: weighted point masses (the shape of simulated posteriors)
- histogram: binned empirical distribution

The `kind` tag on each prototype is what the conjugate table keys on, so
parametrized copies keep their family identity.
"""

from .univariate import beta, binomial, bernoulli, gamma, exponential, poisson, normal
from .multivariate_normal import multivariate_normal, mvn_set_parameters
from .pmf import pmf, pmf_estimate
from .histogram import (
    histogram,
    histogram_estimate,
    histogram_settings_alloc,
    HistogramSettings,
    BinnedDensity,
    InverseCDF,
    DEFAULT_BINS,
)

__all__ = [
    'beta',
    'binomial',
    'bernoulli',
    'gamma',
    'exponential',
    'poisson',
    'normal',
    'multivariate_normal',
    'mvn_set_parameters',
    'pmf',
    'pmf_estimate',
    'histogram',
    'histogram_estimate',
    'histogram_settings_alloc',
    'HistogramSettings',
    'BinnedDensity',
    'InverseCDF',
    'DEFAULT_BINS',
]
