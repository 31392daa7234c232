"""
Conjugate Posterior Updates

Closed-form posteriors for the prior/likelihood pairs in the conjugate table
(see registry.py). Each function has the signature

    fn(data, prior, likelihood) -> posterior Model

and returns a copy of the prior with its parameter vector updated in place.
Inputs the closed form cannot use raise ValueError before anything is copied.

Data conventions follow the stock models in bayesup.models: binomial data is
two columns per row, (failures, successes); other likelihoods use every vector
and matrix entry as one observation.
"""

import numpy as np

from .data import Data
from .model import Model, model_copy


def _observations(data: Data) -> np.ndarray:
    return data.numeric_values() if data is not None else np.zeros(0)


def beta_binomial(data, prior: Model, likelihood: Model) -> Model:
    """
    Beta(a, b) prior, Binomial likelihood.

    With data: a += total successes (column 1), b += total failures (column 0).
    Without data, a parametrized likelihood Binomial(n, p) counts as
    n*p successes and n*(1-p) failures.
    """
    if data is None:
        if likelihood.parameters is None:
            raise ValueError("Binomial update needs data or a parametrized likelihood")
    elif data.matrix is None or data.matrix.shape[1] < 2:
        raise ValueError("Binomial data needs two columns: (failures, successes)")

    out = model_copy(prior)
    params = out.parameters.vector
    if data is None:
        n, p = likelihood.parameters.vector[:2]
        params[0] += n * p
        params[1] += n * (1 - p)
    else:
        params[0] += data.matrix[:, 1].sum()
        params[1] += data.matrix[:, 0].sum()
    return out


def beta_bernoulli(data, prior: Model, likelihood: Model) -> Model:
    """Beta(a, b) prior, Bernoulli likelihood: a += nonzero count, b += zero count."""
    out = model_copy(prior)
    x = _observations(data)
    successes = float(np.count_nonzero(x))
    out.parameters.vector[0] += successes
    out.parameters.vector[1] += x.size - successes
    return out


def gamma_exponential(data, prior: Model, likelihood: Model) -> Model:
    """
    Gamma(shape, scale) prior on the rate, Exponential likelihood.

    shape += n; scale = 1/(1/scale + sum x)
    """
    out = model_copy(prior)
    x = _observations(data)
    params = out.parameters.vector
    params[0] += x.size
    params[1] = 1.0 / (1.0 / params[1] + x.sum())
    return out


def gamma_poisson(data, prior: Model, likelihood: Model) -> Model:
    """
    Gamma(shape, scale) prior on the rate, Poisson likelihood.

    shape += sum x; scale = scale/(scale*n + 1)
    """
    out = model_copy(prior)
    x = _observations(data)
    params = out.parameters.vector
    params[0] += x.sum()
    params[1] = params[1] / (params[1] * x.size + 1)
    return out


def normal_normal(data, prior: Model, likelihood: Model) -> Model:
    """
    Normal(mu0, sigma0) prior on the mean of a fixed-variance Normal likelihood.

        mu    = (mu0/sigma0^2 + n*xbar/sigma^2) / (1/sigma0^2 + n/sigma^2)
        sigma = (1/sigma0^2 + n/sigma^2)^(-1/2)

    The likelihood variance is the likelihood's own sigma when it is
    parametrized, else the sample variance of the data. With no data, a
    parametrized likelihood counts as one observation at its mean.
    """
    mu_pri, sigma_pri = prior.parameters.vector[:2]
    var_pri = sigma_pri ** 2
    has_params = likelihood.parameters is not None
    if data is None:
        if not has_params:
            raise ValueError("Normal/Normal update needs data or a parametrized likelihood")
        mu_like = likelihood.parameters.vector[0]
        var_like = likelihood.parameters.vector[1] ** 2
        n = 1
    else:
        x = _observations(data)
        n = x.size
        if n == 0:
            raise ValueError("Normal/Normal update got an empty data set")
        mu_like = x.mean()
        if has_params:
            var_like = likelihood.parameters.vector[1] ** 2
        elif n > 1:
            var_like = x.var(ddof=1)
        else:
            raise ValueError("One observation and an unparametrized likelihood: no variance to use")
    precision = 1.0 / var_pri + n / var_like
    out = model_copy(prior)
    out.parameters.vector[0] = (mu_pri / var_pri + n * mu_like / var_like) / precision
    out.parameters.vector[1] = precision ** -0.5
    return out
