"""
Univariate Parametric Models

Prototype models for the families covered by the conjugate table. Each is a
Model with no parameters; get a parametrized copy with model_set_parameters():

    prior = model_set_parameters(beta, 1.0, 1.0)

Parametrizations (parameter vector order):
    beta:        (alpha, beta)
    binomial:    (n, p)   two-column data is (failures, successes) per row
    bernoulli:   (p,)     any nonzero datum counts as a success
    gamma:       (shape, scale)
    exponential: (rate,)
    poisson:     (rate,)
    normal:      (mu, sigma)

Log likelihoods sum over every vector and matrix entry of the data.
Draws take a JAX PRNG key and return a length-1 array.
"""

import numpy as np
import jax.numpy as jnp
import jax.random as random
import jax.scipy.stats as stats
from jax.scipy.special import gammaln, xlogy, xlog1py

from ..data import Data
from ..model import Model


def _values(data: Data) -> jnp.ndarray:
    if data is None:
        return jnp.zeros(0)
    return jnp.asarray(data.numeric_values())


def _params(model: Model):
    return [float(v) for v in model.parameters.vector]


# ============================================================================
# BETA
# ============================================================================

def _beta_log_likelihood(data, model):
    a, b = _params(model)
    return jnp.sum(stats.beta.logpdf(_values(data), a, b))


def _beta_constraint(data, model):
    a, b = _params(model)
    return not (a > 0 and b > 0)


def _beta_draw(key, model):
    a, b = _params(model)
    return np.array([float(random.beta(key, a, b))])


beta = Model(name="Beta distribution", kind="beta", vsize=2, dsize=1,
             log_likelihood=_beta_log_likelihood, constraint=_beta_constraint,
             draw=_beta_draw)


# ============================================================================
# BINOMIAL / BERNOULLI
# ============================================================================

def _binomial_logpmf(k, n, p):
    return (gammaln(n + 1) - gammaln(k + 1) - gammaln(n - k + 1)
            + xlogy(k, p) + xlog1py(n - k, -p))


def _binomial_log_likelihood(data, model):
    n, p = _params(model)
    if data is not None and data.matrix is not None and data.matrix.shape[1] >= 2:
        misses = jnp.asarray(data.matrix[:, 0])
        hits = jnp.asarray(data.matrix[:, 1])
        return jnp.sum(_binomial_logpmf(hits, misses + hits, p))
    return jnp.sum(_binomial_logpmf(_values(data), n, p))


def _binomial_constraint(data, model):
    n, p = _params(model)
    return not (n >= 0 and 0 <= p <= 1)


def _binomial_draw(key, model):
    n, p = _params(model)
    hits = random.bernoulli(key, p, shape=(int(round(n)),)).sum()
    return np.array([float(hits)])


binomial = Model(name="Binomial distribution", kind="binomial", vsize=2, dsize=1,
                 log_likelihood=_binomial_log_likelihood, constraint=_binomial_constraint,
                 draw=_binomial_draw)


def _bernoulli_log_likelihood(data, model):
    (p,) = _params(model)
    x = (_values(data) != 0).astype(jnp.float64)
    return jnp.sum(xlogy(x, p) + xlog1py(1 - x, -p))


def _bernoulli_constraint(data, model):
    (p,) = _params(model)
    return not 0 <= p <= 1


def _bernoulli_draw(key, model):
    (p,) = _params(model)
    return np.array([float(random.bernoulli(key, p))])


bernoulli = Model(name="Bernoulli distribution", kind="bernoulli", vsize=1, dsize=1,
                  log_likelihood=_bernoulli_log_likelihood, constraint=_bernoulli_constraint,
                  draw=_bernoulli_draw)


# ============================================================================
# GAMMA / EXPONENTIAL / POISSON
# ============================================================================

def _gamma_log_likelihood(data, model):
    shape, scale = _params(model)
    return jnp.sum(stats.gamma.logpdf(_values(data), shape, scale=scale))


def _gamma_constraint(data, model):
    shape, scale = _params(model)
    return not (shape > 0 and scale > 0)


def _gamma_draw(key, model):
    shape, scale = _params(model)
    return np.array([float(random.gamma(key, shape)) * scale])


gamma = Model(name="Gamma distribution", kind="gamma", vsize=2, dsize=1,
              log_likelihood=_gamma_log_likelihood, constraint=_gamma_constraint,
              draw=_gamma_draw)


def _exponential_log_likelihood(data, model):
    (rate,) = _params(model)
    return jnp.sum(stats.expon.logpdf(_values(data), scale=1.0 / rate))


def _positive_rate_constraint(data, model):
    (rate,) = _params(model)
    return not rate > 0


def _exponential_draw(key, model):
    (rate,) = _params(model)
    return np.array([float(random.exponential(key)) / rate])


exponential = Model(name="Exponential distribution", kind="exponential", vsize=1, dsize=1,
                    log_likelihood=_exponential_log_likelihood,
                    constraint=_positive_rate_constraint, draw=_exponential_draw)


def _poisson_log_likelihood(data, model):
    (rate,) = _params(model)
    return jnp.sum(stats.poisson.logpmf(_values(data), rate))


def _poisson_draw(key, model):
    (rate,) = _params(model)
    return np.array([float(random.poisson(key, rate))])


poisson = Model(name="Poisson distribution", kind="poisson", vsize=1, dsize=1,
                log_likelihood=_poisson_log_likelihood,
                constraint=_positive_rate_constraint, draw=_poisson_draw)


# ============================================================================
# NORMAL
# ============================================================================

def _normal_log_likelihood(data, model):
    mu, sigma = _params(model)
    return jnp.sum(stats.norm.logpdf(_values(data), mu, sigma))


def _normal_constraint(data, model):
    mu, sigma = _params(model)
    return not sigma > 0


def _normal_draw(key, model):
    mu, sigma = _params(model)
    return np.array([mu + sigma * float(random.normal(key))])


normal = Model(name="Normal distribution", kind="normal", vsize=2, dsize=1,
               log_likelihood=_normal_log_likelihood, constraint=_normal_constraint,
               draw=_normal_draw)
