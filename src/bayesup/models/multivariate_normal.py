"""
Multivariate Normal Model

Parameters are one Data page: vector = mean (d,), matrix = covariance (d, d).
The dimension comes from the data, so the prototype's sizes are -1 and prep
settles them from the number of data columns.

This is also the proposal distribution of the block Metropolis-Hastings
sampler; see proposals/rand_walk.py.
"""

import numpy as np
import jax.numpy as jnp
import jax.random as random
import jax.scipy.stats as stats

from ..data import Data
from ..model import Model, model_copy


def _mvn_prep(data, model):
    if data is not None and data.matrix is not None:
        dim = data.matrix.shape[1]
    elif data is not None and data.vector is not None:
        dim = data.vector.size
    else:
        raise ValueError("Multivariate normal needs data (or explicit parameters) to set its dimension")
    model.vsize = model.msize1 = model.msize2 = model.dsize = dim
    model.parameters = Data.alloc(dim, dim, dim)


def _mvn_log_likelihood(data, model):
    mean = jnp.asarray(model.parameters.vector)
    cov = jnp.asarray(model.parameters.matrix)
    if data.matrix is not None:
        rows = jnp.asarray(data.matrix)
    else:
        rows = jnp.asarray(data.vector).reshape(1, -1)
    return jnp.sum(stats.multivariate_normal.logpdf(rows, mean, cov))


def _mvn_draw(key, model):
    mean = jnp.asarray(model.parameters.vector)
    cov = jnp.asarray(model.parameters.matrix)
    return np.asarray(random.multivariate_normal(key, mean, cov), dtype=np.float64)


multivariate_normal = Model(name="Multivariate normal distribution", kind="multivariate_normal",
                            vsize=-1, msize1=-1, msize2=-1, dsize=-1,
                            log_likelihood=_mvn_log_likelihood, draw=_mvn_draw,
                            prep=_mvn_prep)


def mvn_set_parameters(mean, cov) -> Model:
    """Copy of the multivariate normal prototype with the given mean and covariance."""
    mean = np.atleast_1d(np.asarray(mean, dtype=np.float64))
    cov = np.atleast_2d(np.asarray(cov, dtype=np.float64))
    dim = mean.size
    if cov.shape != (dim, dim):
        raise ValueError(f"Covariance shape {cov.shape} does not match mean of length {dim}")
    out = model_copy(multivariate_normal)
    out.vsize = out.msize1 = out.msize2 = out.dsize = dim
    out.parameters = Data(vector=mean.copy(), matrix=cov.copy())
    return out
