"""
Probability Mass Function Model

A point-mass distribution over the rows of a data table. Each row (of the
matrix, or each element of a vector-only table) is one support point; the
table's weights give the relative mass of each point (equal if absent).

This is the shape of every simulated posterior: the Metropolis-Hastings
sampler and the importance resampler both produce a weighted table of
parameter vectors and wrap it with pmf_estimate(). The simulated posteriors
drop p and keep only draw, since their mass sits on a finite set of points
in a continuous space.
"""

import numpy as np
import jax.random as random

from ..data import Data
from ..model import Model, model_copy


def _points_and_weights(data: Data, width: int = 1):
    if data.matrix is not None:
        points = data.matrix
    elif data.vector is not None:
        points = data.vector.reshape(-1, width)
    else:
        raise ValueError("PMF table has neither a vector nor a matrix")
    weights = data.weights if data.weights is not None else np.ones(points.shape[0])
    return points, weights


def _pmf_estimate(data, model):
    out = model_copy(model)
    points, _ = _points_and_weights(data)
    out.data = data
    out.dsize = points.shape[1]
    return out


def _pmf_p(data, model):
    points, weights = _points_and_weights(model.data)
    total = weights.sum()
    # A vector query holds whole rows of the table back to back
    queries, _ = _points_and_weights(data, width=points.shape[1])
    prob = 1.0
    for row in queries:
        matches = np.all(points == row, axis=1)
        prob *= weights[matches].sum() / total
    return prob


def _pmf_draw(key, model):
    points, weights = _points_and_weights(model.data)
    idx = int(random.choice(key, points.shape[0], p=weights / weights.sum()))
    return points[idx].copy()


pmf = Model(name="Probability mass function", kind="pmf", estimate=_pmf_estimate,
            p=_pmf_p, draw=_pmf_draw)


def pmf_estimate(data: Data) -> Model:
    """Point-mass model over the rows of `data`."""
    return _pmf_estimate(data, pmf)
