"""
Bayesian Updating.

update(data, prior, likelihood, key) turns a prior and a likelihood into a
posterior, trying in order:

1. The conjugate table (registry.py). A hit returns the closed-form
   posterior and nothing is sampled.
2. Block Metropolis-Hastings over the product of prior and likelihood, if the
   prior has p or log_likelihood. Any "mcmc" settings group on the prior is
   carried over to the sampler.
3. Importance resampling, if the prior can only draw: each prior draw is
   weighted by the likelihood's p. The prior's "mcmc" group (attached with
   defaults if absent) gives the number of draws; burn-in does not apply.

Simulated posteriors have a draw method but no p, so one can be passed back
in as the prior of a further update and is sampled by importance resampling.

Usage errors do not raise. They come back as a Model with `error` set:
    'd'  prior draw size differs from the likelihood's parameter count
    'm'  prior has none of p, log_likelihood, draw
    'c'  the conjugate update cannot use the data given
    'n'  prior or likelihood missing
"""

import math

import jax.random as random

from .data import Data, as_data, unpack
from .error_handling import ERROR_CONJUGATE, ERROR_DIMENSION, ERROR_NO_METHOD, ERROR_NO_MODEL
from .mcmc import DrawAccumulator, MCMCSettings, get_mcmc_settings, model_metropolis
from .model import (
    Model,
    error_model,
    maybe_prep,
    model_copy,
    model_draw,
    model_free,
    model_log_likelihood,
    model_p,
)
from .models.pmf import pmf_estimate
from .registry import get_conjugate
from .settings import settings_copy_group, settings_free_all

import logging
logger = logging.getLogger('bayesup')


# ============================================================================
# PRODUCT MODEL
# ============================================================================

def _product_log_likelihood(data, model):
    prior, likelihood = model.more
    params = model.parameters.vector
    unpack(params, likelihood.parameters)
    return (model_log_likelihood(Data(vector=params.copy()), prior)
            + model_log_likelihood(data, likelihood))


def _product_constraint(data, model):
    _, likelihood = model.more
    unpack(model.parameters.vector, likelihood.parameters)
    return likelihood.constraint(data, likelihood)


def product_model(data, prior: Model, likelihood: Model) -> Model:
    """
    Unnormalized posterior over the likelihood's parameters.

    log_likelihood(data, m) = prior's log likelihood at m's parameters
                              + likelihood's log likelihood of the data
                              with its parameters set to m's.

    The constraint is the likelihood's, if it has one. `more` holds copies
    of the prior and likelihood; the prior's copy carries every settings group
    except "mcmc", which belongs on the product itself. The copies are shared
    with the sampled posterior built from the product, whose draw method
    keeps evaluating them.
    """
    out = Model(name="Product of the prior and likelihood", kind="product",
                vsize=prior.dsize, dsize=prior.dsize,
                log_likelihood=_product_log_likelihood,
                constraint=_product_constraint if likelihood.constraint is not None else None)
    prior_copy = model_copy(prior, copy_settings=False)
    for name in prior.settings or {}:
        if name != MCMCSettings.settings_name:
            settings_copy_group(prior_copy, prior, name)
    out.more = (prior_copy, model_copy(likelihood))
    out.parameters = Data.alloc(prior.dsize)
    out.data = data
    return out


# ============================================================================
# IMPORTANCE RESAMPLING
# ============================================================================

def importance_resample(data, prior: Model, likelihood: Model, key) -> Model:
    """
    Weighted prior draws: each draw is a row, weighted by the likelihood's p
    at that draw. Draws with a non-finite p are redrawn.
    """
    s = get_mcmc_settings(prior, add=True)
    work = model_copy(likelihood)
    tsize = work.parameters.total_size()
    accumulator = DrawAccumulator(tsize)
    numerical_fails = 0

    while len(accumulator) < s.periods:
        key, draw_key = random.split(key)
        candidate = model_draw(draw_key, prior)
        unpack(candidate, work.parameters)
        p = model_p(data, work)
        if not math.isfinite(p):
            numerical_fails += 1
            logger.debug(f"Trouble evaluating the likelihood function at vector beginning "
                         f"with {candidate[0]:g}. Throwing it out and trying again.")
            continue
        accumulator.append(candidate, weight=p)

    if numerical_fails:
        logger.warning(f"[WARN] {numerical_fails} prior draws gave a non-finite likelihood and were redrawn")
    model_free(work)
    out = pmf_estimate(accumulator.flush())
    out.p = None
    return out


# ============================================================================
# UPDATE
# ============================================================================

def update(data, prior: Model, likelihood: Model, key) -> Model:
    """
    Take in a prior and likelihood, and output a posterior.

    Args:
        data: Data for the likelihood (a Data page, array-like, or None)
        prior: Prior model over the likelihood's parameters
        likelihood: Likelihood model; unparametrized prototypes are prepped
            on a copy
        key: JAX random key, used only when the posterior is simulated

    Returns:
        A closed-form posterior, a point-mass model over simulated parameter
        vectors, or an error model (see module docstring)
    """
    if prior is None or likelihood is None:
        message = "update needs both a prior and a likelihood"
        logger.error(message)
        return error_model(ERROR_NO_MODEL, message)
    data = as_data(data)

    conjugate = get_conjugate(prior, likelihood)
    if conjugate is not None:
        logger.debug(f"Conjugate update: {prior.kind}/{likelihood.kind}")
        try:
            return conjugate(data, prior, likelihood)
        except ValueError as e:
            logger.error(f"Conjugate update failed: {e}")
            return error_model(ERROR_CONJUGATE, str(e))

    s = get_mcmc_settings(prior)
    like, like_is_copy = maybe_prep(data, likelihood)
    try:
        tsize = like.parameters.total_size()
        if prior.dsize != tsize:
            message = (f"Size of a draw from the prior does not match the size of the "
                       f"likelihood's parameters ({prior.dsize} != {tsize}).")
            if tsize > prior.dsize:
                message += (" Perhaps fix some of the likelihood's parameters "
                            "to reduce its parameter count?")
            logger.error(message)
            return error_model(ERROR_DIMENSION, message)

        if prior.p is not None or prior.log_likelihood is not None:
            product = product_model(data, prior, like)
            if s is not None:
                settings_copy_group(product, prior, MCMCSettings.settings_name)
            try:
                return model_metropolis(data, product, key)
            except Exception:
                for part in product.more:
                    model_free(part)
                raise
            finally:
                # The posterior holds its own copy of the run's settings
                settings_free_all(product)

        if prior.draw is None:
            message = "The prior has no p, log_likelihood, or draw method"
            logger.error(message)
            return error_model(ERROR_NO_METHOD, message)

        return importance_resample(data, prior, like, key)
    finally:
        if like_is_copy:
            model_free(like)
