"""
Conjugate Table

This module provides the registry of closed-form posterior updates. update()
looks up the (prior, likelihood) pair here before falling back to sampling.

Pairs are keyed by the models' `kind` tags, so any parametrized copy of a
stock model keeps matching its family.

Example usage:
    from bayesup import register_conjugate

    def my_update(data, prior, likelihood):
        ...
        return posterior

    register_conjugate('my_prior_kind', 'my_likelihood_kind', my_update)
"""

from .conjugates import (
    beta_binomial,
    beta_bernoulli,
    gamma_exponential,
    gamma_poisson,
    normal_normal,
)


BUILTIN_CONJUGATES = {
    ('beta', 'binomial'): beta_binomial,
    ('beta', 'bernoulli'): beta_bernoulli,
    ('gamma', 'exponential'): gamma_exponential,
    ('gamma', 'poisson'): gamma_poisson,
    ('normal', 'normal'): normal_normal,
}

_REGISTRY = dict(BUILTIN_CONJUGATES)


def register_conjugate(prior_kind, likelihood_kind, update_fn):
    """
    Register a closed-form posterior update.

    Args:
        prior_kind: `kind` tag of the prior family
        likelihood_kind: `kind` tag of the likelihood family
        update_fn: fn(data, prior, likelihood) -> posterior Model

    Raises:
        ValueError: If the pair is already registered or a tag is empty
    """
    if not prior_kind or not likelihood_kind:
        raise ValueError("Conjugate pairs need non-empty kind tags")
    key = (prior_kind, likelihood_kind)
    if key in _REGISTRY:
        raise ValueError(f"Conjugate pair {key} is already registered")
    _REGISTRY[key] = update_fn


def get_conjugate(prior, likelihood):
    """
    Get the closed-form update for a prior/likelihood pair.

    Returns:
        The update function, or None if the pair is not in the table
    """
    if not prior.kind or not likelihood.kind:
        return None
    return _REGISTRY.get((prior.kind, likelihood.kind))


def list_conjugates():
    """
    List all registered (prior_kind, likelihood_kind) pairs.
    """
    return list(_REGISTRY.keys())


def reset_registry():
    """
    Restore the table to the built-in pairs. Primarily for testing.
    """
    _REGISTRY.clear()
    _REGISTRY.update(BUILTIN_CONJUGATES)
