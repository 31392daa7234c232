"""
bayesup - Bayesian Updating for Parametric Models

Public API:
    Updating:
        update - Posterior from a prior, a likelihood, and optional data
        model_metropolis - Block Metropolis-Hastings over a model's parameters
        metropolis_draw - Draw method of a sampled posterior (continues the chain)

    Conjugate Table:
        register_conjugate - Add a closed-form (prior kind, likelihood kind) update
        get_conjugate - Look up the update for a prior/likelihood pair
        list_conjugates - List registered pairs

    Settings Registry:
        SettingsGroup - Interface for configuration groups attached to models
        model_add_group - Attach a SettingsGroup under its own name
        settings_add_group - Attach any object with explicit copy/release functions
        settings_get_group, settings_rm_group, settings_copy_group

    MCMC Configuration:
        MCMCSettings - Sampler tunables and run state (settings name "mcmc")
        mcmc_settings_from_config - Build MCMCSettings from a plain dict
        GibbsChunks - Block partitioning mode (ALL, ITEM, BLOCK)

    Models and Data:
        Model, Data - Model records and data tables
        models - Stock models: beta, binomial, bernoulli, gamma, exponential,
            poisson, normal, multivariate_normal, pmf, histogram

Example:
    import jax.random as random
    from bayesup import update, model_set_parameters, model_add_group, MCMCSettings
    from bayesup.models import normal, bernoulli

    prior = model_set_parameters(normal, 0.5, 1.0)
    model_add_group(prior, MCMCSettings(periods=2000, burnin=0.1))
    posterior = update([1, 1, 0, 1], prior, bernoulli, random.PRNGKey(0))
"""
# CRITICAL: Import jax_config FIRST to enable double precision before JAX is used
from . import jax_config  # noqa: F401

# Import mcmc before proposals; the proposals import the mcmc types
from . import mcmc as _mcmc  # noqa: F401

from .data import Data, pack, unpack, add_page, get_page, data_memcpy
from .model import (
    Model,
    model_copy,
    model_free,
    model_prep,
    model_estimate,
    model_p,
    model_log_likelihood,
    model_draw,
    model_set_parameters,
    error_model,
)
from .settings import (
    SettingsGroup,
    model_add_group,
    settings_add_group,
    settings_get_group,
    settings_rm_group,
    settings_copy_group,
)
from .error_handling import (
    SettingsNotFoundError,
    ConstraintError,
    ERROR_CONJUGATE,
    ERROR_DIMENSION,
    ERROR_NO_METHOD,
    ERROR_NO_MODEL,
)
from .block_specs import GibbsChunks
from .registry import register_conjugate, get_conjugate, list_conjugates
from .mcmc import MCMCSettings, mcmc_settings_from_config, model_metropolis, metropolis_draw
from .update import update
from . import models

__version__ = "0.1.0"

__all__ = [
    'update',
    'model_metropolis',
    'metropolis_draw',
    'register_conjugate',
    'get_conjugate',
    'list_conjugates',
    'SettingsGroup',
    'model_add_group',
    'settings_add_group',
    'settings_get_group',
    'settings_rm_group',
    'settings_copy_group',
    'MCMCSettings',
    'mcmc_settings_from_config',
    'GibbsChunks',
    'SettingsNotFoundError',
    'ConstraintError',
    'ERROR_CONJUGATE',
    'ERROR_DIMENSION',
    'ERROR_NO_METHOD',
    'ERROR_NO_MODEL',
    'Model',
    'Data',
    'pack',
    'unpack',
    'add_page',
    'get_page',
    'data_memcpy',
    'model_copy',
    'model_free',
    'model_prep',
    'model_estimate',
    'model_p',
    'model_log_likelihood',
    'model_draw',
    'model_set_parameters',
    'error_model',
    'models',
]
