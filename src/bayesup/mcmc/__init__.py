"""
MCMC Subpackage - Block Metropolis-Hastings sampler.

This package contains the core MCMC sampling logic:
- backend: Run driver (model_metropolis) and the posterior's draw method
- config: MCMCSettings group and its defaults
- diagnostics: Acceptance rate reporting
- sampling: Block proposal and MH step functions
- types: Core data structures (Proposal, DrawAccumulator, RunCounters)
"""

# Import types first (needed by other modules)
from .types import Proposal, DrawAccumulator, RunCounters

from .config import (
    MCMCSettings,
    MCMC_DEFAULTS,
    mcmc_settings_from_config,
    get_mcmc_settings,
)
from .backend import model_metropolis, metropolis_draw
from .sampling import propose_block, metropolis_block_step, main_mcmc_loop
from .diagnostics import block_acceptance_rates, log_acceptance_summary, report_run

__all__ = [
    'Proposal',
    'DrawAccumulator',
    'RunCounters',
    'MCMCSettings',
    'MCMC_DEFAULTS',
    'mcmc_settings_from_config',
    'get_mcmc_settings',
    'model_metropolis',
    'metropolis_draw',
    'propose_block',
    'metropolis_block_step',
    'main_mcmc_loop',
    'block_acceptance_rates',
    'log_acceptance_summary',
    'report_run',
]
