"""
MCMC Configuration.

The Metropolis-Hastings sampler reads its tunables from, and writes its run
state to, an MCMCSettings group attached to the model being sampled under the
name "mcmc". Attach one yourself to change the defaults:

    model_add_group(model, MCMCSettings(periods=2000, burnin=0.1))

or build one from a plain dict:

    mcmc_settings_from_config({'periods': 2000, 'gibbs_chunks': 'item'})

Defaults:
    periods             6000
    burnin              0.05   fraction of periods; values > 1 are read as a
                               number of periods and rescaled
    target_accept_rate  0.35
    gibbs_chunks        'a'    all parameters in one block
    max_constraint_fails None  no cap on consecutive constraint failures
"""

import math
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

import numpy as np

from ..block_specs import GibbsChunks
from ..data import Data
from ..model import Model, model_free
from ..settings import SettingsGroup, model_add_group, settings_get_group
from .types import Proposal

import logging
logger = logging.getLogger('bayesup')


MCMC_DEFAULTS = {
    'periods': 6000,
    'burnin': 0.05,
    'target_accept_rate': 0.35,
    'gibbs_chunks': GibbsChunks.ALL,
    'max_constraint_fails': None,
}


@dataclass(eq=False)
class MCMCSettings(SettingsGroup):
    """
    Tunables and run state of the block Metropolis-Hastings sampler.

    Tunables:
        periods: Number of sampler iterations
        burnin: Fraction of iterations discarded from the output
        target_accept_rate: Accept rate the proposal adaptation aims for
        gibbs_chunks: Block partitioning mode
        max_constraint_fails: Optional cap on consecutive constraint failures

    Run state (written by the sampler):
        block_count, block_starts: Block partition of the packed parameters
        proposals: One Proposal per block
        proposal_is_copy: True when this group owns the proposal models
        accept_count, reject_count: Tallies over all blocks
        constraint_fails, numerical_fails: Candidates redrawn during the run
        last_ll: Log likelihood of the current state
        proposal_count: Iterations run so far
        pmf: Posterior point-mass model produced by the run
        base_model: Model the chain was run for
        data: Data the chain evaluates its likelihood on
        current: Packed current state of the chain
    """
    settings_name = "mcmc"

    periods: int = MCMC_DEFAULTS['periods']
    burnin: float = MCMC_DEFAULTS['burnin']
    target_accept_rate: float = MCMC_DEFAULTS['target_accept_rate']
    gibbs_chunks: GibbsChunks = MCMC_DEFAULTS['gibbs_chunks']
    max_constraint_fails: Optional[int] = MCMC_DEFAULTS['max_constraint_fails']

    block_count: int = 0
    block_starts: Optional[List[int]] = None
    proposals: Optional[List[Proposal]] = None
    proposal_is_copy: bool = False
    accept_count: int = 0
    reject_count: int = 0
    constraint_fails: int = 0
    numerical_fails: int = 0
    last_ll: float = -math.inf
    proposal_count: int = 0
    pmf: Optional[Model] = None
    base_model: Optional[Model] = None
    data: Optional[Data] = None
    current: Optional[np.ndarray] = None
    lock: Any = field(default_factory=threading.RLock, repr=False, compare=False)

    def __post_init__(self):
        self.periods = int(self.periods)
        self.gibbs_chunks = GibbsChunks.parse(self.gibbs_chunks)

    def copy(self) -> 'MCMCSettings':
        """Copy with independent proposal models (owned by the copy)."""
        return replace(
            self,
            block_starts=None if self.block_starts is None else list(self.block_starts),
            proposals=None if self.proposals is None else [p.copy() for p in self.proposals],
            proposal_is_copy=bool(self.proposals),
            current=None if self.current is None else self.current.copy(),
            lock=threading.RLock(),
        )

    def release(self) -> None:
        """Free the proposal models if this group owns them."""
        if self.proposal_is_copy and self.proposals:
            for p in self.proposals:
                model_free(p.proposal)
        self.proposals = None
        self.proposal_is_copy = False

    def normalize_burnin(self) -> None:
        """Rescale a burn-in given as a whole number of periods to a fraction."""
        if self.burnin > 1:
            self.burnin = self.burnin / float(self.periods)
            logger.warning("Burn-in should be a fraction of the number of periods, "
                           f"not a whole number of periods. Rescaling to burnin={self.burnin:g}.")

    def burn_iterations(self) -> int:
        """Iterations discarded before recording starts."""
        return int(math.ceil(round(self.periods * self.burnin, 9)))

    def retained_rows(self) -> int:
        """Rows the posterior table will hold after a full run."""
        return self.periods - self.burn_iterations()

    def reset_run_state(self) -> None:
        self.accept_count = 0
        self.reject_count = 0
        self.constraint_fails = 0
        self.numerical_fails = 0
        self.proposal_count = 0
        self.last_ll = -math.inf
        for p in self.proposals or []:
            p.accept_count = 0
            p.reject_count = 0


def mcmc_settings_from_config(config: Dict[str, Any]) -> MCMCSettings:
    """
    Build MCMCSettings from a plain dict, filling defaults.

    All config keys use lowercase with underscores. Unknown keys are ignored.
    """
    config = dict(config)
    for key, default in MCMC_DEFAULTS.items():
        config.setdefault(key, default)
    return MCMCSettings(**{key: config[key] for key in MCMC_DEFAULTS})


def get_mcmc_settings(model: Model, add: bool = False) -> Optional[MCMCSettings]:
    """The model's MCMC settings group; attach a default one if asked and absent."""
    s = settings_get_group(model, MCMCSettings.settings_name)
    if s is None and add:
        s = model_add_group(model, MCMCSettings())
    return s
