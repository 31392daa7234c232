"""
Random Walk Proposal for MCMC Sampling

Adaptive Gaussian random walk, one per block of the parameter vector.

Proposal: x' ~ N(x_current, scale * Sigma)
where:
    - x_current is the block's last accepted sub-vector
    - Sigma starts as the identity and is rescaled by adapt()

Hastings ratio: 0 (symmetric proposal, q(x'|x) = q(x|x'))

Adaptation runs after every accepted draw of a block but only acts on every
ADAPT_EVERY-th acceptance. The accept rate it steers by is padded with
pseudo-counts worth 1% of the run, so early tallies do not swing the scale:

    ar    = (accepts + .01 * periods * target) / (accepts + rejects + .01 * periods)
    scale = clamp(target / ar, SCALE_MIN, SCALE_MAX)
"""

import numpy as np

from ..models.multivariate_normal import mvn_set_parameters
from ..mcmc.types import Proposal


ADAPT_EVERY = 100
SCALE_MIN = 0.1
SCALE_MAX = 10.0


def setup_normal_proposal(size: int) -> Proposal:
    """Standard-normal random walk proposal for a block of `size` parameters."""
    model = mvn_set_parameters(np.ones(size), np.eye(size))
    return Proposal(proposal=model, step_fn=step_to_vector)


def step_to_vector(accepted, proposal: Proposal, settings) -> None:
    """Recenter the proposal on the accepted sub-vector, then adapt its spread."""
    proposal.proposal.parameters.vector[:] = np.asarray(accepted, dtype=np.float64)
    adapt(proposal, settings)


def adapt(proposal: Proposal, settings) -> None:
    """
    Rescale the proposal covariance toward the target accept rate.

    Acts only when the block's accept count is a positive multiple of
    ADAPT_EVERY.
    """
    accepts = proposal.accept_count
    if accepts == 0 or accepts % ADAPT_EVERY:
        return
    pad = .01 * settings.periods
    target = settings.target_accept_rate
    ar = (accepts + pad * target) / (accepts + proposal.reject_count + pad)
    scale = float(np.clip(target / ar, SCALE_MIN, SCALE_MAX))
    proposal.proposal.parameters.matrix *= scale
    proposal.last_scale = scale
