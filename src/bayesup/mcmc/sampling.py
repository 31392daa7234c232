"""
MCMC Sampling Functions.

Core sampling functions for the MCMC backend:
- propose_block: Draw a candidate sub-vector for one block
- metropolis_block_step: Metropolis-Hastings step for a single block
- main_mcmc_loop: Round-robin over blocks for `periods` iterations

The chain state lives on the MCMCSettings group: `current` is the packed
(all pages) parameter vector of the last accepted state and `last_ll` its
log likelihood. `draw` is a scratch copy of the packed vector that candidates
are written into.
"""

import math

import numpy as np
import jax.random as random

from ..data import unpack
from ..error_handling import ConstraintError
from ..model import model_draw, model_log_likelihood
from .types import DrawAccumulator, RunCounters

import logging
logger = logging.getLogger('bayesup')


def propose_block(key, s, draw: np.ndarray, block: int) -> None:
    """Overwrite draw's slice for `block` with a sample from its proposal."""
    lo, hi = s.block_starts[block], s.block_starts[block + 1]
    candidate = model_draw(key, s.proposals[block].proposal)
    if candidate.size != hi - lo:
        raise ValueError(f"Proposal for block {block} drew {candidate.size} values, "
                         f"block has {hi - lo}")
    draw[lo:hi] = candidate


def metropolis_block_step(key, data, model, s, draw: np.ndarray, block: int,
                          counters: RunCounters):
    """
    Metropolis-Hastings step for a single block.

    Candidates that violate the model's constraint or give a non-finite log
    likelihood are redrawn on the spot; they are tallied in `counters` and
    are neither accepts nor rejects.

    Args:
        key: JAX random key
        data: Data the log likelihood is evaluated on
        model: Model whose parameter table is overwritten with each candidate
        s: MCMCSettings holding the chain state and proposals
        draw: Packed parameter vector, updated in place
        block: Index of the block to update
        counters: Retry tallies for the run

    Returns:
        accepted: Whether the candidate was accepted
        new_key: Updated random key

    Raises:
        ConstraintError: If s.max_constraint_fails consecutive candidates
            violate the constraint
    """
    lo, hi = s.block_starts[block], s.block_starts[block + 1]
    proposal = s.proposals[block]
    consecutive_fails = 0

    while True:
        key, proposal_key, accept_key = random.split(key, 3)
        propose_block(proposal_key, s, draw, block)
        unpack(draw, model.parameters, all_pages=True)

        if model.constraint is not None and model.constraint(data, model):
            counters.constraint_fails += 1
            consecutive_fails += 1
            if s.max_constraint_fails is not None and consecutive_fails >= s.max_constraint_fails:
                draw[lo:hi] = s.current[lo:hi]
                unpack(draw, model.parameters, all_pages=True)
                raise ConstraintError(
                    f"{consecutive_fails} consecutive proposals for block {block} "
                    f"failed to meet the model's parameter constraints"
                )
            continue

        ll = model_log_likelihood(data, model)
        if not math.isfinite(ll):
            counters.numerical_fails += 1
            logger.debug(f"Trouble evaluating the log likelihood at vector beginning with "
                         f"{draw[0]:g}. Throwing it out and trying again.")
            continue
        break

    ratio = ll - s.last_ll
    if ratio >= 0:
        accepted = True
    else:
        with np.errstate(divide='ignore'):
            accepted = bool(np.log(float(random.uniform(accept_key))) < ratio)

    if accepted:
        s.current[:] = draw
        s.last_ll = ll
        proposal.accept_count += 1
        s.accept_count += 1
        if proposal.step_fn is not None:
            proposal.step_fn(draw[lo:hi].copy(), proposal, s)
    else:
        logger.debug(f"reject, with exp(ll_now-ll_proposal) = exp({ll:g}-{s.last_ll:g}) "
                     f"= {math.exp(ratio):g}")
        proposal.reject_count += 1
        s.reject_count += 1
        draw[lo:hi] = s.current[lo:hi]
        unpack(draw, model.parameters, all_pages=True)

    return accepted, key


def main_mcmc_loop(key, data, model, s, draw: np.ndarray, accumulator: DrawAccumulator,
                   counters: RunCounters):
    """
    Run `s.periods` block steps, cycling through the blocks in order.

    Every iteration counts toward the accept/reject tallies and adaptation;
    only iterations past the burn-in are appended to the accumulator.

    Returns:
        new_key: Updated random key
    """
    burn = s.burn_iterations()
    block = 0
    for i in range(1, s.periods + 1):
        s.proposal_count = i
        _, key = metropolis_block_step(key, data, model, s, draw, block, counters)
        if i > burn:
            accumulator.append(s.current)
        block = (block + 1) % s.block_count
    return key
