"""
MCMC Backend - Block Metropolis-Hastings Driver.

- model_metropolis: Run the sampler and return the posterior as a point-mass model
- metropolis_draw: Draw method of that posterior; continues the chain by one accept

Setup allocates one random-walk proposal per block unless the MCMCSettings
group already carries proposals, in which case they are borrowed. The chain
starts from a vector of ones.
"""

import threading
import time
from datetime import timedelta

import numpy as np

from ..block_specs import compute_block_starts, block_sizes
from ..data import as_data, pack, unpack
from ..error_handling import SettingsNotFoundError, validate_mcmc_settings
from ..model import Model, maybe_prep, model_free
from ..models.pmf import pmf_estimate
from ..proposals import setup_normal_proposal
from ..settings import settings_copy_group, settings_get_group
from .config import MCMCSettings, get_mcmc_settings
from .diagnostics import report_run
from .sampling import main_mcmc_loop, metropolis_block_step
from .types import DrawAccumulator, RunCounters

import logging
logger = logging.getLogger('bayesup')


# One sampler run at a time per process
_METROPOLIS_LOCK = threading.Lock()


def _setup_blocks(s: MCMCSettings, total_len: int) -> bool:
    """
    Partition the packed vector and allocate proposals if none are attached.

    Returns:
        True if proposals were allocated here (and are owned by `s`)
    """
    if s.proposals:
        if s.block_starts is None:
            s.block_starts = compute_block_starts(s.gibbs_chunks, total_len)
        if len(s.proposals) != len(s.block_starts) - 1:
            raise ValueError(f"{len(s.proposals)} proposals supplied for "
                             f"{len(s.block_starts) - 1} blocks")
        s.block_count = len(s.proposals)
        return False

    s.block_starts = compute_block_starts(s.gibbs_chunks, total_len)
    s.block_count = len(s.block_starts) - 1
    s.proposals = [setup_normal_proposal(size) for size in block_sizes(s.block_starts)]
    s.proposal_is_copy = True
    return True


def model_metropolis(data, model: Model, key) -> Model:
    """
    Draw from a model's parameter space with block Metropolis-Hastings.

    The model's log likelihood (or p) is evaluated on `data` at each candidate
    parameter vector. Tunables come from the model's "mcmc" settings group,
    which is attached with defaults if absent and receives the run state.

    If the model has no parameters yet, an internal copy is prepped and
    sampled; the caller's model only gains the settings group.

    Args:
        data: Data for the likelihood (a Data page, array-like, or None)
        model: Model to sample the parameters of
        key: JAX random key

    Returns:
        Model over the retained draws. Its draw method continues the chain
        (see metropolis_draw) and it carries a copy of the "mcmc" settings
        group. It has no p, so as a prior in update() it is sampled by
        importance resampling rather than evaluated as a density.

    Raises:
        ValueError: For a missing model or invalid settings
        NotImplementedError: For gibbs_chunks='b'
        ConstraintError: If max_constraint_fails is set and reached
    """
    if model is None:
        raise ValueError("model_metropolis needs a model")
    data = as_data(data)

    with _METROPOLIS_LOCK:
        s = get_mcmc_settings(model, add=True)
        s.normalize_burnin()
        validate_mcmc_settings(s)

        m, _ = maybe_prep(data, model, force_copy=True)
        drawv = pack(m.parameters, all_pages=True)
        allocated = False
        try:
            allocated = _setup_blocks(s, drawv.size)
            s.reset_run_state()

            drawv[:] = 1
            unpack(drawv, m.parameters, all_pages=True)
            s.current = drawv.copy()
            s.data = data

            counters = RunCounters()
            accumulator = DrawAccumulator(drawv.size)

            logger.info(f"--- MCMC RUN ({s.periods} periods, {s.block_count} blocks) ---")
            start_run_time = time.perf_counter()
            main_mcmc_loop(key, data, m, s, drawv, accumulator, counters)
            wall_time = time.perf_counter() - start_run_time
        except Exception:
            if allocated:
                s.release()
            model_free(m)
            raise

        s.constraint_fails = counters.constraint_fails
        s.numerical_fails = counters.numerical_fails

        table = accumulator.flush()
        table.weights = np.ones(table.n_rows)
        outp = pmf_estimate(table)
        # Draw-only: as a prior it is sampled through the continuing chain
        outp.p = None
        outp.log_likelihood = None
        outp.draw = metropolis_draw
        s.pmf = outp
        s.base_model = m
        settings_copy_group(outp, model, MCMCSettings.settings_name)

        report_run(s, counters)
        logger.info(f"  Total Wall Time: {timedelta(seconds=int(wall_time))} ({wall_time:.2f}s)")
    return outp


def metropolis_draw(key, model: Model) -> np.ndarray:
    """
    Draw method for models produced by model_metropolis.

    Continues the chain from its last accepted state until one candidate is
    accepted, appends the new state to the posterior's table (weight 1), and
    returns it. Safe to call from several threads with independent keys.

    Raises:
        SettingsNotFoundError: If the model has no "mcmc" settings group
        ValueError: If the group does not hold a finished run
    """
    s = settings_get_group(model, MCMCSettings.settings_name)
    if s is None:
        raise SettingsNotFoundError(MCMCSettings.settings_name,
                                    "metropolis_draw needs the settings of a finished sampler run")
    if s.base_model is None or s.pmf is None or s.current is None:
        raise ValueError("The MCMC settings group does not hold a finished sampler run")

    with s.lock:
        m = s.base_model
        draw = s.current.copy()
        counters = RunCounters()
        reject_count = 0
        block = s.proposal_count % s.block_count
        while True:
            s.proposal_count += 1
            accepted, key = metropolis_block_step(key, s.data, m, s, draw, block, counters)
            block = (block + 1) % s.block_count
            if accepted:
                break
            reject_count += 1

        s.constraint_fails += counters.constraint_fails
        s.numerical_fails += counters.numerical_fails

        table = DrawAccumulator(s.current.size, data=s.pmf.data)
        table.append(s.current, weight=1.0)
        table.flush()

        if reject_count:
            logger.debug(f"M-H rejections before an accept: {reject_count}.")
        if counters.constraint_fails:
            logger.info(f"{counters.constraint_fails} proposals failed to meet "
                        f"the model's parameter constraints")
        return s.current.copy()
