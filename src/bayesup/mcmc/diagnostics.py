"""
MCMC Diagnostics.

End-of-run reporting for the block Metropolis-Hastings sampler:
- block_acceptance_rates: Per-block accept rates from the proposal tallies
- log_acceptance_summary: Log MH acceptance rate statistics
- report_run: Overall accept percentage and retry counts
"""

from typing import List

import numpy as np

from ..error_handling import diagnose_run, print_diagnostics

import logging
logger = logging.getLogger('bayesup')


def block_acceptance_rates(settings) -> np.ndarray:
    """Accept rate of each block; 0 for a block that was never tried."""
    rates = []
    for p in settings.proposals or []:
        total = p.accept_count + p.reject_count
        rates.append(p.accept_count / total if total else 0.0)
    return np.array(rates)


def log_acceptance_summary(settings, labels: List[str] = None) -> None:
    """
    Log summary statistics for MH acceptance rates.

    Args:
        settings: MCMCSettings after a run
        labels: Optional block labels; defaults to "Block i"
    """
    rates = block_acceptance_rates(settings)
    if rates.size == 0:
        return
    if labels is None:
        labels = [f"Block {i}" for i in range(rates.size)]

    logger.info(f"--- MH Acceptance Rates ({rates.size} blocks) ---")
    logger.info(f"  Mean: {np.mean(rates):.1%}  Median: {np.median(rates):.1%}  "
                f"Min: {np.min(rates):.1%}  Max: {np.max(rates):.1%}")

    low_rate_mask = rates < 0.10
    if np.any(low_rate_mask):
        low_count = int(np.sum(low_rate_mask))
        low_labels = [lbl for lbl, is_low in zip(labels, low_rate_mask) if is_low]
        logger.warning(f"  {low_count} block(s) have acceptance rate < 10%")
        if low_count <= 10:
            logger.warning(f"    Low blocks: {', '.join(low_labels)}")


def report_run(settings, counters) -> dict:
    """Log the end-of-run diagnostics and return them."""
    diagnostics = diagnose_run(settings, counters.constraint_fails, counters.numerical_fails)
    print_diagnostics(diagnostics)
    log_acceptance_summary(settings)
    return diagnostics
