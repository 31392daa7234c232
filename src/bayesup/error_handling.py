"""
Error Handling and Validation Utilities for Bayesian Updating

This module provides the exception types, settings validation, and end-of-run
diagnostic reporting used by the sampler and the update orchestrator.
"""

from typing import Any, Dict

import logging
logger = logging.getLogger('bayesup')


class SettingsNotFoundError(KeyError):
    """A named settings group was requested but is not attached."""

    def __init__(self, name: str, reason: str = "not found"):
        self.name = name
        super().__init__(f"Settings group '{name}': {reason}")


class ConstraintError(RuntimeError):
    """A proposal failed the model's constraint more times than allowed."""


# Error codes carried by Model.error on models returned from update()
ERROR_DIMENSION = 'd'     # prior draw size != likelihood parameter size
ERROR_NO_METHOD = 'm'     # prior has no p, log_likelihood, or draw
ERROR_CONJUGATE = 'c'     # closed-form update cannot use the data given
ERROR_NO_MODEL = 'n'      # prior or likelihood missing


def validate_mcmc_settings(settings) -> None:
    """
    Validates that MCMC settings are sensible.

    Burn-in must already be normalized to a fraction of periods.

    Args:
        settings: MCMCSettings instance

    Raises:
        ValueError: If the settings are invalid
    """
    errors = []

    if settings.periods < 1:
        errors.append(f"periods must be >= 1, got {settings.periods}")

    if not 0 <= settings.burnin < 1:
        errors.append(f"burnin must be in [0, 1), got {settings.burnin}")

    rate = settings.target_accept_rate
    if not 0 < rate < 1:
        errors.append(f"target_accept_rate must be in (0, 1), got {rate}")

    fails = settings.max_constraint_fails
    if fails is not None and fails < 1:
        errors.append(f"max_constraint_fails must be >= 1 or None, got {fails}")

    if errors:
        raise ValueError("Invalid MCMC settings:\n  " + "\n  ".join(errors))


def diagnose_run(settings, constraint_fails: int, numerical_fails: int) -> Dict[str, Any]:
    """
    Summarizes a finished sampler run.

    Args:
        settings: MCMCSettings after the run
        constraint_fails: Proposals discarded for violating the model's constraint
        numerical_fails: Proposals discarded for a non-finite log likelihood

    Returns:
        diagnostics: Dictionary with issues, warnings, and info
    """
    diagnostics = {
        'issues': [],
        'warnings': [],
        'info': [],
    }

    total = settings.accept_count + settings.reject_count
    accept_rate = settings.accept_count / total if total else 0.0
    diagnostics['accept_rate'] = accept_rate
    diagnostics['info'].append(f"M-H sampling accept percent = {100 * accept_rate:3.3f}%")

    if settings.accept_count == 0:
        diagnostics['issues'].append("No proposal was ever accepted - chain never moved")

    if constraint_fails:
        diagnostics['warnings'].append(
            f"{constraint_fails} proposals failed to meet the model's parameter constraints"
        )
    if numerical_fails:
        diagnostics['warnings'].append(
            f"{numerical_fails} proposals gave a non-finite log likelihood and were redrawn"
        )

    return diagnostics


def print_diagnostics(diagnostics: Dict[str, Any]) -> None:
    """Log diagnostics from diagnose_run."""
    for issue in diagnostics['issues']:
        logger.error(f"[ERROR] {issue}")

    for warning in diagnostics['warnings']:
        logger.warning(f"[WARN] {warning}")

    for info in diagnostics['info']:
        logger.info(f"[INFO] {info}")
