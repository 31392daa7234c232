"""
MCMC Data Structures and Type Definitions.

This module contains the core data structures used by the sampler:
- Proposal: Per-block proposal distribution and its accept/reject tallies
- DrawAccumulator: Append-only table of retained parameter vectors
- RunCounters: Retry tallies reported at the end of a run
"""

from dataclasses import dataclass, replace
from typing import Callable, List, Optional

import numpy as np

from ..data import Data
from ..model import Model, model_copy


@dataclass
class Proposal:
    """
    Proposal distribution for one block.

    Fields:
        proposal: Model drawn from to get a candidate sub-vector
            (a multivariate normal unless supplied by the caller)
        step_fn: fn(accepted_subvector, proposal, settings), called after
            every accepted draw of this block; None for a fixed proposal
        accept_count: Accepted candidates for this block
        reject_count: Rejected candidates for this block
        last_scale: Covariance scale factor applied by the latest adaptation
    """
    proposal: Model
    step_fn: Optional[Callable] = None
    accept_count: int = 0
    reject_count: int = 0
    last_scale: Optional[float] = None

    def copy(self) -> 'Proposal':
        return replace(self, proposal=model_copy(self.proposal))


@dataclass
class RunCounters:
    """Proposals discarded and redrawn; neither counts as a rejection."""
    constraint_fails: int = 0
    numerical_fails: int = 0


class DrawAccumulator:
    """
    Append-only table of accepted parameter vectors plus a weights vector.

    Rows are buffered and moved into the Data table by flush(); the table is
    never reordered or inserted into.
    """

    def __init__(self, n_cols: int, data: Optional[Data] = None):
        self.n_cols = n_cols
        if data is None:
            data = Data(matrix=np.zeros((0, n_cols)), weights=np.zeros(0))
        self.data = data
        self._rows: List[np.ndarray] = []
        self._weights: List[float] = []

    def __len__(self):
        return self.data.n_rows + len(self._rows)

    def append(self, row, weight: float = 1.0) -> None:
        row = np.asarray(row, dtype=np.float64).ravel()
        if row.size != self.n_cols:
            raise ValueError(f"Row of length {row.size} does not fit a table with {self.n_cols} columns")
        self._rows.append(row.copy())
        self._weights.append(float(weight))

    def flush(self) -> Data:
        """Move buffered rows into the table and return it."""
        if self._rows:
            new_rows = np.vstack(self._rows)
            new_weights = np.asarray(self._weights)
            if self.data.matrix is None:
                self.data.matrix = new_rows
            else:
                self.data.matrix = np.vstack([self.data.matrix, new_rows])
            if self.data.weights is None:
                self.data.weights = new_weights
            else:
                self.data.weights = np.concatenate([self.data.weights, new_weights])
            self._rows = []
            self._weights = []
        return self.data
