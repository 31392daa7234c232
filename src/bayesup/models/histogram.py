"""
Histogram Model - Empirical Distribution

A one-dimensional binned density built from the numeric entries of a data
table. The binning state lives in a HistogramSettings group attached to the
model under the name "histogram", so the model can be copied, passed to
update() as a prior, and released like any other model.

Layout of the bins:
    bin 0             (-inf, min)          catch-all tail
    bins 1..k         uniform over [min, max], top edge nudged up two ulps
    bin k+1           [max + 2ulp, +inf)   catch-all tail

Every observed value lands in one of the k finite bins, the maximum included.
Bin masses are normalized to sum to 1 over all k+2 bins.

Density of a multi-element input is the SUM of the per-element bin masses,
not their product. The Metropolis-Hastings weighting relies on this.

Draws invert a cumulative table that is built on the first draw request and
reused afterwards. Copies of the settings group do not carry it over.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import jax.random as random

from ..data import Data, as_data
from ..error_handling import SettingsNotFoundError
from ..model import Model, model_copy
from ..settings import SettingsGroup, model_add_group, settings_get_group


# Bin count used by the model's estimate operation
DEFAULT_BINS = 1000


@dataclass
class BinnedDensity:
    """Bin edges (n+1,) and normalized bin masses (n,)."""
    edges: np.ndarray
    bins: np.ndarray

    @property
    def n(self) -> int:
        return self.bins.size

    def find(self, x) -> np.ndarray:
        """Index of the bin holding each value: edges[i] <= x < edges[i+1]."""
        return np.searchsorted(self.edges, x, side='right') - 1

    def copy(self) -> 'BinnedDensity':
        return BinnedDensity(edges=self.edges.copy(), bins=self.bins.copy())


@dataclass
class InverseCDF:
    """Cumulative bin masses (n+1,) over the same edges, for inverse sampling."""
    edges: np.ndarray
    sums: np.ndarray

    @classmethod
    def from_density(cls, pdf: BinnedDensity) -> 'InverseCDF':
        if np.any(pdf.bins < 0):
            raise ValueError("Histogram has negative bin masses")
        total = pdf.bins.sum()
        if total <= 0:
            raise ValueError("Histogram has no mass to sample from")
        sums = np.concatenate(([0.0], np.cumsum(pdf.bins) / total))
        return cls(edges=pdf.edges.copy(), sums=sums)

    def sample(self, r: float) -> float:
        """Map a uniform variate in [0, 1) to a value, linear within the bin."""
        n = self.sums.size - 1
        i = int(np.searchsorted(self.sums, r, side='right')) - 1
        i = min(max(i, 0), n - 1)
        width = self.sums[i + 1] - self.sums[i]
        delta = (r - self.sums[i]) / width if width > 0 else 0.0
        with np.errstate(invalid='ignore'):
            return float(self.edges[i] + delta * (self.edges[i + 1] - self.edges[i]))


class HistogramSettings(SettingsGroup):
    """
    Binning state of a histogram model.

    Fields:
        pdf: Normalized binned density
        cdf: Inverse-sampling table, built lazily by the first draw
        histobase: Optional model the histogram was derived from
        kernelbase: Optional kernel model for smoothed variants
    """
    settings_name = "histogram"

    def __init__(self, pdf: BinnedDensity, histobase: Optional[Model] = None,
                 kernelbase: Optional[Model] = None):
        self.pdf = pdf
        self.cdf: Optional[InverseCDF] = None
        self.histobase = histobase
        self.kernelbase = kernelbase

    def copy(self) -> 'HistogramSettings':
        # The inverse-sampling table is regenerated on demand; base models are shared.
        return HistogramSettings(self.pdf.copy(), histobase=self.histobase,
                                 kernelbase=self.kernelbase)

    def release(self) -> None:
        self.pdf = None
        self.cdf = None
        self.histobase = None
        self.kernelbase = None

    def inverse_cdf(self) -> InverseCDF:
        if self.cdf is None:
            self.cdf = InverseCDF.from_density(self.pdf)
        return self.cdf


def histogram_settings_alloc(data, bins: int) -> HistogramSettings:
    """
    Bin the numeric entries of a data table.

    Args:
        data: Data table (vector and/or matrix) or array-like
        bins: Number of interior bins (k >= 1)

    Returns:
        HistogramSettings with k+2 bins summing to 1

    Raises:
        ValueError: For empty or non-finite data, or bins < 1
    """
    data = as_data(data)
    if bins < 1:
        raise ValueError(f"bins must be >= 1, got {bins}")
    values = data.numeric_values() if data is not None else np.zeros(0)
    if values.size == 0:
        raise ValueError("Cannot build a histogram from an empty data set")
    if not np.all(np.isfinite(values)):
        raise ValueError("Histogram data contains NaN or Inf values")

    lo, hi = values.min(), values.max()
    inner = np.linspace(lo, hi, bins + 1)
    inner[-1] = np.nextafter(np.nextafter(hi, np.inf), np.inf)
    edges = np.concatenate(([-np.inf], inner, [np.inf]))

    pdf = BinnedDensity(edges=edges, bins=np.zeros(bins + 2))
    counts = np.bincount(pdf.find(values), minlength=bins + 2)
    pdf.bins = counts / float(values.size)
    return HistogramSettings(pdf)


def _histogram_group(model: Model) -> HistogramSettings:
    hp = settings_get_group(model, HistogramSettings.settings_name)
    if hp is None:
        raise SettingsNotFoundError(HistogramSettings.settings_name,
                                    "histogram model has not been estimated")
    return hp


def _histogram_estimate(data, model):
    return histogram_estimate(data, bins=DEFAULT_BINS, model=model)


def _histogram_p(data, model):
    hp = _histogram_group(model)
    values = data.numeric_values()
    return float(np.sum(hp.pdf.bins[hp.pdf.find(values)]))


def _histogram_draw(key, model):
    cdf = _histogram_group(model).inverse_cdf()
    while True:
        key, subkey = random.split(key)
        x = cdf.sample(float(random.uniform(subkey)))
        if np.isfinite(x):
            return np.array([x])


histogram = Model(name="Histogram", kind="histogram", dsize=1,
                  estimate=_histogram_estimate, p=_histogram_p, draw=_histogram_draw)


def histogram_estimate(data, bins: int = DEFAULT_BINS, model: Optional[Model] = None) -> Model:
    """Histogram model estimated from `data` with `bins` interior bins."""
    data = as_data(data)
    out = model_copy(histogram if model is None else model)
    model_add_group(out, histogram_settings_alloc(data, bins))
    out.data = data
    return out
