"""
Model Records.

A Model is a named record holding parameter dimensions, a parameter table,
optional per-model operations, and a settings registry (see settings.py).
Stock distributions in bayesup.models are prototype Models; use
model_set_parameters() or the family helpers to get a parametrized copy.

Operation signatures (all optional):
    estimate(data, model) -> Model
    p(data, model) -> float
    log_likelihood(data, model) -> float
    score(data, model) -> array
    predict(data, model) -> Data
    constraint(data, model) -> truthy if the parameters violate the constraint
    draw(key, model) -> 1-D array of length model.dsize
    prep(data, model) -> None (sets sizes and allocates model.parameters)

Sizes of -1 mean "depends on the data"; prep settles them.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np

from .data import Data, as_data, pack
from .settings import settings_copy_group, settings_free_all


@dataclass(eq=False)
class Model:
    """
    A parametric (or empirical) statistical model.

    Fields:
        name: Human-readable name
        kind: Stable family tag ('beta', 'normal', ...) used for conjugate lookup
        vsize, msize1, msize2: Shape of the parameter table
        dsize: Length of one draw
        parameters: Parameter table, or None if not yet allocated
        data: Data the model was estimated on or evaluates against
        settings: Attached settings groups (name -> SettingsEntry)
        more: Opaque model-specific payload
        error: Error code if this model reports a failure, else None
        error_message: Human-readable description of the failure
    """
    name: str = ""
    kind: str = ""
    vsize: int = 0
    msize1: int = 0
    msize2: int = 0
    dsize: int = 0
    parameters: Optional[Data] = None
    data: Optional[Data] = None

    estimate: Optional[Callable] = None
    p: Optional[Callable] = None
    log_likelihood: Optional[Callable] = None
    score: Optional[Callable] = None
    predict: Optional[Callable] = None
    constraint: Optional[Callable] = None
    draw: Optional[Callable] = None
    prep: Optional[Callable] = None

    settings: Dict[str, Any] = field(default_factory=dict)
    more: Any = None
    error: Optional[str] = None
    error_message: str = ""

    def __repr__(self):
        params = None if self.parameters is None else pack_parameters(self)
        return f"Model({self.name!r}, parameters={params})"


def pack_parameters(model: Model) -> Optional[np.ndarray]:
    return pack(model.parameters, all_pages=True) if model.parameters is not None else None


def model_copy(model: Model, copy_settings: bool = True) -> Model:
    """
    Copy a model: parameters are deep-copied, data is shared.

    Settings groups are copied through their registered copy functions.
    """
    out = replace(
        model,
        parameters=None if model.parameters is None else model.parameters.copy(),
        settings={},
    )
    if copy_settings and model.settings:
        settings_copy_group(out, model, "")
    return out


def model_free(model: Model) -> None:
    """Release every settings group and drop the parameter table."""
    settings_free_all(model)
    model.parameters = None


def model_prep(data, model: Model) -> Model:
    """Run the model's prep step, or allocate parameters from its sizes."""
    data = as_data(data)
    if model.prep is not None:
        model.prep(data, model)
    if model.parameters is None:
        model.parameters = Data.alloc(model.vsize, model.msize1, model.msize2)
    if data is not None and model.data is None:
        model.data = data
    return model


def maybe_prep(data, model: Model, force_copy: bool = False) -> Tuple[Model, bool]:
    """
    Make sure a model has a parameter table without touching the caller's model.

    If the model already has parameters (and no copy is forced) it is returned
    as is. Otherwise a copy without settings is taken, prepped, and given a
    parameter table.

    Returns:
        (model, is_a_copy)
    """
    if model.parameters is not None and not force_copy:
        return model, False
    out = model_copy(model, copy_settings=False)
    if out.parameters is None:
        model_prep(data, out)
    return out, True


def model_log_likelihood(data, model: Model) -> float:
    """Log likelihood, falling back to log(p) for models that only give p."""
    data = as_data(data)
    if model.log_likelihood is not None:
        return float(model.log_likelihood(data, model))
    if model.p is not None:
        with np.errstate(divide='ignore'):
            return float(np.log(model.p(data, model)))
    raise ValueError(f"Model '{model.name}' has neither p nor log_likelihood")


def model_p(data, model: Model) -> float:
    """Probability/density, falling back to exp(log_likelihood)."""
    data = as_data(data)
    if model.p is not None:
        return float(model.p(data, model))
    if model.log_likelihood is not None:
        return float(np.exp(model.log_likelihood(data, model)))
    raise ValueError(f"Model '{model.name}' has neither p nor log_likelihood")


def model_draw(key, model: Model) -> np.ndarray:
    """One draw from the model, as a 1-D float64 array."""
    if model.draw is None:
        raise ValueError(f"Model '{model.name}' has no draw method")
    return np.atleast_1d(np.asarray(model.draw(key, model), dtype=np.float64))


def model_estimate(data, model: Model) -> Model:
    """Run the model's estimate operation on the data."""
    if model.estimate is None:
        raise ValueError(f"Model '{model.name}' has no estimate method")
    return model.estimate(as_data(data), model)


def model_set_parameters(model: Model, *values) -> Model:
    """
    Copy of a prototype model with its parameter vector set to `values`.

    Raises:
        ValueError: If the model expects a fixed number of parameters and
            a different number is given
    """
    if model.vsize > 0 and len(values) != model.vsize:
        raise ValueError(f"Model '{model.name}' takes {model.vsize} parameters, got {len(values)}")
    out = model_copy(model)
    out.parameters = Data(vector=np.array(values, dtype=np.float64))
    out.vsize = len(values)
    return out


def error_model(code: str, message: str) -> Model:
    """A model that reports a failure instead of a result."""
    return Model(name="error", error=code, error_message=message)
