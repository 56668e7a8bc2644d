# base.py

from __future__ import annotations
import types
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Callable, Dict, Literal, Mapping, Optional, Protocol, Tuple

import numpy as np
import pandas as pd

from .errors import MalformedInputError

ALL_MODES: Tuple[str, ...] = ("classification", "regression", "censored regression")
UNKNOWN_MODE = "unknown"

PRED_TYPES: Tuple[str, ...] = (
    "raw", "numeric", "class", "prob", "conf_int", "pred_int",
    "quantile", "time", "survival", "linear_pred", "hazard",
)

INTERFACES: Tuple[str, ...] = ("data.frame", "formula", "matrix")
PREDICTOR_INDICATORS: Tuple[str, ...] = ("none", "traditional", "one_hot")

Interface = Literal["data.frame", "formula", "matrix"]
EncodingSource = Literal["registered", "default"]


@dataclass(frozen=True)
class FuncSpec:
    fun: str                          # function (or method) name
    pkg: Optional[str] = None         # owning module; None -> method on the fitted object
    range: Optional[Tuple[Any, ...]] = None
    trans: Optional[Any] = None
    values: Optional[Tuple[Any, ...]] = None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"fun": self.fun}
        for k in ("pkg", "range", "trans", "values"):
            v = getattr(self, k)
            if v is not None:
                out[k] = v
        return out

    def __str__(self) -> str:
        return f"{self.pkg}.{self.fun}" if self.pkg else self.fun


@dataclass(frozen=True)
class EngineRecord:
    engine: str
    mode: str


@dataclass(frozen=True)
class DependencyRecord:
    engine: str
    mode: str
    pkgs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ArgRecord:
    engine: str
    parsnip: str          # name callers use
    original: str         # name the engine function expects
    func: FuncSpec
    has_submodel: bool = False


@dataclass(frozen=True, eq=False)
class FitModule:
    interface: Interface
    func: FuncSpec
    protect: Tuple[str, ...] = ()
    defaults: Dict[str, Any] = field(default_factory=dict)
    data: Optional[Dict[str, str]] = None

    def __post_init__(self):
        # protected names are a set
        object.__setattr__(self, "protect", tuple(sorted(set(self.protect))))

    @property
    def uses_case_weights(self) -> bool:
        return any(p.startswith("weight") or p == "sample_weight" for p in self.protect)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FitModule):
            return NotImplemented
        return values_equal(self, other)

    __hash__ = None  # type: ignore[assignment]


def _same_hook(a: Callable, b: Callable) -> bool:
    """
    Two Python functions are the same hook when they run the same code with the
    same bound state: bytecode, constants, names, defaults and closure cells.
    Rebuilt copies of one function (e.g. after a module reload) still match;
    two different lambdas or two closures over different values do not.
    """
    if a is b:
        return True
    if getattr(a, "__self__", None) is not getattr(b, "__self__", None):
        return False
    fa, fb = getattr(a, "__func__", a), getattr(b, "__func__", b)
    ca, cb = fa.__code__, fb.__code__
    if (ca.co_code, ca.co_consts, ca.co_names) != (cb.co_code, cb.co_consts, cb.co_names):
        return False
    if not values_equal(fa.__defaults__, fb.__defaults__) or not values_equal(fa.__kwdefaults__, fb.__kwdefaults__):
        return False
    cells_a, cells_b = fa.__closure__ or (), fb.__closure__ or ()
    if len(cells_a) != len(cells_b):
        return False
    return all(values_equal(x.cell_contents, y.cell_contents) for x, y in zip(cells_a, cells_b))


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality for registry payloads (arrays, frames, hooks, nested containers)."""
    if a is b:
        return True
    if a is None or b is None:
        return False
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return isinstance(a, np.ndarray) and isinstance(b, np.ndarray) and np.array_equal(a, b)
    if isinstance(a, (pd.DataFrame, pd.Series, pd.Index)):
        return type(a) is type(b) and a.equals(b)
    if isinstance(a, (types.FunctionType, types.MethodType)):
        return isinstance(b, (types.FunctionType, types.MethodType)) and _same_hook(a, b)
    if is_dataclass(a) and not isinstance(a, type):
        return type(a) is type(b) and all(
            values_equal(getattr(a, f.name), getattr(b, f.name)) for f in fields(a)
        )
    if isinstance(a, Mapping):
        return (
            isinstance(b, Mapping)
            and a.keys() == b.keys()
            and all(values_equal(a[k], b[k]) for k in a)
        )
    if isinstance(a, (list, tuple)):
        return (
            type(a) is type(b)
            and len(a) == len(b)
            and all(values_equal(x, y) for x, y in zip(a, b))
        )
    res = a == b
    if isinstance(res, (bool, np.bool_)):
        return bool(res)
    return bool(np.all(res))


@dataclass(frozen=True, eq=False)
class PredictModule:
    func: FuncSpec
    pre: Optional[Callable[..., Any]] = None
    post: Optional[Callable[..., Any]] = None
    args: Dict[str, Any] = field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PredictModule):
            return NotImplemented
        return values_equal(self, other)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class FitRecord:
    engine: str
    mode: str
    value: FitModule


@dataclass(frozen=True)
class PredictRecord:
    engine: str
    mode: str
    type: str
    value: PredictModule


@dataclass(frozen=True)
class EncodingOptions:
    predictor_indicators: str = "traditional"
    compute_intercept: bool = True
    remove_intercept: bool = True
    allow_sparse_x: bool = False


DEFAULT_ENCODING = EncodingOptions()


@dataclass(frozen=True)
class EncodingRecord:
    model: str
    engine: str
    mode: str
    options: EncodingOptions
    source: EncodingSource = "registered"


class Estimator(Protocol):
    """What dispatch expects back from a resolved fit function."""
    def fit(self, X, y, **kwargs: Any) -> "Estimator": ...
    def predict(self, X, **kwargs: Any): ...


def pred_value_template(
    func: Optional[FuncSpec] = None,
    *,
    pre: Optional[Callable[..., Any]] = None,
    post: Optional[Callable[..., Any]] = None,
    **args: Any,
) -> PredictModule:
    """Shorthand for building a PredictModule; extra keywords become `args`."""
    if func is None:
        raise MalformedInputError("Please supply a value to `func`.")
    return PredictModule(func=func, pre=pre, post=post, args=dict(args))
