# file: modelreg/adapters.py
"""
Helpers for dispatch code: turn registry metadata into actual calls.

Nothing here writes to the registry; it only reads fit / predict modules and
argument mappings and invokes whatever they describe.
"""
from __future__ import annotations
import importlib
from typing import Any, Callable, Dict, Mapping, Optional

from loguru import logger

from .base import Estimator, FuncSpec
from .errors import MalformedInputError
from .registry import ModelRegistry


def resolve_function(func: FuncSpec) -> Callable[..., Any]:
    """Import the callable named by an invocation descriptor."""
    if func.pkg is None:
        raise MalformedInputError(
            f"`{func.fun}` has no owning package; it can only be called as a method of a fitted model."
        )
    obj: Any = importlib.import_module(func.pkg)
    for part in func.fun.split("."):
        obj = getattr(obj, part)
    if not callable(obj):
        raise MalformedInputError(f"`{func}` does not refer to a callable.")
    return obj


def translate_args(
    registry: ModelRegistry,
    model: str,
    eng: str,
    mode: str,
    args: Optional[Mapping[str, Any]] = None,
    engine_args: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the keyword arguments for an engine's fit function.

    `args` use the model's abstract names and are renamed through the argument
    table; `engine_args` are passed through as-is. `None` values are dropped.
    Protected names are removed from both before they are laid over the fit
    defaults, so a registered default for a protected name always wins.
    """
    fit = registry.fit_module(model, eng, mode)
    mapping = {a.parsnip: a.original for a in registry.get_args(model, eng)}

    supplied: Dict[str, Any] = {}
    for name, value in (args or {}).items():
        if value is None:
            continue
        if name not in mapping:
            raise MalformedInputError(
                f"Argument '{name}' is not known for model '{model}' with engine '{eng}'. "
                f"Known: {sorted(mapping)}"
            )
        supplied[mapping[name]] = value
    for name, value in (engine_args or {}).items():
        if value is not None:
            supplied[name] = value

    protected = [p for p in fit.protect if p in supplied]
    if protected:
        logger.warning(
            "The following arguments cannot be manually modified and were removed: {}",
            ", ".join(protected),
        )
        for p in protected:
            supplied.pop(p)

    out: Dict[str, Any] = dict(fit.defaults)
    out.update(supplied)
    return out


def build_estimator(
    registry: ModelRegistry,
    model: str,
    eng: str,
    mode: str,
    args: Optional[Mapping[str, Any]] = None,
    engine_args: Optional[Mapping[str, Any]] = None,
) -> Estimator:
    fit = registry.fit_module(model, eng, mode)
    fn = resolve_function(fit.func)
    kwargs = translate_args(registry, model, eng, mode, args, engine_args)
    logger.debug("Building {} for model '{}' ({}, {}) with {}", fit.func, model, eng, mode, kwargs)
    return fn(**kwargs)


def fit_with(
    registry: ModelRegistry,
    model: str,
    eng: str,
    mode: str,
    X,
    y,
    args: Optional[Mapping[str, Any]] = None,
    engine_args: Optional[Mapping[str, Any]] = None,
    **fit_kwargs: Any,
) -> Estimator:
    """Build the estimator and fit it; only `matrix` interfaces are handled here."""
    interface = registry.fit_module(model, eng, mode).interface
    if interface != "matrix":
        raise MalformedInputError(f"fit_with() only handles the 'matrix' interface, not '{interface}'.")
    est = build_estimator(registry, model, eng, mode, args, engine_args)
    est.fit(X, y, **fit_kwargs)
    return est


def predict_with(
    registry: ModelRegistry,
    model: str,
    eng: str,
    mode: str,
    type: str,
    fitted: Any,
    new_data: Any,
):
    """Run pre hook -> prediction function -> post hook for one prediction type."""
    pm = registry.predict_module(model, eng, mode, type)

    if pm.pre is not None:
        new_data = pm.pre(new_data, fitted)

    if pm.func.pkg is None:
        res = getattr(fitted, pm.func.fun)(new_data, **pm.args)
    else:
        res = resolve_function(pm.func)(fitted, new_data, **pm.args)

    if pm.post is not None:
        res = pm.post(res, fitted)
    return res
