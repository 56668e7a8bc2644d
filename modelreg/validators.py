# file: modelreg/validators.py
"""
Shape checks run before anything is admitted to the registry.

Every check raises with a message that names the broken rule. The module
payload checks accept either the typed record or a plain mapping and hand
back the typed record.
"""
from __future__ import annotations
from typing import Any, Mapping, Sequence, Tuple, Union

import numpy as np

from .base import (
    PRED_TYPES, INTERFACES, PREDICTOR_INDICATORS,
    EncodingOptions, FitModule, FuncSpec, PredictModule,
)
from .errors import MalformedInputError, SchemaError

FUNC_FIELDS = ("fun", "pkg", "range", "trans", "values")
FIT_FIELDS = ("defaults", "func", "interface", "protect")
FIT_OPTIONAL = ("data",)
PRED_FIELDS = ("args", "func", "post", "pre")
ENCODING_FIELDS = ("predictor_indicators", "compute_intercept", "remove_intercept", "allow_sparse_x")


def _quoted(names: Sequence[str], tick: str = "`") -> str:
    return ", ".join(f"{tick}{n}{tick}" for n in names)


def _is_single_string(x: Any) -> bool:
    return isinstance(x, str) and x.strip() != ""


def _is_single_bool(x: Any) -> bool:
    return isinstance(x, (bool, np.bool_))


# ---------- scalar checks ----------

def check_model_name(model: Any) -> None:
    if not _is_single_string(model):
        raise MalformedInputError("Please supply a character string for a model name (e.g. `'linear_reg'`)")


def check_eng_val(eng: Any) -> None:
    if not _is_single_string(eng):
        raise MalformedInputError("Please supply a character string for an engine name (e.g. `'lm'`)")


def check_mode_val(mode: Any) -> None:
    if not _is_single_string(mode):
        raise MalformedInputError("Please supply a character string for a mode (e.g. `'regression'`).")


def check_pkg_val(pkg: Any) -> None:
    if not _is_single_string(pkg):
        raise MalformedInputError("Please supply a single character value for the package name.")


def check_arg_val(arg: Any) -> None:
    if not _is_single_string(arg):
        raise MalformedInputError("Please supply a character string for the argument.")


def check_submodels_val(has_submodel: Any) -> None:
    if not _is_single_bool(has_submodel):
        raise MalformedInputError("The `submodels` argument should be a single logical.")


def check_interface_val(x: Any) -> None:
    if not isinstance(x, str) or x not in INTERFACES:
        raise SchemaError(f"The `interface` element should have a single value of: {_quoted(INTERFACES)}")


# ---------- invocation descriptor ----------

_FUNC_MSG = (
    "`func` should be a named mapping with element 'fun' and the optional "
    "elements 'pkg', 'range', 'trans', and 'values'. "
    "'fun' and 'pkg' should both be single character strings."
)


def check_func_val(func: Any) -> FuncSpec:
    if isinstance(func, FuncSpec):
        func = func.as_dict()
    if not isinstance(func, Mapping) or len(func) == 0:
        raise MalformedInputError(_FUNC_MSG)

    names = list(func.keys())
    if len(names) == 1 and names[0] != "fun":
        raise MalformedInputError(_FUNC_MSG)
    if any(n not in FUNC_FIELDS for n in names) or "fun" not in func:
        raise MalformedInputError(_FUNC_MSG)
    if not _is_single_string(func["fun"]):
        raise MalformedInputError(_FUNC_MSG)
    if func.get("pkg") is not None and not _is_single_string(func["pkg"]):
        raise MalformedInputError(_FUNC_MSG)

    def _tuple(v):
        return tuple(v) if isinstance(v, (list, tuple)) else v

    return FuncSpec(
        fun=func["fun"],
        pkg=func.get("pkg"),
        range=_tuple(func.get("range")),
        trans=func.get("trans"),
        values=_tuple(func.get("values")),
    )


# ---------- fit module ----------

def check_fit_info(fit_obj: Union[FitModule, Mapping[str, Any], None]) -> FitModule:
    if fit_obj is None:
        raise SchemaError("The `fit` module cannot be None.")
    if isinstance(fit_obj, FitModule):
        fit_obj = {
            "defaults": fit_obj.defaults,
            "func": fit_obj.func,
            "interface": fit_obj.interface,
            "protect": fit_obj.protect,
            "data": fit_obj.data,
        }
    if not isinstance(fit_obj, Mapping):
        raise SchemaError(f"The `fit` module should be a mapping with elements: {_quoted(FIT_FIELDS)}")

    missing = [n for n in FIT_FIELDS if n not in fit_obj]
    if missing:
        raise SchemaError(
            f"The `fit` module should have elements: {_quoted(FIT_FIELDS)} "
            f"(missing {_quoted(missing)})"
        )
    extra = [n for n in fit_obj if n not in FIT_FIELDS + FIT_OPTIONAL]
    if extra:
        raise SchemaError(
            f"The `fit` module can only have optional elements: {_quoted(FIT_OPTIONAL)} "
            f"(found {_quoted(extra)})"
        )

    data = fit_obj.get("data")
    if data is not None:
        if not isinstance(data, Mapping) or len(data) == 0 or any(not _is_single_string(k) for k in data):
            raise SchemaError("All elements of the `data` argument must be named.")
        data = dict(data)

    check_interface_val(fit_obj["interface"])
    func = check_func_val(fit_obj["func"])

    if not isinstance(fit_obj["defaults"], Mapping):
        raise SchemaError("The `defaults` element should be a mapping.")

    protect = fit_obj["protect"]
    if isinstance(protect, str):
        protect = (protect,)
    if not isinstance(protect, (list, tuple, set, frozenset)) or not all(_is_single_string(p) for p in protect):
        raise SchemaError("The `protect` element should be a collection of argument names.")

    return FitModule(
        interface=fit_obj["interface"],
        func=func,
        protect=tuple(protect),
        defaults=dict(fit_obj["defaults"]),
        data=data,
    )


# ---------- predict module ----------

def check_pred_type(type: Any) -> None:
    if not isinstance(type, str) or type not in PRED_TYPES:
        raise MalformedInputError("The prediction type should be one of: " + _quoted(PRED_TYPES, tick="'"))


def check_pred_info(pred_obj: Union[PredictModule, Mapping[str, Any]], type: Any) -> PredictModule:
    check_pred_type(type)

    if isinstance(pred_obj, PredictModule):
        pred_obj = {"args": pred_obj.args, "func": pred_obj.func, "post": pred_obj.post, "pre": pred_obj.pre}
    if not isinstance(pred_obj, Mapping) or sorted(pred_obj.keys()) != list(PRED_FIELDS):
        raise SchemaError(f"The `predict` module should have elements: {_quoted(PRED_FIELDS)}")

    for hook in ("pre", "post"):
        if pred_obj[hook] is not None and not callable(pred_obj[hook]):
            raise SchemaError(f"The `{hook}` module should be None or a function.")

    func = check_func_val(pred_obj["func"])

    if not isinstance(pred_obj["args"], Mapping):
        raise SchemaError("The `args` element should be a mapping.")

    return PredictModule(func=func, pre=pred_obj["pre"], post=pred_obj["post"], args=dict(pred_obj["args"]))


# ---------- encodings ----------

def check_encodings(x: Union[EncodingOptions, Mapping[str, Any]]) -> EncodingOptions:
    if isinstance(x, EncodingOptions):
        x = {k: getattr(x, k) for k in ENCODING_FIELDS}
    if not isinstance(x, Mapping):
        raise SchemaError("`values` should be a mapping.")

    missing = [k for k in ENCODING_FIELDS if k not in x]
    if missing:
        raise SchemaError(
            "The values passed to `register_encoding()` are missing arguments: "
            + _quoted(missing, tick="'")
        )
    extra = [k for k in x if k not in ENCODING_FIELDS]
    if extra:
        raise SchemaError(
            "The values passed to `register_encoding()` had extra arguments: "
            + _quoted(extra, tick="'")
        )

    if x["predictor_indicators"] not in PREDICTOR_INDICATORS:
        raise SchemaError(
            "`predictor_indicators` should be one of: " + _quoted(PREDICTOR_INDICATORS, tick="'")
        )
    for flag in ENCODING_FIELDS[1:]:
        if not _is_single_bool(x[flag]):
            raise SchemaError(f"`{flag}` should be a single logical.")

    return EncodingOptions(
        predictor_indicators=x["predictor_indicators"],
        compute_intercept=bool(x["compute_intercept"]),
        remove_intercept=bool(x["remove_intercept"]),
        allow_sparse_x=bool(x["allow_sparse_x"]),
    )


def as_pkgs(pkg: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    pkgs = (pkg,) if isinstance(pkg, str) else tuple(pkg)
    if not pkgs:
        raise MalformedInputError("Please supply a single character value for the package name.")
    for p in pkgs:
        check_pkg_val(p)
    return pkgs
