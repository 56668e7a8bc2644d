# file: modelreg/checks.py
"""
Cross-table checks: mode/engine consistency and conflict detection.

These run after the shape validators and before any write to the store.
"""
from __future__ import annotations
from typing import Any, List, Optional, Sequence

import pandas as pd
from loguru import logger

from .base import UNKNOWN_MODE, EngineRecord, values_equal
from .errors import (
    ConflictError,
    IncompatibleEngineError,
    IncompatibleModeError,
    UnregisteredError,
    UnsupportedPredTypeError,
)
from .reference import builtin_only
from .store import ModelTables

COMPONENTS = ("fit", "predict", "encoding")


def unique(values) -> List[str]:
    return list(dict.fromkeys(values))


def _listing(values: Sequence[str]) -> str:
    return ", ".join(f"'{v}'" for v in values)


# ---------- error builders ----------

def stop_incompatible_mode(
    spec_modes: Sequence[str],
    eng: Optional[str] = None,
    cls: Optional[str] = None,
) -> IncompatibleModeError:
    if eng is None and cls is None:
        msg = "Available modes are: "
    elif cls is None:
        msg = f"Available modes for engine {eng} are: "
    elif eng is None:
        msg = f"Available modes for model type {cls} are: "
    else:
        msg = f"Available modes for model type {cls} with engine {eng} are: "
    return IncompatibleModeError(msg + _listing(spec_modes))


def stop_incompatible_engine(spec_engs: Sequence[str], mode: Optional[str]) -> IncompatibleEngineError:
    return IncompatibleEngineError(f"Available engines for mode {mode} are: {_listing(spec_engs)}")


def stop_missing_engine(cls: str, tables: ModelTables) -> UnregisteredError:
    """Error for a model specification that never picked an engine."""
    if not tables.engines:
        return UnregisteredError(f"No known engines for `{cls}()`.")
    by_mode = {}
    for rec in tables.engines:
        by_mode.setdefault(rec.mode, []).append(rec.engine)
    combos = ", ".join(
        f"{mode} {{{', '.join(unique(engs))}}}" for mode, engs in sorted(by_mode.items())
    )
    return UnregisteredError(f"Missing engine. Possible mode/engine combinations are: {combos}")


# ---------- consistency ----------

def check_mode_for_new_engine(cls: str, tables: ModelTables, mode: str) -> None:
    if mode not in tables.modes:
        raise IncompatibleModeError(f"'{mode}' is not a known mode for model `{cls}()`.")


def check_mode_with_no_engine(cls: str, tables: ModelTables, mode: Optional[str]) -> None:
    if mode is None or mode not in tables.modes:
        raise stop_incompatible_mode(tables.modes, cls=cls)


def _has_builtin_engines(cls: str, tables: ModelTables, reference: pd.DataFrame) -> bool:
    if not tables.engines or reference.empty:
        return False
    core = builtin_only(reference)
    core = core[core["model"] == cls]
    registered = {(r.engine, r.mode) for r in tables.engines}
    return any((e, m) in registered for e, m in zip(core["engine"], core["mode"]))


def check_spec_mode_engine_val(
    cls: str,
    tables: ModelTables,
    reference: pd.DataFrame,
    eng: Optional[str],
    mode: Optional[str],
) -> None:
    """
    Verify that a model / engine / mode combination is coherent.

    `eng=None` acts as a wildcard. A missing mode is never resolved silently.
    Models that have none of their built-in engines registered (for example
    models whose engines all live in extension packages) only get the mode
    check.
    """
    if mode is not None and mode not in tables.modes:
        raise IncompatibleModeError(f"'{mode}' is not a known mode for model `{cls}()`.")

    if not _has_builtin_engines(cls, tables, reference):
        check_mode_with_no_engine(cls, tables, mode)
        return

    spec_engs = [r.engine for r in tables.engines]
    if eng is not None and eng not in spec_engs:
        raise IncompatibleEngineError(
            f"Engine '{eng}' is not supported for `{cls}()`. See `show_engines('{cls}')`."
        )

    spec_modes = [r.mode for r in tables.engines if eng is None or r.engine == eng]
    spec_modes = unique([UNKNOWN_MODE] + spec_modes)
    if mode is None or mode not in spec_modes:
        raise stop_incompatible_mode(spec_modes, eng)

    if mode != UNKNOWN_MODE:
        spec_engs = [r.engine for r in tables.engines if r.mode == mode]
    spec_engs = unique(spec_engs)
    if eng is not None and eng not in spec_engs:
        raise stop_incompatible_engine(spec_engs, mode)


def check_unregistered(cls: str, tables: ModelTables, mode: str, eng: str) -> None:
    if EngineRecord(eng, mode) not in tables.engines:
        raise UnregisteredError(
            f"The combination of engine '{eng}' and mode '{mode}' has not "
            f"been registered for model '{cls}'."
        )


def check_spec_pred_type(cls: str, tables: ModelTables, eng: str, mode: str, type: str) -> None:
    possible = unique(p.type for p in tables.predict if p.engine == eng and p.mode == mode)
    if type not in possible:
        raise UnsupportedPredTypeError(
            f"No {type} prediction method available for this model. "
            f"Value for `type` should be one of: {_listing(possible)}"
        )


# ---------- conflicts ----------

def is_discordant_info(
    cls: str,
    tables: ModelTables,
    mode: str,
    eng: str,
    candidate: Any,
    pred_type: Optional[str] = None,
    component: str = "fit",
) -> bool:
    """
    True when `candidate` is new and should be inserted, False when an
    identical record already exists. Raises ConflictError when a record with
    the same key carries different information.
    """
    if component not in COMPONENTS:
        raise ValueError(f"Unknown component '{component}'. Known: {COMPONENTS}")

    current = getattr(tables, component)
    if current is None and component == "encoding":
        return True

    current = [r for r in current if r.engine == eng and r.mode == mode]
    p_type = ""
    if component == "predict" and pred_type is not None:
        current = [r for r in current if r.type == pred_type]
        p_type = f" and prediction type '{pred_type}'"

    if not current:
        return True

    if all(values_equal(r, candidate) for r in current):
        logger.debug(
            "Skipping identical {} registration for model '{}' (engine '{}', mode '{}'{})",
            component, cls, eng, mode, p_type,
        )
        return False

    raise ConflictError(
        f"The combination of engine '{eng}' and mode '{mode}'{p_type} already has "
        f"{component} data for model '{cls}' and the new information being "
        f"registered is different."
    )
