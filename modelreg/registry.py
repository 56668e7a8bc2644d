# file: modelreg/registry.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd
from loguru import logger

from .base import (
    ArgRecord, DependencyRecord, EncodingOptions, EncodingRecord, EngineRecord,
    FitModule, FitRecord, PredictModule, PredictRecord, DEFAULT_ENCODING, values_equal,
)
from . import checks
from . import validators as v
from .errors import (
    DuplicateModelError, MalformedInputError, MissingModuleError, UnregisteredError, UnsupportedPredTypeError,
)
from .reference import as_reference_table
from .store import MODELS_KEY, MODES_KEY, ModelTables, RegistryStore
from .summary import engines_frame, render_model_info

ReferenceLike = Union[None, str, Path, pd.DataFrame]


class ModelRegistry:
    """
    Catalog of model types, their modes, engines, arguments and the modules
    needed to fit and predict with them.

    Registration is append-only: records are never removed, identical repeats
    are ignored and different records under an existing key are rejected.
    Registration is expected to happen once, at import / startup time; the
    registry does no locking of its own.

    Args:
        reference: the static model/engine/mode table, as a DataFrame or a
            path to a TSV file. Defaults to the table shipped with the package.
    """

    def __init__(self, reference: ReferenceLike = None):
        self.store = RegistryStore()
        self.reference: pd.DataFrame = as_reference_table(reference)

    # -----------------------------
    # existence
    # -----------------------------
    def model_exists(self, model: str) -> bool:
        return isinstance(model, str) and model in self.store.models

    def check_model_exists(self, model: Any) -> None:
        v.check_model_name(model)
        if not self.model_exists(model):
            raise UnregisteredError(f"Model `{model}` has not been registered.")

    def check_model_doesnt_exist(self, model: Any) -> None:
        v.check_model_name(model)
        if model in (MODELS_KEY, MODES_KEY):
            raise MalformedInputError(f"`{model}` is a reserved name and cannot be used for a model.")
        if self.model_exists(model):
            raise DuplicateModelError(f"Model `{model}` already exists")

    def _tables(self, model: str) -> ModelTables:
        self.check_model_exists(model)
        return self.store.tables(model)

    def known_models(self) -> List[str]:
        return sorted(self.store.models)

    @property
    def modes(self) -> List[str]:
        """Every mode known to any model, plus 'unknown'."""
        return list(self.store.modes)

    # -----------------------------
    # mutators
    # -----------------------------
    def register_model(self, model: str) -> None:
        self.check_model_doesnt_exist(model)
        self.store.bind(**{
            MODELS_KEY: self.store.models + [model],
            model: ModelTables(),
        })
        logger.debug("Registered model '{}'", model)

    def register_mode(self, model: str, mode: str) -> None:
        tables = self._tables(model)
        v.check_mode_val(mode)

        if mode not in self.store.modes:
            self.store.set(MODES_KEY, self.store.modes + [mode])
        if mode not in tables.modes:
            tables.modes.append(mode)
            logger.debug("Registered mode '{}' for model '{}'", mode, model)

    def register_engine(self, model: str, mode: str, eng: str) -> None:
        tables = self._tables(model)
        v.check_mode_val(mode)
        v.check_eng_val(eng)
        checks.check_mode_for_new_engine(model, tables, mode)

        rec = EngineRecord(eng, mode)
        if rec not in tables.engines:
            tables.engines.append(rec)
            logger.debug("Registered engine '{}' ({}) for model '{}'", eng, mode, model)
        self.register_mode(model, mode)

    def register_arg(
        self,
        model: str,
        eng: str,
        parsnip: str,
        original: str,
        func: Any,
        has_submodel: bool = False,
    ) -> None:
        """Map the abstract argument `parsnip` onto the engine argument `original`."""
        tables = self._tables(model)
        v.check_eng_val(eng)
        v.check_arg_val(parsnip)
        v.check_arg_val(original)
        spec = v.check_func_val(func)
        v.check_submodels_val(has_submodel)

        rec = ArgRecord(eng, parsnip, original, spec, bool(has_submodel))
        if not any(values_equal(a, rec) for a in tables.args):
            tables.args.append(rec)

    def register_dependency(
        self,
        model: str,
        eng: str,
        pkg: Union[str, Sequence[str]],
        mode: Optional[str] = None,
    ) -> None:
        """
        Record that `eng` needs `pkg` at fit time. With `mode=None` the package
        is added for every mode currently registered for the engine. Packages
        are merged into any existing set rather than replacing it.
        """
        tables = self._tables(model)
        v.check_eng_val(eng)
        pkgs = v.as_pkgs(pkg)

        all_modes = checks.unique(r.mode for r in tables.engines if r.engine == eng)
        if not all_modes:
            raise UnregisteredError(f"The engine '{eng}' has not been registered for model '{model}'.")
        if mode is None:
            modes = all_modes
        else:
            if not isinstance(mode, str):
                raise MalformedInputError("'mode' should be a single character value or None.")
            if mode not in all_modes:
                raise UnregisteredError(f"mode '{mode}' is not a valid mode for '{model}'")
            modes = [mode]

        updated = {(r.engine, r.mode): r for r in tables.pkgs}
        for m in modes:
            old = updated.get((eng, m))
            merged = tuple(dict.fromkeys((old.pkgs if old else ()) + pkgs))
            updated[(eng, m)] = DependencyRecord(eng, m, merged)

        tables.pkgs[:] = [updated[k] for k in sorted(updated)]

    def register_fit(self, model: str, mode: str, eng: str, value: Union[FitModule, Mapping[str, Any]]) -> None:
        tables = self._tables(model)
        v.check_eng_val(eng)
        checks.check_spec_mode_engine_val(model, tables, self.reference, eng, mode)
        fit = v.check_fit_info(value)
        checks.check_unregistered(model, tables, mode, eng)

        new_fit = FitRecord(eng, mode, fit)
        if not checks.is_discordant_info(model, tables, mode, eng, new_fit, component="fit"):
            return
        tables.fit.append(new_fit)
        logger.debug("Registered fit module for model '{}' (engine '{}', mode '{}')", model, eng, mode)

    def register_predict(
        self,
        model: str,
        mode: str,
        eng: str,
        type: str,
        value: Union[PredictModule, Mapping[str, Any]],
    ) -> None:
        tables = self._tables(model)
        v.check_eng_val(eng)
        checks.check_spec_mode_engine_val(model, tables, self.reference, eng, mode)
        pred = v.check_pred_info(value, type)
        checks.check_unregistered(model, tables, mode, eng)

        new_pred = PredictRecord(eng, mode, type, pred)
        if not checks.is_discordant_info(
            model, tables, mode, eng, new_pred, pred_type=type, component="predict"
        ):
            return
        tables.predict.append(new_pred)
        logger.debug(
            "Registered '{}' predict module for model '{}' (engine '{}', mode '{}')", type, model, eng, mode
        )

    def register_encoding(
        self,
        model: str,
        mode: str,
        eng: str,
        options: Union[EncodingOptions, Mapping[str, Any]],
    ) -> None:
        tables = self._tables(model)
        v.check_eng_val(eng)
        v.check_mode_val(mode)
        opts = v.check_encodings(options)
        checks.check_unregistered(model, tables, mode, eng)

        new_values = EncodingRecord(model, eng, mode, opts)
        if not checks.is_discordant_info(model, tables, mode, eng, new_values, component="encoding"):
            return
        tables.encoding = (tables.encoding or []) + [new_values]

    # -----------------------------
    # accessors
    # -----------------------------
    def get_modes(self, model: str) -> List[str]:
        return list(self._tables(model).modes)

    def get_engines(self, model: str) -> List[EngineRecord]:
        return list(self._tables(model).engines)

    def get_args(self, model: str, eng: Optional[str] = None) -> List[ArgRecord]:
        args = self._tables(model).args
        return [a for a in args if eng is None or a.engine == eng]

    def get_dependency(self, model: str) -> List[DependencyRecord]:
        tables = self._tables(model)
        if tables.pkgs is None:
            raise MissingModuleError(f"`{model}` does not have a dependency list in the registry.")
        return list(tables.pkgs)

    def get_fit(self, model: str) -> List[FitRecord]:
        tables = self._tables(model)
        if tables.fit is None:
            raise MissingModuleError(f"`{model}` does not have a `fit` method in the registry.")
        return list(tables.fit)

    def get_pred_type(self, model: str, type: str) -> List[PredictRecord]:
        tables = self._tables(model)
        if not tables.predict:
            raise MissingModuleError(f"`{model}` does not have any `pred` methods in the registry.")
        rows = [p for p in tables.predict if p.type == type]
        if not rows:
            raise UnsupportedPredTypeError(
                f"`{model}` does not have any '{type}' prediction methods in the registry."
            )
        return rows

    def get_encoding(self, model: str) -> List[EncodingRecord]:
        tables = self._tables(model)
        if tables.encoding is not None:
            return list(tables.encoding)
        return [
            EncodingRecord(model, r.engine, r.mode, DEFAULT_ENCODING, source="default")
            for r in tables.engines
        ]

    # -----------------------------
    # checks exposed to specification / dispatch code
    # -----------------------------
    def check_spec_mode_engine_val(self, model: str, eng: Optional[str], mode: Optional[str]) -> None:
        tables = self._tables(model)
        if eng is not None:
            v.check_eng_val(eng)
        checks.check_spec_mode_engine_val(model, tables, self.reference, eng, mode)

    def check_spec_pred_type(self, model: str, eng: str, mode: str, type: str) -> None:
        checks.check_spec_pred_type(model, self._tables(model), eng, mode, type)

    def stop_missing_engine(self, model: str) -> None:
        raise checks.stop_missing_engine(model, self._tables(model))

    def fit_module(self, model: str, eng: str, mode: str) -> FitModule:
        for rec in self.get_fit(model):
            if rec.engine == eng and rec.mode == mode:
                return rec.value
        raise MissingModuleError(
            f"No fit module registered for model '{model}' with engine '{eng}' and mode '{mode}'."
        )

    def predict_module(self, model: str, eng: str, mode: str, type: str) -> PredictModule:
        self.check_spec_pred_type(model, eng, mode, type)
        for rec in self.get_pred_type(model, type):
            if rec.engine == eng and rec.mode == mode:
                return rec.value
        raise MissingModuleError(
            f"No '{type}' predict module for model '{model}' with engine '{eng}' and mode '{mode}'."
        )

    # -----------------------------
    # reports
    # -----------------------------
    def show_engines(self, model: str) -> pd.DataFrame:
        return engines_frame(self.get_engines(model))

    def model_info(self, model: str) -> str:
        return render_model_info(model, self._tables(model))

    def show_model_info(self, model: str) -> None:
        print(self.model_info(model))

    def list_models(self) -> Dict[str, Dict[str, Any]]:
        out: Dict[str, Dict[str, Any]] = {}
        for name in self.known_models():
            tables = self.store.tables(name)
            out[name] = {
                "modes": [m for m in tables.modes],
                "engines": checks.unique(r.engine for r in tables.engines),
                "pred_types": checks.unique(p.type for p in tables.predict),
            }
        return out
