# file: modelreg/store.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import (
    ALL_MODES, UNKNOWN_MODE,
    ArgRecord, DependencyRecord, EncodingRecord, EngineRecord, FitRecord, PredictRecord,
)
from .errors import MissingModuleError

# Global names that exist before any model is registered
MODELS_KEY = "models"
MODES_KEY = "modes"


@dataclass
class ModelTables:
    """Everything the registry knows about one model type."""
    modes: List[str] = field(default_factory=lambda: [UNKNOWN_MODE])
    engines: List[EngineRecord] = field(default_factory=list)
    pkgs: List[DependencyRecord] = field(default_factory=list)
    args: List[ArgRecord] = field(default_factory=list)
    fit: List[FitRecord] = field(default_factory=list)
    predict: List[PredictRecord] = field(default_factory=list)
    # None until the first encoding is registered; lookups then fall back to defaults
    encoding: Optional[List[EncodingRecord]] = None


class RegistryStore:
    """
    Raw named storage behind a ModelRegistry.

    Holds the global model list, the global mode list and one ModelTables per
    registered model. No validation happens here.
    """

    def __init__(self):
        self._values: Dict[str, Any] = {
            MODELS_KEY: [],
            MODES_KEY: list(ALL_MODES) + [UNKNOWN_MODE],
        }

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("`name` should be a single character value.")
        self._values[name] = value

    def bind(self, **values: Any) -> None:
        """Set several names at once; nothing is written if any name is bad."""
        for name in values:
            if not name:
                raise ValueError("`name` should be a single character value.")
        self._values.update(values)

    def names(self) -> List[str]:
        return list(self._values)

    # convenience views
    @property
    def models(self) -> List[str]:
        return self._values[MODELS_KEY]

    @property
    def modes(self) -> List[str]:
        return self._values[MODES_KEY]

    def tables(self, model: str) -> ModelTables:
        tables = self._values.get(model)
        if not isinstance(tables, ModelTables):
            raise MissingModuleError(f"`{model}` does not have any tables in the registry.")
        return tables
