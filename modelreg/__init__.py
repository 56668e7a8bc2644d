# file: modelreg/__init__.py
from __future__ import annotations
from typing import Optional

from loguru import logger

from .base import (
    ALL_MODES, UNKNOWN_MODE, PRED_TYPES, INTERFACES, PREDICTOR_INDICATORS,
    ArgRecord, DependencyRecord, EncodingOptions, EncodingRecord, EngineRecord,
    FitModule, FitRecord, FuncSpec, PredictModule, PredictRecord, pred_value_template,
)
from .errors import (
    RegistryError, MalformedInputError, SchemaError, UnregisteredError,
    IncompatibleModeError, IncompatibleEngineError, MissingModuleError,
    UnsupportedPredTypeError, DuplicateModelError, ConflictError,
)
from .registry import ModelRegistry
from .catalog import load_builtin_models
from .utils.config_parser import Config, ConfigError, load_config
from .utils.logger import configure_logging

# Library default: silent until configure_logging() opts in
logger.disable("modelreg")

_DEFAULT_REGISTRY: Optional[ModelRegistry] = None


def create_registry(config: Optional[Config] = None) -> ModelRegistry:
    """Build a fresh registry from a Config (defaults when omitted)."""
    config = config or Config.defaults()
    if config.logging.get("enable"):
        configure_logging(level=config.logging.get("level", "WARNING"))
    registry = ModelRegistry(reference=config.reference_table)
    if config.builtin_models:
        load_builtin_models(registry)
    return registry


def get_registry() -> ModelRegistry:
    """The process-wide registry, created with default settings on first use."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = create_registry()
    return _DEFAULT_REGISTRY


__all__ = [
    "ModelRegistry", "create_registry", "get_registry", "load_builtin_models",
    "Config", "ConfigError", "load_config", "configure_logging",
    "ALL_MODES", "UNKNOWN_MODE", "PRED_TYPES", "INTERFACES", "PREDICTOR_INDICATORS",
    "ArgRecord", "DependencyRecord", "EncodingOptions", "EncodingRecord", "EngineRecord",
    "FitModule", "FitRecord", "FuncSpec", "PredictModule", "PredictRecord", "pred_value_template",
    "RegistryError", "MalformedInputError", "SchemaError", "UnregisteredError",
    "IncompatibleModeError", "IncompatibleEngineError", "MissingModuleError",
    "UnsupportedPredTypeError", "DuplicateModelError", "ConflictError",
]
