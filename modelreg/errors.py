# file: modelreg/errors.py
from __future__ import annotations


class RegistryError(ValueError):
    """Base class for everything the model registry raises."""


class MalformedInputError(RegistryError):
    pass


class SchemaError(RegistryError):
    """A fit / predict / encoding payload has missing or disallowed fields."""


class UnregisteredError(RegistryError):
    pass


class IncompatibleModeError(UnregisteredError):
    pass


class IncompatibleEngineError(UnregisteredError):
    pass


class MissingModuleError(UnregisteredError):
    pass


class UnsupportedPredTypeError(UnregisteredError):
    pass


class DuplicateModelError(RegistryError):
    pass


class ConflictError(RegistryError):
    """
    Raised when a registration matches an existing key but carries
    different content. Identical repeats never raise.
    """
