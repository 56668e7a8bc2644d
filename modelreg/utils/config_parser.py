from __future__ import annotations
import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Top-level sections we understand; both are optional in the YAML
KNOWN_TOP = ["registry", "logging"]
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
PACKAGED_CONFIG = Path(__file__).resolve().parent.parent / "data" / "config.yaml"

DEFAULTS: Dict[str, Any] = {
    "registry": {
        "reference_table": None,   # None -> table shipped with the package
        "builtin_models": True,
    },
    "logging": {
        "enable": False,
        "level": "WARNING",
    },
}


class ConfigError(Exception):
    pass


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base or {})
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


class Config:
    """
    Registry settings, merged over DEFAULTS:
      • registry.reference_table: path to the model/engine/mode TSV (relative
        paths resolve against the YAML file's directory)
      • registry.builtin_models: register the bundled sklearn models
      • logging.enable / logging.level: loguru switch and threshold
    """

    def __init__(self, raw: Optional[Dict[str, Any]] = None, base_dir: Optional[Path] = None):
        self._raw = raw or {}
        self._validate()

        merged = _deep_merge(DEFAULTS, self._raw)
        self.registry: Dict[str, Any] = merged["registry"]
        self.logging: Dict[str, Any] = merged["logging"]

        table = self.registry.get("reference_table")
        if table is not None and base_dir is not None and not Path(table).is_absolute():
            self.registry["reference_table"] = str(base_dir / table)

    # -----------------------------
    # internal helpers
    # -----------------------------
    def _validate(self) -> None:
        if not isinstance(self._raw, dict):
            raise ConfigError("Config root must be a mapping.")
        for key, block in self._raw.items():
            if key not in KNOWN_TOP:
                raise ConfigError(f"Unknown top-level key: {key}. Known: {', '.join(KNOWN_TOP)}")
            if block is not None and not isinstance(block, dict):
                raise ConfigError(f"`{key}` must be a mapping.")

        registry = self._raw.get("registry") or {}
        table = registry.get("reference_table")
        if table is not None and not isinstance(table, str):
            raise ConfigError("registry.reference_table must be a path string.")
        if not isinstance(registry.get("builtin_models", True), bool):
            raise ConfigError("registry.builtin_models must be true or false.")

        logging = self._raw.get("logging") or {}
        level = str(logging.get("level", "WARNING")).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"logging.level must be one of: {', '.join(LOG_LEVELS)}")
        if not isinstance(logging.get("enable", False), bool):
            raise ConfigError("logging.enable must be true or false.")

    # -----------------------------
    # public API
    # -----------------------------
    @property
    def reference_table(self) -> Optional[str]:
        return self.registry.get("reference_table")

    @property
    def builtin_models(self) -> bool:
        return bool(self.registry.get("builtin_models", True))

    @classmethod
    def defaults(cls) -> "Config":
        return cls({})

    def dump_effective(self) -> str:
        """Pretty JSON of effective config (handy for logs/repro)."""
        return json.dumps({"registry": self.registry, "logging": self.logging}, indent=2)

    @property
    def raw(self) -> Dict[str, Any]:
        return self._raw


def load_config(path: str | Path | None = None) -> Config:
    """Load a YAML config; with no path, the example config shipped in `modelreg/data`."""
    path = Path(path) if path is not None else PACKAGED_CONFIG
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return Config(raw, base_dir=path.resolve().parent)
