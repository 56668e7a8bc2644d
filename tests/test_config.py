import json

import pandas as pd
import pytest

from modelreg import Config, ConfigError, create_registry, get_registry, load_config
from modelreg.utils.config_parser import PACKAGED_CONFIG
from modelreg.utils.logger import configure_logging


def test_defaults():
    cfg = Config.defaults()
    assert cfg.reference_table is None
    assert cfg.builtin_models is True
    assert cfg.logging == {"enable": False, "level": "WARNING"}
    assert json.loads(cfg.dump_effective())["registry"]["builtin_models"] is True


def test_load_config_resolves_relative_table(tmp_path):
    (tmp_path / "ref.tsv").write_text("model\tengine\tmode\tpkg\ntoy_model\tlm\tregression\t\n", encoding="utf-8")
    path = tmp_path / "registry.yaml"
    path.write_text("registry:\n  reference_table: ref.tsv\n  builtin_models: false\n", encoding="utf-8")

    cfg = load_config(path)
    assert cfg.reference_table == str(tmp_path.resolve() / "ref.tsv")
    assert cfg.builtin_models is False

    reg = create_registry(cfg)
    assert reg.known_models() == []
    row = reg.reference.iloc[0]
    assert (row["model"], row["engine"], row["mode"]) == ("toy_model", "lm", "regression")
    assert pd.isna(row["pkg"])


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_load_packaged_config():
    cfg = load_config()
    assert cfg.reference_table == str(PACKAGED_CONFIG.parent / "models.tsv")
    assert cfg.logging == {"enable": False, "level": "WARNING"}

    reg = create_registry(cfg)
    assert reg.known_models() == ["linear_reg", "logistic_reg", "rand_forest"]
    assert "partykit" in set(reg.reference["engine"])


@pytest.mark.parametrize(
    "raw, msg",
    [
        ({"models": {}}, "Unknown top-level key"),
        ({"registry": [1]}, "must be a mapping"),
        ({"registry": {"reference_table": 3}}, "reference_table"),
        ({"registry": {"builtin_models": "yes"}}, "builtin_models"),
        ({"logging": {"level": "LOUD"}}, "logging.level"),
        ({"logging": {"enable": "on"}}, "logging.enable"),
    ],
)
def test_config_errors(raw, msg):
    with pytest.raises(ConfigError, match=msg):
        Config(raw)


def test_get_registry_is_shared():
    reg = get_registry()
    assert reg is get_registry()
    assert "rand_forest" in reg.known_models()


def test_configure_logging_captures_registrations(registry):
    lines = []
    configure_logging(level="DEBUG", sink=lines.append)
    try:
        registry.register_model("logged_model")
    finally:
        configure_logging(enable=False)
    assert any(" | DEBUG | Registered model 'logged_model'" in line for line in lines)

    registry.register_model("quiet_model")
    assert not any("quiet_model" in line for line in lines)
