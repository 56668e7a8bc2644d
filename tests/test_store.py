import pytest

from modelreg.errors import MissingModuleError
from modelreg.reference import as_reference_table, builtin_only, read_model_info_table
from modelreg.store import ModelTables, RegistryStore


def test_store_starts_with_global_names():
    store = RegistryStore()
    assert store.get("models") == []
    assert store.get("modes") == ["classification", "regression", "censored regression", "unknown"]
    assert store.get("toy_model") is None
    assert store.get("toy_model", "missing") == "missing"


def test_store_set_and_bind():
    store = RegistryStore()
    store.set("toy_model", ModelTables())
    store.bind(models=["toy_model"], other=ModelTables())
    assert store.models == ["toy_model"]
    assert isinstance(store.tables("other"), ModelTables)
    with pytest.raises(ValueError):
        store.set("", 1)


def test_store_tables_missing():
    with pytest.raises(MissingModuleError):
        RegistryStore().tables("toy_model")


def test_new_tables_are_empty():
    t = ModelTables()
    assert t.modes == ["unknown"]
    assert t.engines == t.pkgs == t.args == t.fit == t.predict == []
    assert t.encoding is None


def test_packaged_reference_table():
    df = read_model_info_table()
    assert list(df.columns) == ["model", "engine", "mode", "pkg"]
    core = builtin_only(df)
    assert ("rand_forest", "sklearn", "regression") in set(map(tuple, core.to_numpy()))
    assert "partykit" not in set(core["engine"])
    # cached reads hand back independent copies
    df.loc[0, "model"] = "changed"
    assert read_model_info_table().loc[0, "model"] != "changed"


def test_reference_table_from_frame_requires_columns():
    import pandas as pd

    with pytest.raises(ValueError, match="missing columns"):
        as_reference_table(pd.DataFrame({"model": ["m"]}))
