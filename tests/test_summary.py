from modelreg import FitModule, FuncSpec, pred_value_template
from modelreg.summary import CASE_WEIGHT_MARK, tables_frame


def test_model_info_empty(registry):
    registry.register_model("bare")
    text = registry.model_info("bare")
    assert text.startswith("Information for `bare`")
    assert " modes: unknown" in text
    assert "no registered engines." in text
    assert "no registered arguments." in text
    assert "no registered fit modules." in text
    assert "no registered prediction modules." in text


def test_model_info_full(toy, capsys):
    toy.register_arg("toy_model", "lm", "penalty", "lambda", {"fun": "penalty"}, False)
    toy.register_dependency("toy_model", "lm", "stats")
    toy.register_fit(
        "toy_model", "regression", "lm",
        FitModule(interface="formula", func=FuncSpec(fun="lm", pkg="stats"), protect=("formula", "weights")),
    )
    toy.register_predict("toy_model", "regression", "lm", "numeric", pred_value_template(FuncSpec(fun="predict")))
    toy.register_predict("toy_model", "regression", "lm", "conf_int", pred_value_template(FuncSpec(fun="predict")))

    text = toy.model_info("toy_model")
    assert f"lm{CASE_WEIGHT_MARK}" in text
    assert "penalty --> lambda" in text
    assert "lm (regression): stats" in text
    assert "conf_int, numeric" in text

    toy.show_model_info("toy_model")
    assert "Information for `toy_model`" in capsys.readouterr().out


def test_tables_frame_columns(toy):
    toy.register_dependency("toy_model", "lm", ["stats", "MASS"])
    df = tables_frame(toy.store.tables("toy_model"), "pkgs")
    assert df.loc[0, "pkg"] == ["stats", "MASS"]
    assert list(tables_frame(toy.store.tables("toy_model"), "fit").columns) == ["engine", "mode", "interface", "func"]
