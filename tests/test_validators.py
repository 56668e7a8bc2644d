import numpy as np
import pytest

from modelreg import EncodingOptions, FitModule, FuncSpec, PredictModule
from modelreg.errors import MalformedInputError, SchemaError
from modelreg import validators as v


@pytest.mark.parametrize("bad", [None, 1, ["a", "b"], "", "   "])
def test_scalar_strings_rejected(bad):
    with pytest.raises(MalformedInputError, match="engine name"):
        v.check_eng_val(bad)
    with pytest.raises(MalformedInputError, match="model name"):
        v.check_model_name(bad)
    with pytest.raises(MalformedInputError, match="mode"):
        v.check_mode_val(bad)
    with pytest.raises(MalformedInputError, match="package name"):
        v.check_pkg_val(bad)
    with pytest.raises(MalformedInputError, match="argument"):
        v.check_arg_val(bad)


def test_submodel_flag():
    v.check_submodels_val(True)
    v.check_submodels_val(np.bool_(False))
    for bad in (1, "TRUE", None, [True]):
        with pytest.raises(MalformedInputError, match="single logical"):
            v.check_submodels_val(bad)


def test_func_descriptor_shapes():
    assert v.check_func_val({"fun": "lm"}) == FuncSpec(fun="lm")
    spec = v.check_func_val({"fun": "penalty", "pkg": "dials", "range": [-10, 0], "trans": "log10"})
    assert spec.range == (-10, 0)
    assert spec.pkg == "dials"
    assert v.check_func_val(FuncSpec(fun="x", values=("a", "b"))).values == ("a", "b")


@pytest.mark.parametrize(
    "bad",
    [
        None,
        "lm",
        {},
        {"pkg": "stats"},
        {"fun": "lm", "extra": 1},
        {"fun": 3},
        {"fun": "lm", "pkg": 3},
    ],
)
def test_func_descriptor_rejections(bad):
    with pytest.raises(MalformedInputError, match="'fun'"):
        v.check_func_val(bad)


def _fit_dict(**over):
    d = {"defaults": {}, "func": {"fun": "lm"}, "interface": "formula", "protect": ["data"]}
    d.update(over)
    return d


def test_fit_info_accepts_mapping_and_record():
    fit = v.check_fit_info(_fit_dict(data={"formula": "formula", "data": "data"}))
    assert isinstance(fit, FitModule)
    assert fit.protect == ("data",)
    assert v.check_fit_info(fit) == fit


def test_fit_info_schema_errors():
    with pytest.raises(SchemaError, match="cannot be None"):
        v.check_fit_info(None)
    d = _fit_dict()
    del d["protect"]
    with pytest.raises(SchemaError, match="missing `protect`"):
        v.check_fit_info(d)
    with pytest.raises(SchemaError, match="optional elements"):
        v.check_fit_info(_fit_dict(bogus=1))
    with pytest.raises(SchemaError, match="must be named"):
        v.check_fit_info(_fit_dict(data={"": "x"}))
    with pytest.raises(SchemaError, match="interface"):
        v.check_fit_info(_fit_dict(interface="tibble"))
    with pytest.raises(SchemaError, match="defaults"):
        v.check_fit_info(_fit_dict(defaults=[1]))


def test_interface_values():
    for ok in ("data.frame", "formula", "matrix"):
        v.check_interface_val(ok)
    with pytest.raises(SchemaError):
        v.check_interface_val(["formula", "matrix"])


def test_pred_info():
    mod = v.check_pred_info({"pre": None, "post": len, "func": {"fun": "predict"}, "args": {}}, "numeric")
    assert isinstance(mod, PredictModule)
    with pytest.raises(MalformedInputError, match="prediction type"):
        v.check_pred_info(mod, "probability")
    with pytest.raises(SchemaError, match="should have elements"):
        v.check_pred_info({"func": {"fun": "predict"}, "args": {}}, "numeric")
    with pytest.raises(SchemaError, match="`pre` module"):
        v.check_pred_info({"pre": "nope", "post": None, "func": {"fun": "predict"}, "args": {}}, "numeric")
    with pytest.raises(SchemaError, match="`args`"):
        v.check_pred_info({"pre": None, "post": None, "func": {"fun": "predict"}, "args": [1]}, "numeric")


def test_encodings_missing_and_extra():
    full = {
        "predictor_indicators": "one_hot",
        "compute_intercept": False,
        "remove_intercept": False,
        "allow_sparse_x": True,
    }
    assert v.check_encodings(full) == EncodingOptions("one_hot", False, False, True)

    missing = dict(full)
    del missing["allow_sparse_x"]
    with pytest.raises(SchemaError, match="missing arguments: 'allow_sparse_x'"):
        v.check_encodings(missing)
    with pytest.raises(SchemaError, match="extra arguments: 'sparse'"):
        v.check_encodings({**full, "sparse": True})
    with pytest.raises(SchemaError, match="predictor_indicators"):
        v.check_encodings({**full, "predictor_indicators": "dummy"})
    with pytest.raises(SchemaError, match="compute_intercept"):
        v.check_encodings({**full, "compute_intercept": "yes"})
