from __future__ import annotations

import pandas as pd
import pytest

from modelreg import FitModule, FuncSpec, ModelRegistry, pred_value_template
from modelreg.reference import empty_reference_table


@pytest.fixture
def registry() -> ModelRegistry:
    """Fresh registry per test with no reference rows (light consistency path)."""
    return ModelRegistry(reference=empty_reference_table())


@pytest.fixture
def toy(registry) -> ModelRegistry:
    registry.register_model("toy_model")
    registry.register_mode("toy_model", "regression")
    registry.register_engine("toy_model", "regression", "lm")
    return registry


@pytest.fixture
def reference_table() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "model": ["toy_model", "toy_model", "toy_model"],
            "engine": ["lm", "glm", "ext"],
            "mode": ["regression", "classification", "regression"],
            "pkg": [None, None, "extpkg"],
        }
    )


@pytest.fixture
def fit_module() -> FitModule:
    return FitModule(
        interface="formula",
        func=FuncSpec(fun="lm", pkg="stats"),
        protect=("formula", "data", "weights"),
        defaults={},
    )


@pytest.fixture
def quantile_module():
    return pred_value_template(FuncSpec(fun="predict"), quantiles=(0.1, 0.5, 0.9))
