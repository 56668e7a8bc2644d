from __future__ import annotations
from typing import Callable, Dict

import numpy as np
import pandas as pd

from .base import EncodingOptions, FitModule, FuncSpec, pred_value_template
from .registry import ModelRegistry

# Arguments every matrix-interface sklearn fit receives from dispatch, never from users
_SKLEARN_PROTECT = ("X", "y", "sample_weight")

_TREE_ENCODING = EncodingOptions(
    predictor_indicators="one_hot", compute_intercept=False, remove_intercept=False, allow_sparse_x=True,
)
_LINEAR_ENCODING = EncodingOptions(
    predictor_indicators="traditional", compute_intercept=False, remove_intercept=False, allow_sparse_x=True,
)


# --- prediction post-processing ---

def prob_to_frame(res, fitted) -> pd.DataFrame:
    """predict_proba output -> one `.pred_<class>` column per class."""
    classes = getattr(fitted, "classes_", range(np.shape(res)[1]))
    return pd.DataFrame(np.asarray(res), columns=[f".pred_{c}" for c in classes])


def to_flat_array(res, fitted) -> np.ndarray:
    return np.ravel(np.asarray(res))


_NUMERIC = pred_value_template(FuncSpec(fun="predict"), post=to_flat_array)
_CLASS = pred_value_template(FuncSpec(fun="predict"))
_PROB = pred_value_template(FuncSpec(fun="predict_proba"), post=prob_to_frame)


def _sklearn_fit(estimator: str, module: str, **defaults) -> FitModule:
    return FitModule(
        interface="matrix",
        func=FuncSpec(fun=estimator, pkg=module),
        protect=_SKLEARN_PROTECT,
        defaults=defaults,
    )


def _ensure_model(registry: ModelRegistry, model: str) -> None:
    if not registry.model_exists(model):
        registry.register_model(model)


# Linear models
def linear_reg(registry: ModelRegistry) -> None:
    _ensure_model(registry, "linear_reg")
    registry.register_mode("linear_reg", "regression")

    registry.register_engine("linear_reg", "regression", "sklearn")
    registry.register_dependency("linear_reg", "sklearn", "sklearn")
    registry.register_fit("linear_reg", "regression", "sklearn", _sklearn_fit("LinearRegression", "sklearn.linear_model"))
    registry.register_encoding("linear_reg", "regression", "sklearn", _LINEAR_ENCODING)
    registry.register_predict("linear_reg", "regression", "sklearn", "numeric", _NUMERIC)

    registry.register_engine("linear_reg", "regression", "elasticnet")
    registry.register_dependency("linear_reg", "elasticnet", "sklearn")
    registry.register_arg(
        "linear_reg", "elasticnet", "penalty", "alpha",
        FuncSpec(fun="penalty", range=(-10, 0), trans="log10"),
    )
    registry.register_arg(
        "linear_reg", "elasticnet", "mixture", "l1_ratio",
        FuncSpec(fun="mixture", range=(0, 1)),
    )
    registry.register_fit(
        "linear_reg", "regression", "elasticnet",
        _sklearn_fit("ElasticNet", "sklearn.linear_model", max_iter=10000),
    )
    registry.register_encoding("linear_reg", "regression", "elasticnet", _LINEAR_ENCODING)
    registry.register_predict("linear_reg", "regression", "elasticnet", "numeric", _NUMERIC)


def logistic_reg(registry: ModelRegistry) -> None:
    _ensure_model(registry, "logistic_reg")
    registry.register_mode("logistic_reg", "classification")
    registry.register_engine("logistic_reg", "classification", "sklearn")
    registry.register_dependency("logistic_reg", "sklearn", "sklearn")
    registry.register_arg(
        "logistic_reg", "sklearn", "cost", "C",
        FuncSpec(fun="cost", range=(-10, 5), trans="log2"),
    )
    registry.register_fit(
        "logistic_reg", "classification", "sklearn",
        _sklearn_fit("LogisticRegression", "sklearn.linear_model", max_iter=1000),
    )
    registry.register_encoding("logistic_reg", "classification", "sklearn", _LINEAR_ENCODING)
    registry.register_predict("logistic_reg", "classification", "sklearn", "class", _CLASS)
    registry.register_predict("logistic_reg", "classification", "sklearn", "prob", _PROB)


# Tree ensembles
def rand_forest(registry: ModelRegistry) -> None:
    _ensure_model(registry, "rand_forest")
    estimators = {"regression": "RandomForestRegressor", "classification": "RandomForestClassifier"}
    for mode in estimators:
        registry.register_mode("rand_forest", mode)
        registry.register_engine("rand_forest", mode, "sklearn")

    registry.register_dependency("rand_forest", "sklearn", "sklearn")
    registry.register_arg("rand_forest", "sklearn", "mtry", "max_features", FuncSpec(fun="mtry", range=(1, None)))
    registry.register_arg("rand_forest", "sklearn", "trees", "n_estimators", FuncSpec(fun="trees", range=(1, 2000)))
    registry.register_arg("rand_forest", "sklearn", "min_n", "min_samples_split", FuncSpec(fun="min_n", range=(2, 40)))

    for mode, estimator in estimators.items():
        registry.register_fit(
            "rand_forest", mode, "sklearn",
            _sklearn_fit(estimator, "sklearn.ensemble", n_jobs=1),
        )
        registry.register_encoding("rand_forest", mode, "sklearn", _TREE_ENCODING)

    registry.register_predict("rand_forest", "regression", "sklearn", "numeric", _NUMERIC)
    registry.register_predict("rand_forest", "classification", "sklearn", "class", _CLASS)
    registry.register_predict("rand_forest", "classification", "sklearn", "prob", _PROB)


BUILTIN_MODELS: Dict[str, Callable[[ModelRegistry], None]] = {
    "linear_reg": linear_reg,
    "logistic_reg": logistic_reg,
    "rand_forest": rand_forest,
}


def load_builtin_models(registry: ModelRegistry) -> ModelRegistry:
    """Register every built-in model. Safe to call more than once."""
    for define in BUILTIN_MODELS.values():
        define(registry)
    return registry
