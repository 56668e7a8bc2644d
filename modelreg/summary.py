# file: modelreg/summary.py
"""Read-only tabular / text views of a model's registry tables."""
from __future__ import annotations
from typing import List, Sequence

import pandas as pd

from .base import EngineRecord
from .store import ModelTables

CASE_WEIGHT_MARK = "¹"


def engines_frame(engines: Sequence[EngineRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"engine": e.engine, "mode": e.mode} for e in engines],
        columns=["engine", "mode"],
    )


def tables_frame(tables: ModelTables, name: str) -> pd.DataFrame:
    """One registry table as a DataFrame (module payloads left out)."""
    if name == "engines":
        return engines_frame(tables.engines)
    if name == "pkgs":
        rows = [{"engine": r.engine, "mode": r.mode, "pkg": list(r.pkgs)} for r in tables.pkgs]
        return pd.DataFrame(rows, columns=["engine", "mode", "pkg"])
    if name == "args":
        rows = [
            {"engine": a.engine, "parsnip": a.parsnip, "original": a.original,
             "func": str(a.func), "has_submodel": a.has_submodel}
            for a in tables.args
        ]
        return pd.DataFrame(rows, columns=["engine", "parsnip", "original", "func", "has_submodel"])
    if name == "fit":
        rows = [
            {"engine": f.engine, "mode": f.mode, "interface": f.value.interface, "func": str(f.value.func)}
            for f in tables.fit
        ]
        return pd.DataFrame(rows, columns=["engine", "mode", "interface", "func"])
    if name == "predict":
        rows = [{"engine": p.engine, "mode": p.mode, "type": p.type, "func": str(p.value.func)} for p in tables.predict]
        return pd.DataFrame(rows, columns=["engine", "mode", "type", "func"])
    raise ValueError(f"Unknown table '{name}'")


def _engine_lines(tables: ModelTables) -> List[str]:
    weighted = {(f.engine, f.mode) for f in tables.fit if f.value.uses_case_weights}
    by_mode = {}
    for e in tables.engines:
        label = e.engine + (CASE_WEIGHT_MARK if (e.engine, e.mode) in weighted else "")
        by_mode.setdefault(e.mode, []).append(label)
    width = max(len(m) for m in by_mode) + 2
    return [f"   {(mode + ': ').ljust(width)}{', '.join(sorted(engs))}" for mode, engs in sorted(by_mode.items())]


def _arg_lines(tables: ModelTables) -> List[str]:
    lines: List[str] = []
    width = max(len(a.parsnip) for a in tables.args)
    seen = set()
    for eng in dict.fromkeys(a.engine for a in tables.args):
        lines.append(f"   {eng}:")
        for a in tables.args:
            key = (a.engine, a.parsnip, a.original)
            if a.engine != eng or key in seen:
                continue
            seen.add(key)
            lines.append(f"      {a.parsnip.ljust(width)} --> {a.original}")
    return lines


def render_model_info(model: str, tables: ModelTables) -> str:
    out: List[str] = [f"Information for `{model}`", f" modes: {', '.join(tables.modes)}", ""]

    if tables.engines:
        out.append(" engines: ")
        out.extend(_engine_lines(tables))
        out += ["", f"{CASE_WEIGHT_MARK}The model can use case weights.", ""]
    else:
        out += [" no registered engines.", ""]

    if tables.args:
        out.append(" arguments: ")
        out.extend(_arg_lines(tables))
        out.append("")
    else:
        out += [" no registered arguments.", ""]

    if tables.pkgs:
        out.append(" dependencies:")
        out.extend(f"   {d.engine} ({d.mode}): {', '.join(d.pkgs)}" for d in tables.pkgs)
        out.append("")
    else:
        out += [" no registered dependencies.", ""]

    if tables.encoding:
        out.append(" encodings:")
        out.extend(
            f"   {e.engine} ({e.mode}): indicators={e.options.predictor_indicators}, "
            f"intercept={e.options.compute_intercept}/{e.options.remove_intercept}, "
            f"sparse={e.options.allow_sparse_x}"
            for e in tables.encoding
        )
        out.append("")

    if tables.fit:
        out.append(" fit modules:")
        fits = tables_frame(tables, "fit")[["engine", "mode"]]
        out.append(fits.to_string(index=False))
        out.append("")
    else:
        out += [" no registered fit modules.", ""]

    if tables.predict:
        out.append(" prediction modules:")
        preds = (
            tables_frame(tables, "predict")
            .groupby(["mode", "engine"], sort=True)["type"]
            .agg(lambda s: ", ".join(sorted(s)))
            .reset_index()
            .rename(columns={"type": "methods"})
        )
        out.append(preds.to_string(index=False))
        out.append("")
    else:
        out += [" no registered prediction modules.", ""]

    return "\n".join(out)
