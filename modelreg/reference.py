# file: modelreg/reference.py
"""
Static model / engine / mode reference table.

A tab-separated file with columns `model`, `engine`, `mode`, `pkg`. An empty
`pkg` means the engine is implemented by this package itself; otherwise it
names the extension package that provides it.
"""
from __future__ import annotations
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import pandas as pd

REFERENCE_COLUMNS = ["model", "engine", "mode", "pkg"]
DEFAULT_TABLE = Path(__file__).resolve().parent / "data" / "models.tsv"


def empty_reference_table() -> pd.DataFrame:
    return pd.DataFrame({c: pd.Series(dtype="object") for c in REFERENCE_COLUMNS})


@lru_cache(maxsize=None)
def _read_cached(path: str) -> pd.DataFrame:
    df = pd.read_csv(path, sep="\t", dtype=str, keep_default_na=False)
    missing = [c for c in REFERENCE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Reference table {path} is missing columns: {missing}")
    df = df[REFERENCE_COLUMNS].copy()
    df.loc[df["pkg"].str.strip() == "", "pkg"] = None
    return df


def read_model_info_table(path: Optional[Union[str, Path]] = None) -> pd.DataFrame:
    """Read (once per path) and return a copy of the reference table."""
    path = Path(path) if path is not None else DEFAULT_TABLE
    if not path.exists():
        raise FileNotFoundError(path)
    return _read_cached(str(path.resolve())).copy()


def as_reference_table(table: Union[None, str, Path, pd.DataFrame]) -> pd.DataFrame:
    if table is None:
        return read_model_info_table()
    if isinstance(table, pd.DataFrame):
        missing = [c for c in REFERENCE_COLUMNS if c not in table.columns]
        if missing:
            raise ValueError(f"Reference table is missing columns: {missing}")
        return table[REFERENCE_COLUMNS].copy()
    return read_model_info_table(table)


def builtin_only(table: pd.DataFrame) -> pd.DataFrame:
    """Rows whose engine ships with this package (no external `pkg`)."""
    return table.loc[table["pkg"].isna(), ["model", "engine", "mode"]]
