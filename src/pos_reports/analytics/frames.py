"""DataFrame helpers used by the aggregators.

Records are turned into small DataFrames with a fixed column set, so that an
empty day or month still yields a frame with the expected columns and every
sum defaults to zero.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Sequence

import pandas as pd


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def records_frame(records: Iterable[Any], columns: Sequence[str]) -> pd.DataFrame:
    """Build a DataFrame from record objects, one row per record.

    Args:
        records: Record dataclass instances.
        columns: Attribute names to extract, in column order. Enum values are
            stored as their string value.

    Returns:
        DataFrame with exactly ``columns``, possibly empty.
    """
    rows = [{col: _plain(getattr(r, col)) for col in columns} for r in records]
    return pd.DataFrame(rows, columns=list(columns))


def sum_column(df: pd.DataFrame, column: str) -> int:
    """Sum a column of integer amounts, skipping missing values; 0 when empty."""
    if df.empty:
        return 0
    return int(pd.to_numeric(df[column]).sum())


def sum_by(df: pd.DataFrame, key: str, value: str) -> dict[str, int]:
    """Sum ``value`` grouped by ``key``, in order of first appearance."""
    if df.empty:
        return {}
    sums = df.groupby(key, sort=False)[value].sum()
    return {str(k): int(v) for k, v in sums.items()}
