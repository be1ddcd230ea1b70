import math
import re
from dataclasses import asdict, fields
from typing import Iterable, Optional, Sequence

import pandas as pd


def is_missing(value) -> bool:
    """True for None and float nan."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def mean_defined(values: Iterable) -> Optional[float]:
    """Arithmetic mean of the non-missing values, or None when there are none."""
    total = 0.0
    count = 0
    for value in values:
        if is_missing(value):
            continue
        total += value
        count += 1
    if count == 0:
        return None
    return total / count


def max_defined(values: Iterable) -> Optional[float]:
    """Largest non-missing value, or None when there are none."""
    present = [value for value in values if not is_missing(value)]
    if not present:
        return None
    return max(present)


def records_to_frame(records: Sequence, record_type=None) -> pd.DataFrame:
    """Convert dataclass records into a DataFrame.

    Args:
        records: Sequence of dataclass instances
        record_type: Dataclass used for the column layout when ``records`` is empty

    Returns:
        DataFrame with one column per dataclass field
    """
    if records:
        return pd.DataFrame([asdict(record) for record in records])
    columns = [f.name for f in fields(record_type)] if record_type else []
    return pd.DataFrame(columns=columns)


def standardize_filename(filename: str) -> str:
    """Standardize filename by removing special characters.

    Args:
        filename: Input filename to standardize

    Returns:
        Standardized filename with only alphanumeric characters and underscores
    """
    return re.sub(r"[^a-zA-Z0-9_]", "_", filename).lower()
