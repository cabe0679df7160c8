"""
Dataset model

A dataset is an ordered sequence of records sharing one schema. Detectors
and signatures never work on records directly; they work on the numeric
frame: a float DataFrame holding the numeric fields in schema order, one
row per record.

Accepted inputs:
    - a sequence of DataRecord
    - a sequence of mappings, either {"id", "timestamp", "values"} or a flat
      field -> value mapping
    - a pandas DataFrame (one record per row)
"""

import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

FieldValue = Union[float, int, str, bool]


@dataclass(frozen=True)
class DataRecord:
    """One row of a dataset."""
    id: str
    values: Dict[str, FieldValue] = field(default_factory=dict)
    timestamp: Optional[float] = None


DatasetLike = Union[Sequence[DataRecord], Sequence[Mapping[str, Any]], pd.DataFrame]


def _record_from_mapping(index: int, row: Mapping[str, Any]) -> DataRecord:
    if "values" in row and isinstance(row["values"], Mapping):
        return DataRecord(
            id=str(row.get("id", index)),
            values=dict(row["values"]),
            timestamp=row.get("timestamp"),
        )
    return DataRecord(id=str(index), values=dict(row))


def _unbox(value: Any) -> Any:
    """numpy scalars -> python scalars"""
    if isinstance(value, np.generic):
        return value.item()
    return value


def as_records(data: Optional[DatasetLike]) -> List[DataRecord]:
    """Normalize any accepted dataset input to a list of DataRecord."""
    if data is None:
        return []

    if isinstance(data, pd.DataFrame):
        records = []
        for idx, row in data.iterrows():
            timestamp = None
            if isinstance(idx, pd.Timestamp):
                timestamp = idx.timestamp()
            records.append(DataRecord(
                id=str(idx),
                values={str(k): _unbox(v) for k, v in row.items()},
                timestamp=timestamp,
            ))
        return records

    records = []
    for i, item in enumerate(data):
        if isinstance(item, DataRecord):
            records.append(item)
        elif isinstance(item, Mapping):
            records.append(_record_from_mapping(i, item))
        else:
            raise TypeError(f"Unsupported record type: {type(item).__name__}")
    return records


def field_names(records: Sequence[DataRecord]) -> List[str]:
    """Field names in schema order (key order of the first record)."""
    if not records:
        return []
    return list(records[0].values.keys())


def is_number(value: Any) -> bool:
    """True for finite real numbers; False for bools, NaN, ±inf and non-numbers."""
    if isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, numbers.Real):
        return False
    return math.isfinite(float(value))


def numeric_fields(records: Sequence[DataRecord]) -> List[str]:
    """Fields whose value is a number in every record, in schema order."""
    if not records:
        return []
    return [
        name for name in field_names(records)
        if all(is_number(r.values.get(name)) for r in records)
    ]


def numeric_frame(data: Optional[DatasetLike]) -> pd.DataFrame:
    """
    Float DataFrame of the numeric fields, in schema order.

    Returns an empty DataFrame for an empty dataset or one without numeric
    fields.
    """
    records = as_records(data)
    columns = numeric_fields(records)

    if not columns:
        return pd.DataFrame()

    frame = pd.DataFrame(
        {name: [float(r.values[name]) for r in records] for name in columns},
        columns=columns,
    )
    logger.debug(f"Numeric frame: {len(frame)} rows, {len(columns)} fields")
    return frame


def records_from_columns(columns: Mapping[str, Sequence[FieldValue]]) -> List[DataRecord]:
    """Build records from equal-length column sequences."""
    names = list(columns.keys())
    if not names:
        return []
    n = len(columns[names[0]])
    return [
        DataRecord(id=str(i), values={name: _unbox(columns[name][i]) for name in names})
        for i in range(n)
    ]
