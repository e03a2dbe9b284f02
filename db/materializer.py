# db/materializer.py
"""
Turn an open DB-API cursor into a list of records without knowing the
query's shape up front.

Column names come from cursor.description, read once before any row. Every
cell is normalized into the closed `models.Value` union so the JSON layer only
ever sees None, bool, int, float, str or bytes.
"""
import datetime
import logging
import math
import uuid
from decimal import Decimal
from typing import List, Sequence

from config import DEFAULT_FETCH_SIZE
from errors import QueryExecutionError
from models import Record, Value

LOG = logging.getLogger(__name__)

_PASSTHROUGH = (bool, int, float, str, bytes)


def normalize_value(value) -> Value:
    """
    Map a driver-decoded cell onto Value. Raises TypeError for types outside
    the union and ValueError for floats JSON cannot carry (inf, nan).
    """
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"non-finite float {value!r} cannot be encoded as JSON")
    if value is None or isinstance(value, _PASSTHROUGH):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    # text keeps every digit of DECIMAL/NUMERIC columns
    if isinstance(value, Decimal):
        return str(value)
    # datetime is a subclass of date, both have isoformat()
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        return value.total_seconds()
    if isinstance(value, uuid.UUID):
        return str(value)
    raise TypeError(f"unsupported column value type {type(value).__name__}")


def column_names(cursor) -> List[str]:
    """
    Ordered column names of the current result. Statements that return no
    row set (INSERT, UPDATE, DDL) have no description and give [].
    """
    try:
        description = cursor.description
    except Exception as e:
        raise QueryExecutionError("describe", f"failed to get columns: {e}") from e
    if description is None:
        return []
    return [col[0] for col in description]


def decode_row(columns: Sequence[str], row) -> Record:
    values = tuple(row)
    if len(values) != len(columns):
        raise QueryExecutionError(
            "decode",
            f"failed to scan row: expected {len(columns)} values, got {len(values)}",
        )
    try:
        decoded = [normalize_value(v) for v in values]
    except (TypeError, ValueError) as e:
        raise QueryExecutionError("decode", f"failed to scan row: {e}") from e
    # zip keeps the cursor's column order as the key order
    return dict(zip(columns, decoded))


def materialize(cursor, fetch_size: int = DEFAULT_FETCH_SIZE) -> List[Record]:
    """
    Read every remaining row of `cursor` into records, in cursor order.

    All-or-nothing: any failure raises QueryExecutionError and the rows
    decoded so far are dropped. The caller owns closing the cursor.
    """
    columns = column_names(cursor)
    if not columns:
        return []

    records: List[Record] = []
    while True:
        try:
            batch = cursor.fetchmany(fetch_size)
        except Exception as e:
            LOG.warning("cursor failed after %d rows: %s", len(records), e)
            raise QueryExecutionError("stream", f"error iterating over rows: {e}") from e
        if not batch:
            break
        for row in batch:
            records.append(decode_row(columns, row))
    return records


def close_cursor(cursor) -> None:
    """Close the cursor; a failure here is logged, never raised over the real error."""
    try:
        cursor.close()
    except Exception as e:
        LOG.warning("failed to close cursor: %s", e)
