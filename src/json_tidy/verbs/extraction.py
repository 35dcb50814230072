"""Extraction verbs: read JSON values into columns without touching rows."""

import json
import logging
import math
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..json_value import JsonValue
from ..paths import PathDescriptor
from ..types import (
    DEFAULT_COMPLEXITY,
    DEFAULT_LENGTH,
    DEFAULT_TYPE,
    SCALAR_COLUMN_TYPES,
    ColumnType,
    ErrorType,
    JsonType,
    ProcessingError,
)

if TYPE_CHECKING:
    from ..tbl_json import TblJson


logger = logging.getLogger(__name__)


def json_types(tbl: "TblJson", column_name: str = DEFAULT_TYPE) -> "TblJson":
    """Add a string column naming the kind of each row's JSON value."""
    return tbl.with_column(
        column_name,
        ColumnType.STRING,
        [value.type.value for value in tbl.attachment]
    )


def json_lengths(tbl: "TblJson", column_name: str = DEFAULT_LENGTH) -> "TblJson":
    """
    Add an integer column with the length of each row's JSON value.

    Objects and arrays count their entries; every scalar, null included,
    has length one.
    """
    return tbl.with_column(
        column_name,
        ColumnType.INTEGER,
        [value.length() for value in tbl.attachment]
    )


def json_complexity(tbl: "TblJson", column_name: str = DEFAULT_COMPLEXITY) -> "TblJson":
    """Add an integer column counting the non-null scalar leaves below each row's JSON value."""
    return tbl.with_column(
        column_name,
        ColumnType.INTEGER,
        [value.leaf_count() for value in tbl.attachment]
    )


def spread_values(tbl: "TblJson", **descriptors: PathDescriptor) -> "TblJson":
    """
    Extract scalars at fixed paths into named columns.

    Each keyword names a column and gives the descriptor used to fill it. A
    row whose path does not resolve to a scalar of the expected kind gets a
    missing cell. Columns are added in keyword order, all read from the same
    JSON values.

    Args:
        tbl: Input TblJson
        **descriptors: Column name to PathDescriptor (see ``jstring``,
            ``jnumber``, ``jlogical``)

    Returns:
        New TblJson with one column per descriptor

    Raises:
        ProcessingError: If a keyword value is not a PathDescriptor
    """
    for name, descriptor in descriptors.items():
        if not isinstance(descriptor, PathDescriptor):
            raise ProcessingError(
                f"spread_values expects path descriptors, got {type(descriptor).__name__} for '{name}'",
                ErrorType.ARGUMENT,
                context={"column": name}
            )

    result = tbl
    for name, descriptor in descriptors.items():
        values = [descriptor.resolve(value) for value in tbl.attachment]
        misses = sum(1 for value in values if value is None)
        logger.debug(f"spread_values: column '{name}' missing in {misses} of {len(values)} rows")
        result = result.with_column(name, descriptor.column_type, values)
    return result


def spread_all(tbl: "TblJson", sep: str = ".") -> "TblJson":
    """
    Spread every scalar reachable through nested objects into columns.

    Keys along the way are joined with ``sep`` to name the columns, which are
    ordered by first appearance. Arrays are not entered. A column whose values
    are all of one kind gets that kind's type; mixed columns are stored as
    strings. Rows whose JSON value is not an object get missing cells.

    Args:
        tbl: Input TblJson
        sep: Separator between nested keys

    Returns:
        New TblJson
    """
    if not isinstance(sep, str) or not sep:
        raise ProcessingError("spread_all needs a non-empty separator", ErrorType.ARGUMENT)

    flattened: List[Dict[str, JsonValue]] = []
    names: Dict[str, None] = {}
    for value in tbl.attachment:
        flat: Dict[str, JsonValue] = {}
        if value.is_object:
            _flatten_object(value, (), sep, flat)
        flattened.append(flat)
        names.update(dict.fromkeys(flat))

    result = tbl
    for name in names:
        cells = [flat.get(name) for flat in flattened]
        kinds = {cell.type for cell in cells if cell is not None and not cell.is_null}
        if len(kinds) == 1:
            kind = kinds.pop()
            dtype = SCALAR_COLUMN_TYPES[kind]
            values = [_coerce(cell, kind, force=False) if cell is not None else None for cell in cells]
        else:
            if kinds:
                logger.debug(f"spread_all: column '{name}' mixes {sorted(k.value for k in kinds)}, storing as string")
            dtype = ColumnType.STRING
            values = [_coerce(cell, JsonType.STRING, force=True) if cell is not None else None
                      for cell in cells]
        result = result.with_column(name, dtype, values)

    logger.debug(f"spread_all: added {len(names)} columns")
    return result


def append_values_string(tbl: "TblJson", column_name: str = "string", force: bool = False) -> "TblJson":
    """Append each row's JSON value as a string column."""
    return _append_values(tbl, JsonType.STRING, column_name, force)


def append_values_number(tbl: "TblJson", column_name: str = "number", force: bool = False) -> "TblJson":
    """Append each row's JSON value as a number column."""
    return _append_values(tbl, JsonType.NUMBER, column_name, force)


def append_values_logical(tbl: "TblJson", column_name: str = "logical", force: bool = False) -> "TblJson":
    """Append each row's JSON value as a logical column."""
    return _append_values(tbl, JsonType.LOGICAL, column_name, force)


def _append_values(tbl: "TblJson", kind: JsonType, column_name: str, force: bool) -> "TblJson":
    """
    Write the current JSON value of each row into a column.

    Without ``force`` only scalars of exactly ``kind`` are kept and everything
    else is missing. With ``force`` other scalars are converted where a
    conversion exists; objects, arrays and null stay missing.
    """
    values = [_coerce(value, kind, force) for value in tbl.attachment]
    return tbl.with_column(column_name, SCALAR_COLUMN_TYPES[kind], values)


def _coerce(value: JsonValue, kind: JsonType, force: bool) -> Optional[Any]:
    if value.type is kind:
        return value.value
    if not force or not value.is_scalar:
        return None

    raw = value.value
    if kind is JsonType.STRING:
        # JSON spelling: true/false, 1.5, 1e+20
        return json.dumps(raw)
    if kind is JsonType.NUMBER:
        if value.type is JsonType.LOGICAL:
            return 1 if raw else 0
        return _parse_number(raw)
    if value.type is JsonType.NUMBER:
        return raw != 0
    lowered = raw.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    return None


def _parse_number(text: str) -> Optional[float]:
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _flatten_object(value: JsonValue, prefix: Tuple[str, ...], sep: str,
                    flat: Dict[str, JsonValue]) -> None:
    for key, item in value.items():
        path = prefix + (key,)
        if item.is_object:
            _flatten_object(item, path, sep, flat)
        elif not item.is_array:
            name = sep.join(path)
            if not name:
                logger.debug("spread_all: skipping a value stored under an empty key")
                continue
            flat[name] = item
