"""Structural verbs: change which rows exist and which JSON value each row holds."""

import logging
from typing import TYPE_CHECKING, List, Union

from ..error_handler import ErrorHandler
from ..json_value import JsonValue
from ..paths import walk_path
from ..types import (
    DEFAULT_ARRAY_INDEX,
    DEFAULT_KEY,
    ColumnType,
    ErrorType,
    JsonType,
    ProcessingError,
)

if TYPE_CHECKING:
    from ..tbl_json import TblJson


logger = logging.getLogger(__name__)
_error_handler = ErrorHandler(logger)


def gather_array(tbl: "TblJson", column_name: str = DEFAULT_ARRAY_INDEX) -> "TblJson":
    """
    Stack array elements into rows.

    Each array of length k becomes k rows, in element order, with the 1-based
    element position in ``column_name`` and the element as the new JSON
    value. Null, empty arrays and any other JSON value yield no rows.

    Args:
        tbl: Input TblJson
        column_name: Name of the integer index column

    Returns:
        New TblJson
    """
    _error_handler.require(_error_handler.validate_column_name(column_name),
                           {"verb": "gather_array"})

    indices: List[int] = []
    elements: List[JsonValue] = []
    positions: List[int] = []
    for row, value in enumerate(tbl.attachment):
        if not value.is_array:
            continue
        for position, element in enumerate(value.value, start=1):
            indices.append(row)
            elements.append(element)
            positions.append(position)

    result = tbl.restack(indices, elements).with_column(column_name, ColumnType.INTEGER, positions)
    _log_restack("gather_array", tbl, result, indices)
    return result


def gather_keys(tbl: "TblJson", column_name: str = DEFAULT_KEY) -> "TblJson":
    """
    Stack object entries into rows.

    Each object with m keys becomes m rows, in key order, with the key in
    ``column_name`` and the value at that key as the new JSON value. Null,
    empty objects and any other JSON value yield no rows.

    Args:
        tbl: Input TblJson
        column_name: Name of the string key column

    Returns:
        New TblJson
    """
    _error_handler.require(_error_handler.validate_column_name(column_name),
                           {"verb": "gather_keys"})

    indices: List[int] = []
    values: List[JsonValue] = []
    keys: List[str] = []
    for row, value in enumerate(tbl.attachment):
        for key, item in value.items():
            indices.append(row)
            values.append(item)
            keys.append(key)

    result = tbl.restack(indices, values).with_column(column_name, ColumnType.STRING, keys)
    _log_restack("gather_keys", tbl, result, indices)
    return result


gather_object = gather_keys


def enter_object(tbl: "TblJson", *keys: str) -> "TblJson":
    """
    Move each row's JSON value down into an object key.

    Rows whose value is not an object, or lacks the key, are dropped. Several
    keys descend through nested objects one key at a time.

    Args:
        tbl: Input TblJson
        *keys: One or more object keys

    Returns:
        New TblJson with at most as many rows as ``tbl``

    Raises:
        ProcessingError: If no key is given or a key is not a string
    """
    if not keys:
        raise ProcessingError("enter_object needs at least one key", ErrorType.PATH)
    for key in keys:
        if not isinstance(key, str):
            raise ProcessingError(
                f"enter_object keys must be strings, got {type(key).__name__}",
                ErrorType.PATH,
                context={"keys": list(keys)}
            )

    indices: List[int] = []
    values: List[JsonValue] = []
    for row, value in enumerate(tbl.attachment):
        target = walk_path(value, keys)
        if target is not None:
            indices.append(row)
            values.append(target)

    result = tbl.restack(indices, values)
    _log_restack(f"enter_object({'.'.join(keys)})", tbl, result, indices)
    return result


def is_json_type(tbl: "TblJson", json_type: Union[JsonType, str]) -> List[bool]:
    """Row mask: whether each JSON value is of ``json_type``."""
    wanted = _coerce_json_type(json_type)
    return [value.type is wanted for value in tbl.attachment]


def filter_json_types(tbl: "TblJson", *types: Union[JsonType, str]) -> "TblJson":
    """
    Keep only rows whose JSON value is one of ``types``.

    Args:
        tbl: Input TblJson
        *types: JsonType members or their names ("object", "array", ...)

    Returns:
        New TblJson
    """
    if not types:
        raise ProcessingError("filter_json_types needs at least one type", ErrorType.ARGUMENT)
    wanted = {_coerce_json_type(json_type) for json_type in types}
    result = tbl.filter_rows([value.type in wanted for value in tbl.attachment])
    logger.debug(f"filter_json_types: {len(tbl)} rows in, {len(result)} rows out")
    return result


def _coerce_json_type(json_type: Union[JsonType, str]) -> JsonType:
    if isinstance(json_type, JsonType):
        return json_type
    try:
        return JsonType(json_type)
    except ValueError:
        valid = ", ".join(member.value for member in JsonType)
        raise ProcessingError(
            f"Unknown JSON type {json_type!r}; expected one of {valid}",
            ErrorType.ARGUMENT
        ) from None


def _log_restack(verb: str, before: "TblJson", after: "TblJson", indices: List[int]) -> None:
    dropped = len(before) - len(set(indices))
    logger.debug(
        f"{verb}: {len(before)} rows in, {len(after)} rows out, "
        f"{dropped} source rows dropped"
    )
