"""Verbs operating on TblJson values."""

from .extraction import (
    append_values_logical,
    append_values_number,
    append_values_string,
    json_complexity,
    json_lengths,
    json_types,
    spread_all,
    spread_values,
)
from .structural import (
    enter_object,
    filter_json_types,
    gather_array,
    gather_keys,
    gather_object,
    is_json_type,
)

__all__ = [
    "append_values_logical",
    "append_values_number",
    "append_values_string",
    "enter_object",
    "filter_json_types",
    "gather_array",
    "gather_keys",
    "gather_object",
    "is_json_type",
    "json_complexity",
    "json_lengths",
    "json_types",
    "spread_all",
    "spread_values",
]
