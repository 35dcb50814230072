"""
json-tidy - A grammar for turning nested JSON into tidy tables.

JSON documents are paired row by row with a typed table. Structural verbs
walk into arrays and objects, extraction verbs copy scalar values into
columns.
"""

__version__ = "1.0.0"

from .json_value import JsonValue
from .parser import JSONParser
from .paths import PathDescriptor, jlogical, jnumber, jstring
from .pipeline import Pipeline, PipelineStep
from .table import Column, TypedTable
from .tbl_json import TblJson, to_tbl_json
from .types import ColumnType, ErrorType, JsonType, ProcessingError, DOCUMENT_ID
from .verbs import (
    append_values_logical,
    append_values_number,
    append_values_string,
    enter_object,
    filter_json_types,
    gather_array,
    gather_keys,
    gather_object,
    is_json_type,
    json_complexity,
    json_lengths,
    json_types,
    spread_all,
    spread_values,
)

__all__ = [
    "DOCUMENT_ID",
    "Column",
    "ColumnType",
    "ErrorType",
    "JSONParser",
    "JsonType",
    "JsonValue",
    "PathDescriptor",
    "Pipeline",
    "PipelineStep",
    "ProcessingError",
    "TblJson",
    "TypedTable",
    "append_values_logical",
    "append_values_number",
    "append_values_string",
    "enter_object",
    "filter_json_types",
    "gather_array",
    "gather_keys",
    "gather_object",
    "is_json_type",
    "jlogical",
    "jnumber",
    "json_complexity",
    "json_lengths",
    "json_types",
    "jstring",
    "spread_all",
    "spread_values",
    "to_tbl_json",
]
