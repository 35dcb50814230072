"""The tbl_json container: a typed table paired row by row with JSON values."""

import logging
from typing import Any, Callable, Iterator, Optional, Sequence, Tuple, Union

import pandas as pd

from .json_value import JsonValue
from .parser import JSONParser
from .paths import PathDescriptor
from .table import TypedTable
from .types import (
    DEFAULT_ARRAY_INDEX,
    DEFAULT_COMPLEXITY,
    DEFAULT_KEY,
    DEFAULT_LENGTH,
    DEFAULT_TYPE,
    ColumnType,
    ErrorType,
    JsonType,
    ProcessingError,
)
from .verbs import extraction, structural


logger = logging.getLogger(__name__)


class TblJson:
    """
    A ``TypedTable`` of n rows together with n JSON values.

    Row ``i`` of ``table`` describes where ``attachment[i]`` came from. Every
    verb returns a new TblJson; neither part is ever mutated in place.
    """

    def __init__(self, table: TypedTable, attachment: Sequence[JsonValue]):
        """
        Pair a table with its JSON attachment.

        Raises:
            ProcessingError: If lengths differ or an attachment entry is not a JsonValue
        """
        attachment = tuple(attachment)
        if len(table) != len(attachment):
            raise ProcessingError(
                f"Table has {len(table)} rows but the JSON attachment has {len(attachment)} values",
                ErrorType.INVARIANT,
                context={"table_rows": len(table), "attachment_rows": len(attachment)}
            )
        for row, value in enumerate(attachment, start=1):
            if not isinstance(value, JsonValue):
                raise ProcessingError(
                    f"Attachment of row {row} is {type(value).__name__}, not a JSON value",
                    ErrorType.INVARIANT,
                    context={"row": row}
                )
        self._table = table
        self._attachment = attachment

    @property
    def table(self) -> TypedTable:
        return self._table

    @property
    def attachment(self) -> Tuple[JsonValue, ...]:
        return self._attachment

    def __len__(self) -> int:
        return len(self._table)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TblJson):
            return NotImplemented
        return self._table == other._table and self._attachment == other._attachment

    def __repr__(self) -> str:
        return f"TblJson(rows={len(self)}, columns={self._table.column_names})"

    def __iter__(self) -> Iterator[Tuple[dict, JsonValue]]:
        """Iterate over ``(row, json_value)`` pairs."""
        return zip(self._table.iter_rows(), self._attachment)

    # Row/column primitives used by the verbs

    def with_column(self, name: str, dtype: ColumnType, values: Sequence[Any]) -> "TblJson":
        """Add or overwrite a column, keeping rows and attachment."""
        return TblJson(self._table.with_column(name, dtype, values), self._attachment)

    def restack(self, indices: Sequence[int], attachment: Sequence[JsonValue]) -> "TblJson":
        """Rebuild from source row positions and the JSON value of each new row."""
        return TblJson(self._table.take(indices), attachment)

    def filter_rows(self, mask: Sequence[bool]) -> "TblJson":
        """Keep the rows whose mask entry is true, together with their JSON values."""
        table = self._table.filter_rows(mask)
        return TblJson(table, [value for value, keep in zip(self._attachment, mask) if keep])

    def append(self, other: "TblJson") -> "TblJson":
        """Stack the rows of ``other`` below these rows."""
        return TblJson(self._table.append_rows(other._table), self._attachment + other._attachment)

    def pipe(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return func(self, *args, **kwargs)

    # Terminal conversions, both discard the attachment

    def as_table(self) -> TypedTable:
        return self._table

    def to_dataframe(self) -> pd.DataFrame:
        return self._table.to_dataframe()

    # Structural verbs

    def gather_array(self, column_name: str = DEFAULT_ARRAY_INDEX) -> "TblJson":
        return structural.gather_array(self, column_name)

    def gather_keys(self, column_name: str = DEFAULT_KEY) -> "TblJson":
        return structural.gather_keys(self, column_name)

    gather_object = gather_keys

    def enter_object(self, *keys: str) -> "TblJson":
        return structural.enter_object(self, *keys)

    def filter_json_types(self, *types: Union[JsonType, str]) -> "TblJson":
        return structural.filter_json_types(self, *types)

    # Extraction verbs

    def spread_values(self, **descriptors: PathDescriptor) -> "TblJson":
        return extraction.spread_values(self, **descriptors)

    def spread_all(self, sep: str = ".") -> "TblJson":
        return extraction.spread_all(self, sep)

    def append_values_string(self, column_name: str = "string", force: bool = False) -> "TblJson":
        return extraction.append_values_string(self, column_name, force)

    def append_values_number(self, column_name: str = "number", force: bool = False) -> "TblJson":
        return extraction.append_values_number(self, column_name, force)

    def append_values_logical(self, column_name: str = "logical", force: bool = False) -> "TblJson":
        return extraction.append_values_logical(self, column_name, force)

    def json_types(self, column_name: str = DEFAULT_TYPE) -> "TblJson":
        return extraction.json_types(self, column_name)

    def json_lengths(self, column_name: str = DEFAULT_LENGTH) -> "TblJson":
        return extraction.json_lengths(self, column_name)

    def json_complexity(self, column_name: str = DEFAULT_COMPLEXITY) -> "TblJson":
        return extraction.json_complexity(self, column_name)


Source = Union[str, Sequence[Optional[str]], TypedTable, pd.DataFrame, TblJson]


def to_tbl_json(source: Source, json_column: Optional[str] = None,
                parser: Optional[JSONParser] = None) -> TblJson:
    """
    Create a TblJson from JSON text.

    Args:
        source: One JSON document, a sequence of documents, a TypedTable or
            DataFrame holding documents in ``json_column``, or a TblJson
            (returned unchanged)
        json_column: Name of the text column holding the documents; required
            for table sources and rejected otherwise
        parser: Optional JSONParser instance

    Returns:
        TblJson with one row per document. Table sources keep their other
        columns; the JSON column itself is removed.

    Raises:
        ProcessingError: For malformed JSON, an unsupported source or a
            missing/misused ``json_column``
    """
    parser = parser or JSONParser()

    if isinstance(source, TblJson):
        return source

    if isinstance(source, pd.DataFrame):
        source = TypedTable.from_dataframe(source)

    if isinstance(source, TypedTable):
        if json_column is None:
            raise ProcessingError(
                "A table source needs the name of its JSON column",
                ErrorType.SOURCE
            )
        if json_column not in source:
            raise ProcessingError(
                f"Column '{json_column}' not found; available columns: {source.column_names}",
                ErrorType.SOURCE,
                context={"json_column": json_column}
            )
        column = source.column(json_column)
        if column.dtype is not ColumnType.STRING:
            raise ProcessingError(
                f"Column '{json_column}' must hold JSON text, not {column.dtype.value} values",
                ErrorType.SOURCE,
                context={"json_column": json_column}
            )
        documents = parser.parse_many(column.values)
        remaining = {name: col for name, col in source.columns.items() if name != json_column}
        return TblJson(TypedTable(remaining), documents)

    if json_column is not None:
        raise ProcessingError(
            "json_column only applies to table sources",
            ErrorType.SOURCE,
            context={"json_column": json_column}
        )

    if isinstance(source, str):
        documents = [parser.parse(source)]
    elif isinstance(source, (list, tuple)):
        documents = parser.parse_many(source)
    else:
        raise ProcessingError(
            f"Cannot build a tbl_json from {type(source).__name__}",
            ErrorType.SOURCE
        )

    return TblJson(TypedTable.for_documents(len(documents)), documents)
