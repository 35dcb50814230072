"""Typed table: ordered, named, nullable columns with a document identity column."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple

import pandas as pd

from .types import DOCUMENT_ID, ColumnType, ErrorType, ProcessingError
from .utils.validation import ValidationUtils


logger = logging.getLogger(__name__)

# Nullable pandas extension dtypes used on export.
PANDAS_DTYPES = {
    ColumnType.STRING: "string",
    ColumnType.NUMBER: "Float64",
    ColumnType.INTEGER: "Int64",
    ColumnType.LOGICAL: "boolean",
}


@dataclass(frozen=True)
class Column:
    """A typed column; ``None`` cells are missing values."""
    dtype: ColumnType
    values: Tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.values)


class TypedTable:
    """
    An ordered collection of equally long, typed columns.

    Every table has the integer column ``document.id`` (1-based index of the
    source document), placed first. Tables are immutable: each operation
    returns a new table.
    """

    def __init__(self, columns: Dict[str, Column]):
        """
        Build a table from named columns.

        Args:
            columns: Ordered mapping of column name to Column

        Raises:
            ProcessingError: If ``document.id`` is missing or invalid, or columns
                differ in length
        """
        if DOCUMENT_ID not in columns:
            raise ProcessingError(
                f"Table must have a '{DOCUMENT_ID}' column",
                ErrorType.RESERVED_COLUMN
            )

        document_ids = columns[DOCUMENT_ID]
        if document_ids.dtype is not ColumnType.INTEGER or any(
            isinstance(value, bool) or not isinstance(value, int) or value < 1
            for value in document_ids.values
        ):
            raise ProcessingError(
                f"Column '{DOCUMENT_ID}' must hold positive integers",
                ErrorType.RESERVED_COLUMN
            )

        n_rows = len(document_ids)
        for name, column in columns.items():
            if len(column) != n_rows:
                raise ProcessingError(
                    f"Column '{name}' has {len(column)} rows, expected {n_rows}",
                    ErrorType.INVARIANT,
                    context={"column": name}
                )

        self._columns: Dict[str, Column] = {DOCUMENT_ID: document_ids}
        for name, column in columns.items():
            if name != DOCUMENT_ID:
                self._columns[name] = column
        self._n_rows = n_rows

    @classmethod
    def for_documents(cls, n_documents: int) -> "TypedTable":
        """Create a table holding only ``document.id`` = 1..n."""
        return cls({
            DOCUMENT_ID: Column(ColumnType.INTEGER, tuple(range(1, n_documents + 1)))
        })

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "TypedTable":
        """
        Import a pandas DataFrame.

        Column types are inferred from the pandas dtypes, or from the cells of
        object columns. A ``document.id`` column is kept when present and
        assigned as 1..n otherwise.

        Args:
            df: DataFrame to import

        Returns:
            TypedTable with the same rows and columns

        Raises:
            ProcessingError: If a column mixes cell types or has non-string names
        """
        columns: Dict[str, Column] = {}
        if DOCUMENT_ID not in df.columns:
            columns[DOCUMENT_ID] = Column(ColumnType.INTEGER, tuple(range(1, len(df) + 1)))

        for name in df.columns:
            name_check = ValidationUtils.validate_column_name(name, allow_reserved=True)
            if not name_check.is_valid:
                raise ProcessingError.from_validation(name_check)
            values = tuple(_to_cell(value) for value in df[name].tolist())
            columns[name] = Column(_infer_column_type(name, df[name], values), values)

        logger.debug(f"Imported DataFrame with {len(df)} rows and {len(df.columns)} columns")
        return cls(columns)

    def __len__(self) -> int:
        return self._n_rows

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __getitem__(self, name: str) -> Tuple[Any, ...]:
        return self.column(name).values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypedTable):
            return NotImplemented
        return list(self._columns.items()) == list(other._columns.items())

    def __repr__(self) -> str:
        return f"TypedTable(rows={self._n_rows}, columns={self.column_names})"

    @property
    def num_rows(self) -> int:
        return self._n_rows

    @property
    def column_names(self) -> List[str]:
        return list(self._columns)

    @property
    def columns(self) -> Dict[str, Column]:
        return dict(self._columns)

    def column(self, name: str) -> Column:
        try:
            return self._columns[name]
        except KeyError:
            raise KeyError(f"No column named '{name}'") from None

    def dtype(self, name: str) -> ColumnType:
        return self.column(name).dtype

    def with_column(self, name: str, dtype: ColumnType, values: Sequence[Any]) -> "TypedTable":
        """
        Return a table with column ``name`` added, or replaced when it exists.

        A replaced column keeps its position; a new one goes last.

        Raises:
            ProcessingError: For an invalid or reserved name, a length
                mismatch, or cells that do not match ``dtype``
        """
        name_check = ValidationUtils.validate_column_name(name)
        if not name_check.is_valid:
            raise ProcessingError.from_validation(name_check, {"column": name})

        values = tuple(values)
        if len(values) != self._n_rows:
            raise ProcessingError(
                f"Column '{name}' has {len(values)} rows, expected {self._n_rows}",
                ErrorType.INVARIANT,
                context={"column": name}
            )

        type_check = ValidationUtils.validate_column_values(dtype, values)
        if not type_check.is_valid:
            raise ProcessingError.from_validation(type_check, {"column": name})

        columns = dict(self._columns)
        columns[name] = Column(dtype, values)
        return TypedTable(columns)

    def take(self, indices: Sequence[int]) -> "TypedTable":
        """Select rows by 0-based position; positions may repeat."""
        return TypedTable({
            name: Column(column.dtype, tuple(column.values[i] for i in indices))
            for name, column in self._columns.items()
        })

    def filter_rows(self, mask: Sequence[bool]) -> "TypedTable":
        """Keep the rows whose mask entry is true."""
        if len(mask) != self._n_rows:
            raise ProcessingError(
                f"Row mask has {len(mask)} entries, expected {self._n_rows}",
                ErrorType.INVARIANT
            )
        return self.take([i for i, keep in enumerate(mask) if keep])

    def append_rows(self, other: "TypedTable") -> "TypedTable":
        """
        Stack the rows of ``other`` below this table.

        Both tables must have the same column names with the same types.
        """
        if set(self._columns) != set(other._columns):
            raise ProcessingError(
                "Cannot append rows from a table with different columns: "
                f"{self.column_names} vs {other.column_names}",
                ErrorType.COLUMN_TYPE
            )
        columns = {}
        for name, column in self._columns.items():
            other_column = other._columns[name]
            if other_column.dtype is not column.dtype:
                raise ProcessingError(
                    f"Column '{name}' is {column.dtype.value} here but "
                    f"{other_column.dtype.value} in the appended table",
                    ErrorType.COLUMN_TYPE,
                    context={"column": name}
                )
            columns[name] = Column(column.dtype, column.values + other_column.values)
        return TypedTable(columns)

    def iter_rows(self) -> Iterator[Dict[str, Any]]:
        for i in range(self._n_rows):
            yield {name: column.values[i] for name, column in self._columns.items()}

    def to_records(self) -> List[Dict[str, Any]]:
        return list(self.iter_rows())

    def to_dataframe(self) -> pd.DataFrame:
        """Export to pandas using nullable extension dtypes."""
        return pd.DataFrame({
            name: pd.Series(list(column.values), dtype=PANDAS_DTYPES[column.dtype])
            for name, column in self._columns.items()
        })


def _to_cell(value: Any) -> Any:
    if _is_missing(value):
        return None
    # numpy scalars
    if not isinstance(value, (str, bool, int, float)) and hasattr(value, "item"):
        return value.item()
    return value


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    # Containers are cell values, never missing markers.
    if isinstance(value, (list, tuple, dict, set)):
        return False
    return bool(pd.isna(value))


def _infer_column_type(name: str, series: pd.Series, values: Tuple[Any, ...]) -> ColumnType:
    if pd.api.types.is_bool_dtype(series.dtype):
        return ColumnType.LOGICAL
    if pd.api.types.is_integer_dtype(series.dtype):
        return ColumnType.INTEGER
    if pd.api.types.is_float_dtype(series.dtype):
        return ColumnType.NUMBER

    present = [value for value in values if value is not None]
    for dtype in (ColumnType.STRING, ColumnType.LOGICAL, ColumnType.INTEGER, ColumnType.NUMBER):
        if all(ValidationUtils.cell_matches(dtype, value) for value in present):
            return dtype

    raise ProcessingError(
        f"Column '{name}' mixes cell types that no single column type can hold",
        ErrorType.COLUMN_TYPE,
        context={"column": name}
    )
