"""Tests for the tbl_json container and source conversion."""

import pandas as pd
import pytest

from json_tidy import JsonValue, TblJson, TypedTable, to_tbl_json
from json_tidy.types import DOCUMENT_ID, ColumnType, ErrorType, JsonType, ProcessingError


class TestTblJson:
    """Tests for TblJson class."""

    def test_length_mismatch_rejected(self):
        """Test the table and attachment must have the same length."""
        with pytest.raises(ProcessingError) as exc_info:
            TblJson(TypedTable.for_documents(2), [JsonValue.null()])

        assert exc_info.value.error_type == ErrorType.INVARIANT
        assert exc_info.value.context == {"table_rows": 2, "attachment_rows": 1}

    def test_attachment_must_be_json_values(self):
        """Test raw Python data cannot be attached."""
        with pytest.raises(ProcessingError) as exc_info:
            TblJson(TypedTable.for_documents(1), [{"a": 1}])

        assert exc_info.value.error_type == ErrorType.INVARIANT

    def test_iterates_rows_with_values(self):
        """Test iteration yields each row with its JSON value."""
        tbl = to_tbl_json(['1', '"a"'])

        rows = list(tbl)

        assert rows[0][0] == {DOCUMENT_ID: 1}
        assert rows[1][1] == JsonValue.from_python("a")

    def test_with_column_keeps_attachment(self):
        """Test adding a column leaves JSON values untouched."""
        tbl = to_tbl_json(['[1]', '{}'])

        result = tbl.with_column("label", ColumnType.STRING, ["x", "y"])

        assert result.attachment == tbl.attachment
        assert result.table["label"] == ("x", "y")
        assert "label" not in tbl.table

    def test_filter_rows(self):
        """Test row filtering keeps JSON values aligned."""
        tbl = to_tbl_json(['1', '2', '3'])

        result = tbl.filter_rows([False, True, True])

        assert result.table[DOCUMENT_ID] == (2, 3)
        assert [value.value for value in result.attachment] == [2, 3]

    def test_append(self):
        """Test stacking two tbl_json values."""
        first = to_tbl_json(['1'])
        second = to_tbl_json(['"b"', 'true'])

        combined = first.append(second)

        assert len(combined) == 3
        assert combined.table[DOCUMENT_ID] == (1, 1, 2)
        assert [value.type for value in combined.attachment] == [
            JsonType.NUMBER, JsonType.STRING, JsonType.LOGICAL
        ]

    def test_pipe(self):
        """Test composing with plain functions."""
        tbl = to_tbl_json('[1, 2]')

        assert tbl.pipe(lambda t, name: t.gather_array(name), "i").table["i"] == (1, 2)

    def test_as_table_discards_attachment(self):
        """Test terminal conversion returns the plain table."""
        tbl = to_tbl_json(['{"a": 1}'])

        assert isinstance(tbl.as_table(), TypedTable)
        assert list(tbl.to_dataframe().columns) == [DOCUMENT_ID]

    def test_equality(self):
        """Test structural equality."""
        assert to_tbl_json(['[1]', '{"a": 2}']) == to_tbl_json(['[1]', '{"a": 2}'])
        assert to_tbl_json(['[1]']) != to_tbl_json(['[2]'])


class TestToTblJson:
    """Tests for to_tbl_json."""

    def test_single_document(self):
        """Test a single text becomes one row."""
        tbl = to_tbl_json('{"name": "bob"}')

        assert len(tbl) == 1
        assert tbl.table[DOCUMENT_ID] == (1,)
        assert tbl.attachment[0].get("name").value == "bob"

    def test_sequence_of_documents(self, ragged_documents):
        """Test document ids follow input order."""
        tbl = to_tbl_json(ragged_documents)

        assert tbl.table[DOCUMENT_ID] == (1, 2, 3, 4, 5, 6)

    def test_empty_sequence(self):
        """Test no documents gives an empty tbl_json."""
        tbl = to_tbl_json([])

        assert len(tbl) == 0
        assert len(tbl.gather_array()) == 0

    def test_existing_tbl_json_returned(self):
        """Test a TblJson passes through unchanged."""
        tbl = to_tbl_json('[1]')

        assert to_tbl_json(tbl) is tbl

    def test_dataframe_source(self):
        """Test a DataFrame with a JSON column."""
        df = pd.DataFrame({
            "customer": ["bob", "sue", "sam"],
            "json": ['{"age": 30}', '[1, 2]', None],
        })

        tbl = to_tbl_json(df, json_column="json")

        assert tbl.table.column_names == [DOCUMENT_ID, "customer"]
        assert tbl.table["customer"] == ("bob", "sue", "sam")
        assert [value.type for value in tbl.attachment] == [
            JsonType.OBJECT, JsonType.ARRAY, JsonType.NULL
        ]

    def test_dataframe_source_keeps_document_id(self):
        """Test a DataFrame that already carries document ids keeps them."""
        df = pd.DataFrame({DOCUMENT_ID: [4, 9], "json": ['1', '2']})

        tbl = to_tbl_json(df, json_column="json")

        assert tbl.table.column_names == [DOCUMENT_ID]
        assert tbl.table[DOCUMENT_ID] == (4, 9)

    def test_typed_table_source(self):
        """Test a TypedTable keeps its document ids."""
        table = TypedTable.for_documents(2).with_column("raw", ColumnType.STRING, ['1', '2'])

        tbl = to_tbl_json(table.take([1]), json_column="raw")

        assert tbl.table[DOCUMENT_ID] == (2,)
        assert tbl.attachment[0].value == 2

    def test_table_source_requires_column(self):
        """Test table sources need json_column."""
        with pytest.raises(ProcessingError) as exc_info:
            to_tbl_json(pd.DataFrame({"json": ['1']}))

        assert exc_info.value.error_type == ErrorType.SOURCE

    def test_table_source_unknown_column(self):
        """Test a missing JSON column is reported."""
        with pytest.raises(ProcessingError, match="not found"):
            to_tbl_json(pd.DataFrame({"json": ['1']}), json_column="doc")

    def test_table_source_non_text_column(self):
        """Test the JSON column must hold text."""
        with pytest.raises(ProcessingError, match="must hold JSON text"):
            to_tbl_json(pd.DataFrame({"json": [1, 2]}), json_column="json")

    def test_json_column_with_text_source(self):
        """Test json_column is rejected for text sources."""
        with pytest.raises(ProcessingError) as exc_info:
            to_tbl_json('[1]', json_column="json")

        assert exc_info.value.error_type == ErrorType.SOURCE

    def test_unsupported_source(self):
        """Test unsupported source objects."""
        with pytest.raises(ProcessingError) as exc_info:
            to_tbl_json(42)

        assert exc_info.value.error_type == ErrorType.SOURCE

    def test_malformed_document(self):
        """Test malformed JSON fails for the whole call."""
        with pytest.raises(ProcessingError) as exc_info:
            to_tbl_json(['[1]', '{"a":'])

        assert exc_info.value.error_type == ErrorType.SYNTAX
        assert exc_info.value.context["document"] == 2
