import pytest

from bufcsv.core.buffer import RowBuffer, normalize
from bufcsv.core.errors import InvalidDataKindError
from bufcsv.core.schema import FieldSchema, FieldSpec


def test_infer_appends_new_columns_as_quoted():
    schema = FieldSchema({"ts": FieldSpec(quoted=False)})

    added = schema.infer_from({"Name": "A", "ts": 1, "Age": 3})

    assert added == ["Name", "Age"]
    assert schema.names == ["ts", "Name", "Age"]
    assert schema["Name"].quoted is True
    assert schema["ts"].quoted is False


def test_known_column_positions_never_move():
    schema = FieldSchema()
    schema.infer_from({"b": 1, "a": 2})
    schema.infer_from({"c": 1, "a": 2, "b": 3})

    assert schema.names == ["b", "a", "c"]


def test_normalize_mapping_reads_values_in_schema_order():
    schema = FieldSchema({"a": FieldSpec(), "b": FieldSpec()})

    assert normalize({"b": 2, "c": 3}, schema) == [None, 2, 3]
    assert schema.names == ["a", "b", "c"]


def test_normalize_positional_skips_inference():
    schema = FieldSchema()

    assert normalize(("x", "y"), schema) == ["x", "y"]
    assert len(schema) == 0


@pytest.mark.parametrize("row", [None, 42, "a,b", b"raw"])
def test_normalize_rejects_other_kinds(row):
    with pytest.raises(InvalidDataKindError):
        normalize(row, FieldSchema())


def test_row_buffer_drain_empties_buffer():
    buf = RowBuffer(FieldSchema())
    buf.append(["a"])
    buf.append(["b"])

    rows = buf.drain()

    assert rows == [["a"], ["b"]]
    assert len(buf) == 0
    assert not buf
