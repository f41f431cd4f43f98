import pytest

from bptreedb.catalog import Catalog, ColumnDef, CreateTableData, TableNotFoundError
from bptreedb.insert import (
    DuplicateKeyError,
    InsertData,
    decode_record,
    format_record,
    insert_record,
)
from bptreedb.sqlenums import SqlToken


@pytest.fixture
def catalog():
    cat = Catalog()
    cat.create_table(
        CreateTableData(
            "emp",
            [
                ColumnDef("emp_id", SqlToken.INT, is_primary_key=True),
                ColumnDef("emp_name", SqlToken.STRING, 32),
                ColumnDef("salary", SqlToken.DOUBLE),
            ],
        )
    )
    return cat


def test_insert_round_trip(catalog):
    key = insert_record(catalog, InsertData("emp", [21, "Abhishek", 1000.5]))
    entry = catalog.lookup("emp")
    record = entry.record_table.query(key)
    assert decode_record(entry, record) == {
        "emp_id": 21,
        "emp_name": "Abhishek",
        "salary": 1000.5,
    }


def test_record_length_matches_schema(catalog):
    key = insert_record(catalog, InsertData("emp", [22, "Ankit Sharma", 10.0]))
    entry = catalog.lookup("emp")
    record = entry.record_table.query(key)
    assert len(record) == sum(s.dtype_size for s in entry.schema_records())


def test_duplicate_key_rejected(catalog):
    insert_record(catalog, InsertData("emp", [21, "Abhishek", 1.0]))
    with pytest.raises(DuplicateKeyError, match='"emp_pkey"'):
        insert_record(catalog, InsertData("emp", [21, "Other", 2.0]))
    entry = catalog.lookup("emp")
    assert len(entry.record_table) == 1
    [(_, record)] = list(entry.record_table.items())
    assert decode_record(entry, record)["emp_name"] == "Abhishek"


def test_missing_table_raises(catalog):
    with pytest.raises(TableNotFoundError):
        insert_record(catalog, InsertData("dept", [1, "x", 1.0]))


def test_wrong_value_count_raises(catalog):
    with pytest.raises(ValueError):
        insert_record(catalog, InsertData("emp", [1, "x"]))
    assert len(catalog.lookup("emp").record_table) == 0


def test_wrong_value_type_raises(catalog):
    with pytest.raises(ValueError):
        insert_record(catalog, InsertData("emp", ["abc", "x", 1.0]))
    with pytest.raises(ValueError):
        insert_record(catalog, InsertData("emp", [1, 5, 1.0]))
    assert len(catalog.lookup("emp").record_table) == 0


def test_string_truncated_to_column_width():
    cat = Catalog()
    entry = cat.create_table(
        CreateTableData(
            "codes",
            [
                ColumnDef("id", SqlToken.INT, is_primary_key=True),
                ColumnDef("code", SqlToken.STRING, 4),
            ],
        )
    )
    key = insert_record(cat, InsertData("codes", [1, "abcdefgh"]))
    assert decode_record(entry, entry.record_table.query(key))["code"] == "abcd"


def test_records_kept_in_key_order(catalog):
    ids = [5, 1, 3, -2, 40, 17, 8]
    for emp_id in ids:
        insert_record(catalog, InsertData("emp", [emp_id, f"n{emp_id}", 0.0]))
    entry = catalog.lookup("emp")
    stored = [decode_record(entry, rec)["emp_id"] for _, rec in entry.record_table.items()]
    assert stored == sorted(ids)


def test_composite_primary_key():
    cat = Catalog()
    cat.create_table(
        CreateTableData(
            "staff",
            [
                ColumnDef("name", SqlToken.STRING, 16, is_primary_key=True),
                ColumnDef("dept", SqlToken.INT, is_primary_key=True),
                ColumnDef("age", SqlToken.INT),
            ],
        )
    )
    insert_record(cat, InsertData("staff", ["bob", 1, 30]))
    insert_record(cat, InsertData("staff", ["bob", 2, 40]))
    with pytest.raises(DuplicateKeyError):
        insert_record(cat, InsertData("staff", ["bob", 1, 50]))
    assert len(cat.lookup("staff").record_table) == 2


def test_double_primary_key_order():
    cat = Catalog()
    entry = cat.create_table(
        CreateTableData("prices", [ColumnDef("price", SqlToken.DOUBLE, is_primary_key=True)])
    )
    values = [2.5, -1.0, 0.25, 100.0]
    for value in values:
        insert_record(cat, InsertData("prices", [value]))
    stored = [decode_record(entry, rec)["price"] for _, rec in entry.record_table.items()]
    assert stored == sorted(values)


def test_format_record_uses_schema_table_order():
    cat = Catalog()
    entry = cat.create_table(
        CreateTableData(
            "emp",
            [
                ColumnDef("salary", SqlToken.DOUBLE),
                ColumnDef("emp_name", SqlToken.STRING, 16),
                ColumnDef("emp_id", SqlToken.INT, is_primary_key=True),
            ],
        )
    )
    key = insert_record(cat, InsertData("emp", [1000.5, "Abhishek", 21]))
    assert format_record(entry, entry.record_table.query(key)) == "21 Abhishek 1000.500000 "


def test_decode_short_record_raises(catalog):
    with pytest.raises(ValueError):
        decode_record(catalog.lookup("emp"), b"\0\0")