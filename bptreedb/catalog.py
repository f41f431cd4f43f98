"""Table catalog: per-table schema and record trees, keyed by table name."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .bplustree import BPlusTree
from .keys import KeyField, encode_key, make_comparator
from .sqlenums import SqlToken, dtype_size, is_valid_dtype

TABLE_NAME_MAX_SIZE = 64
COLUMN_NAME_MAX_SIZE = 64
MAX_COLUMNS_PER_TABLE = 32
BTREE_MAX_CHILDREN_SCHEMA_TABLE = 4
BTREE_MAX_CHILDREN_RDBMS_TABLE = 4
BTREE_MAX_CHILDREN_CATALOG_TABLE = 4
STRING_MAX_VALUE_LEN = 256
MAX_COLS_IN_SELECT_LIST = 128
MAX_TABLES_IN_JOIN_LIST = 8
FQCN_SIZE = TABLE_NAME_MAX_SIZE + COLUMN_NAME_MAX_SIZE
ALIAS_NAME_LEN = FQCN_SIZE

TABLE_KEY_FIELDS = (KeyField(SqlToken.STRING, TABLE_NAME_MAX_SIZE),)
COLUMN_KEY_FIELDS = (KeyField(SqlToken.STRING, COLUMN_NAME_MAX_SIZE),)


class CatalogError(Exception):
    """Base class for catalog failures."""


class TableExistsError(CatalogError):
    """A table with the requested name is already in the catalog."""


class TableNotFoundError(CatalogError):
    """No table with the requested name is in the catalog."""


class NoPrimaryKeyError(CatalogError):
    """A table definition declares no primary key column."""


@dataclass(frozen=True)
class ColumnDef:
    """One column of a CREATE TABLE statement.

    ``size`` is the declared length for strings; for int and double it
    defaults to, and must equal, the type's storage size.
    """

    name: str
    dtype: SqlToken
    size: Optional[int] = None
    is_primary_key: bool = False

    def __post_init__(self) -> None:
        if not is_valid_dtype(self.dtype):
            raise ValueError(f"unsupported column type: {self.dtype!r}")
        dtype = SqlToken(self.dtype)
        object.__setattr__(self, "dtype", dtype)
        default = dtype_size(dtype)
        size = default if self.size is None else self.size
        if size <= 0:
            raise ValueError(f"column size must be positive, got {size}")
        if dtype != SqlToken.STRING and size != default:
            raise ValueError(f"{dtype.name} columns are {default} bytes wide, got {size}")
        object.__setattr__(self, "size", size)


@dataclass
class CreateTableData:
    """A parsed CREATE TABLE statement."""

    table_name: str
    columns: list[ColumnDef] = field(default_factory=list)


@dataclass(frozen=True)
class SchemaRecord:
    """Layout of one column inside a table's fixed-width records."""

    column_name: str
    dtype: SqlToken
    dtype_size: int
    offset: int
    is_primary_key: bool = False
    is_non_null: bool = False


def _table_key(name: str) -> bytes:
    return encode_key([name], TABLE_KEY_FIELDS)


def _column_key(name: str) -> bytes:
    return encode_key([name], COLUMN_KEY_FIELDS)


@dataclass(eq=False)
class CatalogEntry:
    """Everything the catalog holds about one table."""

    table_name: str
    columns: tuple[str, ...]
    schema_table: BPlusTree
    record_table: BPlusTree
    key_fields: tuple[KeyField, ...]

    def schema_records(self) -> list[SchemaRecord]:
        """Schema records in the order the columns were declared."""
        return [self.schema_table.query(_column_key(name)) for name in self.columns]


def construct_key_fields(cdata: CreateTableData) -> tuple[KeyField, ...]:
    """Key layout of a table: its primary key columns in declaration order."""
    fields = tuple(
        KeyField(column.dtype, column.size)
        for column in cdata.columns
        if column.is_primary_key
    )
    if not fields:
        raise NoPrimaryKeyError(
            f"table {cdata.table_name!r} must have at least one primary key"
        )
    return fields


def _check_definition(cdata: CreateTableData) -> None:
    if len(cdata.table_name.encode()) > TABLE_NAME_MAX_SIZE:
        raise CatalogError(f"table name {cdata.table_name!r} is too long")
    if len(cdata.columns) > MAX_COLUMNS_PER_TABLE:
        raise CatalogError(
            f"a table may have at most {MAX_COLUMNS_PER_TABLE} columns, "
            f"got {len(cdata.columns)}"
        )
    seen: set[str] = set()
    for column in cdata.columns:
        if len(column.name.encode()) > COLUMN_NAME_MAX_SIZE:
            raise CatalogError(f"column name {column.name!r} is too long")
        if column.name in seen:
            raise CatalogError(f"column {column.name!r} is declared twice")
        seen.add(column.name)


def _release_entry(entry: CatalogEntry) -> None:
    entry.schema_table.destroy()
    entry.record_table.destroy()


class Catalog:
    """The table catalog of one database."""

    def __init__(self) -> None:
        self._tables = BPlusTree(
            compare=make_comparator(TABLE_KEY_FIELDS),
            max_children=BTREE_MAX_CHILDREN_CATALOG_TABLE,
            on_free=_release_entry,
        )

    def create_table(self, cdata: CreateTableData) -> CatalogEntry:
        """Register a new table with its schema and an empty record tree."""
        key = _table_key(cdata.table_name)
        if self._tables.query(key) is not None:
            raise TableExistsError(f"table {cdata.table_name!r} already exists")
        _check_definition(cdata)
        key_fields = construct_key_fields(cdata)

        schema_table = BPlusTree(
            compare=make_comparator(COLUMN_KEY_FIELDS),
            max_children=BTREE_MAX_CHILDREN_SCHEMA_TABLE,
        )
        offset = 0
        for column in cdata.columns:
            schema_table.insert(
                _column_key(column.name),
                SchemaRecord(
                    column_name=column.name,
                    dtype=column.dtype,
                    dtype_size=column.size,
                    offset=offset,
                    is_primary_key=column.is_primary_key,
                ),
            )
            offset += column.size

        record_table = BPlusTree(
            compare=make_comparator(key_fields),
            max_children=BTREE_MAX_CHILDREN_RDBMS_TABLE,
        )
        entry = CatalogEntry(
            table_name=cdata.table_name,
            columns=tuple(column.name for column in cdata.columns),
            schema_table=schema_table,
            record_table=record_table,
            key_fields=key_fields,
        )
        self._tables.insert(key, entry)
        return entry

    def drop_table(self, name: str) -> None:
        """Remove a table and release its schema and records."""
        if not self._tables.delete(_table_key(name)):
            raise TableNotFoundError(f"table {name!r} does not exist")

    def lookup(self, name: str) -> Optional[CatalogEntry]:
        """The entry for table ``name``, or None if there is no such table."""
        return self._tables.query(_table_key(name))

    def describe(self) -> str:
        """A readable dump of every table, its schema and its column list."""
        lines: list[str] = []
        for _, entry in self._tables.items():
            lines.append(f"Record Table Name = {entry.table_name}")
            lines.append("Schema Table : ")
            for _, rec in entry.schema_table.items():
                flag = "Y" if rec.is_primary_key else "N"
                lines.append(
                    f"Column Name : {rec.column_name}  Dtype = {int(rec.dtype)}  "
                    f"Dtype Len = {rec.dtype_size}  Is_Primary_key = {flag}  "
                    f"offset = {rec.offset}"
                )
            lines.append(f"Record Count : {len(entry.record_table)}")
            lines.append("Column List : ")
            lines.append("".join(f"{name} " for name in entry.columns))
            lines.append("======")
        return "".join(f"{line}\n" for line in lines)