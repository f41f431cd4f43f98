"""Serialising rows into a table's fixed-width records."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any

from .catalog import (
    Catalog,
    CatalogEntry,
    CatalogError,
    SchemaRecord,
    TableNotFoundError,
)
from .sqlenums import SqlToken

_INT = struct.Struct("<i")
_DOUBLE = struct.Struct("<d")


class DuplicateKeyError(CatalogError):
    """A row with the same primary key is already in the table."""


@dataclass
class InsertData:
    """A parsed INSERT statement: one value per column in declaration order."""

    table_name: str
    values: list[Any] = field(default_factory=list)


def _encode(value: Any, schema: SchemaRecord) -> bytes:
    try:
        if schema.dtype == SqlToken.STRING:
            if isinstance(value, str):
                raw = value.encode()
            elif isinstance(value, (bytes, bytearray)):
                raw = bytes(value)
            else:
                raise ValueError(
                    f"column {schema.column_name!r} expects a string, got {value!r}"
                )
            return raw[:schema.dtype_size].ljust(schema.dtype_size, b"\0")
        if schema.dtype == SqlToken.INT:
            return _INT.pack(value)
        return _DOUBLE.pack(value)
    except struct.error as exc:
        raise ValueError(
            f"column {schema.column_name!r} cannot hold {value!r}: {exc}"
        ) from exc


def _decode(record: bytes, schema: SchemaRecord) -> Any:
    chunk = record[schema.offset:schema.offset + schema.dtype_size]
    if len(chunk) < schema.dtype_size:
        raise ValueError(f"record of {len(record)} bytes is too short for its table")
    if schema.dtype == SqlToken.STRING:
        return chunk.split(b"\0", 1)[0].decode(errors="replace")
    if schema.dtype == SqlToken.INT:
        return _INT.unpack_from(chunk)[0]
    return _DOUBLE.unpack_from(chunk)[0]


def insert_record(catalog: Catalog, idata: InsertData) -> bytes:
    """Store one row in its table and return the row's encoded key."""
    entry = catalog.lookup(idata.table_name)
    if entry is None:
        raise TableNotFoundError(f"table {idata.table_name!r} not found")
    schemas = entry.schema_records()
    if len(idata.values) != len(schemas):
        raise ValueError(
            f"table {idata.table_name!r} has {len(schemas)} columns, "
            f"got {len(idata.values)} values"
        )
    record = bytearray(sum(schema.dtype_size for schema in schemas))
    key_parts = []
    for value, schema in zip(idata.values, schemas):
        raw = _encode(value, schema)
        record[schema.offset:schema.offset + schema.dtype_size] = raw
        if schema.is_primary_key:
            key_parts.append(raw)
    key = b"".join(key_parts)
    if entry.record_table.query(key) is not None:
        raise DuplicateKeyError(
            f'duplicate key value violates unique constraint "{idata.table_name}_pkey"'
        )
    entry.record_table.insert(key, bytes(record))
    return key


def decode_record(entry: CatalogEntry, record: bytes) -> dict[str, Any]:
    """Column name to value for one stored record, in declaration order."""
    return {schema.column_name: _decode(record, schema) for schema in entry.schema_records()}


def format_record(entry: CatalogEntry, record: bytes) -> str:
    """Field values in schema-table order, each followed by a space."""
    parts = []
    for _, schema in entry.schema_table.items():
        value = _decode(record, schema)
        parts.append(f"{value:f} " if schema.dtype == SqlToken.DOUBLE else f"{value} ")
    return "".join(parts)