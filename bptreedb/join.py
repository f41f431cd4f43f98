"""Nested-loop join over the record tables of several catalog tables."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Iterator, Sequence

from .catalog import Catalog, CatalogEntry, TableNotFoundError
from .naming import JoinTable


@dataclass(frozen=True)
class JoinedRow:
    """One combination of records, one per joined table, in FROM-list order."""

    keys: tuple[bytes, ...]
    records: tuple[bytes, ...]

    @property
    def size(self) -> int:
        """Number of tables that contributed to this row."""
        return len(self.records)


def resolve_join_tables(
    catalog: Catalog, tables: Sequence[JoinTable]
) -> list[CatalogEntry]:
    """Look up every table of the FROM list once, in order."""
    entries = []
    for table in tables:
        entry = catalog.lookup(table.table_name)
        if entry is None:
            raise TableNotFoundError(f"could not find table {table.table_name!r}")
        entries.append(entry)
    return entries


def iterate_join(entries: Sequence[CatalogEntry]) -> Iterator[JoinedRow]:
    """Yield the cross product of the tables' records.

    The first table is the outermost loop and the last table varies fastest;
    each table is walked in key order.  Nothing is produced when any table
    is empty or when no table is given.
    """
    if not entries:
        return
    per_table = [list(entry.record_table.items()) for entry in entries]
    for combination in product(*per_table):
        yield JoinedRow(
            keys=tuple(key for key, _ in combination),
            records=tuple(record for _, record in combination),
        )