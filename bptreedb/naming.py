"""Resolving column references in a query to table and column names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .catalog import FQCN_SIZE, Catalog


class ColumnNameType(Enum):
    """How a column reference names its table."""

    NOT_KNOWN = 0
    FQCN = 1  # <table>.<column>
    ACN = 2  # <alias>.<column>
    LCN = 3  # <column> alone, taken from the first table


@dataclass(frozen=True)
class JoinTable:
    """One table in a query's FROM list, with its optional alias."""

    table_name: str
    alias_name: str = ""


def _alias_map(tables: Sequence[JoinTable]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for table in tables:
        if table.alias_name:
            mapping.setdefault(table.alias_name, table.table_name)
    return mapping


def _split_tokens(name: str) -> tuple[Optional[str], Optional[str]]:
    tokens = [token for token in name[:FQCN_SIZE].split(".") if token]
    first = tokens[0] if tokens else None
    second = tokens[1] if len(tokens) > 1 else None
    return first, second


def _classify(
    tables: Sequence[JoinTable], catalog: Catalog, name: str
) -> tuple[ColumnNameType, Optional[str], Optional[str], dict[str, str]]:
    first, second = _split_tokens(name)
    aliases = _alias_map(tables)
    if first is None:
        kind = ColumnNameType.NOT_KNOWN
    elif second is None:
        kind = ColumnNameType.LCN
    elif first in aliases:
        kind = ColumnNameType.ACN
    elif catalog.lookup(first) is not None:
        kind = ColumnNameType.FQCN
    else:
        kind = ColumnNameType.NOT_KNOWN
    return kind, first, second, aliases


def classify_column_name(
    tables: Sequence[JoinTable], catalog: Catalog, name: str
) -> ColumnNameType:
    """Tell whether ``name`` is qualified by a table, an alias, or nothing.

    The name is split on dots, ignoring empty pieces; only the first two
    pieces count.  An alias takes precedence over a table of the same name.
    """
    return _classify(tables, catalog, name)[0]


def split_column_name(
    tables: Sequence[JoinTable], catalog: Catalog, name: str
) -> tuple[str, str]:
    """Return ``(table_name, column_name)`` for a column reference.

    Both parts are empty strings when the reference cannot be resolved.  An
    unqualified column belongs to the first table of the FROM list.
    """
    kind, first, second, aliases = _classify(tables, catalog, name)
    if kind is ColumnNameType.FQCN:
        return first, second
    if kind is ColumnNameType.ACN:
        return aliases[first], second
    if kind is ColumnNameType.LCN:
        if not tables:
            raise ValueError(f"column {name!r} is unqualified and no table is listed")
        return tables[0].table_name, first
    return "", ""