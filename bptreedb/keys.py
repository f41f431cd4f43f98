"""Fixed-layout composite keys made of string, int and double fields."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from .sqlenums import SqlToken, is_valid_dtype

_INT = struct.Struct("<i")
_DOUBLE = struct.Struct("<d")


@dataclass(frozen=True)
class KeyField:
    """One field of a key: its column type and its width in bytes."""

    dtype: SqlToken
    size: int

    def __post_init__(self) -> None:
        if not is_valid_dtype(self.dtype):
            raise ValueError(f"unsupported key field type: {self.dtype!r}")
        if self.size <= 0:
            raise ValueError(f"key field size must be positive, got {self.size}")
        if self.dtype == SqlToken.INT and self.size < _INT.size:
            raise ValueError(f"int key field needs {_INT.size} bytes, got {self.size}")
        if self.dtype == SqlToken.DOUBLE and self.size < _DOUBLE.size:
            raise ValueError(f"double key field needs {_DOUBLE.size} bytes, got {self.size}")


def _segment(key: bytes, offset: int, size: int) -> bytes:
    chunk = key[offset:offset + size]
    if len(chunk) < size:
        raise ValueError(f"key of {len(key)} bytes is too short for its layout")
    return chunk


def _order(a: Any, b: Any) -> int:
    return (a < b) - (a > b)


def compare_keys(
    key1: Optional[bytes], key2: Optional[bytes], fields: Sequence[KeyField]
) -> int:
    """Compare two encoded keys field by field.

    Returns 1 when ``key1`` sorts before ``key2``, -1 when it sorts after and
    0 when they are equal.  A missing or empty ``key1`` sorts after anything;
    otherwise a missing or empty ``key2`` does.
    """
    if not key1:
        return 1
    if not key2:
        return -1
    offset = 0
    for field in fields:
        a = _segment(key1, offset, field.size)
        b = _segment(key2, offset, field.size)
        if field.dtype == SqlToken.STRING:
            rc = _order(a.split(b"\0", 1)[0], b.split(b"\0", 1)[0])
        elif field.dtype == SqlToken.INT:
            rc = _order(_INT.unpack_from(a)[0], _INT.unpack_from(b)[0])
        else:
            rc = _order(_DOUBLE.unpack_from(a)[0], _DOUBLE.unpack_from(b)[0])
        if rc:
            return rc
        offset += field.size
    return 0


def make_comparator(fields: Sequence[KeyField]) -> Callable[[Any, Any], int]:
    """Return a two-argument comparison for keys with the given layout."""
    layout = tuple(fields)

    def compare(key1: Optional[bytes], key2: Optional[bytes]) -> int:
        return compare_keys(key1, key2, layout)

    return compare


def encode_key(values: Sequence[Any], fields: Sequence[KeyField]) -> bytes:
    """Serialise one value per field into a fixed-width key.

    Strings are truncated to the field width and padded with NUL bytes.
    """
    if len(values) != len(fields):
        raise ValueError(f"expected {len(fields)} key values, got {len(values)}")
    parts = []
    for value, field in zip(values, fields):
        try:
            if field.dtype == SqlToken.STRING:
                raw = value.encode() if isinstance(value, str) else bytes(value)
                raw = raw[:field.size]
            elif field.dtype == SqlToken.INT:
                raw = _INT.pack(value)
            else:
                raw = _DOUBLE.pack(value)
        except struct.error as exc:
            raise ValueError(f"cannot encode {value!r} as {field.dtype.name}: {exc}") from exc
        parts.append(raw.ljust(field.size, b"\0"))
    return b"".join(parts)