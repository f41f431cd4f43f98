"""An in-memory B+ tree with a table catalog, record storage, name resolution and joins."""

__version__ = "0.1.0"
__all__ = ["bplustree", "keys", "sqlenums", "cli", "catalog", "insert", "naming", "join"]