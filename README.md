# bptreedb

An in-memory B+ tree and a small table engine built on it: a catalog of
tables with schemas and composite primary keys, fixed-width record storage,
column-name resolution and nested-loop joins over stored tables. There are
no dependencies beyond the standard library.

## Install

    pip install .

To run the tests:

    pip install .[test]
    pytest

## The B+ tree

`bptreedb.bplustree.BPlusTree(compare=None, max_children=4, on_free=None)`
keeps unique keys in order. `compare(a, b)` returns a positive number when
`a` sorts before `b`, zero when they are equal and a negative number when
`a` sorts after `b`; without one, keys are compared with `<` and `>`.
`max_children` must be at least 3.

```python
from bptreedb.bplustree import BPlusTree

tree = BPlusTree()
tree.insert("france", "paris")      # True
tree.insert("france", "nice")       # False: the key is already present
tree.insert("japan", "tokyo")
tree.query("japan")                 # "tokyo"
"france" in tree                    # True
len(tree)                           # 2
tree.modify("france", "lyon")       # True
tree.delete("japan")                # True
list(tree.items())                  # [("france", "lyon")]
```

- `query(key)` returns the value or `None`.
- `query_range(low, high)` yields `(key, value)` pairs with
  `low <= key <= high`, in key order.
- `modify`, `delete` and `insert` return `False` instead of raising when
  the key is absent (or, for `insert`, already present).
- `on_free` is called with every value that leaves the tree through
  `modify`, `delete` or `destroy`.
- `destroy()` releases every value and leaves the tree empty.
- `set_max_children(number)` sets the fan-out so a node holds up to
  `number` children.
- Iterating the tree yields its keys in order; `items()` yields pairs.

## Keys made of several fields

`bptreedb.keys` lays out composite keys as fixed-width byte strings.
A `KeyField(dtype, size)` describes one field, where `dtype` is
`SqlToken.STRING`, `SqlToken.INT` (a 4-byte little-endian signed integer)
or `SqlToken.DOUBLE` (an 8-byte little-endian float).

```python
from bptreedb.bplustree import BPlusTree
from bptreedb.keys import KeyField, encode_key, make_comparator
from bptreedb.sqlenums import SqlToken

fields = (KeyField(SqlToken.STRING, 32), KeyField(SqlToken.INT, 4))
tree = BPlusTree(compare=make_comparator(fields))
tree.insert(encode_key(["ada", 7], fields), "record")
```

`encode_key` truncates strings to the field width and pads them with NUL
bytes. `compare_keys(key1, key2, fields)` compares field by field; string
fields compare up to their first NUL byte.

`bptreedb.sqlenums` holds the `SqlToken` codes and the helpers
`is_valid_dtype`, `dtype_str`, `dtype_size` and `agg_fn_tostring`.

## Tables

`bptreedb.catalog.Catalog` holds the tables of one database.

```python
from bptreedb.catalog import Catalog, ColumnDef, CreateTableData
from bptreedb.insert import InsertData, decode_record, insert_record
from bptreedb.sqlenums import SqlToken

catalog = Catalog()
emp = catalog.create_table(CreateTableData("emp", [
    ColumnDef("emp_id", SqlToken.INT, is_primary_key=True),
    ColumnDef("name", SqlToken.STRING, 32),
    ColumnDef("salary", SqlToken.DOUBLE),
]))

key = insert_record(catalog, InsertData("emp", [21, "Ada", 5000.0]))
decode_record(emp, emp.record_table.query(key))
# {"emp_id": 21, "name": "Ada", "salary": 5000.0}
```

- `create_table` returns a `CatalogEntry` with the table's schema tree,
  record tree, column list and key layout. It raises `TableExistsError`
  for a name already in use, `NoPrimaryKeyError` when no column is a
  primary key, and `CatalogError` for names longer than 64 bytes, more than
  32 columns or a column declared twice.
- `drop_table(name)` removes a table or raises `TableNotFoundError`.
- `lookup(name)` returns the entry or `None`; `describe()` returns a text
  dump of every table's schema, record count and columns.
- `CatalogEntry.schema_records()` lists each column's `SchemaRecord`
  (type, width, offset in the record, primary-key flag) in declaration
  order. `construct_key_fields(cdata)` gives a table's key layout.

`bptreedb.insert.insert_record` stores one row and returns its encoded
primary key; it raises `TableNotFoundError` for an unknown table,
`DuplicateKeyError` when the key is already stored, and `ValueError` when
the values do not fit the columns. `format_record` renders a record's
values in column-name order, each followed by a space.

## Column names and joins

`bptreedb.naming` resolves column references against a FROM list of
`JoinTable(table_name, alias_name="")` entries.
`classify_column_name(tables, catalog, name)` returns a `ColumnNameType`:
`FQCN` for `table.column`, `ACN` for `alias.column`, `LCN` for a bare
column and `NOT_KNOWN` otherwise. `split_column_name` returns
`(table_name, column_name)`; a bare column belongs to the first table.

`bptreedb.join.resolve_join_tables(catalog, tables)` looks up each listed
table, and `iterate_join(entries)` yields a `JoinedRow` (its `keys` and
`records`, one per table) for every combination of records, with the last
table varying fastest.

## Interactive shell

    bptreedb

opens a menu over a B+ tree of string keys and string values (each cut to
31 characters): 1 insert, 2 delete, 3 update, 4 read, 5 destroy, 6 list all
records, 7 exit. Any other choice, or the end of input, also leaves.

## What it does not do

There is no SQL text front end: statements are built in Python from
`CreateTableData`, `InsertData` and `JoinTable`, and there is no query
prompt, expression evaluation, WHERE filtering or SELECT output. All data
lives in memory and is lost when the process ends.