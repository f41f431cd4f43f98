import random

import pytest

from bptreedb.bplustree import BPlusTree


def reverse_compare(a, b):
    # Positive when a sorts first: larger numbers first.
    return (a > b) - (a < b)


def test_empty_tree():
    tree = BPlusTree()
    assert len(tree) == 0
    assert list(tree) == []
    assert tree.query("x") is None
    assert "x" not in tree
    assert tree.delete("x") is False
    assert tree.modify("x", 1) is False


def test_insert_and_query():
    tree = BPlusTree()
    assert tree.insert("india", "delhi") is True
    assert tree.insert("france", "paris") is True
    assert tree.query("india") == "delhi"
    assert tree.query("france") == "paris"
    assert tree.query("spain") is None
    assert "france" in tree


def test_duplicate_insert_rejected():
    tree = BPlusTree()
    assert tree.insert(5, "a") is True
    assert tree.insert(5, "b") is False
    assert tree.query(5) == "a"
    assert len(tree) == 1


def test_items_in_order_after_many_inserts():
    tree = BPlusTree()
    keys = list(range(200))
    random.Random(1).shuffle(keys)
    for k in keys:
        tree.insert(k, str(k))
    assert list(tree) == sorted(keys)
    assert list(tree.items()) == [(k, str(k)) for k in sorted(keys)]
    assert len(tree) == len(keys)


def test_custom_compare_reverses_order():
    tree = BPlusTree(compare=reverse_compare)
    for k in [3, 9, 1, 7, 5, 2, 8]:
        tree.insert(k, k * 10)
    assert list(tree) == [9, 8, 7, 5, 3, 2, 1]
    assert tree.query(7) == 70


def test_modify_replaces_and_frees_old_value():
    freed = []
    tree = BPlusTree(on_free=freed.append)
    tree.insert("k", "old")
    assert tree.modify("k", "new") is True
    assert tree.query("k") == "new"
    assert freed == ["old"]


def test_delete_frees_value():
    freed = []
    tree = BPlusTree(on_free=freed.append)
    for k in range(10):
        tree.insert(k, f"v{k}")
    assert tree.delete(4) is True
    assert freed == ["v4"]
    assert 4 not in tree
    assert tree.delete(4) is False
    assert list(tree) == [0, 1, 2, 3, 5, 6, 7, 8, 9]


def test_destroy_frees_everything_and_empties():
    freed = []
    tree = BPlusTree(on_free=freed.append)
    for k in range(20):
        tree.insert(k, k)
    tree.destroy()
    assert sorted(freed) == list(range(20))
    assert len(tree) == 0
    assert tree.insert(1, "again") is True
    assert tree.query(1) == "again"


def test_query_range_inclusive():
    tree = BPlusTree()
    for k in range(0, 100, 2):
        tree.insert(k, -k)
    result = list(tree.query_range(10, 20))
    assert result == [(k, -k) for k in range(10, 21, 2)]


def test_query_range_bounds_between_keys():
    tree = BPlusTree()
    for k in range(0, 100, 2):
        tree.insert(k, k)
    keys = [k for k, _ in tree.query_range(11, 19)]
    assert keys == [k for k in range(0, 100, 2) if 11 <= k <= 19]


def test_query_range_empty_when_inverted():
    tree = BPlusTree()
    for k in range(10):
        tree.insert(k, k)
    assert list(tree.query_range(7, 3)) == []


def test_delete_all_then_reuse():
    tree = BPlusTree()
    keys = list(range(100))
    for k in keys:
        tree.insert(k, k)
    random.Random(7).shuffle(keys)
    for k in keys:
        assert tree.delete(k) is True
    assert len(tree) == 0
    assert list(tree) == []
    tree.insert(42, "x")
    assert list(tree.items()) == [(42, "x")]


def test_set_max_children():
    tree = BPlusTree()
    tree.set_max_children(6)
    assert tree.max_children == 7
    for k in range(50):
        tree.insert(k, k)
    assert list(tree) == list(range(50))


def test_invalid_max_children():
    with pytest.raises(ValueError):
        BPlusTree(max_children=2)
    tree = BPlusTree()
    with pytest.raises(ValueError):
        tree.set_max_children(1)


def test_string_keys_sorted():
    tree = BPlusTree()
    names = ["india", "china", "usa", "uk", "japan", "brazil", "kenya"]
    for name in names:
        tree.insert(name, name.upper())
    assert list(tree) == sorted(names)
    assert dict(tree.items())["japan"] == "JAPAN"