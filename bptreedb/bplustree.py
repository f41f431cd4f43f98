"""An in-memory B+ tree keyed by a caller-supplied comparison function."""

from __future__ import annotations

from bisect import bisect_right
from functools import cmp_to_key
from typing import Any, Callable, Iterator, Optional

MAX_CHILD_NUMBER = 4

Compare = Callable[[Any, Any], int]
FreeHook = Callable[[Any], None]


def _natural_compare(a: Any, b: Any) -> int:
    """Positive when ``a`` sorts before ``b``, zero when equal, negative after."""
    return (a < b) - (a > b)


def _validated(max_children: int) -> int:
    if max_children < 3:
        raise ValueError(f"a node needs room for at least 3 children, got {max_children}")
    return max_children


class _Node:
    __slots__ = ("is_leaf", "keys", "children", "parent", "next", "prev")

    def __init__(self, is_leaf: bool, keys=None, children=None):
        self.is_leaf = is_leaf
        self.keys: list = keys if keys is not None else []
        self.children: list = children if children is not None else []
        self.parent: Optional[_Node] = None
        self.next: Optional[_Node] = None
        self.prev: Optional[_Node] = None


class BPlusTree:
    """A B+ tree mapping unique keys to values.

    ``compare(a, b)`` returns a positive number when ``a`` sorts before ``b``,
    zero when they are equal and a negative number when ``a`` sorts after
    ``b``.  ``on_free`` is called with every value that leaves the tree
    through :meth:`delete`, :meth:`modify` or :meth:`destroy`.
    """

    def __init__(
        self,
        compare: Optional[Compare] = None,
        max_children: int = MAX_CHILD_NUMBER,
        on_free: Optional[FreeHook] = None,
    ):
        self._compare: Compare = compare or _natural_compare
        self._sort_key = cmp_to_key(lambda a, b: -self._compare(a, b))
        self.max_children = _validated(max_children)
        self._on_free = on_free
        self._root = _Node(is_leaf=True)

    # -- searching -------------------------------------------------------

    def _search(self, node: _Node, key: Any) -> int:
        """Index of the last key in ``node`` not after ``key`` (0 if none)."""
        index = bisect_right(node.keys, self._sort_key(key), key=self._sort_key) - 1
        return max(index, 0)

    def _find_leaf(self, key: Any, modify: bool) -> _Node:
        node = self._root
        while not node.is_leaf:
            if self._compare(key, node.keys[0]) > 0:
                if modify:
                    node.keys[0] = key
                node = node.children[0]
            else:
                node = node.children[self._search(node, key)]
        return node

    def _locate(self, key: Any) -> Optional[tuple[_Node, int]]:
        leaf = self._find_leaf(key, modify=False)
        if not leaf.keys:
            return None
        index = self._search(leaf, key)
        if self._compare(leaf.keys[index], key) != 0:
            return None
        return leaf, index

    def _free(self, value: Any) -> None:
        if self._on_free is not None:
            self._on_free(value)

    # -- insertion -------------------------------------------------------

    def _insert(self, node: _Node, key: Any, child: Any) -> None:
        if not node.keys or self._compare(key, node.keys[0]) > 0:
            pos = 0
        else:
            pos = self._search(node, key) + 1
        node.keys.insert(pos, key)
        node.children.insert(pos, child)
        if not node.is_leaf:
            child.parent = node
            if child.is_leaf:
                self._link_leaf(node, pos, child)
        if len(node.keys) >= self.max_children:
            self._split(node)

    @staticmethod
    def _link_leaf(node: _Node, pos: int, leaf: _Node) -> None:
        if pos > 0:
            before = node.children[pos - 1]
            after = before.next
            before.next = leaf
            leaf.prev = before
            leaf.next = after
            if after is not None:
                after.prev = leaf
        else:
            after = node.children[1]
            before = after.prev
            leaf.next = after
            leaf.prev = before
            after.prev = leaf
            if before is not None:
                before.next = leaf

    def _split(self, node: _Node) -> None:
        mid = self.max_children >> 1
        sibling = _Node(node.is_leaf, node.keys[mid:], node.children[mid:])
        del node.keys[mid:]
        del node.children[mid:]
        if not sibling.is_leaf:
            for child in sibling.children:
                child.parent = sibling
        if node is self._root:
            root = _Node(False, [node.keys[0], sibling.keys[0]], [node, sibling])
            node.parent = sibling.parent = root
            self._root = root
            if node.is_leaf:
                node.next = sibling
                sibling.prev = node
        else:
            self._insert(node.parent, sibling.keys[0], sibling)

    # -- deletion --------------------------------------------------------

    def _remove(self, node: _Node, index: int) -> None:
        del node.keys[index]
        removed = node.children.pop(index)
        if not node.is_leaf and removed.is_leaf:
            if removed.prev is not None:
                removed.prev.next = removed.next
            if removed.next is not None:
                removed.next.prev = removed.prev
        if index == 0 and node is not self._root and node.keys:
            child = node
            while child is not self._root and child.parent.children[0] is child:
                child.parent.keys[0] = node.keys[0]
                child = child.parent
            if child is not self._root:
                parent = child.parent
                parent.keys[parent.children.index(child)] = node.keys[0]
        if len(node.keys) * 2 < self.max_children:
            self._redistribute(node)

    @staticmethod
    def _adopt(node: _Node, children: list) -> None:
        if not node.is_leaf:
            for child in children:
                child.parent = node

    def _resort(self, left: _Node, right: _Node) -> None:
        left_size = (len(left.keys) + len(right.keys)) >> 1
        if len(left.keys) < len(right.keys):
            count = left_size - len(left.keys)
            moved = right.children[:count]
            left.keys.extend(right.keys[:count])
            left.children.extend(moved)
            del right.keys[:count]
            del right.children[:count]
            self._adopt(left, moved)
        else:
            moved = left.children[left_size:]
            right.keys[:0] = left.keys[left_size:]
            right.children[:0] = moved
            del left.keys[left_size:]
            del left.children[left_size:]
            self._adopt(right, moved)

    def _absorb(self, into: _Node, source: _Node) -> None:
        into.keys.extend(source.keys)
        into.children.extend(source.children)
        self._adopt(into, source.children)

    def _redistribute(self, node: _Node) -> None:
        if node is self._root:
            if len(node.keys) == 1 and not node.is_leaf:
                self._root = node.children[0]
                self._root.parent = None
            return
        parent = node.parent
        index = parent.children.index(node)
        succ = parent.children[index + 1] if index + 1 < len(parent.children) else None
        prev = parent.children[index - 1] if index > 0 else None
        if succ is not None and (len(succ.keys) - 1) * 2 >= self.max_children:
            self._resort(node, succ)
            parent.keys[index + 1] = succ.keys[0]
            return
        if prev is not None and (len(prev.keys) - 1) * 2 >= self.max_children:
            self._resort(prev, node)
            parent.keys[index] = node.keys[0]
            return
        if succ is not None:
            self._absorb(node, succ)
            self._remove(parent, index + 1)
            return
        if prev is not None:
            self._absorb(prev, node)
            self._remove(parent, index)
            return
        raise RuntimeError("corrupt tree: non-root node without siblings")

    # -- public interface ------------------------------------------------

    def insert(self, key: Any, value: Any) -> bool:
        """Add ``key`` with ``value``; return False if the key is already present."""
        leaf = self._find_leaf(key, modify=True)
        if leaf.keys and self._compare(leaf.keys[self._search(leaf, key)], key) == 0:
            return False
        self._insert(leaf, key, value)
        return True

    def query(self, key: Any) -> Any:
        """Return the value stored under ``key``, or None if there is none."""
        found = self._locate(key)
        if found is None:
            return None
        leaf, index = found
        return leaf.children[index]

    def query_range(self, low: Any, high: Any) -> Iterator[tuple[Any, Any]]:
        """Yield ``(key, value)`` pairs with ``low <= key <= high`` in order."""
        leaf: Optional[_Node] = self._find_leaf(low, modify=False)
        start = next(
            (i for i, k in enumerate(leaf.keys) if self._compare(k, low) <= 0),
            len(leaf.keys),
        )
        while leaf is not None:
            for key, value in zip(leaf.keys[start:], leaf.children[start:]):
                if self._compare(key, high) < 0:
                    return
                yield key, value
            leaf = leaf.next
            start = 0

    def modify(self, key: Any, value: Any) -> bool:
        """Replace the value under ``key``; return False if the key is absent."""
        found = self._locate(key)
        if found is None:
            return False
        leaf, index = found
        old = leaf.children[index]
        leaf.children[index] = value
        self._free(old)
        return True

    def delete(self, key: Any) -> bool:
        """Remove ``key`` and its value; return False if the key is absent."""
        found = self._locate(key)
        if found is None:
            return False
        leaf, index = found
        value = leaf.children[index]
        self._remove(leaf, index)
        self._free(value)
        return True

    def destroy(self) -> None:
        """Release every value and leave the tree empty."""
        for _, value in list(self.items()):
            self._free(value)
        self._root = _Node(is_leaf=True)

    def set_max_children(self, number: int) -> None:
        """Set the fan-out so that a node holds up to ``number`` children."""
        self.max_children = _validated(number + 1)

    def _leaves(self) -> Iterator[_Node]:
        node: Optional[_Node] = self._root
        while node is not None and not node.is_leaf:
            node = node.children[0]
        while node is not None:
            yield node
            node = node.next

    def items(self) -> Iterator[tuple[Any, Any]]:
        """Yield every ``(key, value)`` pair in key order."""
        for leaf in self._leaves():
            yield from zip(list(leaf.keys), list(leaf.children))

    def __iter__(self) -> Iterator[Any]:
        for key, _ in self.items():
            yield key

    def __len__(self) -> int:
        return sum(len(leaf.keys) for leaf in self._leaves())

    def __contains__(self, key: Any) -> bool:
        return self._locate(key) is not None