"""Self-balancing binary search trees: AVL and red-black."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def _in_order(root: Any) -> Iterator[Any]:
    stack = []
    node = root
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node.value
        node = node.right


def _find(root: Any, value: Any) -> Any:
    node = root
    while node is not None:
        if value < node.value:
            node = node.left
        elif value > node.value:
            node = node.right
        else:
            return node
    return None


@dataclass(eq=False)
class _AVLNode:
    value: Any
    height: int = 1
    left: Optional["_AVLNode"] = None
    right: Optional["_AVLNode"] = None


def _height(node: Optional[_AVLNode]) -> int:
    return 0 if node is None else node.height


def _update_height(node: _AVLNode) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _balance(node: _AVLNode) -> int:
    return _height(node.left) - _height(node.right)


def _avl_rotate_right(current: _AVLNode) -> _AVLNode:
    node = current.left
    current.left = node.right
    node.right = current
    _update_height(current)
    _update_height(node)
    return node


def _avl_rotate_left(current: _AVLNode) -> _AVLNode:
    node = current.right
    current.right = node.left
    node.left = current
    _update_height(current)
    _update_height(node)
    return node


class AVLTree:
    """A height-balanced search tree holding each value at most once."""

    def __init__(self) -> None:
        self._root: Optional[_AVLNode] = None

    def insert(self, value: Any) -> None:
        """Insert ``value``; inserting a value already present does nothing."""
        self._root = self._insert(self._root, value)

    def _insert(self, current: Optional[_AVLNode], value: Any) -> _AVLNode:
        if current is None:
            return _AVLNode(value)
        if value > current.value:
            current.right = self._insert(current.right, value)
        elif value < current.value:
            current.left = self._insert(current.left, value)

        _update_height(current)
        balance = _balance(current)

        if balance > 1:
            logger.debug("imbalance at node %s", _format_value(current.value))
            if value < current.left.value:
                return _avl_rotate_right(current)
            current.left = _avl_rotate_left(current.left)
            return _avl_rotate_right(current)
        if balance < -1:
            logger.debug("imbalance at node %s", _format_value(current.value))
            if value > current.right.value:
                return _avl_rotate_left(current)
            current.right = _avl_rotate_right(current.right)
            return _avl_rotate_left(current)
        return current

    def remove(self, value: Any) -> None:
        """Remove ``value`` if present."""
        self._root = self._remove(self._root, value)

    def _remove(self, node: Optional[_AVLNode], value: Any) -> Optional[_AVLNode]:
        if node is None:
            return None
        if value < node.value:
            node.left = self._remove(node.left, value)
        elif value > node.value:
            node.right = self._remove(node.right, value)
        else:
            if node.left is None or node.right is None:
                return node.left if node.left is not None else node.right
            successor = node.right
            while successor.left is not None:
                successor = successor.left
            node.value = successor.value
            node.right = self._remove(node.right, successor.value)

        _update_height(node)
        balance = _balance(node)

        if balance > 1:
            if _height(node.left.left) >= _height(node.left.right):
                return _avl_rotate_right(node)
            node.left = _avl_rotate_left(node.left)
            return _avl_rotate_right(node)
        if balance < -1:
            if _height(node.right.right) >= _height(node.right.left):
                return _avl_rotate_left(node)
            node.right = _avl_rotate_right(node.right)
            return _avl_rotate_left(node)
        return node

    def level_order(self) -> list[Optional[Any]]:
        """Breadth-first values, with None for every empty child slot."""
        result: list[Optional[Any]] = []
        queue: deque[Optional[_AVLNode]] = deque([self._root])
        while queue:
            node = queue.popleft()
            if node is None:
                result.append(None)
            else:
                queue.append(node.left)
                queue.append(node.right)
                result.append(node.value)
        return result

    def __contains__(self, value: object) -> bool:
        return _find(self._root, value) is not None

    def __iter__(self) -> Iterator[Any]:
        return _in_order(self._root)

    def __str__(self) -> str:
        return "".join(
            "null, " if value is None else f"{_format_value(value)}, "
            for value in self.level_order()
        )


@dataclass(eq=False)
class _RBNode:
    value: Any
    red: bool = True
    parent: Optional["_RBNode"] = None
    left: Optional["_RBNode"] = None
    right: Optional["_RBNode"] = None


def _is_red(node: Optional[_RBNode]) -> bool:
    return node is not None and node.red


class RedBlackTree:
    """A red-black search tree; equal values are kept side by side."""

    def __init__(self) -> None:
        self._root: Optional[_RBNode] = None

    def _replace_child(self, parent: Optional[_RBNode], old: _RBNode, new: Optional[_RBNode]) -> None:
        if parent is None:
            self._root = new
        elif parent.left is old:
            parent.left = new
        else:
            parent.right = new

    def _rotate_left(self, current: _RBNode) -> None:
        node = current.right
        node.parent = current.parent
        current.right = node.left
        if node.left is not None:
            node.left.parent = current
        node.left = current
        current.parent = node
        self._replace_child(node.parent, current, node)

    def _rotate_right(self, current: _RBNode) -> None:
        node = current.left
        node.parent = current.parent
        current.left = node.right
        if node.right is not None:
            node.right.parent = current
        node.right = current
        current.parent = node
        self._replace_child(node.parent, current, node)

    def insert(self, value: Any) -> None:
        """Insert ``value``; duplicates go to the right of equal values."""
        new_node = _RBNode(value)
        parent = None
        cursor = self._root
        while cursor is not None:
            parent = cursor
            cursor = cursor.left if value < cursor.value else cursor.right
        new_node.parent = parent
        if parent is None:
            self._root = new_node
        elif value < parent.value:
            parent.left = new_node
        else:
            parent.right = new_node
        self._fix_insert(new_node)

    def _fix_insert(self, node: _RBNode) -> None:
        while node is not self._root and node.parent.red:
            grandpa = node.parent.parent
            if node.parent is grandpa.left:
                uncle = grandpa.right
                if _is_red(uncle):
                    node.parent.red = False
                    uncle.red = False
                    grandpa.red = True
                    node = grandpa
                else:
                    if node is node.parent.right:
                        node = node.parent
                        self._rotate_left(node)
                    node.parent.red = False
                    grandpa.red = True
                    self._rotate_right(grandpa)
            else:
                uncle = grandpa.left
                if _is_red(uncle):
                    node.parent.red = False
                    uncle.red = False
                    grandpa.red = True
                    node = grandpa
                else:
                    if node is node.parent.left:
                        node = node.parent
                        self._rotate_right(node)
                    node.parent.red = False
                    grandpa.red = True
                    self._rotate_left(grandpa)
        self._root.red = False

    def _transplant(self, u: _RBNode, v: Optional[_RBNode]) -> None:
        self._replace_child(u.parent, u, v)
        if v is not None:
            v.parent = u.parent

    def remove(self, value: Any) -> None:
        """Remove one occurrence of ``value`` if present."""
        node = _find(self._root, value)
        if node is None:
            return

        original_red = node.red
        if node.left is None:
            x = node.right
            x_parent = node.parent
            self._transplant(node, node.right)
        elif node.right is None:
            x = node.left
            x_parent = node.parent
            self._transplant(node, node.left)
        else:
            y = node.right
            while y.left is not None:
                y = y.left
            x = y.right
            original_red = y.red
            if y.parent is node:
                x_parent = y
            else:
                x_parent = y.parent
                self._transplant(y, y.right)
                y.right = node.right
                y.right.parent = y
            self._transplant(node, y)
            y.left = node.left
            y.left.parent = y
            y.red = node.red

        if not original_red:
            self._fix_delete(x, x_parent)

    def _fix_delete(self, node: Optional[_RBNode], parent: Optional[_RBNode]) -> None:
        while node is not self._root and not _is_red(node):
            if node is parent.left:
                sibling = parent.right
                if _is_red(sibling):
                    sibling.red = False
                    parent.red = True
                    self._rotate_left(parent)
                    sibling = parent.right
                if sibling is None or (not _is_red(sibling.left) and not _is_red(sibling.right)):
                    if sibling is not None:
                        sibling.red = True
                    node = parent
                    parent = node.parent
                else:
                    if not _is_red(sibling.right):
                        sibling.left.red = False
                        sibling.red = True
                        self._rotate_right(sibling)
                        sibling = parent.right
                    sibling.red = parent.red
                    parent.red = False
                    if sibling.right is not None:
                        sibling.right.red = False
                    self._rotate_left(parent)
                    node = self._root
                    parent = None
            else:
                sibling = parent.left
                if _is_red(sibling):
                    sibling.red = False
                    parent.red = True
                    self._rotate_right(parent)
                    sibling = parent.left
                if sibling is None or (not _is_red(sibling.left) and not _is_red(sibling.right)):
                    if sibling is not None:
                        sibling.red = True
                    node = parent
                    parent = node.parent
                else:
                    if not _is_red(sibling.left):
                        sibling.right.red = False
                        sibling.red = True
                        self._rotate_left(sibling)
                        sibling = parent.left
                    sibling.red = parent.red
                    parent.red = False
                    if sibling.left is not None:
                        sibling.left.red = False
                    self._rotate_right(parent)
                    node = self._root
                    parent = None
        if node is not None:
            node.red = False

    def level_order(self) -> list[Optional[tuple[Any, str]]]:
        """Breadth-first ``(value, "R" or "B")`` pairs, None for empty slots."""
        result: list[Optional[tuple[Any, str]]] = []
        queue: deque[Optional[_RBNode]] = deque([self._root])
        while queue:
            node = queue.popleft()
            if node is None:
                result.append(None)
            else:
                queue.append(node.left)
                queue.append(node.right)
                result.append((node.value, "R" if node.red else "B"))
        return result

    def __contains__(self, value: object) -> bool:
        return _find(self._root, value) is not None

    def __iter__(self) -> Iterator[Any]:
        return _in_order(self._root)

    def __str__(self) -> str:
        return "".join(
            "NIL, " if entry is None else f"{_format_value(entry[0])}({entry[1]}), "
            for entry in self.level_order()
        )