"""Column storage for all entities that share one set of components."""

from __future__ import annotations

import dataclasses
import math
from typing import Any, Optional, Sequence

from voidengine.ecs_types import (
    ArchetypeEdge,
    ComponentId,
    ComponentSet,
    ComponentTypeHook,
    ComponentTypeInfo,
    EcsError,
    EntityId,
)

DEFAULT_COMPONENT_CAPACITY = 4
ADDED_GROW_RATIO = 0.5


def grown_capacity(capacity: int, total_count: int) -> int:
    """Return the capacity needed to hold ``total_count`` rows.

    The current capacity is kept when it already suffices; otherwise it grows
    to ``capacity * (total_count / capacity + 0.5)``, rounded half away from
    zero, treating an empty capacity as one.
    """
    if capacity >= total_count:
        return capacity
    base = capacity or 1
    ratio = total_count / base + ADDED_GROW_RATIO
    return math.floor(base * ratio + 0.5)


class Column:
    """The values of one component type, one per row of an archetype."""

    def __init__(self, type_info: ComponentTypeInfo, type_hook: ComponentTypeHook) -> None:
        self.type_info = dataclasses.replace(type_info)
        self.type_hook = dataclasses.replace(type_hook)
        self.values: list[Any] = []

    def _relocated(self, value: Any) -> Any:
        """Return ``value`` moved or copied by the hooks, without releasing it."""
        info, hook = self.type_info, self.type_hook
        if info.is_trivially_copyable:
            return value
        if info.is_move_constructible:
            if hook.move is None:
                raise EcsError("move hook missing")
            return hook.move(value)
        if hook.copy is None:
            raise EcsError("copy hook missing")
        return hook.copy(value)

    def transfer(self, value: Any) -> Any:
        """Relocate a value into this column and release the original."""
        moved = self._relocated(value)
        self.release(value)
        return moved

    def release(self, value: Any) -> None:
        """Run the destructor hook on ``value`` if the type needs one."""
        if self.type_info.is_trivially_destructible:
            return
        if self.type_hook.dtor is None:
            raise EcsError("destructor hook missing")
        self.type_hook.dtor(value)

    def _regrow(self) -> None:
        if self.type_info.is_trivially_copyable:
            return
        dtor = self.type_hook.dtor
        needs_release = not self.type_info.is_trivially_destructible and dtor is not None
        fresh = []
        for value in self.values:
            fresh.append(self._relocated(value))
            if needs_release:
                dtor(value)
        self.values = fresh

    def __len__(self) -> int:
        return len(self.values)


class Archetype:
    """Entities and their component columns, laid out row by row."""

    def __init__(
        self,
        component_set: ComponentSet,
        columns: Sequence[Column],
        initial_capacity: int = DEFAULT_COMPONENT_CAPACITY,
    ) -> None:
        if len(columns) != len(component_set):
            raise EcsError("one column is needed for every component")
        self.component_set = component_set.copy()
        self.hash_id = hash(self.component_set)
        self.columns: list[Column] = list(columns)
        self.entities: list[EntityId] = []
        self.edges: dict[ComponentId, ArchetypeEdge] = {}
        self.capacity = 0
        self.store_index = 0
        self.reserve(initial_capacity)

    def ensure_capacity(self, added_count: int) -> None:
        """Grow so that ``added_count`` more rows fit."""
        total = len(self.entities) + added_count
        if self.capacity >= total:
            return
        self.reserve(grown_capacity(self.capacity, total))

    def reserve(self, capacity: int) -> None:
        """Raise the capacity to ``capacity``, relocating stored values."""
        if self.capacity >= capacity:
            return
        for column in self.columns:
            column._regrow()
        self.capacity = capacity

    def swap_rows(self, row_a: int, row_b: int) -> None:
        """Exchange two rows (0-based) in the entity list and every column."""
        count = len(self.entities)
        if not (0 <= row_a < count and 0 <= row_b < count):
            raise IndexError("row is out of bounds")
        entities = self.entities
        entities[row_a], entities[row_b] = entities[row_b], entities[row_a]
        for column in self.columns:
            values = column.values
            temp = column._relocated(values[row_a])
            values[row_a] = column._relocated(values[row_b])
            values[row_b] = column._relocated(temp)

    def append(self, entity_id: EntityId, values: Sequence[Any]) -> int:
        """Store a new row and return its 1-based row number."""
        if len(values) != len(self.columns):
            raise EcsError("one value is needed for every column")
        if self.capacity == len(self.entities):
            self.ensure_capacity(1)
        for column, value in zip(self.columns, values):
            column.values.append(value)
        self.entities.append(entity_id)
        return len(self.entities)

    def pop(self) -> tuple[EntityId, list[Any]]:
        """Remove the last row and return its entity id and values."""
        if not self.entities:
            raise EcsError("archetype is empty")
        entity_id = self.entities.pop()
        return entity_id, [column.values.pop() for column in self.columns]

    def column_index(self, component_id: ComponentId) -> Optional[int]:
        """Return the column holding ``component_id``, or None."""
        return self.component_set.search(component_id)

    def __len__(self) -> int:
        return len(self.entities)

    def __repr__(self) -> str:
        return (
            f"Archetype({self.component_set!r}, count={len(self.entities)}, "
            f"capacity={self.capacity})"
        )