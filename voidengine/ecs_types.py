"""Core types shared by the entity-component system."""

from __future__ import annotations

import itertools
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Optional

ComponentId = int
EntityId = int

NULL_ENTITY_ID: EntityId = 0

ENTITY_ID_BITS = 32
ENTITY_GEN_SHIFT = ENTITY_ID_BITS
ENTITY_ID_MASK = 0xFFFFFFFF
ENTITY_GEN_MASK = 0xFFFF

_HASH_MASK = (1 << 64) - 1
_HASH_SEED = 0x9E3779B97F4A7C15


class EcsError(Exception):
    """Raised when the entity-component system is used incorrectly."""


class ComponentSet:
    """An ordered collection of component ids identifying an archetype.

    Ids are appended by :meth:`add`; call :meth:`sort` afterwards to restore
    the ascending order that lookups rely on.
    """

    __slots__ = ("_components", "_hash")

    def __init__(self, components: Iterable[ComponentId] = ()) -> None:
        self._components: list[ComponentId] = list(components)
        self._hash: Optional[int] = None

    def search(self, component_id: ComponentId) -> Optional[int]:
        """Return the position of ``component_id``, or None if absent."""
        pos = bisect_left(self._components, component_id)
        if pos < len(self._components) and self._components[pos] == component_id:
            return pos
        return None

    def contains(self, component_id: ComponentId) -> bool:
        return self.search(component_id) is not None

    def add(self, component_id: ComponentId) -> bool:
        """Append ``component_id``; return False if it is already present."""
        if self.contains(component_id):
            return False
        self._components.append(component_id)
        self._hash = None
        return True

    def remove(self, component_id: ComponentId) -> bool:
        """Remove ``component_id``; return False if it was not present."""
        pos = self.search(component_id)
        if pos is None:
            return False
        del self._components[pos]
        self._hash = None
        return True

    def sort(self) -> None:
        self._components.sort()
        self._hash = None

    def copy(self) -> "ComponentSet":
        clone = ComponentSet(self._components)
        clone._hash = self._hash
        return clone

    def __hash__(self) -> int:
        if self._hash is None:
            h = 0
            for component in self._components:
                h ^= (component + _HASH_SEED + (h << 6) + (h >> 2)) & _HASH_MASK
                h &= _HASH_MASK
            self._hash = h
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComponentSet):
            return NotImplemented
        return self._components == other._components

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[ComponentId]:
        return iter(self._components)

    def __getitem__(self, index: int) -> ComponentId:
        if not 0 <= index < len(self._components):
            raise IndexError("component index is out of bounds")
        return self._components[index]

    def __contains__(self, component_id: object) -> bool:
        return isinstance(component_id, int) and self.contains(component_id)

    def __repr__(self) -> str:
        return f"ComponentSet({self._components!r})"


@dataclass
class ComponentTypeInfo:
    """How values of a component type may be relocated."""

    is_trivially_copyable: bool = True
    is_trivially_destructible: bool = True
    is_move_constructible: bool = False


@dataclass
class ComponentTypeHook:
    """Lifecycle callbacks for a component type.

    ``ctor()`` builds a default value, ``dtor(value)`` releases one,
    ``copy(value)`` and ``move(value)`` return the relocated value.
    """

    ctor: Optional[Callable[[], Any]] = None
    dtor: Optional[Callable[[Any], None]] = None
    copy: Optional[Callable[[Any], Any]] = None
    move: Optional[Callable[[Any], Any]] = None


@dataclass
class ArchetypeRecord:
    """Where a component's column lives inside an archetype."""

    archetype: Any
    column: int


@dataclass
class EntityRecord:
    """Where an entity's data lives; ``row`` is 1-based, 0 meaning none."""

    archetype: Any = None
    row: int = 0


@dataclass
class ArchetypeEdge:
    """Cached archetype transitions for adding or removing one component."""

    added: Any = None
    removed: Any = None


@dataclass
class ComponentInfo:
    """Registration data for a component type."""

    type_info: ComponentTypeInfo = field(default_factory=ComponentTypeInfo)
    type_hook: ComponentTypeHook = field(default_factory=ComponentTypeHook)
    records: list[ArchetypeRecord] = field(default_factory=list)

    def set_ctor_hook(self, ctor: Callable[[], Any]) -> "ComponentInfo":
        self.type_hook.ctor = ctor
        return self

    def set_dtor_hook(self, dtor: Callable[[Any], None]) -> "ComponentInfo":
        self.type_hook.dtor = dtor
        self.type_info.is_trivially_destructible = False
        return self

    def set_copy_hook(self, copy: Callable[[Any], Any]) -> "ComponentInfo":
        self.type_hook.copy = copy
        self.type_info.is_trivially_copyable = False
        return self

    def set_move_hook(self, move: Callable[[Any], Any]) -> "ComponentInfo":
        self.type_hook.move = move
        self.type_info.is_move_constructible = True
        return self


_id_counter = itertools.count(1)
_component_ids: dict[type, ComponentId] = {}


def component_id(component_type: type) -> ComponentId:
    """Return the process-wide id of a component type, assigning one on first use."""
    try:
        return _component_ids[component_type]
    except KeyError:
        new_id = next(_id_counter)
        _component_ids[component_type] = new_id
        return new_id


def entity_index(entity_id: EntityId) -> int:
    return entity_id & ENTITY_ID_MASK


def entity_generation(entity_id: EntityId) -> int:
    return (entity_id >> ENTITY_GEN_SHIFT) & ENTITY_GEN_MASK


def make_entity_id(index: int, generation: int) -> EntityId:
    return ((generation & ENTITY_GEN_MASK) << ENTITY_GEN_SHIFT) | (index & ENTITY_ID_MASK)


def increment_generation(entity_id: EntityId) -> EntityId:
    """Return the id with the same index and the next generation (wrapping)."""
    return make_entity_id(
        entity_index(entity_id), (entity_generation(entity_id) + 1) & ENTITY_GEN_MASK
    )