"""Entity-component world built on archetype storage."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from voidengine.archetype import DEFAULT_COMPONENT_CAPACITY, Archetype, Column
from voidengine.ecs_types import (
    ArchetypeEdge,
    ArchetypeRecord,
    ComponentId,
    ComponentInfo,
    ComponentSet,
    ComponentTypeHook,
    EcsError,
    EntityId,
    EntityRecord,
    component_id,
    entity_generation,
    entity_index,
    increment_generation,
    make_entity_id,
)

_STORE_RESERVE = 300


@dataclass(frozen=True)
class Entity:
    """A handle to an entity living in a :class:`World`."""

    entity_id: EntityId
    world: "World" = field(repr=False, compare=True)

    @property
    def index(self) -> int:
        return entity_index(self.entity_id)

    @property
    def generation(self) -> int:
        return entity_generation(self.entity_id)

    def destroy(self) -> None:
        self.world.destroy_entity(self.entity_id)

    def is_alive(self) -> bool:
        return self.world.is_entity_alive(self.entity_id)

    def add(self, component: Any) -> None:
        self.world.add(self.entity_id, component)

    def remove(self, component_type: type) -> None:
        self.world.remove(self.entity_id, component_type)

    def get(self, component_type: type) -> Any:
        return self.world.get(self.entity_id, component_type)


class World:
    """Owns entities, registered component types and their archetypes."""

    def __init__(self) -> None:
        self._free_entity_ids: list[EntityId] = []
        self._entity_records: dict[EntityId, EntityRecord] = {}
        self._component_index: dict[ComponentId, ComponentInfo] = {}
        self._mapped_archetypes: dict[ComponentSet, Archetype] = {}
        self._store: list[Archetype] = []
        self._next_entity_index = 1

    # ------------------------------------------------------------ entities

    def create_entity(self) -> Entity:
        entity_id = self._generate_entity_id()
        self._entity_records[entity_id] = EntityRecord()
        return Entity(entity_id, self)

    def _generate_entity_id(self) -> EntityId:
        if self._free_entity_ids:
            return increment_generation(self._free_entity_ids.pop())
        entity_id = make_entity_id(self._next_entity_index, 0)
        self._next_entity_index += 1
        return entity_id

    def destroy_entity(self, entity_id: EntityId) -> None:
        """Forget the entity and drop its component data; unknown ids are ignored."""
        record = self._entity_records.get(entity_id)
        if record is None:
            return
        archetype = record.archetype
        if archetype is not None and record.row:
            self._swap_to_back(record)
            _, values = archetype.pop()
            for column, value in zip(archetype.columns, values):
                column.release(value)
        del self._entity_records[entity_id]
        self._free_entity_ids.append(entity_id)

    def is_entity_alive(self, entity_id: EntityId) -> bool:
        return entity_id in self._entity_records

    # ---------------------------------------------------------- components

    def register(self, component_type: type) -> ComponentInfo:
        """Register a component type, returning its (possibly existing) info."""
        cid = component_id(component_type)
        info = self._component_index.get(cid)
        if info is None:
            info = ComponentInfo(type_hook=ComponentTypeHook(ctor=component_type))
            self._component_index[cid] = info
        return info

    def _require_registered(self, cid: ComponentId) -> ComponentInfo:
        info = self._component_index.get(cid)
        if info is None:
            raise EcsError("component is not registered")
        return info

    def _require_record(self, entity_id: EntityId) -> EntityRecord:
        record = self._entity_records.get(entity_id)
        if record is None:
            raise EcsError("entity does not exist")
        return record

    def add(self, entity_id: EntityId, component: Any) -> None:
        """Attach ``component`` to the entity, moving it to a wider archetype."""
        cid = component_id(type(component))
        self._require_registered(cid)
        record = self._require_record(entity_id)
        src = record.archetype
        if src is not None and cid in src.component_set:
            raise EcsError("added component already exists")

        dest = self._resolve_destination(src, cid, added=True)

        src_values: dict[ComponentId, Any] = {}
        if src is not None and record.row:
            self._swap_to_back(record)
            _, values = src.pop()
            src_values = dict(zip(src.component_set, values))

        new_values = []
        for dest_cid, column in zip(dest.component_set, dest.columns):
            if dest_cid in src_values:
                new_values.append(column.transfer(src_values[dest_cid]))
            else:
                new_values.append(self._copy_in(column, component))

        record.archetype = dest
        record.row = dest.append(entity_id, new_values)

    def remove(self, entity_id: EntityId, component_type: type) -> None:
        """Detach a component, moving the entity to a narrower archetype."""
        cid = component_id(component_type)
        self._require_registered(cid)
        record = self._require_record(entity_id)
        src = record.archetype
        if src is None or cid not in src.component_set:
            raise EcsError("removed component does not exist")

        dest = self._resolve_destination(src, cid, added=False)
        if dest.capacity == len(dest):
            dest.ensure_capacity(len(src))

        self._swap_to_back(record)
        _, values = src.pop()

        moved: dict[ComponentId, Any] = {}
        for src_cid, src_column, value in zip(src.component_set, src.columns, values):
            dest_col = dest.column_index(src_cid)
            if dest_col is None:
                src_column.release(value)
            else:
                moved[src_cid] = dest.columns[dest_col].transfer(value)

        record.archetype = dest
        record.row = dest.append(entity_id, [moved[c] for c in dest.component_set])

    def get(self, entity_id: EntityId, component_type: type) -> Any:
        """Return the stored component of the entity."""
        record = self._require_record(entity_id)
        archetype = record.archetype
        cid = component_id(component_type)
        column = None if archetype is None else archetype.column_index(cid)
        if column is None or not record.row:
            raise EcsError("component does not exist")
        return archetype.columns[column].values[record.row - 1]

    def each(self, component_type: type, func: Callable[[Entity, Any], None]) -> None:
        """Call ``func(entity, component)`` for every entity holding the type."""
        cid = component_id(component_type)
        info = self._require_registered(cid)
        for arch_record in list(info.records):
            archetype: Archetype = arch_record.archetype
            values = archetype.columns[arch_record.column].values
            for entity_id, value in list(zip(archetype.entities, values)):
                func(Entity(entity_id, self), value)

    # ------------------------------------------------------------ internals

    @staticmethod
    def _copy_in(column: Column, value: Any) -> Any:
        if column.type_info.is_trivially_copyable:
            return copy.copy(value)
        if column.type_hook.copy is None:
            raise EcsError("copy hook missing")
        return column.type_hook.copy(value)

    def _resolve_destination(
        self, src: Optional[Archetype], cid: ComponentId, added: bool
    ) -> Archetype:
        if src is None:
            if not added:
                raise EcsError("removed component does not exist")
            return self._archetype_for(ComponentSet([cid]))

        edge = src.edges.get(cid)
        if edge is None:
            edge = ArchetypeEdge()
            src.edges[cid] = edge
        dest = edge.added if added else edge.removed
        if dest is not None:
            return dest

        dest_set = src.component_set.copy()
        changed = dest_set.add(cid) if added else dest_set.remove(cid)
        if changed:
            dest_set.sort()
        dest = self._archetype_for(dest_set)
        if added:
            edge.added = dest
        else:
            edge.removed = dest
        return dest

    def _archetype_for(self, components: ComponentSet) -> Archetype:
        existing = self._mapped_archetypes.get(components)
        if existing is not None:
            return existing
        infos = [self._component_index[c] for c in components]
        columns = [Column(info.type_info, info.type_hook) for info in infos]
        archetype = Archetype(components, columns, DEFAULT_COMPONENT_CAPACITY)
        self._store.append(archetype)
        archetype.store_index = len(self._store) - 1
        self._mapped_archetypes[archetype.component_set] = archetype
        for position, info in enumerate(infos):
            info.records.append(ArchetypeRecord(archetype, position))
        return archetype

    def _swap_to_back(self, record: EntityRecord) -> None:
        """Move the entity's row to the end of its archetype."""
        archetype = record.archetype
        if archetype is None or not record.row:
            return
        row = record.row - 1
        last = len(archetype) - 1
        if row != last:
            back_id = archetype.entities[last]
            archetype.swap_rows(row, last)
            back_record = self._entity_records.get(back_id)
            if back_record is not None:
                back_record.row = record.row
        record.row = len(archetype)