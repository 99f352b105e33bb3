from dataclasses import dataclass

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from voidengine.ecs_types import EcsError, entity_generation, entity_index
from voidengine.world import Entity, World


@dataclass
class Position:
    x: int = 0
    y: int = 0


@dataclass
class Velocity:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Rotation:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Unregistered:
    value: int = 0


@pytest.fixture
def world():
    w = World()
    w.register(Position)
    w.register(Velocity)
    w.register(Rotation)
    return w


def collect(world, component_type):
    seen = {}
    world.each(component_type, lambda e, c: seen.__setitem__(e.entity_id, c))
    return seen


def test_first_entity_index_and_generation():
    w = World()
    e = w.create_entity()
    assert e.index == 1
    assert e.generation == 0
    assert e.is_alive()


def test_entity_indices_increase():
    w = World()
    a, b = w.create_entity(), w.create_entity()
    assert b.index == a.index + 1


def test_destroyed_id_is_reused_with_next_generation():
    w = World()
    e = w.create_entity()
    e.destroy()
    assert not e.is_alive()
    again = w.create_entity()
    assert entity_index(again.entity_id) == e.index
    assert entity_generation(again.entity_id) == e.generation + 1
    assert again.is_alive()
    assert not w.is_entity_alive(e.entity_id)


def test_destroy_unknown_is_ignored():
    w = World()
    w.destroy_entity(12345)
    assert w.create_entity().index == 1


def test_register_returns_same_info(world):
    released = []
    info = world.register(Position)
    info.set_dtor_hook(released.append)
    again = world.register(Position)
    assert again is info
    e = world.create_entity()
    e.add(Position(1, 1))
    e.remove(Position)
    assert released == [Position(1, 1)]


def test_add_and_get(world):
    e = world.create_entity()
    e.add(Position(3, 4))
    assert e.get(Position) == Position(3, 4)


def test_add_stores_a_copy(world):
    e = world.create_entity()
    pos = Position(1, 1)
    e.add(pos)
    pos.x = 99
    assert e.get(Position).x == 1


def test_get_returns_stored_value_for_mutation(world):
    e = world.create_entity()
    e.add(Position(1, 2))
    e.get(Position).x = 50
    assert e.get(Position) == Position(50, 2)


def test_each_visits_every_holder(world):
    entities = [world.create_entity() for _ in range(5)]
    data = [Position(1, 1), Position(200, 973), Position(24800, 8973), Position(920, 72), Position(39, 2)]
    for e, p in zip(entities, data):
        e.add(p)
    seen = collect(world, Position)
    assert seen == {e.entity_id: p for e, p in zip(entities, data)}


def test_remove_excludes_from_each(world):
    entities = [world.create_entity() for _ in range(5)]
    for i, e in enumerate(entities):
        e.add(Position(i, i))
    entities[0].remove(Position)
    seen = collect(world, Position)
    assert set(seen) == {e.entity_id for e in entities[1:]}
    for i, e in enumerate(entities[1:], start=1):
        assert e.get(Position) == Position(i, i)


def test_adding_second_component_keeps_first(world):
    e = world.create_entity()
    e.add(Position(5, 6))
    e.add(Velocity(0.5, 1.5))
    assert e.get(Position) == Position(5, 6)
    assert e.get(Velocity) == Velocity(0.5, 1.5)
    assert collect(world, Position) == {e.entity_id: Position(5, 6)}
    assert collect(world, Velocity) == {e.entity_id: Velocity(0.5, 1.5)}


def test_removing_middle_entity_keeps_others_consistent(world):
    entities = [world.create_entity() for _ in range(4)]
    for i, e in enumerate(entities):
        e.add(Position(i, -i))
    entities[1].add(Velocity(1.0, 2.0))
    for i, e in enumerate(entities):
        assert e.get(Position) == Position(i, -i)
    assert entities[1].get(Velocity) == Velocity(1.0, 2.0)
    entities[1].remove(Velocity)
    assert entities[1].get(Position) == Position(1, -1)
    with pytest.raises(EcsError):
        entities[1].get(Velocity)


def test_remove_last_component_leaves_entity_alive(world):
    e = world.create_entity()
    e.add(Position(1, 1))
    e.remove(Position)
    assert e.is_alive()
    with pytest.raises(EcsError):
        e.get(Position)
    e.add(Position(7, 8))
    assert e.get(Position) == Position(7, 8)


def test_readding_after_remove_through_cached_edges(world):
    a, b = world.create_entity(), world.create_entity()
    a.add(Position(1, 1))
    a.add(Velocity(1.0, 1.0))
    b.add(Position(2, 2))
    b.add(Velocity(2.0, 2.0))
    a.remove(Velocity)
    b.remove(Velocity)
    a.add(Velocity(3.0, 3.0))
    assert a.get(Velocity) == Velocity(3.0, 3.0)
    assert a.get(Position) == Position(1, 1)
    assert b.get(Position) == Position(2, 2)


def test_destroy_drops_component_data(world):
    a, b = world.create_entity(), world.create_entity()
    a.add(Position(1, 1))
    b.add(Position(2, 2))
    a.destroy()
    assert collect(world, Position) == {b.entity_id: Position(2, 2)}
    assert b.get(Position) == Position(2, 2)


def test_add_unregistered_raises(world):
    e = world.create_entity()
    with pytest.raises(EcsError):
        e.add(Unregistered(1))


def test_each_unregistered_raises(world):
    with pytest.raises(EcsError):
        world.each(Unregistered, lambda e, c: None)


def test_add_to_missing_entity_raises(world):
    with pytest.raises(EcsError):
        world.add(999, Position(1, 1))


def test_duplicate_add_raises(world):
    e = world.create_entity()
    e.add(Position(1, 1))
    with pytest.raises(EcsError):
        e.add(Position(2, 2))
    assert e.get(Position) == Position(1, 1)


def test_remove_absent_component_raises(world):
    e = world.create_entity()
    with pytest.raises(EcsError):
        e.remove(Position)
    e.add(Position(1, 1))
    with pytest.raises(EcsError):
        e.remove(Velocity)


def test_get_missing_entity_raises(world):
    with pytest.raises(EcsError):
        world.get(999, Position)


def test_copy_hook_used_on_add():
    w = World()
    copies = []

    def copier(value):
        copies.append(value)
        return Unregistered(value.value + 100)

    w.register(Unregistered).set_copy_hook(copier)
    e = w.create_entity()
    e.add(Unregistered(1))
    assert copies == [Unregistered(1)]
    assert e.get(Unregistered) == Unregistered(101)


def test_dtor_hook_called_on_remove():
    w = World()
    released = []
    w.register(Rotation).set_dtor_hook(released.append)
    e = w.create_entity()
    e.add(Rotation(1.0, 2.0))
    e.remove(Rotation)
    assert released == [Rotation(1.0, 2.0)]


def test_entity_handles_compare_by_id(world):
    e = world.create_entity()
    handle = Entity(e.entity_id, world)
    assert handle == e
    handle.add(Position(9, 9))
    assert e.get(Position) == Position(9, 9)


@settings(max_examples=30, deadline=None)
@given(st.lists(st.tuples(st.integers(0, 1000), st.booleans()), max_size=20))
def test_each_matches_model(entries):
    w = World()
    w.register(Position)
    w.register(Velocity)
    model = {}
    for i, (value, keep) in enumerate(entries):
        e = w.create_entity()
        e.add(Position(value, i))
        if i % 2:
            e.add(Velocity(float(value), 0.0))
        if keep:
            model[e.entity_id] = Position(value, i)
        else:
            e.remove(Position)
    assert collect(w, Position) == model
    assert {entity_id: w.get(entity_id, Position) for entity_id in model} == model