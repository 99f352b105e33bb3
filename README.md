# voidengine

Building blocks for a small game engine, with no runtime dependencies
(Python 3.10 or newer):

- an archetype-based **entity component system**: `voidengine.world`,
  `voidengine.archetype` and `voidengine.ecs_types`;
- a **layer stack** that holds layers with overlays kept on top:
  `voidengine.layer_stack`;
- an **AVL tree** and a **red-black tree** of comparable values:
  `voidengine.trees`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Entities and components

Components are plain Python objects, usually dataclasses. Register each
component type with the world before adding it to an entity.

```python
from dataclasses import dataclass

from voidengine.world import World


@dataclass
class Position:
    x: int = 0
    y: int = 0


@dataclass
class Velocity:
    x: float = 0.0
    y: float = 0.0


world = World()
world.register(Position)
world.register(Velocity)

player = world.create_entity()
player.add(Position(1, 1))
player.add(Velocity(0.5, 0.5))

world.each(Position, lambda entity, pos: print(entity.index, pos))

player.get(Position).x += 10   # get returns the stored value itself
player.remove(Velocity)
player.destroy()
print(player.is_alive())       # False
```

`World.create_entity` returns an `Entity`, a small frozen handle with
`destroy`, `is_alive`, `add`, `remove` and `get`, and the properties `index`
and `generation`. The same operations exist on `World` taking an entity id:
`add(entity_id, component)`, `remove(entity_id, component_type)`,
`get(entity_id, component_type)`, `destroy_entity(entity_id)` and
`is_entity_alive(entity_id)`. `World.each(component_type, func)` calls
`func(entity, component)` for every entity that holds the type.

When a component is added, a shallow copy of it is stored (or the result of
the copy hook, when one is set).

### Entity ids

An entity id packs a 32-bit index with a 16-bit generation. The helpers
`make_entity_id`, `entity_index`, `entity_generation` and
`increment_generation` in `voidengine.ecs_types` build and take apart such
ids. Ids of destroyed entities are reused, most recently destroyed first, with
the generation one higher.

### Archetypes

Entities with the same set of components share one
`voidengine.archetype.Archetype`, identified by a `ComponentSet` of sorted
component ids. Each component type has its own `Column` in it. Adding or
removing a component moves the entity to the archetype for the new set; the
transition is cached on an `ArchetypeEdge`. Capacity grows as described by
`grown_capacity`.

### Errors

Misuse raises `voidengine.ecs_types.EcsError`: adding or removing a component
type that was never registered, adding one the entity already has, removing
one it lacks, getting one it does not hold, or using an entity that no longer
exists.

### Hooks

`World.register` returns the type's `ComponentInfo` (the same one on every
call). Its chainable methods change how values of that type are relocated:

- `set_copy_hook(copy)`: `copy(value)` returns the copy to store;
- `set_move_hook(move)`: `move(value)` returns the moved value;
- `set_dtor_hook(dtor)`: `dtor(value)` is called when a value is released,
  for instance when its entity is destroyed or the component removed;
- `set_ctor_hook(ctor)`: records a default constructor (the component type by
  default).

```python
world.register(Position).set_copy_hook(lambda p: Position(p.x, p.y)).set_dtor_hook(print)
```

## Layers

```python
from voidengine.layer_stack import Layer, LayerStack


class GameLayer(Layer):
    def on_update(self, dt):
        super().on_update(dt)
        print("tick", dt)


stack = LayerStack()
stack.push_layer(GameLayer())

for layer in reversed(stack):   # top of the stack first
    layer.on_update(1 / 60)

stack.destroy_all()
```

Layers pushed with `push_layer` always stay below overlays pushed with
`push_overlay`; `pop_layer` and `pop_overlay` take them out again. Pushing
calls `on_attach`, popping and `destroy_all` call `on_detach`. The default
`Layer` hooks keep track of `attached`, `initialized`, `elapsed` (the sum of
the `dt` values since `on_init`) and `last_event`.

## Trees

```python
from voidengine.trees import AVLTree, RedBlackTree

tree = AVLTree()
for value in (10, 20, 30, 40, 50, 25):
    tree.insert(value)
tree.remove(40)

print(list(tree))          # values in sorted order
print(30 in tree)          # True
print(tree.level_order())  # breadth-first, None for empty children
print(tree)                # the same, as "value, " and "null, " entries

rb = RedBlackTree()
for value in (7, 3, 18, 10, 22, 8, 11, 26):
    rb.insert(value)
print(rb.level_order())    # (value, "R" or "B") pairs, None for empty children
print(rb)                  # entries such as "10(B), " and "NIL, "
```

`AVLTree` keeps each value at most once; `RedBlackTree` keeps duplicates, and
`remove` takes out one occurrence.

## What it does not do

There is no window, renderer, input handling, resource loading or application
main loop. Nothing calls a layer's `on_init`, `on_update` or `on_event` for
you: the program that owns the `LayerStack` drives it. There is no command to
run.