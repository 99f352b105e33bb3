"""Archetype-based entity component system, layer stack and AVL and red-black trees."""

__version__ = "0.1.0"
__all__ = ["ecs_types", "layer_stack", "archetype", "world", "trees"]