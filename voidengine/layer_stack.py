"""Ordered stack of application layers with overlays kept on top."""

from __future__ import annotations

from typing import Any, Iterator, Optional


class Layer:
    """Base class for a layer; the default hooks track the layer's lifecycle state."""

    attached: bool = False
    initialized: bool = False
    elapsed: float = 0.0
    last_event: Any = None

    def on_attach(self) -> None:
        """Mark the layer as attached to a stack."""
        self.attached = True

    def on_detach(self) -> None:
        """Mark the layer as detached from its stack."""
        self.attached = False

    def on_init(self) -> None:
        """Mark the layer as initialised and reset its elapsed time."""
        self.initialized = True
        self.elapsed = 0.0

    def on_update(self, dt: float) -> None:
        """Accumulate the time that has passed since initialisation."""
        self.elapsed += dt

    def on_event(self, event: Any) -> None:
        """Remember the most recent event delivered to the layer."""
        self.last_event = event


class LayerStack:
    """Layers occupy the front of the stack, overlays the back."""

    def __init__(self) -> None:
        self._layers: list[Layer] = []
        self._index = 0

    def _find(self, layer: Layer) -> Optional[int]:
        return next((i for i, item in enumerate(self._layers) if item is layer), None)

    def push_layer(self, layer: Layer) -> None:
        self._layers.insert(self._index, layer)
        self._index += 1
        layer.on_attach()

    def push_overlay(self, layer: Layer) -> None:
        self._layers.append(layer)
        layer.on_attach()

    def pop_layer(self, layer: Layer) -> None:
        pos = self._find(layer)
        if pos is not None:
            del self._layers[pos]
            self._index -= 1
            layer.on_detach()

    def pop_overlay(self, layer: Layer) -> None:
        pos = self._find(layer)
        if pos is not None:
            del self._layers[pos]
            layer.on_detach()

    def destroy_all(self) -> None:
        """Detach every layer, front to back, and empty the stack."""
        for layer in self._layers:
            layer.on_detach()
        self._layers.clear()
        self._index = 0

    def __iter__(self) -> Iterator[Layer]:
        return iter(list(self._layers))

    def __reversed__(self) -> Iterator[Layer]:
        return reversed(list(self._layers))

    def __len__(self) -> int:
        return len(self._layers)