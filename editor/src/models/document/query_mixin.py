"""
Document Query Mixin

Read-only access to document state. Everything returned is a snapshot
(LayerInfo, CompositeLayer, numpy tables) that stays valid after later edits.

Methods:
    - get_layer
    - get_layers
    - get_active_layer
    - layer_ids
    - is_full
    - visible_layers
    - visible_buffers
    - get_histograms
    - is_layer_grayscale
"""

from typing import Dict, List, Optional

import numpy as np

from models.errors import EmptyLayer
from models.pixel_buffer import PixelBuffer
from services.compositor import CompositeLayer
from services.histogram import all_histograms

from ._internal.layer import LayerInfo


class DocumentQueryMixin:
    """Mixin providing query operations for ImageDocument"""

    def get_layer(self, layer_id: int) -> LayerInfo:
        """Snapshot of one layer

        Raises:
            LayerNotFound: If layer_id does not exist
        """
        with self._lock:
            return self._require_layer(layer_id).snapshot()

    def get_layers(self) -> List[LayerInfo]:
        """Snapshots of every layer, bottom first"""
        with self._lock:
            return [layer.snapshot() for layer in self._layers]

    def get_active_layer(self) -> Optional[LayerInfo]:
        with self._lock:
            if self._active_layer_id is None:
                return None
            layer = self._layers.get_by_id(self._active_layer_id)
            return layer.snapshot() if layer is not None else None

    def layer_ids(self) -> List[int]:
        with self._lock:
            return [layer.id for layer in self._layers]

    def is_full(self) -> bool:
        with self._lock:
            return len(self._layers) >= self._max_layers

    def visible_layers(self) -> List[CompositeLayer]:
        """Compositing inputs for visible layers with a raster, bottom first"""
        with self._lock:
            return [
                CompositeLayer(layer.edited, layer.blend_mode, layer.opacity)
                for layer in self._layers
                if layer.visible and layer.edited is not None
            ]

    def visible_buffers(self) -> List[PixelBuffer]:
        """Edited buffers of visible layers, bottom first"""
        return [entry.buffer for entry in self.visible_layers()]

    def get_histograms(self, layer_id: Optional[int] = None) -> Dict[str, np.ndarray]:
        """Histogram tables (r, g, b, alpha, gray) of a layer's edited buffer

        Args:
            layer_id: Layer to measure, defaults to the active layer

        Raises:
            NoActiveLayer: If layer_id is None and nothing is selected
            EmptyLayer: If the layer has no raster
            LayerNotFound: If layer_id does not exist
        """
        with self._lock:
            if layer_id is None:
                layer = self._require_active_layer()
            else:
                layer = self._require_layer(layer_id)
                if layer.is_empty:
                    raise EmptyLayer(f"Layer {layer_id} has no image")
            buffer = layer.edited
        return all_histograms(buffer)

    def is_layer_grayscale(self, layer_id: int) -> bool:
        """True when the layer's original has R == G == B everywhere"""
        with self._lock:
            layer = self._require_layer(layer_id)
            return layer.original is not None and layer.original.is_grayscale()
