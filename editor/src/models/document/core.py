"""
GB7 Layer Editor - Image Document Model

THE MODEL in the MVC architecture. Owns the ordered layer collection and all
operations on it.

This class handles:
- Layer slots up to a configurable capacity (add, remove, swap)
- Active layer selection
- Per-layer raster, opacity, blend mode, visibility
- Alpha channel toggling and deletion
- Active-layer edits (fill, convolution, correction, resize)
- Compositing of visible layers

The ImageDocument is INDEPENDENT of UI:
- No Qt imports
- No rendering logic
- No user-facing messages (errors are raised for the caller to surface)

Layer objects never leave the document; callers get LayerInfo snapshots
and immutable PixelBuffer values.

Usage:
    doc = ImageDocument(max_layers=2)
    doc.create_empty_layers()

    doc.set_original(0, loaded_buffer, color_depth=24)
    doc.apply_convolution(get_preset_kernel('Sharpen'))
    doc.set_blend_mode(1, BlendMode.MULTIPLY)

    composite = doc.composite()

Thread safety:
    Every mutation and every compositing snapshot runs under one re-entrant
    lock, so a composite never observes a half-applied layer write.
"""

import logging
import threading
from typing import Optional, Tuple

from constants import MAX_LAYERS, DEFAULT_CANVAS_SIZE
from models.errors import LayerNotFound, NoActiveLayer, EmptyLayer
from models.pixel_buffer import PixelBuffer
from services.compositor import composite_layers

from ._internal.layer import Layer, Layers
from .layer_mixin import DocumentLayerMixin
from .edit_mixin import DocumentEditMixin
from .query_mixin import DocumentQueryMixin


class ImageDocument(DocumentLayerMixin, DocumentEditMixin, DocumentQueryMixin):
    """Layered image store with full command API

    Properties:
        max_layers: Slot capacity
        canvas_size: (width, height) used for blank composites and fills
        layer_count: Number of layer slots in use
        active_layer_id: Id of the active layer, or None
    """

    def __init__(self, max_layers: int = MAX_LAYERS,
                 canvas_size: Tuple[int, int] = DEFAULT_CANVAS_SIZE):
        """Create an empty document

        Args:
            max_layers: Maximum number of layer slots (>= 1)
            canvas_size: (width, height) for empty composites and fills

        Raises:
            ValueError: If max_layers < 1 or canvas_size is not positive
        """
        if int(max_layers) < 1:
            raise ValueError(f"max_layers must be at least 1, got {max_layers}")
        if len(canvas_size) != 2 or canvas_size[0] <= 0 or canvas_size[1] <= 0:
            raise ValueError(f"canvas_size must be two positive integers, got {canvas_size}")

        self._logger = logging.getLogger('ImageDocument')
        self._lock = threading.RLock()
        self._max_layers = int(max_layers)
        self._canvas_size = (int(canvas_size[0]), int(canvas_size[1]))
        self._layers = Layers()
        self._active_layer_id: Optional[int] = None

        self._logger.debug(f"Created document (max_layers={self._max_layers})")

    @classmethod
    def from_config(cls, config) -> 'ImageDocument':
        """Create a document sized by an EditorConfig"""
        return cls(
            max_layers=config.max_layers,
            canvas_size=(config.canvas_width, config.canvas_height),
        )

    def clear(self):
        """Remove every layer and clear the selection"""
        with self._lock:
            self._layers.clear()
            self._active_layer_id = None
            self._logger.debug("Cleared document")

    # ========================================
    # Properties
    # ========================================

    @property
    def max_layers(self) -> int:
        return self._max_layers

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return self._canvas_size

    @property
    def layer_count(self) -> int:
        with self._lock:
            return len(self._layers)

    @property
    def active_layer_id(self) -> Optional[int]:
        with self._lock:
            return self._active_layer_id

    # ========================================
    # Compositing
    # ========================================

    def composite(self) -> PixelBuffer:
        """Merge all visible layers into one buffer

        The visible-layer snapshot is taken under the lock; the merge itself
        runs on immutable buffers and needs no lock.
        """
        with self._lock:
            entries = self.visible_layers()
        return composite_layers(entries, default_size=self._canvas_size)

    # ========================================
    # Internal lookups
    # ========================================

    def _require_layer(self, layer_id: int) -> Layer:
        """Layer by id

        Raises:
            LayerNotFound: If no such layer
        """
        layer = self._layers.get_by_id(layer_id)
        if layer is None:
            raise LayerNotFound(f"Layer with id {layer_id} not found")
        return layer

    def _require_active_layer(self, need_raster: bool = True) -> Layer:
        """Target layer for an edit

        Raises:
            NoActiveLayer: If nothing is selected
            EmptyLayer: If need_raster and the active layer has no raster
        """
        if self._active_layer_id is None:
            raise NoActiveLayer("No active layer selected")
        layer = self._layers.get_by_id(self._active_layer_id)
        if layer is None:
            raise NoActiveLayer(f"Active layer {self._active_layer_id} no longer exists")
        if need_raster and layer.is_empty:
            raise EmptyLayer(f"Layer {layer.id} has no image")
        return layer

    def __repr__(self) -> str:
        return (
            f"ImageDocument({len(self._layers)}/{self._max_layers} layers, "
            f"active={self._active_layer_id})"
        )
