"""
GB7 Layer Editor - Layer Data Model

Provides the internal layer entity and its ordered collection:
- Property-based access with bounds checking
- original/edited buffer pair (edited mirrors original until an edit runs)
- Contiguous integer ids that always equal the layer's position
- Read-only snapshots for everything outside the document

This is part of the MODEL layer - pure data, no UI logic.
Only ImageDocument creates or mutates Layer objects.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

from constants import DEFAULT_BLEND_MODE, DEFAULT_OPACITY, EMPTY_LAYER_NAME
from models.modes import BlendMode
from models.pixel_buffer import PixelBuffer


@dataclass(frozen=True)
class LayerInfo:
    """Immutable snapshot of a layer handed to callers outside the document.

    Buffers are immutable PixelBuffer values, so sharing them is safe.
    """
    id: int
    name: str
    original: Optional[PixelBuffer]
    edited: Optional[PixelBuffer]
    offset_x: int
    offset_y: int
    blend_mode: BlendMode
    opacity: float
    has_alpha_channel: bool
    alpha_channel_visible: bool
    visible: bool
    color_depth: int

    @property
    def is_empty(self) -> bool:
        return self.original is None

    @property
    def width(self) -> int:
        return self.original.width if self.original is not None else 0

    @property
    def height(self) -> int:
        return self.original.height if self.original is not None else 0


class Layer:
    """One editable raster slot.

    Layer Properties:
        id, name, original, edited, offset_x, offset_y, blend_mode,
        opacity, has_alpha_channel, alpha_channel_visible, visible, color_depth
    """

    def __init__(self, layer_id: int, name: Optional[str] = None):
        """Create an empty placeholder layer (no buffers)

        Args:
            layer_id: Position-based id
            name: Display name, defaults to 'empty'
        """
        self._id = layer_id
        self._name = name or EMPTY_LAYER_NAME
        self._original: Optional[PixelBuffer] = None
        self._edited: Optional[PixelBuffer] = None
        self.offset_x = 0
        self.offset_y = 0
        self._blend_mode = BlendMode.parse(DEFAULT_BLEND_MODE)
        self._opacity = DEFAULT_OPACITY
        self.has_alpha_channel = False
        self.alpha_channel_visible = False
        self.visible = True
        self.color_depth = 0

    # ========================================
    # Identity
    # ========================================

    @property
    def id(self) -> int:
        """Position-based id (renumbered by Layers.renumber)"""
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        self._name = str(value) if value else EMPTY_LAYER_NAME

    # ========================================
    # Buffers
    # ========================================

    @property
    def original(self) -> Optional[PixelBuffer]:
        """Canonical source raster"""
        return self._original

    @property
    def edited(self) -> Optional[PixelBuffer]:
        """Raster shown and composited"""
        return self._edited

    @edited.setter
    def edited(self, buffer: Optional[PixelBuffer]):
        if buffer is not None and not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")
        self._edited = buffer

    def set_source(self, buffer: Optional[PixelBuffer]):
        """Replace original and mirror it into edited"""
        if buffer is not None and not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")
        self._original = buffer
        self._edited = buffer

    @property
    def is_empty(self) -> bool:
        return self._original is None

    # ========================================
    # Blending
    # ========================================

    @property
    def blend_mode(self) -> BlendMode:
        return self._blend_mode

    @blend_mode.setter
    def blend_mode(self, value):
        self._blend_mode = BlendMode.parse(value)

    @property
    def opacity(self) -> float:
        """Opacity 0.0-1.0"""
        return self._opacity

    @opacity.setter
    def opacity(self, value: float):
        value = float(value)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"opacity must be between 0 and 1, got {value}")
        self._opacity = value

    def snapshot(self) -> LayerInfo:
        """Read-only copy of the current state"""
        return LayerInfo(
            id=self._id,
            name=self._name,
            original=self._original,
            edited=self._edited,
            offset_x=self.offset_x,
            offset_y=self.offset_y,
            blend_mode=self._blend_mode,
            opacity=self._opacity,
            has_alpha_channel=self.has_alpha_channel,
            alpha_channel_visible=self.alpha_channel_visible,
            visible=self.visible,
            color_depth=self.color_depth,
        )

    def __repr__(self) -> str:
        size = f"{self._original.width}x{self._original.height}" if self._original else "empty"
        return f"Layer(id={self._id}, {self._name!r}, {size})"


class Layers:
    """Ordered layer collection, bottom layer first.

    Provides:
    - List-like access (indexing, iteration, len)
    - id lookups
    - Swap and remove with id renumbering (ids stay 0..n-1)
    """

    _logger = logging.getLogger('Layers')

    def __init__(self):
        self._layers: List[Layer] = []

    def __len__(self) -> int:
        return len(self._layers)

    def __getitem__(self, index: int) -> Layer:
        return self._layers[index]

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def __repr__(self) -> str:
        return f"Layers({len(self._layers)} layers)"

    def append(self, layer: Layer):
        if not isinstance(layer, Layer):
            raise TypeError(f"Expected Layer, got {type(layer)}")
        self._layers.append(layer)

    def get_by_id(self, layer_id: int) -> Optional[Layer]:
        """Find layer by id, or None"""
        for layer in self._layers:
            if layer.id == layer_id:
                return layer
        return None

    def swap(self, index_a: int, index_b: int):
        """Exchange two positions (caller validates bounds)"""
        self._layers[index_a], self._layers[index_b] = self._layers[index_b], self._layers[index_a]
        self.renumber()

    def remove(self, layer: Layer):
        self._layers.remove(layer)
        self.renumber()

    def clear(self):
        self._layers.clear()

    def renumber(self):
        """Make ids match positions again"""
        for index, layer in enumerate(self._layers):
            if layer._id != index:
                self._logger.debug(f"Renumbered layer {layer._id} -> {index}")
                layer._id = index
