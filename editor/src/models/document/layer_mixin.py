"""
Document Layer Management Mixin

This mixin provides layer CRUD, selection and per-layer property operations
for the ImageDocument model.

Methods:
    Layer CRUD:
        - add_layer
        - create_empty_layers
        - remove_layer
        - move_layer

    Selection:
        - set_active_layer

    Layer properties:
        - set_original
        - set_opacity
        - set_blend_mode
        - set_visible
        - set_layer_name
        - set_color_depth

    Alpha channel:
        - toggle_alpha_visibility
        - delete_alpha_channel
"""

from typing import List, Optional

from models.errors import LayerCapacityExceeded
from models.modes import BlendMode
from models.pixel_buffer import PixelBuffer

from ._internal.layer import Layer


class DocumentLayerMixin:
    """Mixin providing layer management operations for ImageDocument

    This mixin assumes the parent class has:
        - self._layers: Layers collection
        - self._lock: re-entrant lock guarding all mutation
        - self._active_layer_id: Optional[int]
        - self._max_layers: int
        - self._logger: logging.Logger instance
        - self._require_layer(layer_id) -> Layer
    """

    # ========================================
    # Layer CRUD Operations
    # ========================================

    def add_layer(self, name: Optional[str] = None) -> int:
        """Add an empty layer slot on top

        The first layer added to an empty document becomes active.

        Args:
            name: Optional display name

        Returns:
            Id of the new layer

        Raises:
            LayerCapacityExceeded: If every slot is in use (nothing changes)
        """
        with self._lock:
            if len(self._layers) >= self._max_layers:
                self._logger.warning(f"Layer limit reached ({self._max_layers}), add ignored")
                raise LayerCapacityExceeded(
                    f"Cannot add more than {self._max_layers} layers"
                )

            layer = Layer(len(self._layers), name=name)
            self._layers.append(layer)

            if len(self._layers) == 1:
                self._active_layer_id = layer.id

            self._logger.debug(f"Added layer: {layer.id}")
            return layer.id

    def create_empty_layers(self) -> List[int]:
        """Fill every remaining slot with an empty layer

        Returns:
            Ids of the layers created (may be empty)
        """
        with self._lock:
            created = []
            while len(self._layers) < self._max_layers:
                created.append(self.add_layer())
            return created

    def remove_layer(self, layer_id: int):
        """Remove a layer and renumber the rest

        The active layer resets to the first remaining layer, or None when
        the document is empty.

        Raises:
            LayerNotFound: If layer_id does not exist
        """
        with self._lock:
            layer = self._require_layer(layer_id)
            self._layers.remove(layer)
            self._active_layer_id = 0 if len(self._layers) > 0 else None
            self._logger.debug(f"Removed layer: {layer_id} (active={self._active_layer_id})")

    def move_layer(self, from_index: int, to_index: int) -> bool:
        """Swap two layer positions

        Ids are renumbered to match the new positions; the active selection
        follows the layer it pointed at. Out-of-range indices are ignored
        (UI events can race with removals).

        Returns:
            True if the layers were swapped, False for a no-op
        """
        with self._lock:
            count = len(self._layers)
            if not (0 <= from_index < count and 0 <= to_index < count):
                self._logger.debug(f"Ignored move_layer({from_index}, {to_index}) with {count} layers")
                return False
            if from_index == to_index:
                return False

            self._layers.swap(from_index, to_index)

            if self._active_layer_id == from_index:
                self._active_layer_id = to_index
            elif self._active_layer_id == to_index:
                self._active_layer_id = from_index

            self._logger.debug(f"Swapped layers {from_index} <-> {to_index}")
            return True

    # ========================================
    # Selection
    # ========================================

    def set_active_layer(self, layer_id: Optional[int]):
        """Select the layer edits apply to (None clears the selection)

        Raises:
            LayerNotFound: If layer_id does not exist
        """
        with self._lock:
            if layer_id is not None:
                self._require_layer(layer_id)
            self._active_layer_id = layer_id
            self._logger.debug(f"Set active layer: {layer_id}")

    # ========================================
    # Layer Properties
    # ========================================

    def set_original(self, layer_id: int, buffer: PixelBuffer,
                     color_depth: Optional[int] = None, has_alpha: Optional[bool] = None,
                     name: Optional[str] = None):
        """Replace a layer's raster (original and mirrored edited)

        Args:
            layer_id: Target layer
            buffer: New raster
            color_depth: Bits per pixel reported by the loader (advisory)
            has_alpha: Whether the source carries an alpha channel;
                defaults to buffer.has_transparency()
            name: Optional new display name

        Raises:
            LayerNotFound: If layer_id does not exist
            TypeError: If buffer is not a PixelBuffer
        """
        if not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

        with self._lock:
            layer = self._require_layer(layer_id)
            layer.set_source(buffer)
            layer.has_alpha_channel = buffer.has_transparency() if has_alpha is None else bool(has_alpha)
            layer.alpha_channel_visible = layer.has_alpha_channel
            if color_depth is not None:
                layer.color_depth = int(color_depth)
            if name:
                layer.name = name
            self._logger.debug(
                f"Set layer {layer_id} raster: {buffer.width}x{buffer.height} "
                f"(alpha={layer.has_alpha_channel}, depth={layer.color_depth})"
            )

    def set_opacity(self, layer_id: int, opacity: float):
        """Set layer opacity (0.0-1.0)

        Raises:
            LayerNotFound: If layer_id does not exist
            ValueError: If opacity is outside 0-1
        """
        with self._lock:
            layer = self._require_layer(layer_id)
            layer.opacity = opacity
            self._logger.debug(f"Set layer {layer_id} opacity: {opacity}")

    def set_blend_mode(self, layer_id: int, mode):
        """Set layer blend mode (BlendMode or its name)

        Raises:
            LayerNotFound: If layer_id does not exist
            ValueError: If the mode is unknown
        """
        with self._lock:
            layer = self._require_layer(layer_id)
            layer.blend_mode = BlendMode.parse(mode)
            self._logger.debug(f"Set layer {layer_id} blend mode: {layer.blend_mode.value}")

    def set_visible(self, layer_id: int, visible: bool):
        """Show or hide a layer in the composite"""
        with self._lock:
            layer = self._require_layer(layer_id)
            layer.visible = bool(visible)
            self._logger.debug(f"Set layer {layer_id} visible: {visible}")

    def set_layer_name(self, layer_id: int, name: str):
        """Set layer display name (editor-only metadata)"""
        with self._lock:
            layer = self._require_layer(layer_id)
            layer.name = name
            self._logger.debug(f"Set layer {layer_id} name: {layer.name}")

    def set_color_depth(self, layer_id: int, depth: int):
        """Record the source color depth in bits per pixel"""
        with self._lock:
            layer = self._require_layer(layer_id)
            layer.color_depth = int(depth)

    # ========================================
    # Alpha Channel
    # ========================================

    def toggle_alpha_visibility(self, layer_id: int) -> bool:
        """Show or hide the alpha channel

        Recomputes edited from the original: shown -> original as-is,
        hidden -> copy with every alpha byte forced to 255. Any uncommitted
        edit is replaced.

        Returns:
            True if toggled, False when the layer has no alpha channel or
            no raster (nothing changes)

        Raises:
            LayerNotFound: If layer_id does not exist
        """
        with self._lock:
            layer = self._require_layer(layer_id)
            if layer.is_empty or not layer.has_alpha_channel:
                self._logger.debug(f"Layer {layer_id} has no alpha channel to toggle")
                return False

            layer.alpha_channel_visible = not layer.alpha_channel_visible
            if layer.alpha_channel_visible:
                layer.edited = layer.original
            else:
                layer.edited = layer.original.with_opaque_alpha()

            self._logger.debug(f"Layer {layer_id} alpha visible: {layer.alpha_channel_visible}")
            return True

    def delete_alpha_channel(self, layer_id: int):
        """Permanently strip alpha (original and edited become opaque)

        Further alpha toggling is disabled for the layer.

        Raises:
            LayerNotFound: If layer_id does not exist
        """
        with self._lock:
            layer = self._require_layer(layer_id)
            if not layer.is_empty:
                layer.set_source(layer.original.with_opaque_alpha())
            layer.has_alpha_channel = False
            layer.alpha_channel_visible = False
            self._logger.debug(f"Deleted alpha channel of layer {layer_id}")
