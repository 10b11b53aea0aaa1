"""
Document Edit Mixin

Edit operations that act on the active layer. Each reads the layer's
original buffer and writes a new edited buffer; `commit=True` (or a later
commit_edits call) makes the result the new original so edits can stack.

Methods:
    - fill_active_layer
    - apply_convolution
    - apply_correction
    - resize_active_layer
    - commit_edits
    - revert_edits

All raise NoActiveLayer when nothing is selected and EmptyLayer when the
active layer has no raster (fill excepted), leaving the document unchanged.
"""

from typing import Optional

from constants import DEFAULT_FILL_COLOR
from models.color import Color
from models.curve import CurveSet
from models.kernel import Kernel
from models.modes import ConvolutionMode, CorrectionMode
from models.pixel_buffer import PixelBuffer
from services.convolution import apply_convolution as convolve_buffer
from services.correction import apply_correction as correct_buffer, choose_correction_mode
from services.resampling import resize_buffer


class DocumentEditMixin:
    """Mixin providing active-layer edits for ImageDocument

    This mixin assumes the parent class has:
        - self._lock: re-entrant lock guarding all mutation
        - self._canvas_size: (width, height)
        - self._logger: logging.Logger instance
        - self._require_active_layer(need_raster) -> Layer
    """

    def _store_edit(self, layer, result: PixelBuffer, commit: bool):
        """Write an edit result, keeping hidden alpha hidden in edited"""
        if commit:
            layer.set_source(result)
        else:
            layer.edited = result
        if layer.has_alpha_channel and not layer.alpha_channel_visible:
            layer.edited = result.with_opaque_alpha()

    # ========================================
    # Edits
    # ========================================

    def fill_active_layer(self, color=None, commit: bool = False) -> PixelBuffer:
        """Fill the active layer with a solid color

        On an empty layer this creates a canvas-sized raster (original and
        edited), so a fill can start a new image.

        Args:
            color: Color, hex string or RGB(A) sequence; DEFAULT_FILL_COLOR if None
            commit: Also replace the original

        Returns:
            The filled buffer
        """
        fill = Color.parse(color if color is not None else DEFAULT_FILL_COLOR)
        with self._lock:
            layer = self._require_active_layer(need_raster=False)
            if layer.is_empty:
                width, height = self._canvas_size
                result = PixelBuffer.filled(width, height, fill.to_rgba())
                layer.set_source(result)
                layer.has_alpha_channel = fill.a < 255
                layer.alpha_channel_visible = layer.has_alpha_channel
            else:
                result = PixelBuffer.filled(layer.original.width, layer.original.height, fill.to_rgba())
                self._store_edit(layer, result, commit)
            self._logger.debug(f"Filled layer {layer.id} with {fill}")
            return result

    def apply_convolution(self, kernel: Kernel, mode=ConvolutionMode.RGB,
                          commit: bool = False) -> PixelBuffer:
        """Filter the active layer's original with a 3x3 kernel

        Args:
            kernel: Weights to apply
            mode: ConvolutionMode.RGB or ConvolutionMode.ALPHA
            commit: Also replace the original

        Returns:
            The filtered buffer
        """
        with self._lock:
            layer = self._require_active_layer()
            result = convolve_buffer(layer.original, kernel, mode)
            self._store_edit(layer, result, commit)
            self._logger.debug(f"Applied convolution to layer {layer.id}")
            return result

    def apply_correction(self, curves: CurveSet, mode: Optional[CorrectionMode] = None,
                         commit: bool = False) -> PixelBuffer:
        """Apply tonal curves to the active layer's original

        Args:
            curves: Curves per target (red/green/blue for color images,
                gray for grayscale images, alpha for both)
            mode: Force a mode; by default GRAYSCALE when every pixel of
                the original has R == G == B, COLOR otherwise
            commit: Also replace the original

        Returns:
            The corrected buffer
        """
        with self._lock:
            layer = self._require_active_layer()
            if mode is None:
                mode = choose_correction_mode(layer.original)
            result = correct_buffer(layer.original, curves, mode)
            self._store_edit(layer, result, commit)
            self._logger.debug(f"Applied {mode.value} correction to layer {layer.id}")
            return result

    def resize_active_layer(self, width: int, height: int, method: str = 'nearest',
                            commit: bool = False) -> PixelBuffer:
        """Resample the active layer's original to a new size

        Args:
            width: Target width
            height: Target height
            method: 'nearest' or 'bilinear'
            commit: Also replace the original

        Returns:
            The resized buffer
        """
        with self._lock:
            layer = self._require_active_layer()
            result = resize_buffer(layer.original, width, height, method)
            self._store_edit(layer, result, commit)
            self._logger.debug(f"Resized layer {layer.id} to {width}x{height} ({method})")
            return result

    # ========================================
    # Edit lifecycle
    # ========================================

    def commit_edits(self) -> PixelBuffer:
        """Make the active layer's edited buffer its new original"""
        with self._lock:
            layer = self._require_active_layer()
            layer.set_source(layer.edited)
            self._logger.debug(f"Committed edits on layer {layer.id}")
            return layer.original

    def revert_edits(self) -> PixelBuffer:
        """Drop uncommitted edits on the active layer

        The alpha visibility setting is re-applied to the restored buffer.
        """
        with self._lock:
            layer = self._require_active_layer()
            if layer.has_alpha_channel and not layer.alpha_channel_visible:
                layer.edited = layer.original.with_opaque_alpha()
            else:
                layer.edited = layer.original
            self._logger.debug(f"Reverted edits on layer {layer.id}")
            return layer.edited
