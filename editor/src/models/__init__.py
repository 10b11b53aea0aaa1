"""
GB7 Layer Editor - Data Models

This module contains the pixel, kernel, curve and document models.
This is the MODEL in MVC architecture.

Public API: Import ImageDocument, LayerInfo from models.document and
PixelBuffer from models.pixel_buffer.
"""

from .pixel_buffer import PixelBuffer
from .document import ImageDocument, LayerInfo

__all__ = ['PixelBuffer', 'ImageDocument', 'LayerInfo']
