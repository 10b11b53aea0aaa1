"""PixelBuffer <-> QImage conversion for display widgets.

The engine never draws; widgets call buffer_to_qimage on the composite.
"""

import numpy as np
from PyQt5.QtGui import QImage

from models.pixel_buffer import PixelBuffer


def buffer_to_qimage(buffer: PixelBuffer) -> QImage:
    """Deep-copied RGBA8888 QImage of the buffer"""
    if buffer.is_empty():
        return QImage()
    data = buffer.to_bytes()
    image = QImage(data, buffer.width, buffer.height, buffer.width * 4, QImage.Format_RGBA8888)
    # QImage only borrows data; copy before it goes out of scope
    return image.copy()


def qimage_to_buffer(image: QImage) -> PixelBuffer:
    """Read any QImage back into a buffer (converted to RGBA8888)"""
    if image.isNull() or image.width() == 0 or image.height() == 0:
        return PixelBuffer.blank(0, 0)

    image = image.convertToFormat(QImage.Format_RGBA8888)
    width, height = image.width(), image.height()
    stride = image.bytesPerLine()

    ptr = image.constBits()
    ptr.setsize(height * stride)
    rows = np.frombuffer(ptr, dtype=np.uint8).reshape(height, stride)
    pixels = rows[:, :width * 4].reshape(height, width, 4)
    return PixelBuffer.from_array(pixels)
