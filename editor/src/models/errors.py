"""
GB7 Layer Editor - Error Taxonomy

Fatal errors (buffer construction, codec, curves, kernels) reject the call and
never leave a partially written buffer behind.

Recoverable errors (LayerStateError subclasses) are raised by ImageDocument
with its state left untouched, so the caller can surface a message and carry on.
"""


class EditorError(Exception):
    """Base class for all editor errors"""


class InvalidBufferLayout(EditorError, ValueError):
    """Pixel data length does not match width * height * 4"""


class InvalidKernelShape(EditorError, ValueError):
    """Convolution kernel is not a 3x3 matrix"""


class InvalidCurveControlPoints(EditorError, ValueError):
    """Curve control points are out of order (p1.input >= p2.input)"""


class InvalidGB7Header(EditorError, ValueError):
    """GB7 data has a bad magic, version, or is shorter than the header"""


class TruncatedGB7Payload(EditorError, ValueError):
    """GB7 payload holds fewer than width * height bytes"""


class UnsupportedFormat(EditorError):
    """File is not PNG, JPEG or GB7, or could not be decoded"""


class LayerStateError(EditorError):
    """Recoverable layer store error - document state is unchanged"""


class NoActiveLayer(LayerStateError):
    """Edit requested while no layer is active"""


class EmptyLayer(LayerStateError):
    """Edit requested on a layer that has no raster yet"""


class LayerCapacityExceeded(LayerStateError):
    """Layer add requested with every slot already in use"""


class LayerNotFound(LayerStateError, ValueError):
    """No layer with the requested id"""
