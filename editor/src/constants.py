"""
GB7 Layer Editor - Constants and Configuration

This module contains all constant values used throughout the application:
- Layer store capacity and canvas defaults
- GB7 file format header layout
- Convolution kernel presets
- Tonal correction weights
- Viewport zoom steps
- Export settings

Based on: docs/specifications/gb7_format.md
"""

# ======================================================================
# LAYER STORE
# ======================================================================

# Maximum number of layer slots an ImageDocument holds by default
MAX_LAYERS = 2

# Default blend/opacity for a freshly created layer
DEFAULT_BLEND_MODE = 'normal'
DEFAULT_OPACITY = 1.0

# Layer name shown for a slot with no raster
EMPTY_LAYER_NAME = 'empty'

# ======================================================================
# CANVAS DEFAULTS
# ======================================================================

# Composite size when no visible layer has a raster
DEFAULT_CANVAS_WIDTH = 600
DEFAULT_CANVAS_HEIGHT = 600
DEFAULT_CANVAS_SIZE = (DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT)

# Fill color used when none is given (opaque black, RGBA)
DEFAULT_FILL_COLOR = (0, 0, 0, 255)

# ======================================================================
# GB7 FORMAT
# ======================================================================
# 12 byte header followed by width*height payload bytes.
# Payload byte: bit 7 = mask (opaque when set), bits 0-6 = gray >> 1

GB7_MAGIC = b'\x47\x42\x37\x1d'  # "GB7" + 0x1D
GB7_VERSION = 0x01
GB7_HEADER_SIZE = 12
GB7_MASK_FLAG = 0x01
GB7_NO_MASK_FLAG = 0x00
GB7_MASK_BIT = 0x80
GB7_GRAY_BITS = 0x7F
GB7_MAX_DIMENSION = 0xFFFF

# ======================================================================
# CONVOLUTION PRESETS
# ======================================================================
# Weights are applied as written (no kernel flip); rows are y, columns x.

CONVOLUTION_PRESETS = {
    'Identity': [
        [0, 0, 0],
        [0, 1, 0],
        [0, 0, 0],
    ],
    'Sharpen': [
        [0, -1, 0],
        [-1, 5, -1],
        [0, -1, 0],
    ],
    'Gaussian Blur': [
        [1, 2, 1],
        [2, 4, 2],
        [1, 2, 1],
    ],
    'Box Blur': [
        [1, 1, 1],
        [1, 1, 1],
        [1, 1, 1],
    ],
    'Prewitt Horizontal': [
        [-1, 0, 1],
        [-1, 0, 1],
        [-1, 0, 1],
    ],
    'Prewitt Vertical': [
        [-1, -1, -1],
        [0, 0, 0],
        [1, 1, 1],
    ],
}

KERNEL_SIZE = 3

# ======================================================================
# TONAL CORRECTION
# ======================================================================

# Luma weights used by grayscale-mode correction (ITU-R BT.601)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Identity curve endpoints: (input, output)
CURVE_IDENTITY_START = (0, 0)
CURVE_IDENTITY_END = (255, 255)

LUT_SIZE = 256

# ======================================================================
# VIEWPORT
# ======================================================================

# Zoom steps offered for on-screen presentation (fractions of 1.0)
SCALE_PRESETS = [
    0.12, 0.25, 0.33, 0.5, 0.67, 0.75, 0.8, 0.9,
    1.0, 1.1, 1.25, 1.5, 1.75, 2.0, 2.5, 3.0,
]

# ======================================================================
# EXPORT / CONFIG
# ======================================================================

JPEG_QUALITY = 95
DEFAULT_GB7_USE_MASK = False

CONFIG_DIR_NAME = '.gb7_editor'
CONFIG_FILE_NAME = 'config.json'
MAX_RECENT_FILES = 10
