"""
Shared fixtures for GB7 Layer Editor tests.

Provides reusable pixel buffers, kernels and documents.
"""
import sys
import os
import numpy as np
import pytest

# Run Qt headless when no display is available
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

from models.pixel_buffer import PixelBuffer


# ── Sample rasters ──────────────────────────────────────────────────────

def make_gradient(width=8, height=6, alpha=255):
    """Color gradient with distinct R, G, B per pixel"""
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = (xs * 255) // max(width - 1, 1)
    pixels[..., 1] = (ys * 255) // max(height - 1, 1)
    pixels[..., 2] = ((xs + ys) * 17) % 256
    pixels[..., 3] = alpha
    return PixelBuffer.from_array(pixels)


def make_random(width=16, height=12, seed=7):
    """Random RGBA noise, alpha included"""
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8))


@pytest.fixture
def gradient_buffer():
    """Opaque 8x6 color gradient"""
    return make_gradient()


@pytest.fixture
def random_buffer():
    """16x12 random RGBA buffer (partially transparent)"""
    return make_random()


@pytest.fixture
def gray_buffer():
    """4x4 grayscale ramp, opaque"""
    values = np.arange(16, dtype=np.uint8).reshape(4, 4) * 16
    pixels = np.stack([values, values, values, np.full_like(values, 255)], axis=-1)
    return PixelBuffer.from_array(pixels)


@pytest.fixture
def red_buffer():
    """Opaque 4x4 red"""
    return PixelBuffer.filled(4, 4, (255, 0, 0, 255))


@pytest.fixture
def blue_buffer():
    """Opaque 4x4 blue"""
    return PixelBuffer.filled(4, 4, (0, 0, 255, 255))


# ── Documents ───────────────────────────────────────────────────────────

@pytest.fixture
def document():
    """Empty two-slot document"""
    from models.document import ImageDocument
    return ImageDocument(max_layers=2, canvas_size=(10, 8))


@pytest.fixture
def loaded_document(document, gradient_buffer, red_buffer):
    """Two layers: gradient at the bottom (active), red on top"""
    document.create_empty_layers()
    document.set_original(0, gradient_buffer, color_depth=24)
    document.set_original(1, red_buffer, color_depth=24)
    return document
