"""
GB7 Layer Editor - Document Model

Public API: ImageDocument and its LayerInfo snapshots.
The _internal/ subdirectory holds the mutable Layer entity and is not
meant to be imported from outside this package.
"""

from .core import ImageDocument
from ._internal.layer import LayerInfo

__all__ = ['ImageDocument', 'LayerInfo']
