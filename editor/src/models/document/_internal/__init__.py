"""
Document Internal Package - DO NOT IMPORT FROM HERE

This package contains INTERNAL implementation for the ImageDocument model:
- layer.py: Layer and Layers data structures, LayerInfo snapshots

FORBIDDEN: Do not import from models.document._internal.* directly
CORRECT: Import from models.document (the public API)

Example:
    from models.document import ImageDocument, LayerInfo
"""

# This package is internal - do not populate __all__
# External code must use models.document
