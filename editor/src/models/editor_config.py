"""
GB7 Layer Editor - Editor Configuration Model

User-tunable settings persisted between sessions. Defaults come from
constants.py; ConfigManager (services.config_operations) handles the file.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List

from constants import (
    MAX_LAYERS, DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT,
    DEFAULT_GB7_USE_MASK, JPEG_QUALITY,
)


@dataclass
class EditorConfig:
    """Settings that survive a restart"""
    max_layers: int = MAX_LAYERS
    canvas_width: int = DEFAULT_CANVAS_WIDTH
    canvas_height: int = DEFAULT_CANVAS_HEIGHT
    gb7_use_mask: bool = DEFAULT_GB7_USE_MASK
    jpeg_quality: int = JPEG_QUALITY
    recent_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EditorConfig':
        """Build from parsed JSON, keeping defaults for missing or invalid keys

        Unknown keys are ignored so older and newer config files both load.
        """
        config = cls()
        if not isinstance(data, dict):
            return config

        for name in ('max_layers', 'canvas_width', 'canvas_height'):
            value = data.get(name)
            if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
                setattr(config, name, value)

        if isinstance(data.get('gb7_use_mask'), bool):
            config.gb7_use_mask = data['gb7_use_mask']

        quality = data.get('jpeg_quality')
        if isinstance(quality, int) and not isinstance(quality, bool):
            config.jpeg_quality = max(1, min(95, quality))

        recent = data.get('recent_files')
        if isinstance(recent, list):
            config.recent_files = [path for path in recent if isinstance(path, str)]

        return config
