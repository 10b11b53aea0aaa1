"""Configuration file operations and recent files for the GB7 editor"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME, MAX_RECENT_FILES
from models.editor_config import EditorConfig
from utils.logger import loggerRaise


def default_config_dir() -> Path:
    """~/.gb7_editor"""
    return Path.home() / CONFIG_DIR_NAME


class ConfigManager:
    """Loads and saves EditorConfig as JSON

    A missing or unreadable file yields defaults; it never stops the editor
    from starting.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None,
                 max_recent_files: int = MAX_RECENT_FILES):
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self.max_recent_files = max_recent_files
        self.config = EditorConfig()
        self._logger = logging.getLogger('ConfigManager')

    def load(self) -> EditorConfig:
        """Load settings from the config file

        Recent files that no longer exist are dropped.
        """
        if not self.config_file.exists():
            self._logger.debug(f"No config at {self.config_file}, using defaults")
            self.config = EditorConfig()
            return self.config

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.warning(f"Error loading config {self.config_file}: {e}, using defaults")
            self.config = EditorConfig()
            return self.config

        config = EditorConfig.from_dict(data)
        config.recent_files = [f for f in config.recent_files if os.path.exists(f)][:self.max_recent_files]
        self.config = config
        return config

    def save(self):
        """Save settings to the config file

        Raises:
            OSError: If the directory or file cannot be written
        """
        data = self.config.to_dict()
        data['recent_files'] = data['recent_files'][:self.max_recent_files]
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            loggerRaise(e, "Error saving config")
        self._logger.debug(f"Saved config to {self.config_file}")

    def add_recent_file(self, filepath: Union[str, Path]):
        """Move a file to the front of the recent list and save"""
        filepath = str(filepath)
        recent = self.config.recent_files
        if filepath in recent:
            recent.remove(filepath)
        recent.insert(0, filepath)
        self.config.recent_files = recent[:self.max_recent_files]
        self.save()

    def clear_recent_files(self):
        self.config.recent_files = []
        self.save()
