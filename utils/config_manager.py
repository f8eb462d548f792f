"""Application configuration management"""

import copy
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "app": {
        "name": "MESAI Kiosk",
        "version": "v2.1.0",
        "description": "Work order session tracker"
    },
    "kiosk": {
        "device_id": "DVN-0001",
        "tick_interval_ms": 1000,
        "work_orders_file": ""
    },
    "capture": {
        "camera_index": 0,
        "resolution": [640, 480],
        "frame_interval_ms": 33,
        "visual_timeout_sec": 0,
        "scan_delay_sec": 0.0
    },
    "ui": {
        "window_title": "MESAI Kiosk",
        "window_geometry": "1280x800",
        "fullscreen": False
    },
    "logging": {
        "enabled": True,
        "log_file": "kiosk_event_log.csv",
        "level": "INFO"
    },
    "sound": {
        "enabled": True,
        "success_file": "assets/success.wav",
        "error_file": "assets/error.wav"
    }
}


class ConfigManager:
    """Loads and saves the kiosk settings stored as JSON"""

    def __init__(self, config_file: str = "config.json", base_dir: Optional[str] = None):
        self.config_file = config_file
        self.base_dir = base_dir or os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.config = self._load_config()

    @property
    def config_path(self) -> str:
        return os.path.join(self.base_dir, self.config_file)

    def _load_config(self) -> Dict[str, Any]:
        """Load the config file, creating the default one when missing."""
        try:
            if os.path.exists(self.config_path):
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            return self._create_default_config()
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Config file load error: %s", e)
            return self._create_default_config()

    def _create_default_config(self) -> Dict[str, Any]:
        """Build the default configuration and write it to disk."""
        default_config = copy.deepcopy(DEFAULT_CONFIG)
        self.save_config(default_config)
        return default_config

    def get(self, key_path: str, default=None):
        """Return a value by dot path, e.g. 'kiosk.device_id'."""
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key_path: str, value):
        """Set a value by dot path."""
        keys = key_path.split('.')
        config = self.config

        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

    def save_config(self, config_data=None):
        """Write the configuration to the file."""
        data = config_data if config_data is not None else self.config
        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=4)
        except OSError as e:
            logger.error("Config file save error: %s", e)
