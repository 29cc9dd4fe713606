"""
GarageDash Client - Configuration Manager

Handles loading and saving client configuration from/to config.json,
including the client-local pins and nicknames for files and folders.

Author: GarageDash Project
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any

# Configure logging
logger = logging.getLogger(__name__)


# Default configuration values
DEFAULT_CONFIG = {
    "server_url": "http://localhost",
    "server_port": 8000,
    "verify_ssl": True,
    "poll_interval_seconds": 5,
    "log_level": "INFO",
    "log_retention_days": 30,
    "pins": [],  # Paths pinned to the top of listings
    "nicknames": {}  # Path -> display name
}


class ConfigManager:
    """
    Manages client configuration.

    Responsibilities:
    - Load/save config.json next to the executable (same location as logs folder)
    - Provide configuration values to other modules
    - Keep pins and nicknames, which exist only on this machine and are
      keyed by the file or folder path
    """

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize configuration manager."""
        if config_file is None:
            # Determine base directory (same logic as logs folder)
            if getattr(sys, 'frozen', False):
                # Running as compiled executable
                base_dir = Path(sys.executable).parent
            else:
                # Running as script
                base_dir = Path.cwd()
            config_file = base_dir / "config.json"

        self.config_file = config_file
        self.config: Dict[str, Any] = {}

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from config.json.
        Creates default config if file doesn't exist.

        Returns:
            Configuration dictionary
        """
        if self.config_file.exists():
            logger.debug(f"Loading configuration from {self.config_file}")
            with open(self.config_file, 'r') as f:
                self.config = json.load(f)
            # Merge with defaults for any missing keys
            for key, value in DEFAULT_CONFIG.items():
                if key not in self.config:
                    self.config[key] = json.loads(json.dumps(value))
            logger.info("Configuration loaded successfully")
        else:
            logger.info(f"Configuration file not found, creating default at {self.config_file}")
            self.config = json.loads(json.dumps(DEFAULT_CONFIG))
            self.save_config()

        return self.config

    def save_config(self):
        """Save current configuration to config.json."""
        logger.debug(f"Saving configuration to {self.config_file}")
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)
        logger.debug("Configuration saved successfully")

    def get(self, key: str, default=None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        """
        Set configuration value and save to file.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self.config[key] = value
        self.save_config()

    # ==================== Pins and Nicknames ====================

    def is_pinned(self, path: str) -> bool:
        """Check whether a path is pinned."""
        return path in self.config.get("pins", [])

    def toggle_pin(self, path: str) -> bool:
        """
        Pin or unpin a path.

        Returns:
            True if the path is pinned afterwards
        """
        pins = list(self.config.get("pins", []))
        if path in pins:
            pins.remove(path)
            pinned = False
        else:
            pins.append(path)
            pinned = True
        self.set("pins", pins)
        return pinned

    def get_nickname(self, path: str) -> Optional[str]:
        """Get the nickname for a path, if any."""
        return self.config.get("nicknames", {}).get(path)

    def set_nickname(self, path: str, nickname: Optional[str]):
        """Set a nickname for a path; an empty nickname clears it."""
        nicknames = dict(self.config.get("nicknames", {}))
        if nickname:
            nicknames[path] = nickname
        else:
            nicknames.pop(path, None)
        self.set("nicknames", nicknames)
