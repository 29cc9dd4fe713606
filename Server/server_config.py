"""
GarageDash Server - Configuration

Loads server configuration from an optional server_config.json next to the
working directory, merged over built-in defaults, with environment variables
taking precedence over both.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ServerConfig(BaseSettings):
    """
    Resolved server configuration

    Every field can be set from the environment variable of the same name
    in upper case (S3_ENDPOINT, ARCHIVE_BUCKET, CONNECT_TIMEOUT_SECONDS, ...).
    Empty environment variables are ignored.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    s3_endpoint: str = "http://127.0.0.1:3900"
    s3_region: str = "garage"  # Garage ignores the region but boto3 requires one
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    archive_bucket: str = "archive"
    trash_bucket: str = "archive-trash"
    connect_timeout_seconds: int = 10
    read_timeout_seconds: int = 60
    max_attempts: int = 3
    log_level: str = "INFO"
    log_dir: str = "logs"

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings,
                                   dotenv_settings, file_secret_settings):
        # Environment beats values passed in from server_config.json
        return env_settings, init_settings


class ServerConfigManager:
    """
    Resolves the server configuration.

    Precedence (highest first):
    - Environment variables
    - Values from server_config.json
    - ServerConfig field defaults
    """

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = config_file or Path.cwd() / "server_config.json"

    def read_config_file(self) -> Dict[str, Any]:
        """
        Read known keys from server_config.json.

        Returns:
            Dict of values from the file (empty if the file does not exist)

        Raises:
            ValueError: If server_config.json is not a JSON object
        """
        if not self.config_file.exists():
            return {}

        logger.debug(f"Loading configuration from {self.config_file}")
        with open(self.config_file, 'r') as f:
            file_config = json.load(f)
        if not isinstance(file_config, dict):
            raise ValueError(f"{self.config_file} must contain a JSON object")

        known = {}
        for key, value in file_config.items():
            if key in ServerConfig.model_fields:
                known[key] = value
            else:
                logger.warning(f"Ignoring unknown configuration key '{key}' in {self.config_file}")
        return known

    def load_config(self) -> ServerConfig:
        """
        Load configuration from defaults, file and environment.

        Returns:
            ServerConfig with every field resolved

        Raises:
            ValueError: If server_config.json is not a JSON object
            pydantic.ValidationError: If a value has the wrong type
        """
        config = ServerConfig(**self.read_config_file())

        logger.info(
            f"Configuration loaded: endpoint={config.s3_endpoint}, "
            f"archive={config.archive_bucket}, trash={config.trash_bucket}"
        )
        return config
