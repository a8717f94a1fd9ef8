"""Application Settings and Configuration.

This module provides application-wide settings that combine configuration
from the configuration manager with application-specific defaults.
"""

import os
from typing import Optional

from dialysis_log import __version__
from dialysis_log.infrastructure.config_manager import ConfigManager, ConverterConfig

# Application metadata
APP_NAME = "Dialysis-Log-Converter"
APP_VERSION = __version__


class Settings:
    """Application settings loaded from configuration manager and environment.

    Converter options are validated lazily through ``ConverterConfig`` on
    first access; process-level options (logging, web server) are read
    directly from the environment.
    """

    def __init__(self):
        """Initialize settings from configuration manager and environment."""
        self._converter_config: Optional[ConverterConfig] = None
        self._config_manager: Optional[ConfigManager] = None

        self.app_name = os.getenv("DL_APP_NAME", APP_NAME)
        self.app_version = APP_VERSION

        # Logging
        self.log_level = os.getenv("DL_LOG_LEVEL", "INFO")
        self.json_logs = os.getenv("DL_JSON_LOGS", "false").lower() == "true"

        # Web server
        self.host = os.getenv("DL_HOST", "127.0.0.1")
        self.port = int(os.getenv("DL_PORT", "8000"))

    @property
    def config_manager(self) -> ConfigManager:
        """Get configuration manager instance."""
        if self._config_manager is None:
            self._config_manager = ConfigManager.from_environment()
        return self._config_manager

    @property
    def converter(self) -> ConverterConfig:
        """Get converter configuration (loaded on first access)."""
        if self._converter_config is None:
            self._converter_config = self.config_manager.get_converter_config()
        return self._converter_config

    def reload(self) -> None:
        """Drop cached configuration so the next access re-reads the environment."""
        self._converter_config = None
        self._config_manager = None


# Global settings instance
settings = Settings()
