"""Configuration Manager for the Converter.

This module loads converter configuration from the environment or from a
JSON file and validates it before use.

Architecture:
    - Follows Hexagonal Architecture: Infrastructure layer isolated from domain
    - Supports environment variables (with .env loading) and JSON files
    - Type-safe configuration using Pydantic models
    - Fail-fast validation prevents runtime errors
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from dialysis_log.domain.enums import CSVQuoting

logger = logging.getLogger(__name__)

# Default byte source limit (64MB)
DEFAULT_MAX_FILE_SIZE = 64 * 1024 * 1024

# Records below which sharded decoding is not worth the thread overhead
DEFAULT_PARALLEL_THRESHOLD = 50000


class ConverterConfig(BaseModel):
    """Converter configuration model.

    Parameters:
        max_file_size: Largest byte source accepted, in bytes
        decode_workers: Threads used for sharded decoding (1 = sequential)
        parallel_threshold: Minimum record count before sharding is used
        csv_quoting: CSV field quoting mode ('none' keeps legacy output)
        output_dir: Default directory for exported CSV files
    """

    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0, description="Maximum source size in bytes")
    decode_workers: int = Field(default=1, ge=1, le=64, description="Decoder threads")
    parallel_threshold: int = Field(default=DEFAULT_PARALLEL_THRESHOLD, ge=1, description="Sharding threshold in records")
    csv_quoting: CSVQuoting = Field(default=CSVQuoting.NONE, description="CSV quoting mode")
    output_dir: Optional[str] = Field(None, description="Default CSV output directory")

    @field_validator("csv_quoting", mode="before")
    @classmethod
    def normalize_csv_quoting(cls, v: Any) -> Any:
        """Accept quoting modes case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v: Optional[str]) -> Optional[str]:
        """Validate output directory exists (if provided)."""
        if v is None or v == "":
            return None

        output_path = Path(v)
        if not output_path.is_dir():
            raise ValueError(f"Output directory does not exist: {output_path}")

        return str(output_path)


class ConfigManager:
    """Configuration manager for converter settings.

    Example Usage:
        ```python
        # Load from environment variables
        config = ConfigManager.from_environment()
        converter_config = config.get_converter_config()

        # Load from file
        config = ConfigManager.from_file("converter.json")
        converter_config = config.get_converter_config()
        ```
    """

    def __init__(self, config_data: Dict[str, Any]):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary
        """
        self._config_data = config_data
        self._converter_config: Optional[ConverterConfig] = None

    @classmethod
    def from_environment(cls) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - DL_MAX_FILE_SIZE: Maximum source size in bytes
            - DL_DECODE_WORKERS: Decoder threads
            - DL_PARALLEL_THRESHOLD: Sharding threshold in records
            - DL_CSV_QUOTING: CSV quoting mode (none, minimal)
            - DL_OUTPUT_DIR: Default CSV output directory

        A .env file in the project root is loaded first if present.

        Returns:
            ConfigManager instance
        """
        env_path = Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")

        converter: Dict[str, Any] = {}
        env_map = {
            "max_file_size": "DL_MAX_FILE_SIZE",
            "decode_workers": "DL_DECODE_WORKERS",
            "parallel_threshold": "DL_PARALLEL_THRESHOLD",
            "csv_quoting": "DL_CSV_QUOTING",
            "output_dir": "DL_OUTPUT_DIR",
        }
        for key, env_var in env_map.items():
            value = os.getenv(env_var)
            if value is not None and value != "":
                converter[key] = value

        return cls({"converter": converter})

    @classmethod
    def from_file(cls, config_path: str) -> 'ConfigManager':
        """Load configuration from a JSON file.

        Parameters:
            config_path: Path to configuration file

        Returns:
            ConfigManager instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {str(e)}") from e

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a JSON object")

        return cls(config_data)

    def get_converter_config(self) -> ConverterConfig:
        """Get converter configuration.

        Returns:
            ConverterConfig instance

        Raises:
            pydantic.ValidationError: If the configuration is invalid
        """
        if self._converter_config is None:
            self._converter_config = ConverterConfig(**self._config_data.get("converter", {}))
        return self._converter_config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Parameters:
            key: Configuration key (supports dot notation, e.g., "converter.csv_quoting")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config_data

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default
