"""Dependency injection for the web API.

Routes receive configuration and the decoder through FastAPI dependencies so
tests can override them.
"""

from typing import Annotated

from fastapi import Depends

from dialysis_log.domain.decoder import RecordDecoder
from dialysis_log.infrastructure.config_manager import ConverterConfig
from dialysis_log.infrastructure.settings import settings
from dialysis_log.main import create_decoder


def get_converter_config() -> ConverterConfig:
    """Get the converter configuration."""
    return settings.converter


def get_decoder(config: Annotated[ConverterConfig, Depends(get_converter_config)]) -> RecordDecoder:
    """Get a decoder configured for this request."""
    return create_decoder(config)


# Type aliases for dependency injection
ConfigDep = Annotated[ConverterConfig, Depends(get_converter_config)]
DecoderDep = Annotated[RecordDecoder, Depends(get_decoder)]
