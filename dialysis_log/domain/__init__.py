"""Domain layer for the dialysis log converter.

This module contains the binary record decoder and the session record
schemas. All domain models are pure Python with no external dependencies
beyond Pydantic.
"""

from .enums import PassFail
from .session_record import SessionRecord, ConversionSession
from .decoder import RecordDecoder, decode, RECORD_SIZE

__all__ = [
    "PassFail",
    "SessionRecord",
    "ConversionSession",
    "RecordDecoder",
    "decode",
    "RECORD_SIZE",
]
