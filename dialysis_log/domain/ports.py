"""Domain Ports - Abstract Contracts for Byte Sources, Presenters and Exporters.

This module defines the Port interfaces (abstract contracts) that Adapters must
implement. Following Hexagonal Architecture, the Domain Core defines what it
needs, not how it's provided: the decoder only ever sees a byte buffer, and
the records it produces leave the core through a presenter or an exporter.

Architecture:
    - Pure abstract interfaces with zero infrastructure dependencies
    - Byte sources (file, upload buffer) implement ByteSourcePort
    - Table renderers (terminal, HTML) implement PresenterPort
    - Document writers (CSV) implement ExporterPort
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, Optional, TypeVar, Union

from dialysis_log.domain.session_record import ConversionSession

# Type variable for Result generic
T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    The pipeline returns Results so that the CLI and the web layer can report
    a failure as one human-readable message instead of a traceback.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error information (only present if success=False)
        error_type: Type of error (FormatError, ExportError, etc.)
        error_details: Additional error context (source, size, etc.)

    Example:
        ```python
        result = load_session(FileByteSource("session.bin"))
        if result.is_success():
            present(result.value)
        else:
            print(f"Failed to parse file: {result.error}")
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result.

        Parameters:
            value: The successful result value

        Returns:
            Result: Success result with the value
        """
        return cls(
            success=True,
            value=value,
            error=None,
            error_type=None,
            error_details=None
        )

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error (e.g., "FormatError", "ExportError")
            error_details: Additional context (source, size, etc.)

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class ConversionError(Exception):
    """Base exception for all conversion-related errors."""
    pass


class FormatError(ConversionError):
    """Raised when the byte source cannot be read at all.

    Decoding itself never fails: every byte pattern maps to some record. This
    error only ever originates from the I/O side (missing file, permissions,
    oversized input).

    Attributes:
        source: The source identifier that could not be read
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class SourceNotFoundError(FormatError):
    """Raised when the source file does not exist or is not a regular file."""
    pass


class SourceTooLargeError(FormatError):
    """Raised when the source exceeds the configured size limit.

    Attributes:
        size: Size of the source in bytes
        limit: Configured limit in bytes
    """

    def __init__(self, message: str, source: Optional[str] = None, size: int = 0, limit: int = 0):
        super().__init__(message, source=source)
        self.size = size
        self.limit = limit


class ExportError(ConversionError):
    """Raised when an exported document cannot be written.

    Attributes:
        destination: Path that could not be written
    """

    def __init__(self, message: str, destination: Optional[str] = None):
        super().__init__(message)
        self.destination = destination


# ============================================================================
# Ports
# ============================================================================

class ByteSourcePort(ABC):
    """Abstract contract for anything that supplies a raw log buffer.

    The filename carries no meaning to the decoder; it is only kept so that
    presenters can show it and exporters can derive an output name from it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Filename shown to the user and used to derive export names."""
        pass

    @abstractmethod
    def read(self) -> bytes:
        """Return the whole buffer.

        Raises:
            FormatError: If the source cannot be read
        """
        pass

    def get_source_info(self) -> Optional[dict]:
        """Get metadata about the source (optional, adapter-specific).

        Returns:
            Optional[dict]: Metadata such as 'name', 'size', 'record_count'
            and 'trailing_bytes'. None if it cannot be determined without
            reading the source.
        """
        return None


class PresenterPort(ABC):
    """Abstract contract for rendering a session as a table.

    Implementations must keep record order and render the pass/fail outcome
    as exactly one of two visual states.
    """

    @abstractmethod
    def render(self, session: ConversionSession, limit: Optional[int] = None):
        """Render the session; the return type is presenter-specific."""
        pass


class ExporterPort(ABC):
    """Abstract contract for serializing a session to a document."""

    @abstractmethod
    def render(self, session: ConversionSession) -> str:
        """Return the serialized document."""
        pass

    @abstractmethod
    def export_filename(self, source_name: str) -> str:
        """Derive the output filename from the source filename."""
        pass

    @abstractmethod
    def write(self, session: ConversionSession, output_dir: Union[str, Path]) -> Path:
        """Write the document into output_dir and return its path.

        Raises:
            ExportError: If the document cannot be written
        """
        pass
