"""File Byte Source Adapter.

This adapter implements the ByteSourcePort contract for log files on disk.
The file extension carries no meaning: any regular file is read as a flat
sequence of 88-byte records.

Architecture:
    - Implements ByteSourcePort (Hexagonal Architecture)
    - Size is checked before the file is opened so oversized inputs are
      rejected without reading them
    - OS-level failures are translated to FormatError
"""

import logging
from pathlib import Path
from typing import Optional, Union

from dialysis_log.domain.decoder import RecordDecoder
from dialysis_log.domain.ports import (
    ByteSourcePort,
    FormatError,
    SourceNotFoundError,
    SourceTooLargeError,
)
from dialysis_log.infrastructure.config_manager import DEFAULT_MAX_FILE_SIZE

logger = logging.getLogger(__name__)


class FileByteSource(ByteSourcePort):
    """Read a session log from the filesystem.

    Parameters:
        path: Path to the log file
        max_file_size: Largest file accepted, in bytes
    """

    def __init__(self, path: Union[str, Path], max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        self.path = Path(path)
        self.max_file_size = max_file_size

    @property
    def name(self) -> str:
        return self.path.name

    @staticmethod
    def can_read(source: Union[str, Path]) -> bool:
        """Check if the source is an existing regular file."""
        if not source:
            return False
        try:
            return Path(source).is_file()
        except (OSError, ValueError):
            return False

    def get_source_info(self) -> Optional[dict]:
        """Get metadata about the log file without reading it.

        Returns:
            Optional[dict]: name, size, record_count and trailing_bytes, or
            None if the file cannot be inspected
        """
        try:
            size = self.path.stat().st_size
        except (OSError, ValueError):
            return None

        return {
            'format': 'dialysis-log',
            'name': self.name,
            'size': size,
            'record_count': RecordDecoder.record_count(size),
            'trailing_bytes': RecordDecoder.trailing_bytes(size),
        }

    def read(self) -> bytes:
        """Read the whole file.

        Returns:
            bytes: File contents

        Raises:
            SourceNotFoundError: If the path does not exist or is not a file
            SourceTooLargeError: If the file exceeds max_file_size
            FormatError: If the file cannot be read
        """
        source = str(self.path)
        if not self.path.is_file():
            raise SourceNotFoundError(f"Log file not found: {source}", source=source)

        try:
            with open(self.path, "rb") as handle:
                size = self._check_size(handle.seek(0, 2))
                handle.seek(0)
                data = handle.read(size + 1)
        except OSError as e:
            raise FormatError(f"Cannot read {source}: {e.strerror or e}", source=source) from e

        # File grew between the size check and the read
        if len(data) > self.max_file_size:
            self._check_size(len(data))

        logger.debug(f"Read {len(data)} bytes from {source}")
        return data

    def _check_size(self, size: int) -> int:
        if size > self.max_file_size:
            raise SourceTooLargeError(
                f"{self.name} is {size} bytes, limit is {self.max_file_size} bytes",
                source=str(self.path),
                size=size,
                limit=self.max_file_size,
            )
        return size
