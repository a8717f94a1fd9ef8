"""Byte source adapters.

This module contains adapters that implement the ByteSourcePort interface for
supplying raw log buffers (files on disk, uploaded buffers).
"""

from pathlib import Path
from typing import Union

from dialysis_log.adapters.sources.file_source import FileByteSource
from dialysis_log.adapters.sources.memory_source import MemoryByteSource
from dialysis_log.domain.ports import ByteSourcePort, SourceNotFoundError

__all__ = ["FileByteSource", "MemoryByteSource", "get_source"]


def get_source(source: Union[str, Path, bytes, bytearray, memoryview], **kwargs) -> ByteSourcePort:
    """Factory function to get the appropriate byte source.

    Buffers are wrapped as-is; anything path-like is read from disk. File
    extensions are not inspected.

    Parameters:
        source: File path or raw buffer
        **kwargs: Passed to the adapter constructor
            - max_file_size for both adapters
            - filename for buffers

    Returns:
        ByteSourcePort: Adapter instance

    Raises:
        SourceNotFoundError: If a path does not point to a regular file

    Example Usage:
        ```python
        source = get_source("logs/2024-03-05.bin")
        source = get_source(upload_bytes, filename="session.dat")
        ```
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return MemoryByteSource(source, **kwargs)

    if not FileByteSource.can_read(source):
        raise SourceNotFoundError(f"Log file not found: {source}", source=str(source))

    return FileByteSource(source, **kwargs)
