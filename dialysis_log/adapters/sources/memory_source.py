"""In-memory byte source for uploaded logs."""

from typing import Optional, Union

from dialysis_log.domain.decoder import RecordDecoder
from dialysis_log.domain.ports import ByteSourcePort, SourceTooLargeError
from dialysis_log.infrastructure.config_manager import DEFAULT_MAX_FILE_SIZE


class MemoryByteSource(ByteSourcePort):
    """Wrap a buffer that has already been received, e.g. an HTTP upload.

    Parameters:
        data: Raw log contents
        filename: Name the buffer was uploaded under
        max_file_size: Largest buffer accepted, in bytes
    """

    def __init__(
        self,
        data: Union[bytes, bytearray, memoryview],
        filename: str = "upload.bin",
        max_file_size: int = DEFAULT_MAX_FILE_SIZE
    ):
        self._data = bytes(data)
        self._filename = filename or "upload.bin"
        self.max_file_size = max_file_size

    @property
    def name(self) -> str:
        return self._filename

    def get_source_info(self) -> Optional[dict]:
        size = len(self._data)
        return {
            'format': 'dialysis-log',
            'name': self.name,
            'size': size,
            'record_count': RecordDecoder.record_count(size),
            'trailing_bytes': RecordDecoder.trailing_bytes(size),
        }

    def read(self) -> bytes:
        if len(self._data) > self.max_file_size:
            raise SourceTooLargeError(
                f"{self.name} is {len(self._data)} bytes, limit is {self.max_file_size} bytes",
                source=self.name,
                size=len(self._data),
                limit=self.max_file_size,
            )
        return self._data
