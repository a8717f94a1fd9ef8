"""Binary Session Log Decoder.

This module turns the raw contents of a dialysis machine log into
``SessionRecord`` objects. The log is a flat sequence of 88-byte packed
records with no header, magic number, checksum or version byte:

    offset  size  field         encoding
    ------  ----  ------------  ------------------------------------------
     0       1    day           u8
     1       1    month         u8
     2       2    year          u16 little-endian
     4       1    hour          u8
     5       1    minute        u8
     6      11    patient_id    char[11], leading NULs stripped, NUL-terminated
    17      31    patient_name  char[31], leading NULs stripped, NUL-terminated
    48      11    dialyzer_id   char[11], NUL-terminated
    59       1    (reserved)
    60       4    volume        i32 little-endian
    64       1    prs           u8, 0xFF = pass, anything else = fail
    65      23    (padding)

Every field has a total decoding function, so decoding never fails for any
byte content. Bytes after the last complete record are discarded.

Architecture:
    - Pure domain service with zero infrastructure dependencies
    - Stateless: safe to share across threads
    - Optional sharding by record-index range; shards are concatenated in
      index order so the output always follows file order
"""

import logging
import struct
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, Optional, Union

from dialysis_log.domain.enums import PassFail
from dialysis_log.domain.session_record import SessionRecord

logger = logging.getLogger(__name__)

BufferLike = Union[bytes, bytearray, memoryview]

RECORD_SIZE = 88

# day, month, year, hour, minute, patient_id, patient_name, dialyzer_id,
# reserved, volume, prs, padding
RECORD_STRUCT = struct.Struct("<BBHBB11s31s11sxiB23x")

# Whitespace trimmed from text fields. Matches what the device tooling trims
# in the single-byte range: 0x1C-0x1F and 0x85 are not whitespace here.
TEXT_WHITESPACE = " \t\n\x0b\x0c\r\xa0"


def extract_text(raw: bytes, strip_leading_nulls: bool = False) -> str:
    """Extract a fixed-width NUL-terminated text field.

    Parameters:
        raw: The field's bytes
        strip_leading_nulls: Drop every leading zero byte before scanning

    Returns:
        str: Characters up to the first zero byte, whitespace-trimmed. Each
        byte becomes the code point of the same value, so 0xE9 is "é".
    """
    if strip_leading_nulls:
        raw = raw.lstrip(b"\x00")
    end = raw.find(b"\x00")
    if end != -1:
        raw = raw[:end]
    # latin-1 maps byte N to U+00N, one to one
    return raw.decode("latin-1").strip(TEXT_WHITESPACE)


class RecordDecoder:
    """Decoder for 88-byte dialysis session records.

    Parameters:
        workers: Number of threads used to decode shards (1 = sequential)
        parallel_threshold: Minimum record count before sharding kicks in

    Example Usage:
        ```python
        decoder = RecordDecoder()
        for record in decoder.iter_records(buffer):
            print(record.date, record.patient_id, record.prs)
        ```
    """

    record_size = RECORD_SIZE

    def __init__(self, workers: int = 1, parallel_threshold: int = 50000):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.workers = workers
        self.parallel_threshold = parallel_threshold

    @staticmethod
    def record_count(length: int) -> int:
        """Number of complete records in a buffer of the given length."""
        return length // RECORD_SIZE

    @staticmethod
    def trailing_bytes(length: int) -> int:
        """Number of bytes left over after the last complete record."""
        return length % RECORD_SIZE

    @staticmethod
    def decode_record(buffer: BufferLike, offset: int = 0) -> SessionRecord:
        """Decode the record starting at ``offset``."""
        (
            day,
            month,
            year,
            hour,
            minute,
            patient_id,
            patient_name,
            dialyzer_id,
            volume,
            prs_flag,
        ) = RECORD_STRUCT.unpack_from(buffer, offset)

        return SessionRecord(
            year=year,
            month=month,
            day=day,
            hour=hour,
            minute=minute,
            patient_id=extract_text(patient_id, strip_leading_nulls=True),
            patient_name=extract_text(patient_name, strip_leading_nulls=True),
            dialyzer_id=extract_text(dialyzer_id),
            volume=volume,
            pass_fail=PassFail.from_flag(prs_flag),
        )

    def iter_records(
        self,
        buffer: BufferLike,
        start: int = 0,
        stop: Optional[int] = None
    ) -> Iterator[SessionRecord]:
        """Lazily decode records ``start`` (inclusive) to ``stop`` (exclusive).

        Parameters:
            buffer: Raw log contents
            start: Index of the first record to decode
            stop: Index after the last record to decode (default: all)

        Yields:
            SessionRecord: Records in file order
        """
        view = memoryview(buffer).cast("B")
        total = self.record_count(len(view))
        stop = total if stop is None else min(stop, total)
        for index in range(start, stop):
            yield self.decode_record(view, index * RECORD_SIZE)

    def decode(self, buffer: BufferLike) -> list[SessionRecord]:
        """Decode every complete record in the buffer.

        Buffers shorter than one record yield an empty list. When more than
        one worker is configured and the buffer holds at least
        ``parallel_threshold`` records, the record range is split into one
        contiguous shard per worker.

        Parameters:
            buffer: Raw log contents

        Returns:
            list[SessionRecord]: Records in file order
        """
        length = len(memoryview(buffer).cast("B"))
        total = self.record_count(length)
        leftover = self.trailing_bytes(length)
        if leftover:
            logger.debug(f"Ignoring {leftover} trailing bytes after {total} records")

        if self.workers == 1 or total < max(self.parallel_threshold, self.workers):
            return list(self.iter_records(buffer))

        return self._decode_sharded(buffer, total)

    def _decode_sharded(self, buffer: BufferLike, total: int) -> list[SessionRecord]:
        shard_size = -(-total // self.workers)
        bounds = [
            (start, min(start + shard_size, total))
            for start in range(0, total, shard_size)
        ]
        logger.debug(f"Decoding {total} records in {len(bounds)} shards")

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="record-decoder") as executor:
            futures = [
                executor.submit(lambda b: list(self.iter_records(buffer, *b)), b)
                for b in bounds
            ]
            records: list[SessionRecord] = []
            for future in futures:
                records.extend(future.result())
        return records


def decode(buffer: BufferLike) -> list[SessionRecord]:
    """Decode a buffer sequentially with the default decoder."""
    return RecordDecoder().decode(buffer)
