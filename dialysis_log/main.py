"""Conversion pipeline for dialysis session logs.

This module wires byte sources, the record decoder and the CSV exporter
together. The CLI and the web API both go through these functions.

Architecture:
    - Follows Hexagonal Architecture principles
    - Every run produces an explicit ConversionSession; nothing is kept in
      module state between calls
    - Failures are returned as Result objects carrying one human-readable
      message
"""

import logging
from pathlib import Path
from typing import Optional, Union

from dialysis_log.adapters.exporters import CSVExporter
from dialysis_log.adapters.sources import get_source
from dialysis_log.domain.decoder import RecordDecoder
from dialysis_log.domain.enums import CSVQuoting
from dialysis_log.domain.ports import (
    ByteSourcePort,
    ConversionError,
    ExportError,
    FormatError,
    Result,
)
from dialysis_log.domain.session_record import ConversionSession
from dialysis_log.infrastructure.config_manager import ConverterConfig
from dialysis_log.infrastructure.settings import settings

logger = logging.getLogger(__name__)


def create_decoder(config: Optional[ConverterConfig] = None) -> RecordDecoder:
    """Create a record decoder from configuration."""
    config = config or settings.converter
    return RecordDecoder(workers=config.decode_workers, parallel_threshold=config.parallel_threshold)


def failure_message(result: Result) -> str:
    """Message shown to the user for a failed result."""
    return f"Failed to parse file: {result.error}"


def load_session(
    source: ByteSourcePort,
    decoder: Optional[RecordDecoder] = None
) -> Result[ConversionSession]:
    """Read a byte source and decode it into a session.

    Parameters:
        source: Byte source adapter
        decoder: Decoder to use (default: configured from settings)

    Returns:
        Result[ConversionSession]: The session, or a failure if the source
        could not be read. A buffer shorter than one record is a successful,
        empty session.
    """
    decoder = decoder or create_decoder()

    try:
        buffer = source.read()
    except FormatError as e:
        logger.error(f"Failed to read source '{source.name}': {str(e)}")
        return Result.failure_result(e, error_details={"source": e.source or source.name})

    records = decoder.decode(buffer)
    session = ConversionSession(
        filename=source.name,
        records=tuple(records),
        trailing_bytes=decoder.trailing_bytes(len(buffer)),
    )

    logger.info(
        f"Decoded {session.record_count} records from {session.filename} "
        f"({session.pass_count} pass, {session.fail_count} fail)",
        extra={"extra_fields": {
            "source": session.filename,
            "record_count": session.record_count,
            "trailing_bytes": session.trailing_bytes,
        }}
    )
    if session.trailing_bytes:
        logger.info(f"Dropped {session.trailing_bytes} trailing bytes from {session.filename}")

    return Result.success_result(session)


def export_session(
    session: ConversionSession,
    output_dir: Union[str, Path],
    quoting: Optional[Union[CSVQuoting, str]] = None
) -> Result[Path]:
    """Write a session as CSV into output_dir.

    Parameters:
        session: Decoded session
        output_dir: Destination directory
        quoting: CSV quoting mode (default: from settings)

    Returns:
        Result[Path]: Path of the written file, or a failure
    """
    exporter = CSVExporter(quoting=quoting or settings.converter.csv_quoting)
    try:
        return Result.success_result(exporter.write(session, output_dir))
    except ExportError as e:
        logger.error(f"Failed to export {session.filename}: {str(e)}")
        return Result.failure_result(e, error_details={"destination": e.destination})


def convert_file(
    path: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None,
    quoting: Optional[Union[CSVQuoting, str]] = None
) -> Result[Path]:
    """Decode a log file and write its CSV.

    Parameters:
        path: Log file
        output_dir: Destination directory (default: DL_OUTPUT_DIR, else the
                    log file's directory)
        quoting: CSV quoting mode (default: from settings)

    Returns:
        Result[Path]: Path of the written CSV, or a failure
    """
    config = settings.converter
    try:
        source = get_source(path, max_file_size=config.max_file_size)
    except ConversionError as e:
        logger.error(f"Failed to open source '{path}': {str(e)}")
        return Result.failure_result(e, error_details={"source": str(path)})

    session_result = load_session(source, create_decoder(config))
    if session_result.is_failure():
        return session_result

    destination = output_dir or config.output_dir or Path(path).parent
    return export_session(session_result.value, destination, quoting=quoting)


def main() -> None:
    """Console entry point."""
    from dialysis_log.cli import app
    app()


if __name__ == "__main__":
    main()
