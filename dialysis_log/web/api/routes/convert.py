"""Conversion endpoints for the web API.

The browser flow is: upload a log, look at the decoded table, download the
CSV. Each request decodes the uploaded buffer from scratch; the server keeps
no record of previous uploads.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from fastapi.responses import HTMLResponse, Response
from starlette.concurrency import run_in_threadpool

from dialysis_log.adapters.exporters import CSVExporter
from dialysis_log.adapters.presenters import HTMLTablePresenter
from dialysis_log.adapters.sources import MemoryByteSource
from dialysis_log.domain.ports import SourceTooLargeError
from dialysis_log.domain.session_record import ConversionSession
from dialysis_log.main import failure_message, load_session
from dialysis_log.web.api.dependencies import ConfigDep, DecoderDep
from dialysis_log.web.models.conversion import ConversionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/convert", tags=["convert"])


async def decode_upload(file: UploadFile, config: ConfigDep, decoder: DecoderDep) -> ConversionSession:
    """Read an upload and decode it.

    Raises:
        HTTPException: 413 if the upload exceeds the size limit, 400 if it
        cannot be read
    """
    limit = config.max_file_size
    # One byte past the limit is enough to know it is too large
    data = await file.read(limit + 1)
    await file.close()

    source = MemoryByteSource(data, filename=file.filename or "upload.bin", max_file_size=limit)
    logger.info(f"Received upload {source.name} ({len(data)} bytes)")

    # Decoding is CPU-bound; keep it off the event loop
    result = await run_in_threadpool(load_session, source, decoder)
    if result.is_failure():
        code = (
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
            if result.error_type == SourceTooLargeError.__name__
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code=code, detail=failure_message(result))
    return result.value


@router.post("", response_model=ConversionResponse)
async def convert(config: ConfigDep, decoder: DecoderDep, file: UploadFile = File(...)) -> ConversionResponse:
    """Decode an uploaded log and return its records as JSON."""
    session = await decode_upload(file, config, decoder)
    return ConversionResponse.from_session(session, CSVExporter.export_filename(session.filename))


@router.post("/csv")
async def convert_csv(config: ConfigDep, decoder: DecoderDep, file: UploadFile = File(...)) -> Response:
    """Decode an uploaded log and return it as a CSV download."""
    session = await decode_upload(file, config, decoder)
    exporter = CSVExporter(quoting=config.csv_quoting)
    filename = exporter.export_filename(session.filename).replace('"', "")
    return Response(
        content=exporter.render(session).encode(exporter.encoding),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/table", response_class=HTMLResponse)
async def convert_table(config: ConfigDep, decoder: DecoderDep, file: UploadFile = File(...)) -> HTMLResponse:
    """Decode an uploaded log and return it as an HTML table."""
    session = await decode_upload(file, config, decoder)
    return HTMLResponse(content=HTMLTablePresenter().render(session))
