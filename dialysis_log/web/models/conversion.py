"""Conversion response models for the web API."""

from typing import Literal

from pydantic import BaseModel, Field

from dialysis_log.domain.session_record import ConversionSession, SessionRecord


class RecordRow(BaseModel):
    """One decoded record as returned to the browser.

    Attributes:
        date: Session date (YYYY-MM-DD)
        time: Session time (HH:MM)
        patient_id: Patient identifier
        patient_name: Patient name
        dialyzer_id: Dialyzer identifier
        volume: Volume
        prs: Pressure test outcome, P or F
    """
    date: str
    time: str
    patient_id: str
    patient_name: str
    dialyzer_id: str
    volume: int
    prs: Literal["P", "F"]

    @classmethod
    def from_record(cls, record: SessionRecord) -> "RecordRow":
        return cls(**record.to_row())


class ConversionResponse(BaseModel):
    """Decoded upload.

    Attributes:
        filename: Uploaded filename
        record_count: Number of decoded records
        pass_count: Records whose pressure test passed
        fail_count: Records whose pressure test failed
        trailing_bytes: Bytes ignored after the last full record
        export_filename: Name the CSV download will use
        records: Records in file order
    """
    filename: str
    record_count: int = Field(..., ge=0)
    pass_count: int = Field(..., ge=0)
    fail_count: int = Field(..., ge=0)
    trailing_bytes: int = Field(0, ge=0)
    export_filename: str
    records: list[RecordRow] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: ConversionSession, export_filename: str) -> "ConversionResponse":
        return cls(
            filename=session.filename,
            record_count=session.record_count,
            pass_count=session.pass_count,
            fail_count=session.fail_count,
            trailing_bytes=session.trailing_bytes,
            export_filename=export_filename,
            records=[RecordRow.from_record(record) for record in session.records],
        )
