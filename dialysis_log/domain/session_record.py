"""Session Record Schema Definitions.

This module defines the canonical data models for decoded dialysis session
logs. A ``SessionRecord`` is the typed form of one 88-byte block written by
the dialysis machine; a ``ConversionSession`` groups the records decoded from
one source together with the source filename.

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Models are frozen once constructed
    - Raw date/time components are stored as-is; the device format is trusted
      and values such as month 13 or hour 25 are carried through verbatim
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from dialysis_log.domain.enums import PassFail


class SessionRecord(BaseModel):
    """One decoded dialysis session.

    Parameters:
        year: Raw 16-bit year, no epoch adjustment
        month: Raw month byte (not calendar-validated)
        day: Raw day byte (not calendar-validated)
        hour: Raw hour byte (not range-validated)
        minute: Raw minute byte (not range-validated)
        patient_id: Patient identifier (nominally 10 characters)
        patient_name: Patient name (nominally 30 characters)
        dialyzer_id: Dialyzer identifier (nominally 10 characters)
        volume: Signed 32-bit volume
        pass_fail: Pressure test outcome
    """

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=0, le=0xFFFF, description="Raw year (u16)")
    month: int = Field(..., ge=0, le=0xFF, description="Raw month (u8)")
    day: int = Field(..., ge=0, le=0xFF, description="Raw day (u8)")
    hour: int = Field(..., ge=0, le=0xFF, description="Raw hour (u8)")
    minute: int = Field(..., ge=0, le=0xFF, description="Raw minute (u8)")
    patient_id: str = Field("", max_length=11, description="Patient identifier")
    patient_name: str = Field("", max_length=31, description="Patient name")
    dialyzer_id: str = Field("", max_length=11, description="Dialyzer identifier")
    volume: int = Field(..., ge=-(2 ** 31), le=2 ** 31 - 1, description="Signed 32-bit volume")
    pass_fail: PassFail = Field(..., description="Pressure test outcome")

    @computed_field
    @property
    def date(self) -> str:
        """Session date as ``YYYY-MM-DD``.

        Zero-padding is textual only: a month of 13 is rendered ``13`` and a
        year above 9999 keeps all of its digits.
        """
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @computed_field
    @property
    def time(self) -> str:
        """Session start time as ``HH:MM``."""
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def prs(self) -> str:
        return self.pass_fail.value

    def to_row(self) -> dict:
        """Return the record keyed by export column name."""
        return {
            "date": self.date,
            "time": self.time,
            "patient_id": self.patient_id,
            "patient_name": self.patient_name,
            "dialyzer_id": self.dialyzer_id,
            "volume": self.volume,
            "prs": self.prs,
        }


class ConversionSession(BaseModel):
    """The records decoded from a single source, plus where they came from.

    Replaces any notion of a "currently loaded file": presenters and exporters
    receive this value explicitly.
    """

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description="Original source filename")
    records: tuple[SessionRecord, ...] = Field(default_factory=tuple)
    trailing_bytes: int = Field(0, ge=0, description="Bytes discarded after the last full record")

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def pass_count(self) -> int:
        return sum(1 for record in self.records if record.pass_fail is PassFail.PASS)

    @property
    def fail_count(self) -> int:
        return self.record_count - self.pass_count

    @property
    def is_empty(self) -> bool:
        return not self.records
