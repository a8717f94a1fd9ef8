"""Shared fixtures for building session log buffers."""

import struct

import pytest

RECORD_SIZE = 88


def pack_field(value, width: int) -> bytes:
    """Pack text (str or bytes) into a NUL-padded fixed-width field."""
    raw = value.encode("latin-1") if isinstance(value, str) else bytes(value)
    assert len(raw) <= width, f"{raw!r} does not fit in {width} bytes"
    return raw.ljust(width, b"\x00")


def build_record(
    day: int = 5,
    month: int = 3,
    year: int = 2024,
    hour: int = 9,
    minute: int = 7,
    patient_id=b"\x00P001",
    patient_name=b"\x00JANE DOE",
    dialyzer_id=b"DZ-100",
    volume: int = 1500,
    prs: int = 0xFF,
) -> bytes:
    """Build one 88-byte record the way the dialysis machine lays it out."""
    block = (
        struct.pack("<BBHBB", day, month, year, hour, minute)
        + pack_field(patient_id, 11)
        + pack_field(patient_name, 31)
        + pack_field(dialyzer_id, 11)
        + b"\x00"
        + struct.pack("<i", volume)
        + bytes([prs])
        + b"\x00" * 23
    )
    assert len(block) == RECORD_SIZE
    return block


@pytest.fixture
def record_bytes():
    """Factory fixture returning a single encoded record."""
    return build_record


@pytest.fixture
def sample_log() -> bytes:
    """Three records: pass, fail, pass."""
    return (
        build_record()
        + build_record(
            day=28, month=2, year=2023, hour=14, minute=30,
            patient_id=b"\x00\x00P002", patient_name=b"\x00JOHN SMITH",
            dialyzer_id=b"DZ-200", volume=-250, prs=0x00,
        )
        + build_record(
            day=1, month=1, year=2025, hour=0, minute=0,
            patient_id=b"P003", patient_name=b"ANA LOPEZ",
            dialyzer_id=b"DZ-300", volume=0, prs=0xFF,
        )
    )


@pytest.fixture
def sample_log_file(tmp_path, sample_log):
    """Write the sample log to disk and return its path."""
    path = tmp_path / "DIAL0001.BIN"
    path.write_bytes(sample_log)
    return path


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against default converter configuration."""
    from dialysis_log.infrastructure.settings import settings

    for name in ("DL_MAX_FILE_SIZE", "DL_DECODE_WORKERS", "DL_PARALLEL_THRESHOLD",
                 "DL_CSV_QUOTING", "DL_OUTPUT_DIR"):
        monkeypatch.delenv(name, raising=False)
    settings.reload()
    yield settings
    settings.reload()
