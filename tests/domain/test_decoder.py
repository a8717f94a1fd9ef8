"""Unit tests for the binary session record decoder.

Tests cover:
- Record counting and trailing byte handling
- Field offsets, endianness and sign handling
- Text field extraction (leading NULs, termination, trimming, high bytes)
- Pass/fail sentinel
- Sharded decoding
"""

import struct

import pytest

from dialysis_log.domain.decoder import (
    RECORD_SIZE,
    RECORD_STRUCT,
    RecordDecoder,
    decode,
    extract_text,
)
from dialysis_log.domain.enums import PassFail


class TestRecordLayout:
    """Test the packed layout constants."""

    def test_struct_matches_record_size(self):
        """The struct format covers exactly one 88-byte record."""
        assert RECORD_STRUCT.size == RECORD_SIZE == 88


class TestRecordCount:
    """Test how many records a buffer yields."""

    @pytest.mark.parametrize("length", [0, 1, 50, 87])
    def test_short_buffers_yield_no_records(self, length):
        """Buffers shorter than one record are an empty success."""
        assert decode(b"\x00" * length) == []

    def test_exact_multiple(self, record_bytes):
        """176 bytes decode to exactly two records."""
        buffer = record_bytes() * 2
        assert len(buffer) == 176
        assert len(decode(buffer)) == 2

    def test_trailing_bytes_are_dropped(self, record_bytes):
        """A partial trailing record is discarded without error."""
        buffer = record_bytes() * 3 + b"\xff" * 40
        records = decode(buffer)
        assert len(records) == 3
        assert RecordDecoder.trailing_bytes(len(buffer)) == 40

    @pytest.mark.parametrize("length", [0, 87, 88, 89, 175, 176, 880, 1000])
    def test_count_is_floor_division(self, length):
        """record_count is floor(length / 88) and matches the decoded list."""
        assert RecordDecoder.record_count(length) == length // 88
        assert len(decode(bytes(length))) == length // 88

    def test_accepts_bytearray_and_memoryview(self, record_bytes):
        """Any bytes-like buffer can be decoded."""
        raw = record_bytes() * 2
        assert decode(bytearray(raw)) == decode(raw)
        assert decode(memoryview(raw)) == decode(raw)


class TestDateTimeFields:
    """Test date and time decoding and formatting."""

    def test_date_and_time_formatting(self, record_bytes):
        """day=5, month=3, year=2024, hour=9, minute=7 -> 2024-03-05 09:07."""
        record = decode(record_bytes(day=5, month=3, year=2024, hour=9, minute=7))[0]
        assert record.date == "2024-03-05"
        assert record.time == "09:07"

    def test_year_is_little_endian(self, record_bytes):
        """Year bytes E8 07 decode to 2024."""
        raw = bytearray(record_bytes())
        raw[2:4] = b"\xe8\x07"
        assert decode(bytes(raw))[0].year == 2024

    def test_out_of_range_values_are_not_validated(self, record_bytes):
        """Month 13, day 0 and hour 25 are emitted verbatim."""
        record = decode(record_bytes(day=0, month=13, year=7, hour=25, minute=99))[0]
        assert record.date == "0007-13-00"
        assert record.time == "25:99"

    def test_large_values_keep_all_digits(self, record_bytes):
        """Padding is a minimum width, not a truncation."""
        record = decode(record_bytes(day=255, month=200, year=65535, hour=255, minute=255))[0]
        assert record.date == "65535-200-255"
        assert record.time == "255:255"


class TestTextFields:
    """Test fixed-width text extraction."""

    def test_patient_id_strips_all_leading_nulls(self, record_bytes):
        """[0,0,'4','2',0,...] as patient_id decodes to '42'."""
        record = decode(record_bytes(patient_id=b"\x00\x0042"))[0]
        assert record.patient_id == "42"

    def test_dialyzer_id_does_not_strip_leading_nulls(self, record_bytes):
        """The same bytes as dialyzer_id decode to an empty string."""
        record = decode(record_bytes(dialyzer_id=b"\x00\x0042"))[0]
        assert record.dialyzer_id == ""

    def test_patient_name_strips_leading_nulls(self, record_bytes):
        """Names are stored after a leading NUL."""
        record = decode(record_bytes(patient_name=b"\x00\x00\x00MARIA GARCIA"))[0]
        assert record.patient_name == "MARIA GARCIA"

    def test_text_stops_at_first_null(self, record_bytes):
        """Bytes after the terminator are ignored."""
        record = decode(record_bytes(patient_name=b"\x00ANNA\x00GARBAGE", dialyzer_id=b"DZ\x00XYZ"))[0]
        assert record.patient_name == "ANNA"
        assert record.dialyzer_id == "DZ"

    def test_all_zero_fields_are_empty(self, record_bytes):
        """A field of only zero bytes decodes to an empty string."""
        record = decode(record_bytes(patient_id=b"", patient_name=b"", dialyzer_id=b""))[0]
        assert record.patient_id == ""
        assert record.patient_name == ""
        assert record.dialyzer_id == ""

    def test_surrounding_whitespace_is_trimmed(self, record_bytes):
        """Space padding around values is removed."""
        record = decode(record_bytes(patient_id=b"\x00  77  ", patient_name=b"\x00\tJO ANN \r\n"))[0]
        assert record.patient_id == "77"
        assert record.patient_name == "JO ANN"

    def test_full_width_field_without_terminator(self, record_bytes):
        """An unterminated 11-byte field is read to the end of the field."""
        record = decode(record_bytes(patient_id=b"ABCDEFGHIJK", dialyzer_id=b"12345678901"))[0]
        assert record.patient_id == "ABCDEFGHIJK"
        assert record.dialyzer_id == "12345678901"

    def test_fields_do_not_bleed_into_neighbours(self, record_bytes):
        """A full patient_id does not pick up patient_name bytes."""
        record = decode(record_bytes(patient_id=b"ABCDEFGHIJK", patient_name=b"ZED"))[0]
        assert record.patient_id == "ABCDEFGHIJK"
        assert record.patient_name == "ZED"

    def test_high_bytes_map_to_same_code_point(self, record_bytes):
        """Byte 0xE9 becomes U+00E9, never a multi-byte decode."""
        record = decode(record_bytes(patient_name=b"\x00REN\xc9E \xc3\xa9"))[0]
        assert record.patient_name == "RENÉE Ã©"

    def test_extract_text_whitespace_set(self):
        """NBSP is trimmed; 0x1C-0x1F and 0x85 are kept."""
        assert extract_text(b"\xa0AB\xa0") == "AB"
        assert extract_text(b"\x1fAB\x85") == "\x1fAB\x85"

    def test_extract_text_leading_null_option(self):
        """Only the strip_leading_nulls variant skips leading zero bytes."""
        assert extract_text(b"\x00\x00X\x00", strip_leading_nulls=True) == "X"
        assert extract_text(b"\x00\x00X\x00") == ""


class TestVolumeField:
    """Test signed little-endian volume decoding."""

    def test_volume_one(self, record_bytes):
        """01 00 00 00 decodes to 1."""
        raw = bytearray(record_bytes())
        raw[60:64] = b"\x01\x00\x00\x00"
        assert decode(bytes(raw))[0].volume == 1

    def test_volume_minus_one(self, record_bytes):
        """FF FF FF FF decodes to -1."""
        raw = bytearray(record_bytes())
        raw[60:64] = b"\xff\xff\xff\xff"
        assert decode(bytes(raw))[0].volume == -1

    @pytest.mark.parametrize("volume", [-(2 ** 31), -1, 0, 2500, 2 ** 31 - 1])
    def test_volume_extremes(self, record_bytes, volume):
        assert decode(record_bytes(volume=volume))[0].volume == volume


class TestPassFailField:
    """Test the pass/fail sentinel byte."""

    @pytest.mark.parametrize(
        "flag, expected",
        [
            (0xFF, PassFail.PASS),
            (0x00, PassFail.FAIL),
            (0xFE, PassFail.FAIL),
            (0x01, PassFail.FAIL),
            (0x7F, PassFail.FAIL),
        ],
    )
    def test_only_ff_passes(self, record_bytes, flag, expected):
        assert decode(record_bytes(prs=flag))[0].pass_fail is expected

    def test_every_other_byte_fails(self):
        """All 255 non-0xFF values map to FAIL."""
        assert all(PassFail.from_flag(flag) is PassFail.FAIL for flag in range(0xFF))


class TestIgnoredBytes:
    """Test that reserved and padding bytes do not affect the record."""

    def test_reserved_and_padding_bytes_ignored(self, record_bytes):
        baseline = decode(record_bytes())[0]
        raw = bytearray(record_bytes())
        raw[59] = 0xAB
        raw[65:88] = b"\xcd" * 23
        assert decode(bytes(raw))[0] == baseline


class TestRecordIndependence:
    """Test that records decode independently and in file order."""

    def test_mutating_second_record_leaves_first_unchanged(self, record_bytes):
        buffer = bytearray(record_bytes() * 2)
        first_before = decode(bytes(buffer))[0]
        for offset in range(RECORD_SIZE, 2 * RECORD_SIZE):
            buffer[offset] ^= 0x5A
        records = decode(bytes(buffer))
        assert records[0] == first_before
        assert records[1] != first_before

    def test_output_follows_file_order(self, record_bytes):
        buffer = b"".join(record_bytes(volume=index) for index in range(10))
        assert [record.volume for record in decode(buffer)] == list(range(10))

    def test_iter_records_is_lazy_and_bounded(self, record_bytes):
        buffer = b"".join(record_bytes(volume=index) for index in range(5))
        decoder = RecordDecoder()
        assert [r.volume for r in decoder.iter_records(buffer, start=1, stop=3)] == [1, 2]
        assert [r.volume for r in decoder.iter_records(buffer, start=3, stop=99)] == [3, 4]

    def test_decode_record_at_offset(self, record_bytes):
        buffer = record_bytes(volume=1) + record_bytes(volume=2)
        assert RecordDecoder.decode_record(buffer, RECORD_SIZE).volume == 2


class TestShardedDecode:
    """Test decoding split across worker threads."""

    def test_sharded_matches_sequential(self, record_bytes):
        buffer = b"".join(
            record_bytes(volume=index, prs=0xFF if index % 3 else 0x00) for index in range(103)
        ) + b"\x01\x02"
        sequential = RecordDecoder().decode(buffer)
        sharded = RecordDecoder(workers=4, parallel_threshold=10).decode(buffer)
        assert sharded == sequential
        assert [r.volume for r in sharded] == list(range(103))

    def test_below_threshold_decodes_sequentially(self, record_bytes):
        decoder = RecordDecoder(workers=4, parallel_threshold=1000)
        assert len(decoder.decode(record_bytes() * 5)) == 5

    def test_more_workers_than_records(self, record_bytes):
        decoder = RecordDecoder(workers=8, parallel_threshold=1)
        assert [r.volume for r in decoder.decode(record_bytes(volume=1) + record_bytes(volume=2))] == [1, 2]

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            RecordDecoder(workers=0)


class TestTotalDecoding:
    """Every byte pattern decodes to some record."""

    @pytest.mark.parametrize("fill", [0x00, 0x20, 0x7F, 0x80, 0xA0, 0xFF])
    def test_uniform_buffers_decode(self, fill):
        records = decode(bytes([fill]) * RECORD_SIZE)
        assert len(records) == 1

    def test_every_byte_value_in_every_position(self):
        buffer = b"".join(bytes([value]) * RECORD_SIZE for value in range(256))
        records = decode(buffer)
        assert len(records) == 256
        assert records[0xFF].pass_fail is PassFail.PASS
        assert records[0xFF].volume == -1
        assert records[0x01].year == struct.unpack("<H", b"\x01\x01")[0]
