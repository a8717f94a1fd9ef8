"""Domain enumerations for dialysis session records."""

from enum import Enum


class PassFail(str, Enum):
    """Pressure test outcome recorded by the dialysis machine.

    The device stores this as a single sentinel byte: only 0xFF means the
    test passed, every other value is a failure.
    """
    PASS = "P"
    FAIL = "F"

    @classmethod
    def from_flag(cls, flag: int) -> "PassFail":
        """Map the raw sentinel byte to an outcome."""
        return cls.PASS if flag == 0xFF else cls.FAIL


class CSVQuoting(str, Enum):
    """Field quoting modes for CSV export."""
    NONE = "none"
    MINIMAL = "minimal"
