"""Tests for ByteRange parsing."""

import pytest

from domain.exceptions import RangeNotSatisfiableError
from domain.value_objects.byte_range import ByteRange


class TestByteRangeParse:
    def test_closed_range(self) -> None:
        byte_range = ByteRange.parse("bytes=1-3", 5)

        assert (byte_range.start, byte_range.end) == (1, 3)
        assert byte_range.length == 3
        assert byte_range.content_range(5) == "bytes 1-3/5"

    def test_open_ended_range_runs_to_last_byte(self) -> None:
        byte_range = ByteRange.parse("bytes=2-", 5)

        assert (byte_range.start, byte_range.end) == (2, 4)

    def test_suffix_range(self) -> None:
        byte_range = ByteRange.parse("bytes=-2", 5)

        assert (byte_range.start, byte_range.end) == (3, 4)

    def test_suffix_longer_than_object_covers_everything(self) -> None:
        byte_range = ByteRange.parse("bytes=-100", 5)

        assert (byte_range.start, byte_range.end) == (0, 4)

    def test_end_is_clamped(self) -> None:
        byte_range = ByteRange.parse("bytes=3-999", 5)

        assert byte_range.end == 4
        assert byte_range.length == 2

    def test_single_byte(self) -> None:
        assert ByteRange.parse("bytes=0-0", 5).length == 1

    def test_whitespace_and_unit_case_tolerated(self) -> None:
        byte_range = ByteRange.parse("  Bytes= 1 - 2 ", 5)

        assert (byte_range.start, byte_range.end) == (1, 2)

    @pytest.mark.parametrize(
        "header",
        [
            "items=0-1",
            "bytes=",
            "bytes=-",
            "bytes=abc",
            "bytes=0-1,3-4",
            "bytes=3-1",
            "bytes=5-",
            "bytes=9-10",
            "bytes=-0",
        ],
    )
    def test_unsatisfiable(self, header) -> None:
        with pytest.raises(RangeNotSatisfiableError):
            ByteRange.parse(header, 5)

    def test_any_range_on_empty_object_is_unsatisfiable(self) -> None:
        with pytest.raises(RangeNotSatisfiableError):
            ByteRange.parse("bytes=-1", 0)
        with pytest.raises(RangeNotSatisfiableError):
            ByteRange.parse("bytes=0-", 0)


class TestByteRangeBounds:
    def test_check_within(self) -> None:
        ByteRange(start=0, end=4).check_within(5)
        with pytest.raises(RangeNotSatisfiableError):
            ByteRange(start=0, end=5).check_within(5)

    def test_invalid_window_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid byte range"):
            ByteRange(start=3, end=1)
