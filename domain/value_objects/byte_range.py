from __future__ import annotations

import re

from pydantic import BaseModel, model_validator

from domain.exceptions import RangeNotSatisfiableError

_RANGE_SPEC = re.compile(r"\s*(\d*)\s*-\s*(\d*)\s*", re.ASCII)


class ByteRange(BaseModel):
    """Inclusive byte window ``[start, end]`` within a blob."""

    model_config = {"frozen": True}

    start: int
    end: int

    @model_validator(mode="after")
    def _check_bounds(self) -> ByteRange:
        if self.start < 0 or self.end < self.start:
            msg = f"Invalid byte range {self.start}-{self.end}"
            raise ValueError(msg)
        return self

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, total_size: int) -> str:
        return f"bytes {self.start}-{self.end}/{total_size}"

    def check_within(self, total_size: int) -> None:
        if self.end >= total_size:
            msg = f"Range {self.start}-{self.end} exceeds object length {total_size}"
            raise RangeNotSatisfiableError(msg)

    @classmethod
    def parse(cls, header_value: str, total_size: int) -> ByteRange:
        """Parse a single-range ``Range`` header against an object of ``total_size`` bytes.

        Accepts ``bytes=start-end``, ``bytes=start-`` and the suffix form
        ``bytes=-length``. The end offset is clamped to the last byte.

        Raises:
            RangeNotSatisfiableError: If the header is malformed, names several
                ranges, or starts beyond the end of the object.

        """
        value = header_value.strip()
        if not value.lower().startswith("bytes="):
            msg = "Range unit must be bytes"
            raise RangeNotSatisfiableError(msg)
        value = value[6:].strip()
        if "," in value:
            msg = "Multiple ranges are not supported"
            raise RangeNotSatisfiableError(msg)
        match = _RANGE_SPEC.fullmatch(value)
        if match is None:
            msg = f"Malformed range {value!r}"
            raise RangeNotSatisfiableError(msg)

        start_str, end_str = match.groups()
        if not start_str and not end_str:
            msg = "Empty range"
            raise RangeNotSatisfiableError(msg)

        if not start_str:
            # suffix form: last N bytes
            suffix = int(end_str)
            if suffix <= 0 or total_size == 0:
                msg = "Suffix range is not satisfiable"
                raise RangeNotSatisfiableError(msg)
            return cls(start=max(total_size - suffix, 0), end=total_size - 1)

        start = int(start_str)
        if start >= total_size:
            msg = f"Range start {start} is beyond object length {total_size}"
            raise RangeNotSatisfiableError(msg)

        if end_str:
            end = int(end_str)
            if end < start:
                msg = f"Range end {end} is before start {start}"
                raise RangeNotSatisfiableError(msg)
            end = min(end, total_size - 1)
        else:
            end = total_size - 1
        return cls(start=start, end=end)
