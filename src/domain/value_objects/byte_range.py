"""HTTP byte range value object."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from src.domain.exceptions import InvalidByteRangeException

# Single range with a required start: bytes=<start>-[<end>]
RANGE_HEADER_PATTERN = re.compile(r"^bytes=(\d+)-(\d*)$")


class ByteRange(BaseModel):
    """Inclusive byte interval of an object of known size."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    total_size: int = Field(gt=0)

    @classmethod
    def from_header(cls, header: str, total_size: int) -> ByteRange:
        """Parse a Range request header against an object size.

        A missing end means "to the last byte"; an end past the object is
        clamped to the last byte.

        Raises:
            InvalidByteRangeException: If the header is malformed, uses a
                suffix or multi-range form, or starts past the object.
        """
        match = RANGE_HEADER_PATTERN.match(header.strip())
        if match is None or total_size <= 0:
            raise InvalidByteRangeException(header, total_size)

        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else total_size - 1
        end = min(end, total_size - 1)

        if start > end:
            raise InvalidByteRangeException(header, total_size)

        return cls(start=start, end=end, total_size=total_size)

    @property
    def length(self) -> int:
        """Number of bytes in the range."""
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        """Value of the Content-Range response header."""
        return f"bytes {self.start}-{self.end}/{self.total_size}"
