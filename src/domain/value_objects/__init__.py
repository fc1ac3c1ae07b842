"""Domain value objects."""

from src.domain.value_objects.byte_range import ByteRange
from src.domain.value_objects.set_video_filename import SetVideoFilename

__all__ = [
    "ByteRange",
    "SetVideoFilename",
]
