"""Set video upload filename value object."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from src.domain.exceptions import (
    InvalidSetVideoFilenameException,
    UnsupportedVideoExtensionException,
)
from src.domain.models.workout_log import ID_PATTERN, VideoFileExtension

_ID_RE = re.compile(ID_PATTERN)

SEGMENT_COUNT = 3


class SetVideoFilename(BaseModel):
    """Value object binding an uploaded file to a set.

    Grammar: ``<exerciseId>.<setId>.<extension>``, exactly three non-empty
    dot-separated segments. The extension is matched case-insensitively.

    Examples:
        >>> name = SetVideoFilename.parse("e1.s1.mp4")
        >>> (name.exercise_id, name.set_id, name.extension.value)
        ('e1', 's1', 'mp4')
    """

    model_config = ConfigDict(frozen=True)

    exercise_id: str = Field(pattern=ID_PATTERN)
    set_id: str = Field(pattern=ID_PATTERN)
    extension: VideoFileExtension

    @classmethod
    def parse(cls, filename: str | None) -> SetVideoFilename:
        """Parse an original upload filename.

        Args:
            filename: Filename as sent by the client.

        Returns:
            The parsed filename.

        Raises:
            InvalidSetVideoFilenameException: If the filename does not follow
                the grammar.
            UnsupportedVideoExtensionException: If the extension is not an
                accepted video format.
        """
        if not filename:
            raise InvalidSetVideoFilenameException("", "Filename cannot be empty")

        segments = filename.split(".")
        if len(segments) != SEGMENT_COUNT:
            raise InvalidSetVideoFilenameException(
                filename,
                f"Expected exerciseId.setId.extension, got {len(segments)} segments",
            )

        exercise_id, set_id, raw_extension = segments
        if not all(segments):
            raise InvalidSetVideoFilenameException(
                filename, "Segments cannot be empty"
            )
        if not _ID_RE.match(exercise_id) or not _ID_RE.match(set_id):
            raise InvalidSetVideoFilenameException(
                filename, "Ids may only contain letters, digits, '_' or '-'"
            )

        try:
            extension = VideoFileExtension(raw_extension.lower())
        except ValueError:
            raise UnsupportedVideoExtensionException(raw_extension) from None

        return cls(exercise_id=exercise_id, set_id=set_id, extension=extension)

    def __str__(self) -> str:
        return f"{self.exercise_id}.{self.set_id}.{self.extension.value}"
