"""Domain exceptions for the workout logger."""


class DomainException(Exception):
    """Base exception for domain errors."""


class AuthenticationException(DomainException):
    """Raised when a request carries no valid session."""

    def __init__(self, reason: str = "Authentication required") -> None:
        self.reason = reason
        super().__init__(reason)


class WorkoutLogNotFoundException(DomainException):
    """Raised when a workout log does not exist for the requesting user."""

    def __init__(self, workout_log_id: str) -> None:
        self.workout_log_id = workout_log_id
        super().__init__(f"Workout log not found: {workout_log_id}")


class WorkoutLogValidationException(DomainException):
    """Raised when a workout log payload fails validation.

    Carries the dotted path of the first offending field so the API can
    answer with a ``{field, error}`` body.
    """

    def __init__(self, field: str, error: str) -> None:
        self.field = field
        self.error = error
        super().__init__(f"{field}: {error}")


class SetNotFoundException(DomainException):
    """Raised when an exercise/set combination is absent from a log."""

    def __init__(self, exercise_id: str, set_id: str) -> None:
        self.exercise_id = exercise_id
        self.set_id = set_id
        super().__init__(f"Set not found: exercise={exercise_id} set={set_id}")


class InvalidSetVideoFilenameException(DomainException):
    """Raised when an upload filename does not follow exercise.set.extension."""

    def __init__(self, filename: str, reason: str = "Invalid filename") -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Invalid set video filename '{filename}': {reason}")


class UnsupportedVideoExtensionException(DomainException):
    """Raised when an uploaded video has an extension outside the allowed set."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"Unsupported video extension: '{extension}'")


class InvalidSetVideoUploadException(DomainException):
    """Raised when an upload batch cannot be applied to a workout log."""

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Cannot upload '{filename}': {reason}")


class InvalidByteRangeException(DomainException):
    """Raised when a Range header cannot be satisfied for an object."""

    def __init__(self, header: str, total_size: int) -> None:
        self.header = header
        self.total_size = total_size
        super().__init__(f"Range '{header}' not satisfiable for {total_size} bytes")
