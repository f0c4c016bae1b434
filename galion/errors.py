# Galion Errors
# Exception hierarchy shared by the rclone client, the job tracker and the UI


class GalionError(Exception):
    """Base exception for galion errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} - caused by: {self.cause}"
        return self.message


class ConfigError(GalionError):
    """Raised when the configuration file cannot be read or is invalid."""


class PersistenceError(GalionError):
    """Raised when the remote list cannot be written back to disk."""


class RcloneError(GalionError):
    """
    Transport level failure talking to rclone.

    Covers connection errors and rc error responses. Treated as transient
    by the job tracker while polling.
    """

    def __init__(self, message: str, status: int | None = None, cause: Exception | None = None):
        self.status = status
        super().__init__(message, cause)


class RcloneDecodeError(GalionError):
    """Raised when rclone answers with a payload that cannot be decoded."""


class StatusDecodeError(RcloneDecodeError):
    """Raised when a job status payload is malformed."""


class TrackerError(GalionError):
    """Raised when the job tracker worker stopped with an error."""
