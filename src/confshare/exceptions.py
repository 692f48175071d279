"""Exception hierarchy for confshare."""


class ConfShareError(Exception):
    """Base exception for all confshare errors."""


class CodecError(ConfShareError):
    """Raised when properties text cannot be decoded."""


class PersistenceError(ConfShareError):
    """Raised when the backing file cannot be read or written."""


class HostUnavailableError(ConfShareError):
    """Raised by the client when the host cannot be reached or answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
