from enum import Enum
from typing import Optional


class Severity(Enum):
    INFO = "INFO"
    WARN = "WARN"
    RETRY = "RETRY"
    ABORT = "ABORT"


class ErrorKind(Enum):
    HTTP = "HTTP"
    URL = "URL"
    OBSERVER = "OBSERVER"
    CONFIG = "CONFIG"
    UNKNOWN = "UNKNOWN"


class AppError(Exception):
    """
    Domain-specific error that carries severity + classification metadata so
    callers can decide how to recover.
    """

    def __init__(
        self,
        message: str,
        severity: Severity = Severity.WARN,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.severity = severity
        self.kind = kind
        self.original_exception = original_exception

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.severity.name}/{self.kind.name}] {base}"


class InvalidURLError(AppError):
    """
    Raised when a path cannot be resolved into an absolute URL. This is a
    programming error on the caller's side and is never retried.
    """

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(message, Severity.ABORT, ErrorKind.URL, original_exception=original_exception)


class ObserverError(AppError):
    """
    Raised when a passthrough observer hook fails while a dispatch is being set up.
    """

    def __init__(self, hook: str, original_exception: Exception):
        super().__init__(
            f"Observer hook '{hook}' failed: {original_exception}",
            Severity.ABORT,
            ErrorKind.OBSERVER,
            original_exception=original_exception,
        )
        self.hook = hook
