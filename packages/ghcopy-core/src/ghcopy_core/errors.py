"""Error taxonomy shared by every ghcopy component."""

from __future__ import annotations

from pathlib import Path


class GhCopyError(Exception):
    """Base class for all ghcopy failures.

    ``retryable`` tells the fetcher whether repeating the same single
    request could succeed.
    """

    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidUrlError(GhCopyError):
    """Malformed or unsupported source URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class NetworkError(GhCopyError):
    """Transport failure or unusable HTTP response.

    ``status`` is None for transport-level failures (connect, TLS, reset,
    timeout), which are always retryable.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        status_line: str | None = None,
        location: str | None = None,
        retryable: bool | None = None,
    ) -> None:
        self.status = status
        self.status_line = status_line
        self.location = location
        self._retryable = retryable
        super().__init__(message)

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        if self._retryable is not None:
            return self._retryable
        if self.status is None:
            return True
        return self.status >= 500 or self.status == 429


class HttpStatusError(NetworkError):
    """A non-2xx status line was received."""

    def __init__(
        self, status: int, status_line: str, *, location: str | None = None
    ) -> None:
        super().__init__(
            f"HTTP request failed: {status_line}",
            status=status,
            status_line=status_line,
            location=location,
        )


class RateLimitError(HttpStatusError):
    """API rate limit exhausted (HTTP 429)."""


class AuthenticationError(HttpStatusError):
    """Credentials missing, invalid or insufficient (HTTP 401/403)."""


class ParseError(GhCopyError):
    """Malformed base64, chunk-size line, or JSON fragment."""


class UnsupportedOperationError(GhCopyError):
    """The resource kind is outside what ghcopy handles (whole repositories)."""


class InvalidOperationError(GhCopyError):
    """An operation was called with a descriptor of the wrong kind."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


class NotFoundError(GhCopyError):
    """A local path does not exist."""


class PermissionDeniedError(GhCopyError):
    """A local path cannot be read or written."""


class FileConflictError(GhCopyError):
    """Destination exists and strict mode forbids auto-renaming."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Destination already exists: {self.path}")


def status_error(
    status: int, status_line: str, *, location: str | None = None
) -> HttpStatusError:
    """Build the most specific HttpStatusError subclass for *status*."""
    if status == 429:
        return RateLimitError(status, status_line, location=location)
    if status in (401, 403):
        return AuthenticationError(status, status_line, location=location)
    return HttpStatusError(status, status_line, location=location)


def from_os_error(exc: OSError, path: Path | str | None = None) -> GhCopyError:
    """Map a filesystem failure onto the ghcopy taxonomy."""
    where = f"{path}: " if path is not None else ""
    if isinstance(exc, FileExistsError):
        return FileConflictError(path if path is not None else exc.filename or "")
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(f"{where}{exc.strerror or exc}")
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(f"{where}{exc.strerror or exc}")
    return GhCopyError(f"{where}{exc}")
