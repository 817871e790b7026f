"""
Exception types raised by uvup.

Every error derives from :class:`UvUpError` and carries a ``details``
mapping holding the context known where it was raised: the manifest, URL,
configuration option or file operation. ``str(exc)`` appends that context,
so console messages and log records need no extra formatting.

Only a few of these ever reach the operator. Resolution failures are
turned into "not found" by the resolver, and unreadable manifests become
skip reasons during discovery.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

MAX_RESPONSE_PREVIEW = 200


class UvUpError(Exception):
    """Base class for uvup errors.

    Args:
        message: Human-readable error message.
        details: Structured context describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def _record(self, **context: Any) -> None:
        """Copy every non-``None`` keyword into ``details``."""
        self.details.update(
            (key, value) for key, value in context.items() if value is not None
        )

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


class ManifestError(UvUpError):
    """A ``pyproject.toml`` could not be read, decoded or used.

    ``message`` is short enough to serve as the skip reason shown before
    the session starts.
    """

    __slots__ = ("file_path",)

    def __init__(self, message: str, *, file_path: Optional[str] = None) -> None:
        super().__init__(message)
        self.file_path = file_path
        self._record(file=file_path)


class ConfigError(UvUpError):
    """The configuration file is missing, malformed or holds a bad value.

    Args:
        message: Error description.
        config_path: Configuration file involved.
        option: Offending option, when a single one is to blame.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.config_path = config_path
        self.option = option
        self._record(config=config_path, option=option)


class NetworkError(UvUpError):
    """A registry request failed or returned an unusable response.

    Args:
        message: Error description.
        url: Requested URL.
        status_code: HTTP status, when a response arrived.
        response_body: Raw body; only a preview goes into ``details``.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.response_body = response_body
        self._record(
            url=url,
            status_code=status_code,
            response=_preview(response_body),
        )


class PyPIError(NetworkError):
    """PyPI answered, but not with the package data asked for (e.g. 404)."""

    __slots__ = ("package_name",)

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.package_name = package_name
        self._record(package=package_name)


class FileOperationError(UvUpError):
    """Reading, writing or backing up a file failed.

    Args:
        message: Error description.
        file_path: File involved.
        operation: ``read``, ``write`` or ``backup``.
        original_error: Underlying OS-level exception.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
        self._record(
            path=file_path,
            operation=operation,
            original_error=str(original_error) if original_error else None,
        )


def _preview(text: Optional[str]) -> Optional[str]:
    if text is None or len(text) <= MAX_RESPONSE_PREVIEW:
        return text
    return text[:MAX_RESPONSE_PREVIEW] + "..."
