"""Exception types for coderun-terminal."""

from __future__ import annotations


class CodeRunError(Exception):
    """Base class for all coderun-terminal errors."""


class TransportError(CodeRunError):
    """The remote call could not complete (connection, timeout, bad JSON)."""


class ServiceError(CodeRunError):
    """The remote service answered with a non-success status."""

    def __init__(self, status_code: int, error: str | None = None) -> None:
        self.status_code = status_code
        self.error = error
        super().__init__(error or f"Service returned HTTP {status_code}")


class InvalidLanguageError(CodeRunError, ValueError):
    """A language id outside the supported set was supplied."""

    def __init__(self, language: str) -> None:
        self.language = language
        super().__init__(f"Unsupported language: {language!r}")
