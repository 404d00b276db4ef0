"""Exceptions raised by the repoflow provider."""

from __future__ import annotations


class RepoflowError(Exception):
    """Base class for provider errors."""


class RepoflowAPIError(RepoflowError):
    """A call to the repoflow API failed.

    Covers transport failures, HTTP error statuses and undecodable bodies.
    The reader layer does not tell these apart.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (HTTP {self.status})"
        return self.message


class ConfigError(RepoflowError):
    """Provider configuration is missing or invalid."""


class ValueConversionError(RepoflowError, ValueError):
    """A value could not be converted into its state representation."""


class EntityLookupError(RepoflowError, LookupError):
    """Looking up a workspace or repository failed.

    Attributes:
        entity: "workspace" or "repository".
        cause: The underlying client exception.
        message: Human readable description naming the failed lookup.
    """

    def __init__(self, entity: str, cause: Exception, message: str) -> None:
        super().__init__(message)
        self.entity = entity
        self.cause = cause
        self.message = message
