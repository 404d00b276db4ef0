"""Registry of data source readers, keyed by type name."""

from __future__ import annotations

import logging
from typing import Any

from .client import RepoflowAPI
from .datasources import ReadResponse, Reader, RepositoryReader, Schema, WorkspaceReader

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TYPE_NAME = "repoflow"


class ReaderRegistry:
    """Maps data source type names to readers."""

    def __init__(self) -> None:
        self._readers: dict[str, Reader[Any]] = {}

    def register(self, reader: Reader[Any]) -> None:
        """Register a reader under its type name.

        Raises:
            ValueError: If the type name is already taken.
        """
        if reader.type_name in self._readers:
            raise ValueError(f"Data source already registered: {reader.type_name}")
        self._readers[reader.type_name] = reader
        logger.debug(f"Registered data source {reader.type_name}")

    def get(self, type_name: str) -> Reader[Any]:
        """Get the reader for a type name.

        Raises:
            KeyError: If no reader is registered under that name.
        """
        try:
            return self._readers[type_name]
        except KeyError:
            known = ", ".join(self.type_names()) or "none"
            raise KeyError(f"Unknown data source {type_name!r} (known: {known})") from None

    def type_names(self) -> list[str]:
        return sorted(self._readers)

    def read(self, type_name: str, config: dict[str, Any]) -> ReadResponse[Any]:
        return self.get(type_name).read(config)

    def schemas(self) -> dict[str, Schema]:
        return {name: self._readers[name].schema() for name in self.type_names()}

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._readers

    def __len__(self) -> int:
        return len(self._readers)


def build_registry(
    client: RepoflowAPI, provider_type_name: str = DEFAULT_PROVIDER_TYPE_NAME
) -> ReaderRegistry:
    """Build a registry with the workspace and repository data sources."""
    registry = ReaderRegistry()
    registry.register(WorkspaceReader(client, type_name=f"{provider_type_name}_workspace"))
    registry.register(RepositoryReader(client, type_name=f"{provider_type_name}_repository"))
    return registry
