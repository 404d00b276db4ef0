"""repoflow data sources."""

from __future__ import annotations

from .base import Attribute, AttributeType, Reader, ReadResponse, Schema
from .repository import REPOSITORY_SCHEMA, RepositoryReader, RepositoryState
from .workspace import WORKSPACE_SCHEMA, WorkspaceReader, WorkspaceState

__all__ = [
    # Base
    "Attribute",
    "AttributeType",
    "Reader",
    "ReadResponse",
    "Schema",
    # Workspace
    "WORKSPACE_SCHEMA",
    "WorkspaceReader",
    "WorkspaceState",
    # Repository
    "REPOSITORY_SCHEMA",
    "RepositoryReader",
    "RepositoryState",
]
