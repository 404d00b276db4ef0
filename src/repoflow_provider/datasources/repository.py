"""Repository data source.

A read resolves the workspace, fetches the repository and maps it into a
``RepositoryState`` keyed by ``workspace_id/repository_id``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..client import RepoflowAPI
from ..errors import EntityLookupError, ValueConversionError
from ..values import composite_id, list_value_from, optional_int64
from .base import Attribute, AttributeType, ReadResponse, Schema

logger = logging.getLogger(__name__)

REPOSITORY_SCHEMA = Schema(
    description="Repository data source",
    attributes=(
        Attribute("name", AttributeType.STRING, "Repository name", required=True),
        Attribute(
            "workspace",
            AttributeType.STRING,
            "Workspace used to create it (name or Id)",
            required=True,
        ),
        Attribute(
            "repository_type",
            AttributeType.STRING,
            "Repository type stored by the repository.",
            computed=True,
        ),
        Attribute(
            "package_type",
            AttributeType.STRING,
            "Package type stored by the repository.",
            computed=True,
        ),
        Attribute(
            "remote_repository_url",
            AttributeType.STRING,
            "URL of the remote repository (required for remote repository type).",
            computed=True,
        ),
        Attribute(
            "remote_cache_enabled",
            AttributeType.BOOL,
            "Whether caching is enabled.",
            computed=True,
        ),
        Attribute(
            "file_cache_time_till_revalidation",
            AttributeType.INT64,
            "Milliseconds before cached files require revalidation "
            "(null for indefinite caching).",
            computed=True,
        ),
        Attribute(
            "metadata_cache_time_till_revalidation",
            AttributeType.INT64,
            "Milliseconds before cached metadata requires revalidation "
            "(null for indefinite caching).",
            computed=True,
        ),
        Attribute(
            "child_repository_ids",
            AttributeType.LIST_OF_STRING,
            "IDs of repositories included in the virtual repository "
            "(required for virtual repository type).",
            computed=True,
        ),
        Attribute(
            "upload_local_repository_id",
            AttributeType.STRING,
            "ID of a local repository where uploads will be stored "
            "(must also be in child_repository_ids).",
            computed=True,
        ),
        Attribute("repository_id", AttributeType.STRING, "Repository identifier", computed=True),
        Attribute("status", AttributeType.STRING, "Status of the repository", computed=True),
        Attribute("id", AttributeType.STRING, "Repository identifier", computed=True),
    ),
)


@dataclass
class RepositoryState:
    """State of a repository data source.

    ``id`` is ``workspace_id/repository_id``; ``repository_id`` is the
    service's own id. ``child_repository_ids`` is None when the service
    sends no child list, which is not the same as an empty list.
    """

    id: str
    repository_id: str
    workspace_id: str
    name: str
    status: str
    package_type: str | None = None
    repository_type: str | None = None
    remote_repository_url: str | None = None
    remote_cache_enabled: bool = False
    file_cache_time_till_revalidation: int | None = None
    metadata_cache_time_till_revalidation: int | None = None
    upload_local_repository_id: str | None = None
    child_repository_ids: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary keyed by schema attribute names."""
        return {
            "id": self.id,
            "repository_id": self.repository_id,
            "workspace": self.workspace_id,
            "name": self.name,
            "status": self.status,
            "package_type": self.package_type,
            "repository_type": self.repository_type,
            "remote_repository_url": self.remote_repository_url,
            "remote_cache_enabled": self.remote_cache_enabled,
            "file_cache_time_till_revalidation": self.file_cache_time_till_revalidation,
            "metadata_cache_time_till_revalidation": self.metadata_cache_time_till_revalidation,
            "upload_local_repository_id": self.upload_local_repository_id,
            "child_repository_ids": self.child_repository_ids,
        }


class RepositoryReader:
    """Resolves a repository of a workspace into a ``RepositoryState``."""

    def __init__(self, client: RepoflowAPI, type_name: str = "repoflow_repository") -> None:
        self.client = client
        self.type_name = type_name

    def schema(self) -> Schema:
        return REPOSITORY_SCHEMA

    def read(self, config: dict[str, Any]) -> ReadResponse[RepositoryState]:
        response: ReadResponse[RepositoryState] = ReadResponse()
        diagnostics = response.diagnostics
        diagnostics.extend(REPOSITORY_SCHEMA.validate_config(config))
        if diagnostics.has_error():
            return response

        workspace = config["workspace"]
        repository = config["name"]

        # A failed workspace lookup is reported but does not stop the read:
        # the repository lookup still runs, with an empty workspace id.
        workspace_id = ""
        try:
            workspace_id = self.client.get_workspace(workspace).id
        except Exception as e:
            err = EntityLookupError(
                "workspace", e, f"Unable to get workspace {workspace}, got error: {e}"
            )
            logger.info(err.message)
            diagnostics.add_error("Client Error", err.message, err)

        try:
            rp = self.client.get_repository(workspace_id, repository)
        except Exception as e:
            err = EntityLookupError(
                "repository",
                e,
                f"Unable to read repository {repository} on workspaceId {workspace_id}, "
                f"got error: {e}",
            )
            logger.info(err.message)
            diagnostics.add_error("Client Error", err.message, err)
            return response

        state = RepositoryState(
            id=composite_id(workspace_id, rp.id),
            repository_id=rp.id,
            workspace_id=workspace_id,
            name=rp.name,
            status=rp.status,
        )

        # Both type fields are gated on repository_type
        if rp.repository_type != "":
            state.package_type = rp.package_type
        if rp.repository_type != "":
            state.repository_type = rp.repository_type

        state.remote_repository_url = rp.remote_repository_url
        state.remote_cache_enabled = bool(rp.is_remote_cache_enabled)

        try:
            state.file_cache_time_till_revalidation = optional_int64(
                rp.file_cache_time_till_revalidation
            )
            state.metadata_cache_time_till_revalidation = optional_int64(
                rp.metadata_cache_time_till_revalidation
            )
        except ValueConversionError as e:
            diagnostics.add_error("Value Conversion Error", f"Cache revalidation time: {e}")
            return response

        state.upload_local_repository_id = rp.upload_local_repository_id

        if rp.child_repositories is None:
            state.child_repository_ids = None
        else:
            ids = [child.id for child in rp.child_repositories]
            values, list_diags = list_value_from(ids)
            diagnostics.extend(list_diags)
            if diagnostics.has_error():
                return response
            state.child_repository_ids = values

        logger.debug(
            "read repository data",
            extra={"trace": {"name": repository, "id": rp.id, "workspace": workspace_id}},
        )

        response.state = state
        return response
