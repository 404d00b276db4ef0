"""Workspace data source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..client import RepoflowAPI
from ..errors import EntityLookupError
from .base import Attribute, AttributeType, ReadResponse, Schema

logger = logging.getLogger(__name__)

WORKSPACE_SCHEMA = Schema(
    description="Workspace data source",
    attributes=(
        Attribute("name", AttributeType.STRING, "Workspace name", required=True),
        Attribute("id", AttributeType.STRING, "Workspace identifier", computed=True),
    ),
)


@dataclass
class WorkspaceState:
    name: str
    id: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "id": self.id}


class WorkspaceReader:
    """Resolves a workspace name to its identifier."""

    def __init__(self, client: RepoflowAPI, type_name: str = "repoflow_workspace") -> None:
        self.client = client
        self.type_name = type_name

    def schema(self) -> Schema:
        return WORKSPACE_SCHEMA

    def read(self, config: dict[str, Any]) -> ReadResponse[WorkspaceState]:
        response: ReadResponse[WorkspaceState] = ReadResponse()
        response.diagnostics.extend(WORKSPACE_SCHEMA.validate_config(config))
        if response.diagnostics.has_error():
            return response

        workspace = config["name"]

        try:
            ws = self.client.get_workspace(workspace)
        except Exception as e:
            err = EntityLookupError(
                "workspace", e, f"Unable to get workspace {workspace}, got error: {e}"
            )
            logger.info(err.message)
            response.diagnostics.add_error("Client Error", err.message, err)
            return response

        response.state = WorkspaceState(name=ws.name, id=ws.id)

        logger.debug(
            "read workspace data",
            extra={"trace": {"name": workspace, "id": ws.id}},
        )
        return response
