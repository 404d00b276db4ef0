"""Records returned by the repoflow API.

The service speaks camelCase JSON. Optional fields stay ``None`` when the
service omits them or sends ``null``; they are never replaced by a zero value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Workspace:
    """A repoflow workspace.

    Attributes:
        id: Workspace identifier.
        name: Workspace name.
    """

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Workspace:
        """Create from an API response body."""
        return cls(id=data.get("id") or "", name=data.get("name") or "")


@dataclass
class ChildRepository:
    """A repository aggregated by a virtual repository."""

    id: str
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChildRepository:
        """Create from an API response body."""
        return cls(id=data.get("id", ""), name=data.get("name", "") or "")


@dataclass
class Repository:
    """A repoflow repository.

    Attributes:
        id: Repository identifier.
        name: Repository name.
        status: Repository status as reported by the service.
        package_type: Package format (npm, pypi, docker, ...).
        repository_type: local, remote or virtual.
        remote_repository_url: Upstream URL of a remote repository.
        is_remote_cache_enabled: Whether a remote repository caches upstream content.
        file_cache_time_till_revalidation: Milliseconds before cached files
            are revalidated (None for indefinite caching).
        metadata_cache_time_till_revalidation: Milliseconds before cached
            metadata is revalidated (None for indefinite caching).
        upload_local_repository_id: Local repository receiving uploads made
            to a virtual repository.
        child_repositories: Repositories aggregated by a virtual repository.
            None when the service sends no list.
    """

    id: str
    name: str
    status: str = ""
    package_type: str = ""
    repository_type: str = ""
    remote_repository_url: str | None = None
    is_remote_cache_enabled: bool = False
    file_cache_time_till_revalidation: int | None = None
    metadata_cache_time_till_revalidation: int | None = None
    upload_local_repository_id: str | None = None
    child_repositories: list[ChildRepository] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the service's JSON shape."""
        children = None
        if self.child_repositories is not None:
            children = [{"id": c.id, "name": c.name} for c in self.child_repositories]
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "packageType": self.package_type,
            "repositoryType": self.repository_type,
            "remoteRepositoryUrl": self.remote_repository_url,
            "isRemoteCacheEnabled": self.is_remote_cache_enabled,
            "fileCacheTimeTillRevalidation": self.file_cache_time_till_revalidation,
            "metadataCacheTimeTillRevalidation": self.metadata_cache_time_till_revalidation,
            "uploadLocalRepositoryId": self.upload_local_repository_id,
            "childRepositories": children,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Repository:
        """Create from an API response body."""
        children = None
        if data.get("childRepositories") is not None:
            children = [ChildRepository.from_dict(c) for c in data["childRepositories"]]

        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            status=data.get("status") or "",
            package_type=data.get("packageType") or "",
            repository_type=data.get("repositoryType") or "",
            remote_repository_url=data.get("remoteRepositoryUrl"),
            is_remote_cache_enabled=bool(data.get("isRemoteCacheEnabled", False)),
            file_cache_time_till_revalidation=data.get("fileCacheTimeTillRevalidation"),
            metadata_cache_time_till_revalidation=data.get(
                "metadataCacheTimeTillRevalidation"
            ),
            upload_local_repository_id=data.get("uploadLocalRepositoryId"),
            child_repositories=children,
        )

    @property
    def child_repository_ids(self) -> list[str] | None:
        """Ids of the child repositories, in service order."""
        if self.child_repositories is None:
            return None
        return [child.id for child in self.child_repositories]
