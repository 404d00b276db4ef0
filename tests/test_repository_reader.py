"""Tests for the repository data source.

Tests cover:
- Composite state id
- Core, type, remote, cache and virtual field mapping
- Null vs empty child repository lists
- Workspace and repository lookup failures
- Trace logging
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from repoflow_provider.datasources import REPOSITORY_SCHEMA, RepositoryReader, RepositoryState
from repoflow_provider.errors import EntityLookupError, RepoflowAPIError
from repoflow_provider.models import ChildRepository, Repository, Workspace
from repoflow_provider.values import INT64_MAX, split_composite_id

CONFIG = {"workspace": "acme", "name": "libs"}


def _repository(**overrides: object) -> Repository:
    fields: dict[str, object] = {
        "id": "r-9",
        "name": "libs",
        "status": "ready",
        "repository_type": "local",
        "package_type": "npm",
    }
    fields.update(overrides)
    return Repository(**fields)  # type: ignore[arg-type]


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.get_workspace.return_value = Workspace(id="w-1", name="acme")
    client.get_repository.return_value = _repository()
    return client


def _read(client: MagicMock, config: dict[str, object] | None = None) -> RepositoryState:
    response = RepositoryReader(client).read(dict(config or CONFIG))
    assert not response.diagnostics.has_error(), response.diagnostics
    assert response.state is not None
    return response.state


class TestRepositoryReader:
    """Tests for RepositoryReader.read() on successful lookups."""

    def test_type_name_and_schema(self, client: MagicMock) -> None:
        reader = RepositoryReader(client)

        assert reader.type_name == "repoflow_repository"
        assert reader.schema() is REPOSITORY_SCHEMA

    def test_local_repository(self, client: MagicMock) -> None:
        """Test the acme/libs local npm repository read."""
        state = _read(client)

        client.get_workspace.assert_called_once_with("acme")
        client.get_repository.assert_called_once_with("w-1", "libs")
        assert state.to_dict() == {
            "id": "w-1/r-9",
            "repository_id": "r-9",
            "workspace": "w-1",
            "name": "libs",
            "status": "ready",
            "package_type": "npm",
            "repository_type": "local",
            "remote_repository_url": None,
            "remote_cache_enabled": False,
            "file_cache_time_till_revalidation": None,
            "metadata_cache_time_till_revalidation": None,
            "upload_local_repository_id": None,
            "child_repository_ids": None,
        }

    def test_composite_id_splits_back(self, client: MagicMock) -> None:
        state = _read(client)

        assert split_composite_id(state.id) == (state.workspace_id, state.repository_id)

    def test_name_and_status_come_from_service(self, client: MagicMock) -> None:
        client.get_repository.return_value = _repository(name="Libs", status="")

        state = _read(client)

        assert state.name == "Libs"
        assert state.status == ""

    def test_empty_repository_type_leaves_both_type_fields_unset(
        self, client: MagicMock
    ) -> None:
        """Package type is only written when repository type is set."""
        client.get_repository.return_value = _repository(repository_type="", package_type="npm")

        state = _read(client)

        assert state.repository_type is None
        assert state.package_type is None

    def test_repository_type_set_with_empty_package_type(self, client: MagicMock) -> None:
        client.get_repository.return_value = _repository(repository_type="local", package_type="")

        state = _read(client)

        assert state.repository_type == "local"
        assert state.package_type == ""

    def test_remote_repository(self, client: MagicMock) -> None:
        client.get_repository.return_value = _repository(
            repository_type="remote",
            remote_repository_url="https://registry.npmjs.org",
            is_remote_cache_enabled=True,
            file_cache_time_till_revalidation=60000,
            metadata_cache_time_till_revalidation=0,
        )

        state = _read(client)

        assert state.remote_repository_url == "https://registry.npmjs.org"
        assert state.remote_cache_enabled is True
        assert state.file_cache_time_till_revalidation == 60000
        assert state.metadata_cache_time_till_revalidation == 0

    @pytest.mark.parametrize("value", [None, 0, 1, 3_600_000, INT64_MAX])
    def test_cache_times_keep_presence(self, client: MagicMock, value: int | None) -> None:
        client.get_repository.return_value = _repository(
            file_cache_time_till_revalidation=value,
            metadata_cache_time_till_revalidation=value,
        )

        state = _read(client)

        assert state.file_cache_time_till_revalidation == value
        assert state.metadata_cache_time_till_revalidation == value

    def test_cache_time_out_of_range(self, client: MagicMock) -> None:
        client.get_repository.return_value = _repository(
            file_cache_time_till_revalidation=INT64_MAX + 1
        )

        response = RepositoryReader(client).read(dict(CONFIG))

        assert response.state is None
        assert response.diagnostics.errors()[0].summary == "Value Conversion Error"

    def test_virtual_repository(self, client: MagicMock) -> None:
        client.get_repository.return_value = _repository(
            repository_type="virtual",
            upload_local_repository_id="r-2",
            child_repositories=[
                ChildRepository(id="r-3", name="c"),
                ChildRepository(id="r-1", name="a"),
                ChildRepository(id="r-2", name="b"),
            ],
        )

        state = _read(client)

        assert state.upload_local_repository_id == "r-2"
        assert state.child_repository_ids == ["r-3", "r-1", "r-2"]

    def test_absent_children_are_null(self, client: MagicMock) -> None:
        client.get_repository.return_value = _repository(child_repositories=None)

        state = _read(client)

        assert state.child_repository_ids is None

    def test_empty_children_stay_empty(self, client: MagicMock) -> None:
        client.get_repository.return_value = _repository(child_repositories=[])

        state = _read(client)

        assert state.child_repository_ids == []

    def test_bad_child_id_aborts_read(self, client: MagicMock) -> None:
        client.get_repository.return_value = _repository(
            child_repositories=[ChildRepository(id="r-1"), ChildRepository(id=None)]  # type: ignore[arg-type]
        )

        response = RepositoryReader(client).read(dict(CONFIG))

        assert response.state is None
        assert len(response.diagnostics.errors()) == 1
        assert "List element 1" in response.diagnostics.errors()[0].detail

    def test_null_computed_attributes_in_config(self, client: MagicMock) -> None:
        """Computed attributes may be present with a null value."""
        config = {**CONFIG, "id": None, "status": None, "child_repository_ids": None}

        state = _read(client, config)

        assert state.id == "w-1/r-9"

    def test_computed_attribute_with_value_in_config(self, client: MagicMock) -> None:
        response = RepositoryReader(client).read({**CONFIG, "status": "ready"})

        assert response.state is None
        assert response.diagnostics.errors()[0].summary == "Invalid Configuration"
        client.get_repository.assert_not_called()

    def test_null_repository_id_from_service(self, client: MagicMock) -> None:
        client.get_repository.return_value = Repository.from_dict({"id": None, "name": "libs"})

        state = _read(client)

        assert state.id == "w-1/"
        assert state.repository_id == ""

    def test_trace_log(self, client: MagicMock, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="repoflow_provider.datasources.repository"):
            _read(client)

        records = [r for r in caplog.records if r.getMessage() == "read repository data"]
        assert len(records) == 1
        assert records[0].trace == {"name": "libs", "id": "r-9", "workspace": "w-1"}


class TestRepositoryReaderFailures:
    """Tests for RepositoryReader.read() when lookups fail."""

    def test_repository_lookup_failure(self, client: MagicMock) -> None:
        client.get_repository.side_effect = RepoflowAPIError("connection reset")

        response = RepositoryReader(client).read(dict(CONFIG))

        assert response.state is None
        assert len(response.diagnostics) == 1
        diag = response.diagnostics.errors()[0]
        assert diag.summary == "Client Error"
        assert "libs" in diag.detail
        assert "w-1" in diag.detail
        assert "connection reset" in diag.detail

    def test_lookup_failures_keep_errors(self, client: MagicMock) -> None:
        ws_cause = RepoflowAPIError("down")
        repo_cause = RepoflowAPIError("gone", status=404)
        client.get_workspace.side_effect = ws_cause
        client.get_repository.side_effect = repo_cause

        response = RepositoryReader(client).read(dict(CONFIG))

        errors = [d.error for d in response.diagnostics.errors()]
        assert all(isinstance(e, EntityLookupError) for e in errors)
        assert [(e.entity, e.cause) for e in errors] == [
            ("workspace", ws_cause),
            ("repository", repo_cause),
        ]

    def test_workspace_failure_still_looks_up_repository(self, client: MagicMock) -> None:
        """A failed workspace lookup does not stop the read."""
        client.get_workspace.side_effect = RepoflowAPIError("workspace not found", status=404)

        response = RepositoryReader(client).read(dict(CONFIG))

        client.get_repository.assert_called_once_with("", "libs")
        assert response.state is not None
        assert response.state.id == "/r-9"
        assert response.state.workspace_id == ""
        assert len(response.diagnostics) == 1
        assert response.diagnostics.errors()[0].detail == (
            "Unable to get workspace acme, got error: workspace not found (HTTP 404)"
        )
        assert not response.ok

    def test_workspace_failure_with_children_aborts(self, client: MagicMock) -> None:
        """The child list step stops on any earlier error."""
        client.get_workspace.side_effect = RepoflowAPIError("workspace not found")
        client.get_repository.return_value = _repository(
            child_repositories=[ChildRepository(id="r-1")]
        )

        response = RepositoryReader(client).read(dict(CONFIG))

        assert response.state is None
        assert len(response.diagnostics) == 1

    def test_both_lookups_fail(self, client: MagicMock) -> None:
        client.get_workspace.side_effect = RepoflowAPIError("down")
        client.get_repository.side_effect = RepoflowAPIError("down")

        response = RepositoryReader(client).read(dict(CONFIG))

        assert response.state is None
        details = [d.detail for d in response.diagnostics.errors()]
        assert details == [
            "Unable to get workspace acme, got error: down",
            "Unable to read repository libs on workspaceId , got error: down",
        ]

    def test_missing_workspace_in_config(self, client: MagicMock) -> None:
        response = RepositoryReader(client).read({"name": "libs"})

        assert response.state is None
        assert "workspace" in response.diagnostics.errors()[0].detail
        client.get_workspace.assert_not_called()
        client.get_repository.assert_not_called()
