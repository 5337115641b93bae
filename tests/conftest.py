"""Shared fixtures: an in-memory control plane that records every call."""

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from pipesync.exceptions import ControlPlaneAPIError
from pipesync.models import (
    BLIND_CONFIG_VERSION,
    ConfigWarning,
    PipelineConfigResponse,
    PipelineIdentity,
    PipelineInfo,
    SaveConfigResult,
)
from pipesync.services.pipeline import PipelineReader, PipelineReconciler


@dataclass
class StoredPipeline:
    config: dict[str, Any]
    public: bool = False
    paused: bool = True
    version: int = 1


@dataclass
class FakeControlPlane:
    """In-memory stand-in for a Concourse control plane.

    ``calls`` records ``(operation, team, pipeline, *args)`` for every team
    operation. ``failures`` maps an operation name to an exception raised on
    its next call. ``warnings`` are returned by every config upload.
    """

    pipelines: dict[tuple[str, str], StoredPipeline] = field(default_factory=dict)
    calls: list[tuple[Any, ...]] = field(default_factory=list)
    failures: dict[str, Exception] = field(default_factory=dict)
    warnings: list[ConfigWarning] = field(default_factory=list)
    missing_config: set[tuple[str, str]] = field(default_factory=set)
    missing_after_upload: set[str] = field(default_factory=set)
    refuse_save: bool = False

    def team(self, team_name: str) -> "FakeTeam":
        return FakeTeam(self, team_name)

    def add_pipeline(
        self,
        team_name: str,
        name: str,
        config: dict[str, Any],
        public: bool = False,
        paused: bool = True,
    ) -> StoredPipeline:
        stored = StoredPipeline(config=config, public=public, paused=paused)
        self.pipelines[(team_name, name)] = stored
        return stored

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeTeam:
    def __init__(self, plane: FakeControlPlane, team_name: str) -> None:
        self.plane = plane
        self.team_name = team_name

    def _record(self, operation: str, name: str, *args: Any) -> None:
        self.plane.calls.append((operation, self.team_name, name, *args))
        failure = self.plane.failures.pop(operation, None)
        if failure is not None:
            raise failure

    def _stored(self, name: str) -> StoredPipeline | None:
        return self.plane.pipelines.get((self.team_name, name))

    def get_pipeline(self, name: str) -> PipelineInfo | None:
        self._record("get_pipeline", name)
        stored = self._stored(name)
        if stored is None:
            return None
        return PipelineInfo(
            name=name, team_name=self.team_name, public=stored.public, paused=stored.paused
        )

    def get_pipeline_config(self, name: str) -> PipelineConfigResponse | None:
        self._record("get_pipeline_config", name)
        stored = self._stored(name)
        if stored is None or (self.team_name, name) in self.plane.missing_config:
            return None
        body = json.dumps({"config": stored.config}).encode()
        return PipelineConfigResponse(
            raw=body, config=stored.config, version=str(stored.version)
        )

    def create_or_update_pipeline_config(
        self, name: str, version: str, config: bytes, check_credentials: bool
    ) -> SaveConfigResult:
        self._record("create_or_update_pipeline_config", name, version, check_credentials)
        if self.plane.refuse_save:
            return SaveConfigResult()

        stored = self._stored(name)
        if stored is not None and version != BLIND_CONFIG_VERSION and version != str(
            stored.version
        ):
            raise ControlPlaneAPIError("API error: 409", status_code=409)

        parsed = json.loads(config)
        if stored is None:
            self.plane.add_pipeline(self.team_name, name, parsed)
            result = SaveConfigResult(created=True, warnings=self.plane.warnings)
        else:
            stored.config = parsed
            stored.version += 1
            result = SaveConfigResult(updated=True, warnings=self.plane.warnings)

        if name in self.plane.missing_after_upload:
            del self.plane.pipelines[(self.team_name, name)]
        return result

    def _set(self, operation: str, name: str, attribute: str, value: bool) -> bool:
        self._record(operation, name)
        stored = self._stored(name)
        if stored is None:
            return False
        setattr(stored, attribute, value)
        return True

    def expose_pipeline(self, name: str) -> bool:
        return self._set("expose_pipeline", name, "public", True)

    def hide_pipeline(self, name: str) -> bool:
        return self._set("hide_pipeline", name, "public", False)

    def pause_pipeline(self, name: str) -> bool:
        return self._set("pause_pipeline", name, "paused", True)

    def unpause_pipeline(self, name: str) -> bool:
        return self._set("unpause_pipeline", name, "paused", False)

    def delete_pipeline(self, name: str) -> bool:
        self._record("delete_pipeline", name)
        return self.plane.pipelines.pop((self.team_name, name), None) is not None


@pytest.fixture
def control_plane() -> FakeControlPlane:
    return FakeControlPlane()


@pytest.fixture
def identity() -> PipelineIdentity:
    return PipelineIdentity(team_name="main", pipeline_name="ci")


@pytest.fixture
def reader(control_plane: FakeControlPlane) -> PipelineReader:
    return PipelineReader(control_plane)


@pytest.fixture
def reconciler(control_plane: FakeControlPlane, reader: PipelineReader) -> PipelineReconciler:
    return PipelineReconciler(control_plane, reader=reader)
