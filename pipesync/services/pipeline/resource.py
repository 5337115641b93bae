"""Resource adapters mapping pipeline state to declarative resource attributes.

Two shapes are exposed: a read-only lookup and a managed resource with
create/read/update/delete. Inputs are validated once here, at the boundary;
the engine below only sees typed identities and submissions.
"""

from pydantic import BaseModel, ConfigDict, Field

from pipesync.exceptions import PipelineError
from pipesync.models import ConfigFormat, ConfigSubmission, PipelineIdentity, PipelineState

from .identity import make_identity, parse_pipeline_id
from .reader import PipelineReader
from .reconciler import PipelineReconciler


class PipelineLookupInput(BaseModel):
    """Arguments of the read-only pipeline lookup."""

    pipeline_name: str
    team_name: str


class PipelineLookupOutput(BaseModel):
    """Attributes computed by the read-only pipeline lookup."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    is_exposed: bool
    is_paused: bool
    config_json: str = Field(alias="json")
    config_yaml: str = Field(alias="yaml")


class ManagedPipelineInput(BaseModel):
    """Desired state of a managed pipeline."""

    pipeline_name: str
    team_name: str
    is_exposed: bool
    is_paused: bool
    pipeline_config_format: ConfigFormat
    pipeline_config: str


class ManagedPipelineOutput(BaseModel):
    """Attributes of a managed pipeline as observed after an operation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    is_exposed: bool
    is_paused: bool
    config_json: str = Field(alias="json")
    config_yaml: str = Field(alias="yaml")


def _read_with_context(reader: PipelineReader, identity: PipelineIdentity) -> PipelineState:
    try:
        return reader.read(identity)
    except PipelineError as e:
        raise e.with_context(
            f"Error reading pipeline {identity.pipeline_name} "
            f"from team '{identity.team_name}': {e}"
        ) from e.__cause__


class PipelineLookup:
    """Read-only lookup of an existing pipeline."""

    def __init__(self, reader: PipelineReader) -> None:
        self.reader = reader

    def read(self, params: PipelineLookupInput) -> PipelineLookupOutput:
        identity = make_identity(params.team_name, params.pipeline_name)
        state = _read_with_context(self.reader, identity)
        return PipelineLookupOutput(
            id=identity.key,
            is_exposed=state.is_exposed,
            is_paused=state.is_paused,
            config_json=state.config_json,
            config_yaml=state.config_yaml,
        )


class ManagedPipeline:
    """Managed pipeline resource.

    Create and update are the same operation: the config upload is a
    create-or-update and both flags are always asserted.
    """

    def __init__(self, reconciler: PipelineReconciler) -> None:
        self.reconciler = reconciler

    @staticmethod
    def _output(identity: PipelineIdentity, state: PipelineState) -> ManagedPipelineOutput:
        return ManagedPipelineOutput(
            id=identity.key,
            is_exposed=state.is_exposed,
            is_paused=state.is_paused,
            config_json=state.config_json,
            config_yaml=state.config_yaml,
        )

    def create(self, params: ManagedPipelineInput) -> ManagedPipelineOutput:
        return self.update(params)

    def read(self, params: ManagedPipelineInput) -> ManagedPipelineOutput:
        identity = make_identity(params.team_name, params.pipeline_name)
        state = _read_with_context(self.reconciler.reader, identity)
        return self._output(identity, state)

    def update(self, params: ManagedPipelineInput) -> ManagedPipelineOutput:
        identity = make_identity(params.team_name, params.pipeline_name)
        submission = ConfigSubmission(
            raw_config=params.pipeline_config,
            config_format=params.pipeline_config_format,
            desired_exposed=params.is_exposed,
            desired_paused=params.is_paused,
        )
        state = self.reconciler.write(identity, submission)
        return self._output(identity, state)

    def delete(self, params: ManagedPipelineInput) -> None:
        identity = make_identity(params.team_name, params.pipeline_name)
        self.reconciler.delete(identity)

    def import_state(self, resource_id: str) -> ManagedPipelineInput:
        """Rebuild the desired state of an existing pipeline from its identifier.

        The imported config is expressed in YAML.
        """
        identity = parse_pipeline_id(resource_id)
        state = _read_with_context(self.reconciler.reader, identity)
        return ManagedPipelineInput(
            pipeline_name=identity.pipeline_name,
            team_name=identity.team_name,
            is_exposed=state.is_exposed,
            is_paused=state.is_paused,
            pipeline_config_format=ConfigFormat.YAML,
            pipeline_config=state.config_yaml,
        )
