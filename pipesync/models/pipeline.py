"""
Pydantic models for pipelines and their control plane payloads.

PipelineIdentity names a pipeline, PipelineState is the observed snapshot
handed back to callers and ConfigSubmission is the desired state fed into
the write path.
"""

import enum

from pydantic import BaseModel, ConfigDict, Field

from pipesync.types import PipelineConfig

# Token submitted on upload when the current version is not looked up first
BLIND_CONFIG_VERSION = "0"

ID_DELIMITER = ":"


class ConfigFormat(str, enum.Enum):
    """Serialization formats accepted for a pipeline config document."""

    JSON = "json"
    YAML = "yaml"


class WriteMode(str, enum.Enum):
    """How the config version token is chosen when uploading a pipeline config.

    ``overwrite`` always submits the blind token and replaces whatever is
    stored. ``compare_and_swap`` submits the version read just before upload,
    so a concurrent change makes the upload fail.
    """

    OVERWRITE = "overwrite"
    COMPARE_AND_SWAP = "compare_and_swap"


class PipelineIdentity(BaseModel):
    """Immutable (team, pipeline) pair identifying a pipeline.

    Args:
        team_name: Team owning the pipeline.
        pipeline_name: Pipeline name, unique within the team.
    """

    model_config = ConfigDict(frozen=True)

    team_name: str
    pipeline_name: str

    @property
    def key(self) -> str:
        """Composite identifier surfaced as the resource id."""
        return f"{self.team_name}{ID_DELIMITER}{self.pipeline_name}"

    def __str__(self) -> str:
        return self.key


class PipelineState(BaseModel):
    """Snapshot of a pipeline as observed on the control plane.

    Never persisted locally; always re-derived from the control plane.

    Args:
        team_name: Team owning the pipeline.
        pipeline_name: Pipeline name.
        is_exposed: Whether the pipeline is publicly visible.
        is_paused: Whether scheduled execution is suspended.
        config_json: Canonical JSON serialization of the pipeline config.
        config_yaml: YAML serialization derived from ``config_json``.
    """

    team_name: str
    pipeline_name: str
    is_exposed: bool = False
    is_paused: bool = False
    config_json: str = ""
    config_yaml: str = ""

    @property
    def identity(self) -> PipelineIdentity:
        return PipelineIdentity(team_name=self.team_name, pipeline_name=self.pipeline_name)


class ConfigSubmission(BaseModel):
    """Desired config and flags for one write. Not retained after reconciliation."""

    model_config = ConfigDict(frozen=True)

    raw_config: str
    config_format: ConfigFormat
    desired_exposed: bool
    desired_paused: bool


class PipelineInfo(BaseModel):
    """Pipeline summary as returned by the control plane."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    name: str
    team_name: str | None = None
    public: bool = False
    paused: bool = False
    archived: bool = False


class PipelineConfigResponse(BaseModel):
    """Stored config of a pipeline together with its version token."""

    raw: bytes
    config: PipelineConfig
    version: str


class ConfigWarning(BaseModel):
    """Advisory reported by the control plane when saving a config."""

    type: str
    message: str


class SaveConfigResult(BaseModel):
    """Outcome of a create-or-update config call."""

    created: bool = False
    updated: bool = False
    warnings: list[ConfigWarning] = Field(default_factory=list)

    @property
    def saved(self) -> bool:
        return self.created or self.updated
