"""PipelineReconciler - drives a pipeline on the control plane to a desired state.

A write runs five stages strictly in order, each gating the next:

1. canonicalize the submitted config
2. upload it (create or update)
3. assert the visibility flag (expose/hide)
4. assert the pause flag (pause/unpause)
5. re-read the pipeline and return what the control plane committed

The first failure aborts the write. Both flags are asserted on every write,
whatever their previously observed values.
"""

import enum
from dataclasses import dataclass

from pipesync.client import ControlPlane
from pipesync.exceptions import (
    ConfigParseError,
    ConfigWarningError,
    ControlPlaneAPIError,
    RemoteError,
)
from pipesync.models import (
    BLIND_CONFIG_VERSION,
    ConfigSubmission,
    PipelineIdentity,
    PipelineState,
    WriteMode,
)
from pipesync.utils.logger import logger

from .parser import canonicalize
from .reader import PipelineReader


class FlagKind(str, enum.Enum):
    """Independent boolean flags of a pipeline."""

    VISIBILITY = "visibility"
    PAUSE = "pause"


@dataclass(frozen=True)
class _FlagOperations:
    enable: str
    disable: str
    enabling: str
    disabling: str


_FLAG_OPERATIONS: dict[FlagKind, _FlagOperations] = {
    FlagKind.VISIBILITY: _FlagOperations("expose_pipeline", "hide_pipeline", "exposing", "hiding"),
    FlagKind.PAUSE: _FlagOperations("pause_pipeline", "unpause_pipeline", "pausing", "unpausing"),
}


class PipelineReconciler:
    """Orchestrates config upload and flag reconciliation for pipelines.

    Args:
        control_plane: Client handing out team-scoped handles.
        reader: Reader used for the post-write re-read. Built from
            ``control_plane`` when omitted.
        write_mode: How the config version token is chosen on upload.
    """

    def __init__(
        self,
        control_plane: ControlPlane,
        reader: PipelineReader | None = None,
        write_mode: WriteMode = WriteMode.OVERWRITE,
    ) -> None:
        self.control_plane = control_plane
        self.reader = reader or PipelineReader(control_plane)
        self.write_mode = write_mode

    def write(self, identity: PipelineIdentity, submission: ConfigSubmission) -> PipelineState:
        """Apply a desired config and flags, then return the observed result.

        Args:
            identity: Pipeline to write.
            submission: Desired config and flag values.

        Returns:
            State re-read from the control plane after all changes committed.

        Raises:
            ConfigParseError: If the submitted config is malformed.
            ConfigWarningError: If the control plane reported config warnings.
            RemoteError: If any control plane call fails.
        """
        team_name, name = identity.team_name, identity.pipeline_name

        try:
            config_json = canonicalize(submission.raw_config, submission.config_format)
        except ConfigParseError as e:
            raise e.for_pipeline(name, team_name) from e

        self._upload(identity, config_json)
        self.set_flag(identity, FlagKind.VISIBILITY, submission.desired_exposed)
        self.set_flag(identity, FlagKind.PAUSE, submission.desired_paused)

        state = self.reader.read(identity)
        logger.info(
            f"Reconciled pipeline {identity} "
            f"(exposed={state.is_exposed}, paused={state.is_paused})"
        )
        return state

    def _config_version(self, identity: PipelineIdentity) -> str:
        if self.write_mode is WriteMode.COMPARE_AND_SWAP:
            return self.reader.current_version(identity)
        return BLIND_CONFIG_VERSION

    def _upload(self, identity: PipelineIdentity, config_json: str) -> None:
        team_name, name = identity.team_name, identity.pipeline_name
        version = self._config_version(identity)
        team = self.control_plane.team(team_name)

        logger.debug(f"Uploading config for pipeline {identity} (version {version})")
        try:
            result = team.create_or_update_pipeline_config(
                name, version, config_json.encode("utf-8"), False
            )
        except ControlPlaneAPIError as e:
            logger.error(f"Setting config for pipeline {identity} failed: {e}")
            raise RemoteError(
                f"Encountered error setting config for pipeline {name} in team '{team_name}': {e}",
                name,
                team_name,
            ) from e

        if not result.saved:
            raise RemoteError(
                f"Could not create/update pipeline {name} in team {team_name}", name, team_name
            )

        if result.warnings:
            raise ConfigWarningError(name, team_name, result.warnings)

        logger.debug(
            f"Config for pipeline {identity} {'created' if result.created else 'updated'}"
        )

    def set_flag(self, identity: PipelineIdentity, kind: FlagKind, desired: bool) -> None:
        """Assert one boolean flag on the control plane.

        The call is always issued, even if the flag already has the desired value.

        Args:
            identity: Pipeline to change.
            kind: Which flag to set.
            desired: Value the flag must end up with.

        Raises:
            RemoteError: If the call fails or the pipeline is reported missing.
        """
        team_name, name = identity.team_name, identity.pipeline_name
        ops = _FLAG_OPERATIONS[kind]
        operation, verb = (ops.enable, ops.enabling) if desired else (ops.disable, ops.disabling)
        team = self.control_plane.team(team_name)

        logger.debug(f"{verb.capitalize()} pipeline {identity}")
        try:
            found = getattr(team, operation)(name)
        except ControlPlaneAPIError as e:
            raise RemoteError(
                f"Error {verb} pipeline {name} in team '{team_name}': {e}", name, team_name
            ) from e

        if not found:
            raise RemoteError(
                f"Could not find pipeline {name} in team '{team_name}' while {verb} it",
                name,
                team_name,
            )

    def delete(self, identity: PipelineIdentity) -> None:
        """Delete a pipeline.

        Raises:
            RemoteError: If the call fails or nothing was deleted.
        """
        team_name, name = identity.team_name, identity.pipeline_name
        team = self.control_plane.team(team_name)

        try:
            deleted = team.delete_pipeline(name)
        except ControlPlaneAPIError as e:
            raise RemoteError(
                f"Could not delete pipeline {name} from team {team_name}: {e}", name, team_name
            ) from e

        if not deleted:
            raise RemoteError(
                f"Could not delete pipeline {name} from team {team_name}", name, team_name
            )

        logger.info(f"Deleted pipeline {identity}")
