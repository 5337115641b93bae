"""PipelineReader - observes the current state of a pipeline on the control plane."""

from pipesync.client import ControlPlane
from pipesync.exceptions import (
    ConfigParseError,
    ControlPlaneAPIError,
    PipelineNotFoundError,
    RemoteError,
)
from pipesync.models import (
    BLIND_CONFIG_VERSION,
    ConfigFormat,
    PipelineIdentity,
    PipelineState,
)
from pipesync.utils.logger import logger

from .converter import dump_json, json_to_yaml
from .parser import canonicalize


class PipelineReader:
    """Fetches existence, flags and config of a pipeline.

    Every read goes to the control plane; nothing is cached. A read either
    returns a fully populated state or raises.

    Args:
        control_plane: Client handing out team-scoped handles.
    """

    def __init__(self, control_plane: ControlPlane) -> None:
        self.control_plane = control_plane

    def read(self, identity: PipelineIdentity) -> PipelineState:
        """Read the observed state of a pipeline.

        Args:
            identity: Pipeline to read.

        Returns:
            Observed state with config in both JSON and YAML form.

        Raises:
            PipelineNotFoundError: If the pipeline or its config does not exist.
            RemoteError: If the control plane fails or returns an unparsable config.
        """
        team_name, name = identity.team_name, identity.pipeline_name
        team = self.control_plane.team(team_name)

        logger.debug(f"Looking up pipeline {identity}")
        try:
            info = team.get_pipeline(name)
        except ControlPlaneAPIError as e:
            raise RemoteError(
                f"Error looking up pipeline {name} within team '{team_name}': {e}",
                name,
                team_name,
            ) from e

        if info is None:
            raise PipelineNotFoundError(name, team_name)

        try:
            stored = team.get_pipeline_config(name)
        except ControlPlaneAPIError as e:
            raise RemoteError(
                f"Error looking up config of pipeline {name} within team '{team_name}': {e}",
                name,
                team_name,
            ) from e

        if stored is None:
            raise PipelineNotFoundError(
                name, team_name, f"No pipeline {name} config found within team {team_name}"
            )

        try:
            config_json = canonicalize(dump_json(stored.config), ConfigFormat.JSON)
            config_yaml = json_to_yaml(config_json)
        except ConfigParseError as e:
            raise RemoteError(
                f"Encountered error parsing pipeline {name} config within team '{team_name}': {e}",
                name,
                team_name,
            ) from e

        return PipelineState(
            team_name=team_name,
            pipeline_name=name,
            is_exposed=info.public,
            is_paused=info.paused,
            config_json=config_json,
            config_yaml=config_yaml,
        )

    def current_version(self, identity: PipelineIdentity) -> str:
        """Version token of the stored config.

        Returns:
            The stored version, or the blind token when no config exists yet.

        Raises:
            RemoteError: If the control plane fails.
        """
        team_name, name = identity.team_name, identity.pipeline_name
        try:
            stored = self.control_plane.team(team_name).get_pipeline_config(name)
        except ControlPlaneAPIError as e:
            raise RemoteError(
                f"Error looking up config version of pipeline {name} "
                f"within team '{team_name}': {e}",
                name,
                team_name,
            ) from e

        if stored is None or not stored.version:
            return BLIND_CONFIG_VERSION
        return stored.version
