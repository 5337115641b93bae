"""Composite identifiers for pipelines.

A pipeline is identified by ``"<team>:<pipeline>"``. Team names may not
contain the delimiter, so a key splits unambiguously on its first ``:``.
"""

from pipesync.exceptions import InvalidPipelineIdError
from pipesync.models import ID_DELIMITER, PipelineIdentity


def make_identity(team_name: str, pipeline_name: str) -> PipelineIdentity:
    """Build an identity, validating both components.

    Raises:
        InvalidPipelineIdError: If a component is empty or the team name
            contains the delimiter.
    """
    candidate = f"{team_name}{ID_DELIMITER}{pipeline_name}"
    if not team_name:
        raise InvalidPipelineIdError(candidate, "team name is empty")
    if not pipeline_name:
        raise InvalidPipelineIdError(candidate, "pipeline name is empty")
    if ID_DELIMITER in team_name:
        raise InvalidPipelineIdError(
            candidate, f"team name may not contain '{ID_DELIMITER}'"
        )
    return PipelineIdentity(team_name=team_name, pipeline_name=pipeline_name)


def pipeline_id(team_name: str, pipeline_name: str) -> str:
    """Resource identifier for a pipeline."""
    return make_identity(team_name, pipeline_name).key


def parse_pipeline_id(key: str) -> PipelineIdentity:
    """Split a resource identifier back into its identity.

    Raises:
        InvalidPipelineIdError: If the key has no delimiter or an empty component.
    """
    team_name, sep, pipeline_name = key.partition(ID_DELIMITER)
    if not sep:
        raise InvalidPipelineIdError(key, f"expected '<team>{ID_DELIMITER}<pipeline>'")
    return make_identity(team_name, pipeline_name)
