"""
Domain exceptions for the pipeline reconciliation layer.

These exceptions are used by the converter, reader and reconciler to represent
failures without coupling to HTTP status codes or to the client library.
"""

from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from pipesync.models.pipeline import ConfigWarning


class PipesyncError(Exception):
    """Base exception for all pipesync-specific errors."""

    def with_context(self, detail: str) -> Self:
        """Add context information to the exception.

        Args:
            detail: Additional details about the error

        Returns:
            Self with updated message
        """
        self.args = (detail,)
        return self


# Identity exceptions
class InvalidPipelineIdError(PipesyncError):
    """Raised when a composite pipeline identifier cannot be built or parsed."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        super().__init__(f"Invalid pipeline identifier '{value}': {reason}")


# Pipeline exceptions
class PipelineError(PipesyncError):
    """Base exception for failures tied to a single pipeline.

    Args:
        message: Human readable description of the failure.
        pipeline_name: Name of the pipeline involved, if known.
        team_name: Name of the team owning the pipeline, if known.
    """

    def __init__(
        self,
        message: str,
        pipeline_name: str | None = None,
        team_name: str | None = None,
    ) -> None:
        self.pipeline_name = pipeline_name
        self.team_name = team_name
        super().__init__(message)


class ConfigParseError(PipelineError):
    """Raised when a pipeline configuration document is malformed.

    Caused by caller input on the write path and never retried. The underlying
    YAML/JSON error is chained as ``__cause__``.
    """

    def __init__(
        self,
        config_format: str,
        raw: str,
        reason: str,
        pipeline_name: str | None = None,
        team_name: str | None = None,
    ) -> None:
        self.config_format = config_format
        self.raw = raw
        self.reason = reason
        if pipeline_name is not None:
            message = (
                f"Error parsing {config_format} config of pipeline {pipeline_name} "
                f"in team '{team_name}': {reason}"
            )
        else:
            message = f"Error parsing {config_format} config: {reason}"
        super().__init__(message, pipeline_name, team_name)

    def for_pipeline(self, pipeline_name: str, team_name: str) -> "ConfigParseError":
        """Return a copy of this error carrying the pipeline identity."""
        return ConfigParseError(self.config_format, self.raw, self.reason, pipeline_name, team_name)


class PipelineNotFoundError(PipelineError):
    """Raised when a pipeline or its config does not exist on the control plane."""

    def __init__(self, pipeline_name: str, team_name: str, detail: str | None = None) -> None:
        message = detail or f"Could not find pipeline {pipeline_name} within team {team_name}"
        super().__init__(message, pipeline_name, team_name)


class RemoteError(PipelineError):
    """Raised when the control plane fails or reports an inconsistent state."""

    pass


class ConfigWarningError(RemoteError):
    """Raised when the control plane accepted a config but reported warnings.

    Warnings block the write entirely; each one is listed as
    ``"<type>: <message>"`` on its own line.
    """

    def __init__(
        self, pipeline_name: str, team_name: str, warnings: list["ConfigWarning"]
    ) -> None:
        self.warnings = list(warnings)
        lines = "".join(f"{w.type}: {w.message}\n" for w in self.warnings)
        super().__init__(
            f"Encountered pipeline warnings ({pipeline_name}/{team_name}):\n{lines}",
            pipeline_name,
            team_name,
        )


# Control plane client exceptions
class ControlPlaneAPIError(PipesyncError):
    """Raised by the HTTP client on transport errors and unexpected responses."""

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None) -> None:
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class ControlPlaneAuthError(ControlPlaneAPIError):
    """Authentication-related errors."""

    pass


# Configuration errors
class ConfigurationError(PipesyncError):
    """Raised when there's a configuration problem."""

    pass
