"""
Exceptions for pipesync.

All domain exceptions live in :mod:`pipesync.exceptions.domain` and are
re-exported here for convenience.
"""

from .domain import (
    ConfigParseError,
    ConfigurationError,
    ConfigWarningError,
    ControlPlaneAPIError,
    ControlPlaneAuthError,
    InvalidPipelineIdError,
    PipelineError,
    PipelineNotFoundError,
    PipesyncError,
    RemoteError,
)

__all__ = [
    "ConfigParseError",
    "ConfigWarningError",
    "ConfigurationError",
    "ControlPlaneAPIError",
    "ControlPlaneAuthError",
    "InvalidPipelineIdError",
    "PipelineError",
    "PipelineNotFoundError",
    "PipesyncError",
    "RemoteError",
]
