"""
pipesync data models.

This package contains the pydantic models describing pipelines, the desired
state submitted for a write and the payloads exchanged with the control plane.
"""

from .pipeline import (
    BLIND_CONFIG_VERSION,
    ID_DELIMITER,
    ConfigFormat,
    ConfigSubmission,
    ConfigWarning,
    PipelineConfigResponse,
    PipelineIdentity,
    PipelineInfo,
    PipelineState,
    SaveConfigResult,
    WriteMode,
)

__all__ = [
    "BLIND_CONFIG_VERSION",
    "ID_DELIMITER",
    "ConfigFormat",
    "ConfigSubmission",
    "ConfigWarning",
    "PipelineConfigResponse",
    "PipelineIdentity",
    "PipelineInfo",
    "PipelineState",
    "SaveConfigResult",
    "WriteMode",
]
