"""
Pipeline Service - pipeline config reconciliation against a Concourse control plane.

Canonicalizes JSON/YAML pipeline configs, uploads them and reconciles the
visibility and pause flags, always returning the state the control plane
actually committed.

Example:
    from pipesync.client import ConcourseClient
    from pipesync.models import ConfigFormat, ConfigSubmission
    from pipesync.services.pipeline import PipelineReconciler, make_identity

    with ConcourseClient("http://localhost:8080", token="...") as client:
        reconciler = PipelineReconciler(client)
        state = reconciler.write(
            make_identity("main", "ci"),
            ConfigSubmission(
                raw_config="jobs: []",
                config_format=ConfigFormat.YAML,
                desired_exposed=True,
                desired_paused=False,
            ),
        )
"""

from .converter import json_to_json, json_to_yaml, yaml_to_json
from .identity import make_identity, parse_pipeline_id, pipeline_id
from .parser import canonicalize
from .reader import PipelineReader
from .reconciler import FlagKind, PipelineReconciler
from .resource import (
    ManagedPipeline,
    ManagedPipelineInput,
    ManagedPipelineOutput,
    PipelineLookup,
    PipelineLookupInput,
    PipelineLookupOutput,
)

__all__ = [
    "FlagKind",
    "ManagedPipeline",
    "ManagedPipelineInput",
    "ManagedPipelineOutput",
    "PipelineLookup",
    "PipelineLookupInput",
    "PipelineLookupOutput",
    "PipelineReader",
    "PipelineReconciler",
    "canonicalize",
    "json_to_json",
    "json_to_yaml",
    "make_identity",
    "parse_pipeline_id",
    "pipeline_id",
    "yaml_to_json",
]
