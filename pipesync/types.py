"""Common type definitions for pipesync.

This module provides type aliases for commonly used types across the package,
improving type safety and reducing repetition.
"""

from typing import Any, TypeAlias

# JSON-compatible types for control plane payloads
JSONDict: TypeAlias = dict[str, Any]

# Decoded pipeline config document
PipelineConfig: TypeAlias = dict[str, Any]
