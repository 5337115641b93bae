"""
pipesync - pipeline definition reconciliation for a Concourse control plane.

Takes a pipeline configuration document in JSON or YAML, normalizes it,
uploads it and reconciles the pipeline's visibility and pause flags.
"""

__version__ = "0.1.0"
