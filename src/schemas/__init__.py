"""Schema definitions for onion-pipeline."""

from .definition import IMPORT_REFERENCE_PATTERN, ImportReference, PipelineDefinition

__all__ = [
    "IMPORT_REFERENCE_PATTERN",
    "ImportReference",
    "PipelineDefinition",
]
