"""Declarative pipeline definition schemas.

A definition names the steps and destination of a pipeline by import
reference so a pipeline can be assembled from a JSON file:

    {
        "name": "checkout",
        "steps": ["shop.middleware:authenticate", "shop.middleware.audit"],
        "destination": "shop.handlers:checkout",
        "arguments": [{"cart": 42}]
    }
"""

from typing import Annotated, Any

from pydantic import BaseModel, Field

IMPORT_REFERENCE_PATTERN = (
    r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*"
    r"(:[A-Za-z_]\w*(\.[A-Za-z_]\w*)*|\.[A-Za-z_]\w*)$"
)

ImportReference = Annotated[str, Field(pattern=IMPORT_REFERENCE_PATTERN)]


class PipelineDefinition(BaseModel):
    """Definition of a pipeline loaded from configuration.

    Attributes:
        name: Display name for logging
        version: Definition schema version
        description: Optional free-text description
        steps: Import references of the step callables, outermost first
        destination: Import reference of the destination callable
        arguments: Default arguments sent through the pipeline
    """

    name: str = "pipeline"
    version: str = "1.0"
    description: str | None = None
    steps: list[ImportReference] = []
    destination: ImportReference
    arguments: list[Any] = []

    model_config = {"extra": "forbid"}
