"""Pipeline orchestrator for definition-driven runs.

Resolves the steps and destination named in a PipelineDefinition and runs
arguments through them.
"""

import importlib
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from onion_pipeline.exceptions import InvalidConfiguration
from onion_pipeline.pipeline.plumbing import Pipeline
from schemas.definition import PipelineDefinition

logger = logging.getLogger(__name__)


def resolve_callable(reference: str) -> Callable:
    """Import the callable named by an import reference.

    Accepts ``"package.module:attribute"`` (the attribute may be dotted) or
    ``"package.module.attribute"``.

    Args:
        reference: The import reference

    Returns:
        The referenced callable

    Raises:
        InvalidConfiguration: If the module cannot be imported, the attribute
            does not exist, or the target is not callable
    """
    module_name, separator, attribute = reference.partition(":")
    if not separator:
        module_name, _, attribute = reference.rpartition(".")
    if not module_name or not attribute:
        raise InvalidConfiguration(f"Invalid import reference: {reference}", offending=[reference])

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidConfiguration(
            f"Cannot import module {module_name} for {reference}: {e}",
            offending=[reference],
        ) from e

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise InvalidConfiguration(
                f"{reference} does not exist", offending=[reference]
            ) from e

    if not callable(target):
        raise InvalidConfiguration(f"{reference} is not callable", offending=[reference])

    return target


def load_definition(path: Path) -> PipelineDefinition:
    """Load and validate a pipeline definition from a JSON file.

    Args:
        path: Path to the definition file

    Returns:
        The validated definition

    Raises:
        InvalidConfiguration: If the file is missing or unreadable, is not
            JSON, or does not match the definition schema
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise InvalidConfiguration(f"Pipeline definition not found: {path}") from e
    except OSError as e:
        raise InvalidConfiguration(f"Pipeline definition cannot be read: {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidConfiguration(f"Pipeline definition is not UTF-8 text: {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"Pipeline definition is not valid JSON: {path}: {e}") from e

    try:
        return PipelineDefinition.model_validate(data)
    except ValidationError as e:
        raise InvalidConfiguration(
            f"Invalid pipeline definition: {path}", errors=e.errors()
        ) from e


class Orchestrator:
    """Definition-driven pipeline runner.

    Resolves every import reference once, then builds a fresh Pipeline for
    each run so runs never share configuration state.

    Attributes:
        definition: The pipeline definition
        steps: Resolved step callables, outermost first
        destination: Resolved destination callable
    """

    def __init__(self, definition: PipelineDefinition):
        self.definition = definition
        self.steps = [resolve_callable(ref) for ref in definition.steps]
        self.destination = resolve_callable(definition.destination)
        logger.debug(
            f"Resolved pipeline {definition.name} with {len(self.steps)} step(s)"
        )

    @classmethod
    def from_file(cls, path: Path) -> "Orchestrator":
        return cls(load_definition(path))

    def pipeline(self) -> Pipeline:
        """Build a new Pipeline configured with the resolved steps."""
        return Pipeline().through(self.steps)

    def run(self, arguments: list | None = None) -> Any:
        """Run arguments through the pipeline.

        Args:
            arguments: Arguments to send; the definition's arguments are
                used when None

        Returns:
            The pipeline result
        """
        if arguments is None:
            arguments = self.definition.arguments

        logger.info(f"Running pipeline {self.definition.name}")
        return self.pipeline().send(*arguments).then(self.destination)
