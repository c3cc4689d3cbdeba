"""Middleware pipeline with suspend-and-resume steps."""

from .arguments import STOP, Arguments, is_stop
from .orchestrator import Orchestrator, load_definition, resolve_callable
from .plumbing import (
    ExceptionOffer,
    ExecutionStack,
    Pipeline,
    build_offer_chain,
    offer_exception,
)
from .suspension import (
    GeneratorSuspension,
    State,
    Suspend,
    SuspensionPoint,
    as_suspension,
)

__all__ = [
    "STOP",
    "Arguments",
    "is_stop",
    "Pipeline",
    "ExecutionStack",
    "ExceptionOffer",
    "build_offer_chain",
    "offer_exception",
    "State",
    "SuspensionPoint",
    "GeneratorSuspension",
    "Suspend",
    "as_suspension",
    "Orchestrator",
    "load_definition",
    "resolve_callable",
]
