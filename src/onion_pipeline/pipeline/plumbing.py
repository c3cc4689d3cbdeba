"""Middleware pipeline infrastructure.

Steps wrap a destination handler like the layers of an onion. Each step runs
in order; a step that returns a suspension point is pushed onto an execution
stack and paused. After the destination runs, the stack is unwound in
reverse, resuming each paused step with the current result so it can act
"after" the inner chain.

This module provides the core abstractions:
- ExecutionStack: LIFO record of paused steps for one run
- ExceptionOffer: one record in the innermost-first exception chain
- Pipeline: configures steps and arguments and executes them
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from onion_pipeline.exceptions import InvalidConfiguration
from onion_pipeline.pipeline.arguments import Arguments, is_stop
from onion_pipeline.pipeline.suspension import SuspensionPoint, as_suspension

logger: logging.Logger = logging.getLogger(__name__)


class ExecutionStack:
    """
    Ordered record of the suspension points started during one run.

    Points are pushed in the order their steps start and popped in reverse,
    so the step closest to the destination is always resumed first.
    """

    def __init__(self) -> None:
        self._points: list[SuspensionPoint] = []

    def __repr__(self) -> str:
        return f"ExecutionStack({len(self._points)})"

    def __len__(self) -> int:
        return len(self._points)

    def __bool__(self) -> bool:
        return bool(self._points)

    def __iter__(self) -> Iterator[SuspensionPoint]:
        return iter(self._points)

    def push(self, point: SuspensionPoint) -> None:
        self._points.append(point)

    def pop(self) -> SuspensionPoint:
        if not self._points:
            raise IndexError("pop from an empty execution stack")
        return self._points.pop()

    def innermost_first(self) -> list[SuspensionPoint]:
        return list(reversed(self._points))


@dataclass(frozen=True)
class ExceptionOffer:
    """A handler in the exception offer chain.

    Attributes:
        position: Index of the suspension point in the execution stack
        point: The suspension point given the chance to absorb
    """

    position: int
    point: SuspensionPoint

    def offer(self, exception: Exception) -> Any:
        return self.point.throw(exception)


def build_offer_chain(stack: ExecutionStack) -> list[ExceptionOffer]:
    """Build the exception offer chain from the current stack contents.

    Args:
        stack: The execution stack at the moment the exception was raised

    Returns:
        Handler records ordered innermost first
    """
    depth = len(stack)
    return [
        ExceptionOffer(position=depth - 1 - offset, point=point)
        for offset, point in enumerate(stack.innermost_first())
    ]


def offer_exception(stack: ExecutionStack, exception: Exception) -> Any:
    """Offer an exception to each paused step, innermost first.

    The first step that handles the exception without raising absorbs it:
    its final value is returned and no other step is resumed. A step that
    raises passes its exception (the original or a new one) outward.

    Args:
        stack: The execution stack at the moment the exception was raised
        exception: The exception to offer

    Returns:
        The final value of the step that absorbed the exception

    Raises:
        Exception: The last exception raised if no step absorbed it
    """
    for handler in build_offer_chain(stack):
        try:
            result = handler.offer(exception)
        except Exception as e:
            logger.debug(
                f"Stack position {handler.position} passed on "
                f"{type(e).__name__}: {e}"
            )
            exception = e
            continue

        logger.debug(
            f"Stack position {handler.position} absorbed "
            f"{type(exception).__name__}: {exception}"
        )
        return result

    logger.debug(f"No step absorbed {type(exception).__name__}: {exception}")
    raise exception


def _is_step_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _require_callable(value: Any, role: str) -> None:
    if not callable(value):
        raise InvalidConfiguration(f"Pipeline {role} must be callable", offending=[value])


class Pipeline:
    """
    Runs arguments through an ordered list of steps to a destination.

    A step is any callable. It receives the current arguments positionally
    and either returns a plain value (it is finished) or a suspension point,
    usually a generator::

        def timing(request):
            started = time.monotonic()
            response = yield
            response.headers["X-Elapsed"] = str(time.monotonic() - started)
            return response

    The first value a step yields controls the chain: ``STOP`` skips every
    inner step and the destination, an ``Arguments`` instance replaces the
    arguments for inner steps, anything else has no effect.

    A single Pipeline instance must not be reconfigured while ``then()`` is
    running; use separate instances for concurrent runs.

    Attributes:
        steps: Ordered step callables
        arguments: Arguments passed to the first step
    """

    def __init__(self) -> None:
        self.steps: list[Callable] = []
        self.arguments: list = []

    def __repr__(self) -> str:
        return f"Pipeline(steps={len(self.steps)}, arguments={len(self.arguments)})"

    def send(self, *arguments: Any) -> "Pipeline":
        """Set the arguments passed through the pipeline.

        Replaces any previously sent arguments.
        """
        self.arguments = list(arguments)
        return self

    def through(self, *steps: Any) -> "Pipeline":
        """Set the steps the arguments pass through.

        Accepts either a single sequence of callables (list, tuple, deque)
        or the callables themselves. Replaces any previously configured steps.

        Args:
            *steps: The steps, in the order they run

        Returns:
            This pipeline

        Raises:
            InvalidConfiguration: If any step is not callable. The existing
                steps are left untouched.
        """
        if len(steps) == 1 and _is_step_sequence(steps[0]):
            steps = tuple(steps[0])

        offending = [step for step in steps if not callable(step)]
        if offending:
            raise InvalidConfiguration("Pipeline steps must be callable", offending=offending)

        self.steps = list(steps)
        return self

    def push(self, step: Callable) -> "Pipeline":
        """Append a step to the end (innermost position) of the chain."""
        _require_callable(step, "step")
        self.steps.append(step)
        return self

    def unshift(self, step: Callable) -> "Pipeline":
        """Prepend a step to the start (outermost position) of the chain."""
        _require_callable(step, "step")
        self.steps.insert(0, step)
        return self

    def then(self, destination: Callable) -> Any:
        """Run the pipeline with the given destination.

        Steps run in order, then the destination (unless a step stopped the
        chain), then paused steps are resumed in reverse. A step that
        returns a value from its resume replaces the result; one that
        returns None leaves it unchanged.

        An exception raised anywhere along the way is offered to the paused
        steps, innermost first, and the first one to handle it decides the
        result. Unhandled exceptions propagate unchanged.

        Args:
            destination: The innermost handler, called with the final
                arguments

        Returns:
            The final result

        Raises:
            InvalidConfiguration: If the destination is not callable
        """
        _require_callable(destination, "destination")

        steps = list(self.steps)
        arguments = list(self.arguments)
        stack = ExecutionStack()

        try:
            stopped = False
            for position, step in enumerate(steps):
                point = as_suspension(step(*arguments))
                if point is None:
                    logger.debug(f"Step at position {position} completed inline")
                    continue

                # A step joins the stack only once it has paused
                control = point.start()
                stack.push(point)
                if is_stop(control):
                    logger.debug(f"Step at position {position} stopped the chain")
                    stopped = True
                    break
                elif isinstance(control, Arguments):
                    logger.debug(f"Step at position {position} replaced the arguments")
                    arguments = control.to_list()

            result = None if stopped else destination(*arguments)

            while stack:
                point = stack.pop()
                logger.debug(f"Resuming stack position {len(stack)}")
                value = point.resume(result)
                if value is not None:
                    result = value

        except Exception as e:
            logger.debug(f"Offering {type(e).__name__} to {len(stack)} paused step(s)")
            return offer_exception(stack, e)

        return result
