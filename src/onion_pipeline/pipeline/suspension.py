"""Suspension points: a step's paused execution.

A suspension point is a two-phase continuation. ``start()`` runs the step up
to its pause and returns the control value it paused on. Later, during
unwind, ``resume(result)`` hands it the inner result and returns its final
value, or ``throw(exception)`` offers it an exception raised further in.

Two implementations are provided:

- GeneratorSuspension: wraps a generator; the first ``yield`` is the control
  value and the generator's ``return`` value is the final value
- Suspend: built from plain callbacks for steps that do not use generators
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable, Generator
from enum import Enum
from typing import Any

from onion_pipeline.exceptions import SuspensionError


class State(Enum):
    """Lifecycle of a suspension point."""

    CREATED = "created"
    SUSPENDED = "suspended"
    COMPLETED = "completed"


class SuspensionPoint(ABC):
    """
    Explicit continuation interface for a suspended step.

    Final values use ``None`` for "absent": a resume that returns None
    leaves the pipeline's current result unchanged.

    Attributes:
        state: Current lifecycle state
        value: Final value once completed, None before that
    """

    def __init__(self) -> None:
        self.state = State.CREATED
        self.value: Any = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.state.value})"

    @property
    def completed(self) -> bool:
        return self.state is State.COMPLETED

    @abstractmethod
    def start(self) -> Any:
        """Run phase 1 and return the control value.

        Returns:
            The value the step paused on

        Raises:
            SuspensionError: If the point was already started
        """
        pass

    @abstractmethod
    def resume(self, result: Any) -> Any:
        """Run phase 2 with the current pipeline result.

        Args:
            result: The result produced by everything inside this step

        Returns:
            The final value, or None to pass the result through

        Raises:
            SuspensionError: If the point was never started
        """
        pass

    @abstractmethod
    def throw(self, exception: Exception) -> Any:
        """Offer an exception to the suspended step.

        Args:
            exception: The exception raised further inside the chain

        Returns:
            The final value if the step absorbed the exception

        Raises:
            Exception: The offered exception, or whatever the step raised
                while handling it
        """
        pass

    def _begin(self) -> None:
        if self.state is not State.CREATED:
            raise SuspensionError(f"{self!r} has already been started")

    def _ensure_started(self) -> None:
        if self.state is State.CREATED:
            raise SuspensionError(f"{self!r} cannot be resumed before it is started")

    def _complete(self, value: Any) -> Any:
        self.state = State.COMPLETED
        self.value = value
        return value


class GeneratorSuspension(SuspensionPoint):
    """
    Suspension point backed by a generator.

    The generator must yield exactly once. Its return value is the final
    value; a bare ``return`` (or falling off the end) passes the result
    through.

    Attributes:
        generator: The wrapped generator
    """

    def __init__(self, generator: Generator):
        super().__init__()
        self.generator = generator

    def __repr__(self) -> str:
        name = getattr(self.generator, "__qualname__", "generator")
        return f"GeneratorSuspension({name}, {self.state.value})"

    def start(self) -> Any:
        self._begin()
        try:
            control = next(self.generator)
        except StopIteration as stop:
            # Returned without pausing; nothing left to run on unwind
            self._complete(stop.value)
            return None
        except Exception:
            self.state = State.COMPLETED
            raise

        self.state = State.SUSPENDED
        return control

    def resume(self, result: Any) -> Any:
        self._ensure_started()
        if self.completed:
            return self.value
        return self._advance(self.generator.send, result)

    def throw(self, exception: Exception) -> Any:
        if self.state is not State.SUSPENDED:
            raise exception
        return self._advance(self.generator.throw, exception)

    def _advance(self, step: Callable[[Any], Any], value: Any) -> Any:
        try:
            step(value)
        except StopIteration as stop:
            return self._complete(stop.value)
        except Exception:
            self.state = State.COMPLETED
            raise

        self.state = State.COMPLETED
        self.generator.close()
        raise SuspensionError(f"{self!r} yielded again instead of returning")


class Suspend(SuspensionPoint):
    """
    Callback-based suspension point.

    Lets a plain function take part in the onion without being written as
    a generator::

        def audit(request):
            return Suspend(after=lambda response: record(request, response))

    Attributes:
        control: Control value returned by ``start()``
        after: Called with the inner result on unwind; its return value is
            the final value
        recover: Called with an offered exception; its return value is the
            final value. Without it every offered exception is re-raised.
    """

    def __init__(
        self,
        control: Any = None,
        after: Callable[[Any], Any] | None = None,
        recover: Callable[[Exception], Any] | None = None,
    ):
        super().__init__()
        self.control = control
        self.after = after
        self.recover = recover

    def start(self) -> Any:
        self._begin()
        self.state = State.SUSPENDED
        return self.control

    def resume(self, result: Any) -> Any:
        self._ensure_started()
        if self.completed:
            return self.value
        self.state = State.COMPLETED
        return self._complete(self.after(result) if self.after else None)

    def throw(self, exception: Exception) -> Any:
        if self.state is not State.SUSPENDED or self.recover is None:
            self.state = State.COMPLETED
            raise exception
        self.state = State.COMPLETED
        return self._complete(self.recover(exception))


def as_suspension(outcome: Any) -> SuspensionPoint | None:
    """Normalise a step's return value.

    Args:
        outcome: Whatever the step returned

    Returns:
        A suspension point to push on the execution stack, or None if the
        step already completed
    """
    if isinstance(outcome, SuspensionPoint):
        return outcome
    if inspect.isgenerator(outcome):
        return GeneratorSuspension(outcome)
    return None
