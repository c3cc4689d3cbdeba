"""Custom exceptions for the middleware pipeline."""


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class InvalidConfiguration(PipelineError):
    """Raised when a pipeline is configured with something it cannot run.

    Covers non-callable steps or destinations, import references that do
    not resolve, and definition files that fail validation.
    """

    def __init__(
        self,
        message: str,
        offending: list | None = None,
        errors: list | None = None,
        *args,
        **kwargs,
    ):
        self.offending = offending or []
        self.errors = errors or []
        super().__init__(message, *args, **kwargs)


class SuspensionError(PipelineError):
    """Raised when a suspension point is driven outside its protocol."""

    pass
