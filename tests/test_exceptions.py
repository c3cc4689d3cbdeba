"""Tests for pipeline exception classes."""

from onion_pipeline.exceptions import InvalidConfiguration, PipelineError, SuspensionError


class TestPipelineError:
    """Tests for the base PipelineError exception."""

    def test_instantiation_with_message(self):
        """PipelineError stores the error message."""
        error = PipelineError("Something went wrong")

        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"

    def test_inheritance(self):
        """PipelineError is an Exception."""
        assert isinstance(PipelineError("test"), Exception)


class TestInvalidConfiguration:
    """Tests for InvalidConfiguration exception."""

    def test_defaults(self):
        """InvalidConfiguration defaults to empty offending and errors."""
        error = InvalidConfiguration("bad step")

        assert error.message == "bad step"
        assert error.offending == []
        assert error.errors == []

    def test_stores_offending_items(self):
        """InvalidConfiguration keeps the rejected items."""
        error = InvalidConfiguration("bad step", offending=[42, "x"])

        assert error.offending == [42, "x"]

    def test_stores_validation_errors(self):
        """InvalidConfiguration keeps validation details."""
        error = InvalidConfiguration("bad file", errors=[{"loc": ("steps",)}])

        assert error.errors == [{"loc": ("steps",)}]

    def test_inheritance(self):
        """InvalidConfiguration inherits from PipelineError."""
        error = InvalidConfiguration("test")

        assert isinstance(error, PipelineError)
        assert isinstance(error, Exception)


class TestSuspensionError:
    """Tests for SuspensionError exception."""

    def test_instantiation(self):
        """SuspensionError stores the error message."""
        error = SuspensionError("resumed twice")

        assert error.message == "resumed twice"

    def test_inheritance(self):
        """SuspensionError inherits from PipelineError."""
        assert isinstance(SuspensionError("test"), PipelineError)
