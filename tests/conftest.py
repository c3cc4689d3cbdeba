"""Pytest fixtures for onion-pipeline tests."""

import json
import sys

import pytest

STEP_MODULE = "fixture_steps"

STEP_SOURCE = '''
from onion_pipeline.pipeline import STOP, Arguments


def double(value):
    yield Arguments(value * 2)


def bracket(*values):
    result = yield
    return f"[{result}]"


def gate(value):
    if value < 0:
        yield STOP
        return "rejected"
    yield


def total(*values):
    return sum(values)


def explode(*values):
    raise RuntimeError("destination failed")


def rescue(*values):
    try:
        result = yield
    except RuntimeError as e:
        return f"rescued: {e}"
    return result


NOT_CALLABLE = 42
'''


@pytest.fixture
def events():
    """Shared list steps append to, for asserting execution order."""
    return []


@pytest.fixture
def tracing_step(events):
    """Factory for generator steps that record before/after events."""

    def _make(name: str):
        def step(*arguments):
            events.append(f"{name}:before")
            yield
            events.append(f"{name}:after")

        return step

    return _make


@pytest.fixture
def step_module(tmp_path, monkeypatch):
    """Write an importable module of sample steps and return its name."""
    (tmp_path / f"{STEP_MODULE}.py").write_text(STEP_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    sys.modules.pop(STEP_MODULE, None)
    yield STEP_MODULE
    sys.modules.pop(STEP_MODULE, None)


@pytest.fixture
def write_definition(tmp_path):
    """Factory that writes a pipeline definition JSON file."""

    def _write(content: dict, name: str = "pipeline.json"):
        path = tmp_path / name
        path.write_text(json.dumps(content, indent=2))
        return path

    return _write
