"""Pytest configuration and shared fixtures for the bbtransform test suite."""

import logging
import os

import pytest
from hypothesis import Phase, Verbosity, settings

from bbtransform import Document, parse

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=500, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=100)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


SIZE_EXAMPLE = 'Hello [size="14"][b]World!![/b][/size] Yo.'


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "security: Tests of escaping and URL screening")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def size_example() -> Document:
    """Provide the parsed ``[size]``/``[b]`` example document.

    Returns
    -------
    Document
        ``Hello [size="14"][b]World!![/b][/size] Yo.`` parsed with default options.

    """
    return parse(SIZE_EXAMPLE)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run in an empty directory with no config discovery outside it."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    monkeypatch.delenv("BBTRANSFORM_CONFIG", raising=False)
    for name in list(os.environ):
        if name.startswith("BBTRANSFORM_"):
            monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_package_logging():
    """Undo handler and level changes made to the ``bbtransform`` logger."""
    package_logger = logging.getLogger("bbtransform")
    handlers, level = package_logger.handlers[:], package_logger.level
    yield
    for handler in package_logger.handlers:
        if handler not in handlers:
            handler.close()
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
