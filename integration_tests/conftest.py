"""Pytest configuration for integration tests."""

import pytest
from click.testing import CliRunner

from plainfit.cli import main


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def data_dir(tmp_path):
    """Data directory for one CLI session."""
    return tmp_path / "plainfit"


@pytest.fixture
def invoke(data_dir):
    """Run the CLI against ``data_dir``."""
    runner = CliRunner()

    def run(*args, input=None):
        return runner.invoke(main, ["--data-dir", str(data_dir), *args], input=input)

    return run


@pytest.fixture
def initialized(invoke):
    """A data directory after ``plainfit init``."""
    result = invoke("init")
    assert result.exit_code == 0, result.output
    return invoke
