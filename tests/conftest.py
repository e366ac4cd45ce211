"""
Pytest configuration and shared fixtures for llvmconfigkit tests.
"""

import pytest
from pathlib import Path

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.llvm_config import (
    fake_runner,
    fake_llvm_config,
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests against an installed llvm-config",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove the llvm-config override variable from the environment."""
    monkeypatch.delenv("LLVM_CONFIG_PATH", raising=False)


@pytest.fixture
def sample_settings_yaml(tmp_path: Path) -> Path:
    """Create sample llvmconfigkit.yaml settings."""
    content = """version: 1
candidates: [llvm-config-18, llvm-config]
strict: false
link_mode: static
queries: [cflags, ldflags, libs, includedir, libdir]
requirement:
  min_version: "15.0"
  components: [core, support]
"""
    settings_file = tmp_path / "llvmconfigkit.yaml"
    settings_file.write_text(content)
    return settings_file
