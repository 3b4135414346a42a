"""
Pytest configuration and shared fixtures for delivery-rust tests.
"""

import subprocess
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from delivery_rust.config.parser import OmnibusConfig, PrepConfig
from delivery_rust.converge.environment import ProcessEnvironment


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests against the real host",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Test Doubles
# ============================================================================


class RecordingRunner:
    """
    CommandRunner stand-in that records commands and simulates a package database.

    ``rpm -q`` and ``dpkg-query`` answer from ``installed``; install commands
    add to it. Commands listed in ``failures`` return the given exit code.
    """

    def __init__(self, installed=(), failures=None):
        self.commands = []
        self.envs = []
        self.installed = set(installed)
        self.failures = dict(failures or {})

    def run(self, command, check=True, env=None):
        from delivery_rust.core.exceptions import CommandFailedError

        command = list(command)
        self.commands.append(command)
        self.envs.append(env)

        returncode, stdout = 0, ""
        if command[0] in self.failures:
            returncode = self.failures[command[0]]
        elif command[0] == "rpm":
            returncode = 0 if command[-1] in self.installed else 1
        elif command[0] == "dpkg-query":
            if command[-1] in self.installed:
                stdout = "install ok installed"
            else:
                returncode = 1
        elif "install" in command:
            self.installed.add(command[-1])

        if check and returncode != 0:
            raise CommandFailedError(command, returncode, "simulated failure")
        return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr="")

    def executables(self):
        return [command[0] for command in self.commands]


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def runner() -> RecordingRunner:
    """Command runner with an empty package database."""
    return RecordingRunner()


@pytest.fixture
def make_runner():
    """Factory for command runners with preinstalled packages or failures."""
    return RecordingRunner


@pytest.fixture
def environ() -> dict:
    """Isolated environment mapping."""
    return {"PATH": "C:/Windows/system32"}


@pytest.fixture
def environment(environ) -> ProcessEnvironment:
    """Environment store over the isolated mapping."""
    return ProcessEnvironment(environ)


@pytest.fixture
def make_config(temp_dir: Path):
    """Factory for PrepConfig whose linker config path lives in temp_dir."""

    def _make(platform_family: str = "rhel", **overrides) -> PrepConfig:
        overrides.setdefault(
            "ld_so_conf_path", str(temp_dir / "ld.so.conf.d" / "rust-x86_64.conf")
        )
        overrides.setdefault(
            "recipes", {"delivery_rust::_omnibus": [["rustup-init", "-y"]]}
        )
        ruby_version = overrides.pop("ruby_version", "ruby-2.1.6-x64")
        return PrepConfig(
            platform_family=platform_family,
            omnibus=OmnibusConfig(ruby_version=ruby_version),
            **overrides,
        )

    return _make


@pytest.fixture
def sample_config_yaml(temp_dir: Path) -> Path:
    """Create sample delivery_rust.yaml configuration."""
    config_content = """platform_family: debian
omnibus:
  ruby_version: ruby-2.1.6-x64
unsupported_policy: warn
strict_includes: false
recipes:
  delivery_rust::_omnibus:
    - [rustup-init, -y]
    - rustc --version
"""
    config_file = temp_dir / "delivery_rust.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from delivery_rust.core import platform

    platform.clear_platform_cache()
    yield
    platform.clear_platform_cache()
