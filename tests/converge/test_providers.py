"""
Tests for resource providers.
"""

import os
import stat
import sys
from contextlib import contextmanager
from unittest.mock import patch

import pytest

from delivery_rust.converge.environment import (
    MACHINE_ENVIRONMENT_KEY,
    ProcessEnvironment,
    WindowsMachineEnvironment,
)
from delivery_rust.converge.packages import YumBackend
from delivery_rust.converge.providers import (
    EnvProvider,
    ExecuteProvider,
    FileProvider,
    PackageProvider,
)
from delivery_rust.core.exceptions import (
    CommandFailedError,
    EnvironmentUpdateError,
    FileResourceError,
    PackageManagerNotFoundError,
)
from delivery_rust.recipes.resources import (
    EnvResource,
    ExecuteResource,
    FileResource,
    PackageResource,
)


class TestFileProvider:
    """Tests for FileProvider."""

    def test_missing_file_needs_update(self, temp_dir):
        resource = FileResource(str(temp_dir / "rust.conf"), "/usr/local/lib\n", 0o644)

        assert FileProvider().needs_update(resource)

    def test_apply_then_up_to_date(self, temp_dir):
        path = temp_dir / "rust.conf"
        resource = FileResource(str(path), "/usr/local/lib\n", 0o644)
        provider = FileProvider()

        provider.apply(resource)

        assert path.read_text() == "/usr/local/lib\n"
        assert not provider.needs_update(resource)

    def test_different_content_needs_update(self, temp_dir):
        path = temp_dir / "rust.conf"
        path.write_text("  /usr/local/lib\n")

        resource = FileResource(str(path), "/usr/local/lib\n")

        assert FileProvider().needs_update(resource)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_wrong_mode_needs_update(self, temp_dir):
        path = temp_dir / "rust.conf"
        path.write_text("/usr/local/lib\n")
        os.chmod(path, 0o600)
        resource = FileResource(str(path), "/usr/local/lib\n", 0o644)
        provider = FileProvider()

        assert provider.needs_update(resource)
        provider.apply(resource)
        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_write_failure(self, temp_dir):
        resource = FileResource(str(temp_dir / "rust.conf"), "x\n")

        with patch(
            "delivery_rust.converge.providers.atomic_write",
            side_effect=PermissionError("read-only file system"),
        ):
            with pytest.raises(FileResourceError, match="read-only"):
                FileProvider().apply(resource)


class TestExecuteProvider:
    def test_always_needs_update(self, runner):
        resource = ExecuteResource("reload ldconfig", ("ldconfig",))

        assert ExecuteProvider(runner).needs_update(resource)

    def test_apply_runs_command(self, runner):
        ExecuteProvider(runner).apply(ExecuteResource("reload ldconfig", ["ldconfig"]))

        assert runner.commands == [["ldconfig"]]

    def test_failure_propagates(self, make_runner):
        runner = make_runner(failures={"ldconfig": 1})

        with pytest.raises(CommandFailedError):
            ExecuteProvider(runner).apply(ExecuteResource("reload ldconfig", ["ldconfig"]))


class TestPackageProvider:
    def test_installed_package_is_up_to_date(self, make_runner):
        provider = PackageProvider(YumBackend(make_runner(installed={"git"})))

        assert not provider.needs_update(PackageResource("git"))

    def test_install_missing_package(self, runner):
        provider = PackageProvider(YumBackend(runner))
        resource = PackageResource("git")

        assert provider.needs_update(resource)
        provider.apply(resource)
        assert not provider.needs_update(resource)

    def test_no_backend(self):
        with pytest.raises(PackageManagerNotFoundError):
            PackageProvider(None).needs_update(PackageResource("git"))


class TestEnvProvider:
    """Tests for EnvProvider."""

    def _modify(self, value):
        return EnvResource("add", "PATH", value, delim=";", action="modify")

    def test_modify_appends(self):
        environ = {"PATH": "C:/Windows"}
        provider = EnvProvider(ProcessEnvironment(environ))

        provider.apply(self._modify("C:/rubies/2.1/bin"))

        assert environ["PATH"] == "C:/Windows;C:/rubies/2.1/bin"

    def test_modify_existing_entry_is_up_to_date(self):
        environ = {"PATH": "C:/rubies/2.1/bin;C:/Windows"}
        provider = EnvProvider(ProcessEnvironment(environ))

        assert not provider.needs_update(self._modify("C:/rubies/2.1/bin"))

    def test_modify_unset_variable(self):
        environ = {}
        EnvProvider(ProcessEnvironment(environ)).apply(self._modify("C:/bin"))

        assert environ["PATH"] == "C:/bin"

    def test_modify_strips_single_trailing_delimiter(self):
        environ = {"PATH": "C:/Windows;"}
        EnvProvider(ProcessEnvironment(environ)).apply(self._modify("C:/bin"))

        assert environ["PATH"] == "C:/Windows;C:/bin"

    def test_modify_keeps_empty_entries(self):
        environ = {"PATH": "C:/a;;C:/b"}
        EnvProvider(ProcessEnvironment(environ)).apply(self._modify("C:/bin"))

        assert environ["PATH"] == "C:/a;;C:/b;C:/bin"

    def test_modify_keeps_existing_empty_trailing_entry(self):
        environ = {"PATH": "C:/a;;"}
        EnvProvider(ProcessEnvironment(environ)).apply(self._modify("C:/bin"))

        assert environ["PATH"] == "C:/a;;C:/bin"

        assert environ["PATH"] == "C:/Windows;C:/bin"

    def test_create(self):
        environ = {}
        provider = EnvProvider(ProcessEnvironment(environ))
        resource = EnvResource("ruby", "RUBY_VERSION", "2.1", action="create")

        assert provider.needs_update(resource)
        provider.apply(resource)
        assert environ == {"RUBY_VERSION": "2.1"}
        assert not provider.needs_update(resource)

    def test_delete(self):
        environ = {"RUBY_VERSION": "2.1"}
        provider = EnvProvider(ProcessEnvironment(environ))
        resource = EnvResource("ruby", "RUBY_VERSION", action="delete")

        provider.apply(resource)

        assert environ == {}
        assert not provider.needs_update(resource)

    def test_delete_element(self):
        environ = {"PATH": "C:/a;C:/b"}
        resource = EnvResource("rm", "PATH", "C:/a", delim=";", action="delete")

        EnvProvider(ProcessEnvironment(environ)).apply(resource)

        assert environ["PATH"] == "C:/b"

    def test_invalid_action(self):
        with pytest.raises(ValueError, match="Invalid env action"):
            EnvResource("x", "PATH", "v", action="append")


class FakeWinreg:
    """In-memory stand-in for the winreg module."""

    HKEY_LOCAL_MACHINE = "HKLM"
    KEY_SET_VALUE = 0x0002
    REG_EXPAND_SZ = 2

    def __init__(self, values=None, write_error=None):
        self.values = dict(values or {})
        self.write_error = write_error
        self.opened = []
        self.writes = []

    @contextmanager
    def OpenKey(self, root, sub_key, reserved=0, access=0):
        self.opened.append((root, sub_key, access))
        if access and self.write_error:
            raise self.write_error
        yield (root, sub_key)

    def QueryValueEx(self, handle, name):
        try:
            return self.values[name], self.REG_EXPAND_SZ
        except KeyError:
            raise FileNotFoundError(name)

    def SetValueEx(self, handle, name, reserved, value_type, value):
        self.writes.append((name, value_type, value))
        self.values[name] = value

    def DeleteValue(self, handle, name):
        if name not in self.values:
            raise FileNotFoundError(name)
        del self.values[name]


@pytest.fixture
def winreg():
    fake = FakeWinreg({"Path": "C:/Windows"})
    with patch.dict(sys.modules, {"winreg": fake}):
        with patch.dict(os.environ, {}, clear=False):
            yield fake


class TestWindowsMachineEnvironment:
    """Tests for the registry-backed environment store."""

    def test_get(self, winreg):
        assert WindowsMachineEnvironment().get("Path") == "C:/Windows"
        assert winreg.opened == [("HKLM", MACHINE_ENVIRONMENT_KEY, 0)]

    def test_get_missing_value(self, winreg):
        assert WindowsMachineEnvironment().get("RUBY_VERSION") is None

    def test_set_writes_expandable_string(self, winreg):
        WindowsMachineEnvironment().set("RUBY_VERSION", "2.1")

        assert winreg.writes == [("RUBY_VERSION", winreg.REG_EXPAND_SZ, "2.1")]
        assert winreg.opened[-1][2] == winreg.KEY_SET_VALUE
        assert os.environ["RUBY_VERSION"] == "2.1"

    def test_delete(self, winreg):
        os.environ["RUBY_VERSION"] = "2.1"
        winreg.values["RUBY_VERSION"] = "2.1"

        WindowsMachineEnvironment().delete("RUBY_VERSION")

        assert "RUBY_VERSION" not in winreg.values
        assert "RUBY_VERSION" not in os.environ

    def test_delete_missing_value(self, winreg):
        WindowsMachineEnvironment().delete("RUBY_VERSION")

        assert winreg.values == {"Path": "C:/Windows"}

    def test_set_failure(self, winreg):
        winreg.write_error = PermissionError("Access is denied")

        with pytest.raises(EnvironmentUpdateError, match="Failed to set Path"):
            WindowsMachineEnvironment().set("Path", "C:/bin")

        assert winreg.values["Path"] == "C:/Windows"

    def test_delete_failure(self, winreg):
        winreg.write_error = PermissionError("Access is denied")

        with pytest.raises(EnvironmentUpdateError, match="Failed to delete Path"):
            WindowsMachineEnvironment().delete("Path")

    def test_path_modify_through_provider(self, winreg):
        provider = EnvProvider(WindowsMachineEnvironment())
        resource = EnvResource(
            "add", "Path", "C:/rubies/2.1/bin", delim=";", action="modify"
        )

        provider.apply(resource)

        assert winreg.values["Path"] == "C:/Windows;C:/rubies/2.1/bin"
        assert not provider.needs_update(resource)
