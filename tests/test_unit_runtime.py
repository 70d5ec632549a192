"""
Unit tests for gaia_manager/runtime.py - node install/init/start.
"""

from unittest.mock import MagicMock, patch

import pytest

from gaia_manager import runtime
from gaia_manager.errors import SubprocessFailure


def _completed(returncode=0):
    result = MagicMock()
    result.returncode = returncode
    return result


class TestCommands:
    """Command builders."""

    def test_install_command(self, settings):
        cmd = runtime.install_command(settings)
        assert cmd.startswith("curl -sSfL ")
        assert settings.installer_url in cmd
        assert cmd.endswith("| bash")

    def test_init_command(self, settings, small_entry):
        assert runtime.init_command(settings, small_entry.config_url) == [
            "gaianet", "init", "--config", small_entry.config_url,
        ]

    def test_start_command_uses_binary(self, settings):
        custom = settings.with_overrides(runtime_binary="/opt/gaianet/bin/gaianet")
        assert runtime.start_command(custom) == ["/opt/gaianet/bin/gaianet", "start"]

    def test_format_command_quotes(self):
        assert runtime.format_command(["gaianet", "init", "--config", "a b"]) == "gaianet init --config 'a b'"


class TestRunStep:
    """Tests for run_step."""

    def test_success(self):
        with patch("gaia_manager.runtime.subprocess.run", return_value=_completed(0)) as mock_run:
            runtime.run_step(["gaianet", "start"])
        mock_run.assert_called_once_with(["gaianet", "start"], shell=False, check=False)

    def test_non_zero_exit(self):
        with patch("gaia_manager.runtime.subprocess.run", return_value=_completed(2)):
            with pytest.raises(SubprocessFailure) as excinfo:
                runtime.run_step(["gaianet", "start"])
        assert excinfo.value.returncode == 2
        assert str(excinfo.value) == "Command failed with code 2: gaianet start"

    def test_launch_failure(self):
        with patch("gaia_manager.runtime.subprocess.run", side_effect=FileNotFoundError("gaianet")):
            with pytest.raises(SubprocessFailure) as excinfo:
                runtime.run_step(["gaianet", "start"])
        assert excinfo.value.returncode is None
        assert "Failed to start command: gaianet start" in str(excinfo.value)


class TestDeploy:
    """install -> init -> start, strictly in order."""

    def test_order(self, settings, small_entry):
        with patch("gaia_manager.runtime.subprocess.run", return_value=_completed(0)) as mock_run:
            runtime.deploy(small_entry, settings)

        calls = mock_run.call_args_list
        assert len(calls) == 3
        assert "install.sh" in calls[0][0][0]
        assert calls[0][1]["shell"] is True
        assert calls[1][0][0] == ["gaianet", "init", "--config", small_entry.config_url]
        assert calls[2][0][0] == ["gaianet", "start"]

    def test_skip_install(self, settings, small_entry):
        with patch("gaia_manager.runtime.subprocess.run", return_value=_completed(0)) as mock_run:
            runtime.deploy(small_entry, settings, skip_install=True)

        assert [c[0][0][1] for c in mock_run.call_args_list] == ["init", "start"]

    def test_failure_aborts_remaining_steps(self, settings, small_entry):
        with patch("gaia_manager.runtime.subprocess.run",
                   side_effect=[_completed(0), _completed(1), _completed(0)]) as mock_run:
            with pytest.raises(SubprocessFailure) as excinfo:
                runtime.deploy(small_entry, settings)

        assert mock_run.call_count == 2
        assert "init --config" in excinfo.value.command

    def test_install_failure_stops_everything(self, settings, small_entry, capsys):
        with patch("gaia_manager.runtime.subprocess.run", return_value=_completed(127)) as mock_run:
            with pytest.raises(SubprocessFailure):
                runtime.deploy(small_entry, settings)

        assert mock_run.call_count == 1
        assert "Command failed with code 127" in capsys.readouterr().out
