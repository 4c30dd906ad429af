"""Unit tests for the siasync command line."""

from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from siasync.cli import main
from siasync.exceptions import SiaContractError, SiaNetworkError


@pytest.fixture
def runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_folder():
    """Mock SiaFolder so no watcher or thread is started."""
    with patch("siasync.cli.SiaFolder") as mock_class:
        yield mock_class


@pytest.fixture(autouse=True)
def mock_signals():
    """Keep the test process's own signal handlers in place."""
    with patch("siasync.cli._install_signal_handlers") as mock:
        yield mock


@pytest.fixture
def mock_console():
    """Record console output and replace the spinner."""
    with patch("siasync.cli.Progress"), patch("siasync.cli.console") as mock:
        yield mock


@pytest.fixture
def mock_wait():
    """Return immediately instead of waiting for a signal."""
    with patch("siasync.cli.wait_for_shutdown") as mock:
        yield mock


class TestMain:
    """Tests for the siasync command."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "FOLDER" in result.output
        assert "--address" in result.output

    def test_missing_folder_prints_usage(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code != 0
        assert "Usage:" in result.output

    def test_nonexistent_folder(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing")])
        assert result.exit_code != 0

    def test_runs_until_shutdown(self, runner, tmp_path, mock_folder, mock_wait):
        result = runner.invoke(main, ["--quiet", str(tmp_path)])

        assert result.exit_code == 0
        folder = mock_folder.return_value
        folder.start.assert_called_once()
        mock_wait.assert_called_once()
        folder.close.assert_called_once()

    def test_address_and_password_passed_to_client(
        self, runner, tmp_path, mock_folder, mock_wait
    ):
        with patch("siasync.cli.SiaClient") as mock_client:
            result = runner.invoke(
                main,
                ["-q", "--address", "node:9980", "--password", "pw", str(tmp_path)],
            )

        assert result.exit_code == 0
        mock_client.assert_called_once_with(address="node:9980", password="pw")
        mock_folder.assert_called_once_with(str(tmp_path), mock_client.return_value)
        mock_client.return_value.close.assert_called_once()

    def test_startup_error_exits_nonzero(self, runner, tmp_path, mock_folder, mock_wait):
        mock_folder.return_value.start.side_effect = SiaContractError(
            "you must have formed contracts to upload to Sia"
        )

        result = runner.invoke(main, ["-q", str(tmp_path)])

        assert result.exit_code == 1
        mock_wait.assert_not_called()

    def test_network_error_exits_nonzero(self, runner, tmp_path, mock_folder, mock_wait):
        mock_folder.return_value.start.side_effect = SiaNetworkError("refused")

        result = runner.invoke(main, [str(tmp_path)])

        assert result.exit_code == 1

    def test_close_on_interrupt(self, runner, tmp_path, mock_folder, mock_wait):
        mock_wait.side_effect = KeyboardInterrupt

        runner.invoke(main, ["-q", str(tmp_path)])

        mock_folder.return_value.close.assert_called_once()

    def test_status_output(self, runner, tmp_path, mock_folder, mock_wait):
        mock_folder.return_value.path = tmp_path

        result = runner.invoke(main, [str(tmp_path)])

        assert result.exit_code == 0
        mock_folder.return_value.start.assert_called_once()

    def test_signal_handlers_installed_before_start(
        self, runner, tmp_path, mock_folder, mock_wait, mock_signals
    ):
        calls = []
        mock_signals.side_effect = lambda stop: calls.append("install")
        mock_folder.return_value.start = Mock(side_effect=lambda: calls.append("start"))

        runner.invoke(main, ["-q", str(tmp_path)])

        assert calls == ["install", "start"]

    def test_quit_message_after_shutdown(
        self, runner, tmp_path, mock_folder, mock_wait, mock_console
    ):
        mock_folder.return_value.path = tmp_path

        runner.invoke(main, [str(tmp_path)])

        mock_console.print.assert_any_call("Caught quit signal, exiting...")

    def test_no_quit_message_on_error(
        self, runner, tmp_path, mock_folder, mock_wait, mock_console
    ):
        mock_folder.return_value.path = tmp_path
        mock_wait.side_effect = RuntimeError("boom")

        result = runner.invoke(main, [str(tmp_path)])

        assert isinstance(result.exception, RuntimeError)
        printed = [c.args[0] for c in mock_console.print.call_args_list]
        assert "Caught quit signal, exiting..." not in printed
        mock_folder.return_value.close.assert_called_once()
