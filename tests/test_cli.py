"""Tests for argument parsing, exit codes and the CLI entry point."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from args import parse_args
from constants import Constants, ExitCodes
from installer.errors import (
    CompanionToolError,
    ExtractionError,
    FilesystemError,
    InvalidConstraintError,
    NoMatchingVersionError,
    TransferError,
    UnsupportedPlatformError,
)
import nodejs_installer
from nodejs_installer import build_overrides, exit_code_for, main, run


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestParseArgs:
    """Command-line surface."""

    def test_defaults(self):
        args = parse_args([])
        assert args.action == "install"
        assert args.VERSIONS == []
        assert args.FORCE_LOCAL is None
        assert args.LOG_LEVEL == "INFO"
        assert args.QUIET is False

    def test_all_options(self):
        args = parse_args([
            "uninstall", "-c", "cfg.yml", "-V", "^6", "-V", "8.x",
            "--target-dir", "t", "--bin-dir", "b", "--vendor-dir", "v",
            "--force-local", "--npm-version", "^6", "--yarn-version", "1.22.19",
            "--loglevel", "DEBUG", "--logfile", "out.log", "-q",
        ])
        assert args.action == "uninstall"
        assert args.CONFIG == "cfg.yml"
        assert args.VERSIONS == ["^6", "8.x"]
        assert args.FORCE_LOCAL is True
        assert args.YARN_VERSION == "1.22.19"
        assert args.LOG_FILE == "out.log"
        assert args.QUIET is True

    def test_unknown_action(self):
        with pytest.raises(SystemExit):
            parse_args(["upgrade"])

    def test_overrides_drop_unset_values(self):
        overrides = build_overrides(parse_args(["-V", "^6"]))
        assert overrides["version"] == ["^6"]
        assert overrides["forceLocal"] is None
        assert build_overrides(parse_args([]))["version"] is None


class TestExitCodeFor:
    """Error to exit code mapping."""

    @pytest.mark.parametrize(
        "exc,code",
        [
            (TransferError("x"), ExitCodes.CONNECTION_ERROR),
            (FilesystemError("x"), ExitCodes.FILE_ERROR),
            (ExtractionError("x"), ExitCodes.FILE_ERROR),
            (CompanionToolError("x"), ExitCodes.COMPANION_ERROR),
            (NoMatchingVersionError("^99"), ExitCodes.RESOLUTION_ERROR),
            (InvalidConstraintError("x"), ExitCodes.RESOLUTION_ERROR),
            (UnsupportedPlatformError("x"), ExitCodes.RESOLUTION_ERROR),
        ],
    )
    def test_mapping(self, exc, code):
        assert exit_code_for(exc) == code.value


class TestRun:
    """Action dispatch."""

    @patch('nodejs_installer.InstallOrchestrator')
    @patch('nodejs_installer.load_settings')
    def test_install(self, mock_load, mock_orchestrator):
        assert run(parse_args(["-V", "^6"])) == ExitCodes.SUCCESS.value
        mock_load.assert_called_once()
        assert mock_load.call_args[0][1]["version"] == ["^6"]
        mock_orchestrator.return_value.run.assert_called_once_with()
        mock_orchestrator.return_value.uninstall.assert_not_called()

    @patch('nodejs_installer.InstallOrchestrator')
    @patch('nodejs_installer.load_settings')
    def test_uninstall(self, mock_load, mock_orchestrator):
        assert run(parse_args(["uninstall"])) == ExitCodes.SUCCESS.value
        mock_orchestrator.return_value.uninstall.assert_called_once_with()
        mock_orchestrator.return_value.run.assert_not_called()

    @patch('nodejs_installer.InstallOrchestrator')
    @patch('nodejs_installer.load_settings')
    def test_error_is_logged_and_mapped(self, mock_load, mock_orchestrator, caplog):
        mock_orchestrator.return_value.run.side_effect = NoMatchingVersionError("^99")
        with caplog.at_level(logging.ERROR):
            assert run(parse_args(["-V", "^99"])) == ExitCodes.RESOLUTION_ERROR.value
        assert "No NodeJS version could be found for constraint '^99'" in caplog.text

    @patch('nodejs_installer.load_settings')
    def test_config_error(self, mock_load):
        mock_load.side_effect = FilesystemError("Config file not found: x.yml")
        assert run(parse_args(["-c", "x.yml"])) == ExitCodes.FILE_ERROR.value


class TestMain:
    """Process entry point."""

    def test_exits_with_run_result(self, monkeypatch, restore_logging):
        monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "INFO")
        fake_run = MagicMock(return_value=ExitCodes.CONNECTION_ERROR.value)
        monkeypatch.setattr(nodejs_installer, "run", fake_run)

        with pytest.raises(SystemExit) as exc_info:
            main(["-q", "--loglevel", "WARNING"])

        assert exc_info.value.code == ExitCodes.CONNECTION_ERROR.value
        assert fake_run.call_args[0][0].QUIET is True
        assert logging.getLogger().level == logging.WARNING
