"""Unit tests for the main entry point.

Tests the main() function including:
- CLI argument parsing
- Configuration loading with priority (CLI > env > config)
- Logging configuration
- App construction and uvicorn startup
- --check-config mode
- Exit code handling
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from formmail.config.environment import EnvironmentConfig
from formmail.config.exceptions import ConfigurationError
from formmail.config.models import AppConfig
from formmail.main import load_runtime_config, main, resolve_port
from formmail.transports.exceptions import TransportConfigurationError


def make_env_config(**overrides):
    values = dict(
        sender_email="no-reply@example.com",
        contact_email="info@example.com",
        hr_email="hr@example.com",
        sendgrid_api_key="SG.key",
    )
    values.update(overrides)
    return EnvironmentConfig(**values)


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    @pytest.mark.parametrize(
        "cli,env,yaml_level,expected",
        [
            ("ERROR", "WARNING", "DEBUG", "ERROR"),
            (None, "WARNING", "DEBUG", "WARNING"),
            (None, None, "DEBUG", "DEBUG"),
            (None, None, None, "INFO"),
        ],
    )
    def test_log_level_priority(self, cli, env, yaml_level, expected):
        app_config = AppConfig()
        if yaml_level:
            app_config.logging.level = yaml_level
        else:
            app_config.logging.level = None

        with patch("formmail.main.load_config") as mock_load:
            mock_load.return_value = (app_config, make_env_config(log_level=env))

            _, env_config = load_runtime_config(None, cli)

        assert env_config.log_level == expected


@pytest.mark.parametrize(
    "cli,env,expected",
    [(9000, 4000, 9000), (None, 4000, 4000), (None, None, 3001)],
)
def test_resolve_port(cli, env, expected):
    assert resolve_port(cli, make_env_config(port=env), AppConfig()) == expected


class TestMain:
    @patch("formmail.main.uvicorn.run")
    @patch("formmail.main.build_app")
    @patch("formmail.main.configure_logging")
    @patch("formmail.main.load_config")
    def test_starts_server(self, mock_load, mock_logging, mock_build, mock_run):
        app_config = AppConfig()
        mock_load.return_value = (app_config, make_env_config(port=4000, environment="production"))
        mock_build.return_value = MagicMock()

        exit_code = main(["--host", "127.0.0.1", "--log-level", "DEBUG"])

        assert exit_code == 0
        mock_logging.assert_called_once_with(
            level="DEBUG", format_type="key-value", environment="production"
        )
        mock_build.assert_called_once()
        mock_run.assert_called_once_with(
            mock_build.return_value, host="127.0.0.1", port=4000, log_config=None
        )

    @patch("formmail.main.load_config")
    def test_configuration_error_exits_1(self, mock_load, capsys):
        mock_load.side_effect = ConfigurationError("Environment variable validation failed")

        assert main([]) == 1
        assert "Configuration Error" in capsys.readouterr().err

    @patch("formmail.main.uvicorn.run")
    @patch("formmail.main.build_app")
    @patch("formmail.main.configure_logging")
    @patch("formmail.main.load_config")
    def test_transport_error_exits_1(self, mock_load, mock_logging, mock_build, mock_run, capsys):
        mock_load.return_value = (AppConfig(), make_env_config())
        mock_build.side_effect = TransportConfigurationError("SendGrid API key cannot be empty")

        assert main([]) == 1
        assert "Transport Error" in capsys.readouterr().err
        mock_run.assert_not_called()

    @patch("formmail.main.uvicorn.run")
    @patch("formmail.main.load_config")
    def test_check_config_success(self, mock_load, mock_run, capsys):
        mock_load.return_value = (AppConfig(), make_env_config())

        assert main(["--check-config"]) == 0
        assert "✓" in capsys.readouterr().out
        mock_run.assert_not_called()

    @patch("formmail.main.load_config")
    def test_check_config_invalid_file(self, mock_load, tmp_path, capsys):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("unknown: 1\n")

        assert main(["--check-config", "--config", str(config_file)]) == 1
        assert "✗" in capsys.readouterr().out
        mock_load.assert_not_called()

    @patch("formmail.main.load_config")
    def test_check_config_missing_environment(self, mock_load):
        mock_load.side_effect = ConfigurationError("Environment variable validation failed")

        assert main(["--check-config"]) == 1
