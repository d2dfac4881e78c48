"""Integration tests for configuration module."""

from pathlib import Path

import pytest

from formmail.config import (
    AppConfig,
    ConfigurationError,
    TransportType,
    load_app_config,
    load_config,
    validate_config_file,
)
from formmail.config.duration import DurationParseError, parse_duration, validate_duration_range
from formmail.config.environment import EnvironmentConfig, load_environment_config

# Test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

ENV_VARS = (
    "SENDER_EMAIL",
    "SENDGRID_SENDER_EMAIL",
    "CONTACT_EMAIL",
    "HR_EMAIL",
    "SENDGRID_API_KEY",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "FRONTEND_URL",
    "PORT",
    "LOG_LEVEL",
    "ENVIRONMENT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the service reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def mock_env_vars(clean_env):
    """Mock required environment variables for the sendgrid transport."""
    clean_env.setenv("SENDER_EMAIL", "no-reply@example.com")
    clean_env.setenv("CONTACT_EMAIL", "info@example.com")
    clean_env.setenv("HR_EMAIL", "careers@example.com, hr@example.com")
    clean_env.setenv("SENDGRID_API_KEY", "SG.test-key")
    return clean_env


class TestConfigurationLoading:
    """Test configuration loading from YAML files."""

    def test_load_valid_config(self, mock_env_vars):
        app_config, env_config = load_config(FIXTURES_DIR / "valid_config.yaml")

        assert app_config.server.host == "127.0.0.1"
        assert app_config.server.port == 8080
        assert app_config.server.cors_allowed_origins == ["https://www.example.com"]
        assert app_config.mail.transport == TransportType.SENDGRID.value
        assert app_config.mail.sender_name == "Example Website"
        assert app_config.mail.timeout_seconds == 10
        assert app_config.rate_limit.max_requests == 10
        assert app_config.rate_limit.window_seconds == 1800
        assert app_config.branding.company_name == "Example Electrical"
        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"

        assert env_config.sender_email == "no-reply@example.com"
        assert env_config.hr_recipients == ["careers@example.com", "hr@example.com"]

    def test_defaults_without_config_file(self, mock_env_vars, tmp_path):
        mock_env_vars.chdir(tmp_path)

        app_config, _ = load_config()

        assert app_config == AppConfig()
        assert app_config.server.port == 3001
        assert app_config.mail.transport == "sendgrid"
        assert app_config.mail.timeout_seconds == 15.0
        assert app_config.rate_limit.max_requests == 5
        assert app_config.rate_limit.window_seconds == 900
        assert app_config.rate_limit.message == (
            "Too many emails sent from this IP, please try again later."
        )
        assert app_config.branding.company_name == "C&C Construction & Electrical"

    def test_default_location_is_searched(self, mock_env_vars, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text("server:\n  port: 9000\n")
        mock_env_vars.chdir(tmp_path)

        app_config, _ = load_config()

        assert app_config.server.port == 9000

    def test_empty_config_file_uses_defaults(self, mock_env_vars):
        app_config, _ = load_config(FIXTURES_DIR / "empty_config.yaml")
        assert app_config == AppConfig()

    def test_config_file_not_found(self, mock_env_vars):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(Path("nonexistent.yaml"))

        assert "not found" in str(exc_info.value)

    def test_invalid_config_lists_every_error(self, mock_env_vars):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(FIXTURES_DIR / "invalid_config.yaml")

        errors = exc_info.value.errors
        assert len(errors) == 4
        assert "Unknown field: unknown_section" in errors
        assert any("mail -> transport" in e for e in errors)
        assert any("mail -> timeout_seconds" in e for e in errors)
        assert any("rate_limit -> window" in e for e in errors)
        assert "Suggestions:" in str(exc_info.value)

    def test_malformed_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("server: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_app_config(config_file)

    def test_non_mapping_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping at the top level"):
            load_app_config(config_file)

    def test_smtp_config_requires_smtp_environment(self, mock_env_vars):
        with pytest.warns(UserWarning, match="without TLS"):
            with pytest.raises(ConfigurationError) as exc_info:
                load_config(FIXTURES_DIR / "smtp_config.yaml")

        assert any("SMTP_HOST" in e for e in exc_info.value.errors)
        assert any("SMTP_PORT" in e for e in exc_info.value.errors)

    def test_warnings_for_risky_settings(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "rate_limit:\n  enabled: false\n  trust_forwarded_for: true\nmail:\n  timeout_seconds: 90\n"
        )

        with pytest.warns(UserWarning) as record:
            load_app_config(config_file)

        messages = [str(w.message) for w in record]
        assert any("Rate limiting is disabled" in m for m in messages)
        assert any("trust_forwarded_for" in m for m in messages)
        assert any("timeout_seconds" in m for m in messages)

    def test_validate_config_file(self, capsys):
        assert validate_config_file(FIXTURES_DIR / "valid_config.yaml") is True
        assert "✓" in capsys.readouterr().out

        assert validate_config_file(FIXTURES_DIR / "invalid_config.yaml") is False
        assert "✗" in capsys.readouterr().out


class TestEnvironmentConfig:
    """Test environment variable loading and validation."""

    def test_sendgrid_environment(self, mock_env_vars):
        mock_env_vars.setenv("LOG_LEVEL", "debug")
        mock_env_vars.setenv("PORT", "4000")

        env_config = load_environment_config("sendgrid")

        assert env_config.sendgrid_api_key == "SG.test-key"
        assert env_config.contact_recipients == ["info@example.com"]
        assert env_config.frontend_url == "http://localhost:3000"
        assert env_config.environment == "local"
        assert env_config.log_level == "DEBUG"
        assert env_config.port == 4000

    def test_sender_fallback_variable(self, mock_env_vars):
        mock_env_vars.delenv("SENDER_EMAIL")
        mock_env_vars.setenv("SENDGRID_SENDER_EMAIL", "legacy@example.com")

        assert load_environment_config().sender_email == "legacy@example.com"

    def test_missing_variables_reported_together(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config("sendgrid")

        errors = exc_info.value.errors
        assert len(errors) == 4
        for name in ("SENDER_EMAIL", "CONTACT_EMAIL", "HR_EMAIL", "SENDGRID_API_KEY"):
            assert any(name in e for e in errors)

    def test_invalid_addresses(self, mock_env_vars):
        mock_env_vars.setenv("SENDER_EMAIL", "not-an-address")
        mock_env_vars.setenv("HR_EMAIL", "hr@example.com, broken")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert any("SENDER_EMAIL" in e for e in exc_info.value.errors)
        assert any("HR_EMAIL" in e for e in exc_info.value.errors)

    def test_smtp_environment(self, mock_env_vars):
        mock_env_vars.delenv("SENDGRID_API_KEY")
        mock_env_vars.setenv("SMTP_HOST", "smtp.example.com")
        mock_env_vars.setenv("SMTP_PORT", "465")
        mock_env_vars.setenv("SMTP_USER", "user")
        mock_env_vars.setenv("SMTP_PASS", "secret")

        env_config = load_environment_config("smtp")

        assert env_config.smtp_port == 465
        assert env_config.sendgrid_api_key is None

    def test_smtp_credentials_must_be_paired(self, mock_env_vars):
        mock_env_vars.setenv("SMTP_HOST", "smtp.example.com")
        mock_env_vars.setenv("SMTP_PORT", "587")
        mock_env_vars.setenv("SMTP_USER", "user")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config("smtp")

        assert any("SMTP_PASS" in e for e in exc_info.value.errors)

    @pytest.mark.parametrize("value", ["abc", "0", "70000"])
    def test_invalid_port(self, mock_env_vars, value):
        mock_env_vars.setenv("PORT", value)

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert any("PORT" in e for e in exc_info.value.errors)

    def test_invalid_log_level(self, mock_env_vars):
        mock_env_vars.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
            load_environment_config()

    def test_repr_hides_secrets(self):
        env_config = EnvironmentConfig(
            sender_email="a@example.com",
            contact_email="b@example.com",
            hr_email="c@example.com",
            sendgrid_api_key="SG.very-secret",
            smtp_pass="hunter2",
        )

        assert "SG.very-secret" not in repr(env_config)
        assert "hunter2" not in repr(env_config)


class TestDurationParsing:
    @pytest.mark.parametrize(
        "value,expected",
        [("15m", 900), ("PT15M", 900), ("1h30m", 5400), ("30s", 30), ("P1D", 86400)],
    )
    def test_valid_durations(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "forever", "15x", "PT"])
    def test_invalid_durations(self, value):
        with pytest.raises(DurationParseError):
            parse_duration(value)

    def test_range_validation(self):
        validate_duration_range(900, min_seconds=1, max_seconds=86400)

        with pytest.raises(DurationParseError, match="Rate limit window"):
            validate_duration_range(0, min_seconds=1, max_seconds=86400, label="Rate limit window")
