"""Main entry point for the form notification service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import sys
from pathlib import Path
from typing import Optional, Tuple

import uvicorn

from formmail.api.app import build_app
from formmail.config.environment import EnvironmentConfig
from formmail.config.exceptions import ConfigurationError
from formmail.config.loader import load_config, validate_config_file
from formmail.config.models import AppConfig
from formmail.logging import get_logger
from formmail.logging.config import configure_logging
from formmail.transports.exceptions import TransportConfigurationError

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str] = None
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file (None searches the defaults)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with env_config.log_level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Apply log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def resolve_port(cli_port: Optional[int], env_config: EnvironmentConfig, app_config: AppConfig) -> int:
    """Port priority: CLI > PORT > YAML."""
    if cli_port:
        return cli_port
    if env_config.port:
        return env_config.port
    return app_config.server.port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Form Mail Service - turns website form submissions into notification emails"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument("--host", default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Listening port (overrides PORT and config)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate configuration and environment, then exit",
    )
    return parser


def main(argv=None) -> int:
    """
    Main entry point for the form notification service.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = build_parser().parse_args(argv)

    try:
        if args.check_config:
            if args.config and not validate_config_file(args.config):
                return 1
            app_config, env_config = load_runtime_config(args.config, args.log_level)
            print(
                f"✓ Environment is valid for the {app_config.mail.transport} transport "
                f"(sender {env_config.sender_email})"
            )
            return 0

        # Step 1: Load configuration before logging so the format is known
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        host = args.host or app_config.server.host
        port = resolve_port(args.port, env_config, app_config)

        logger.info(
            "Form Mail Service starting",
            extra={
                "event": "service.configured",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "transport": app_config.mail.transport,
                "rate_limit_enabled": app_config.rate_limit.enabled,
                "host": host,
                "port": port,
            },
        )

        # Step 3: Build transport, service and app
        app = build_app(app_config, env_config)

        # Step 4: Serve until interrupted; the app lifespan closes the transport
        uvicorn.run(app, host=host, port=port, log_config=None)
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except TransportConfigurationError as e:
        print(f"Transport Error: {e}", file=sys.stderr)
        logger.error(
            f"Transport configuration error: {e}",
            extra={"event": "config.error", "error_type": "TransportConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0


if __name__ == "__main__":
    sys.exit(main())
