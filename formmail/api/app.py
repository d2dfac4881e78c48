"""FastAPI application factory."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from formmail import __version__
from formmail.config.environment import EnvironmentConfig
from formmail.config.loader import load_config
from formmail.config.models import AppConfig
from formmail.logging import get_logger
from formmail.logging.config import configure_logging
from formmail.rendering.documents import DocumentRenderer
from formmail.submissions.models import SubmissionResult
from formmail.submissions.service import SubmissionService
from formmail.transports.factory import get_transport

from .rate_limit import FixedWindowRateLimiter, RateLimitExceeded, create_rate_limiter
from .routes import router

logger = get_logger(__name__, component="api")

# Validation problems listed in a 400 message
MAX_REPORTED_ERRORS = 3


def summarize_validation_errors(errors: List[dict]) -> str:
    """Turn pydantic errors into a short message without echoing input values."""
    parts = []
    for error in errors[:MAX_REPORTED_ERRORS]:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)

    remaining = len(errors) - MAX_REPORTED_ERRORS
    if remaining > 0:
        parts.append(f"and {remaining} more")

    return "; ".join(parts)


def allowed_origins(app_config: AppConfig, env_config: EnvironmentConfig) -> List[str]:
    origins = [env_config.frontend_url.rstrip("/")]
    for origin in app_config.server.cors_allowed_origins:
        if origin not in origins:
            origins.append(origin)
    return origins


def create_app(
    service: SubmissionService,
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    rate_limiter: Optional[FixedWindowRateLimiter] = None,
) -> FastAPI:
    """Build the HTTP application around an existing submission service.

    Args:
        service: Service used by the form routes
        app_config: Application configuration
        env_config: Environment configuration (CORS origin)
        rate_limiter: Limiter shared by the form routes; built from
            app_config.rate_limit when omitted

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Form service starting up",
            extra={"event": "service.starting", "transport": service.transport.name},
        )
        yield
        service.transport.close()
        logger.info("Form service shutting down", extra={"event": "service.stopping"})

    app = FastAPI(title="Form Mail Service", version=__version__, lifespan=lifespan)

    app.state.submission_service = service
    app.state.app_config = app_config
    app.state.rate_limiter = rate_limiter or create_rate_limiter(app_config.rate_limit)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        summary = summarize_validation_errors(exc.errors())
        logger.warning(
            f"Rejected invalid submission to {request.url.path}: {summary}",
            extra={"event": "submission.invalid", "path": request.url.path},
        )
        result = SubmissionResult.invalid(f"Invalid submission: {summary}")
        return JSONResponse(status_code=result.status_code, content=result.to_response())

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"success": False, "message": exc.message},
            headers={"Retry-After": str(exc.retry_after)},
        )

    origins = allowed_origins(app_config, env_config)
    logger.info(f"CORS allowed origins: {origins}", extra={"event": "cors.configured"})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["POST"],
        allow_headers=["Content-Type"],
    )

    app.include_router(router)

    return app


def build_app(app_config: AppConfig, env_config: EnvironmentConfig) -> FastAPI:
    """Wire transport, renderer and service from configuration into an app.

    Raises:
        TransportConfigurationError: If the configured transport cannot be built
    """
    transport = get_transport(app_config, env_config)
    renderer = DocumentRenderer.from_config(app_config, env_config)
    service = SubmissionService(transport=transport, renderer=renderer)
    return create_app(service, app_config, env_config)


def create_app_from_environment(config_path: Optional[Path] = None) -> FastAPI:
    """Factory for `uvicorn formmail.api.app:create_app_from_environment --factory`.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    load_dotenv()
    app_config, env_config = load_config(config_path)

    configure_logging(
        level=env_config.log_level or app_config.logging.level,
        format_type=app_config.logging.format,
        environment=env_config.environment,
    )

    return build_app(app_config, env_config)
