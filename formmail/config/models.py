"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range

DEFAULT_RATE_LIMIT_MESSAGE = "Too many emails sent from this IP, please try again later."


class TransportType(str, Enum):
    """Supported outbound mail transports."""

    SENDGRID = "sendgrid"
    SMTP = "smtp"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ServerConfig(BaseModel):
    """HTTP listener settings."""

    host: str = Field("0.0.0.0", min_length=1, description="Interface to bind")
    port: int = Field(3001, ge=1, le=65535, description="TCP port to listen on")
    cors_allowed_origins: List[str] = Field(
        default_factory=list,
        description="Extra CORS origins in addition to FRONTEND_URL",
    )

    @field_validator("cors_allowed_origins")
    @classmethod
    def strip_origins(cls, v: List[str]) -> List[str]:
        """Drop blank origins and trailing slashes."""
        return [origin.strip().rstrip("/") for origin in v if origin and origin.strip()]


class MailConfig(BaseModel):
    """Outbound mail transport settings."""

    transport: TransportType = Field(
        TransportType.SENDGRID.value, description="Mail transport (sendgrid or smtp)"
    )
    sender_name: Optional[str] = Field(
        None, description="Display name used in the From header"
    )
    timeout_seconds: float = Field(
        15.0, gt=0, le=120, description="Deadline for a single outbound send call"
    )
    use_tls: bool = Field(True, description="Use STARTTLS for SMTP on non-465 ports")
    sendgrid_api_url: str = Field(
        "https://api.sendgrid.com/v3/mail/send",
        description="SendGrid v3 mail send endpoint",
    )

    @field_validator("sender_name")
    @classmethod
    def strip_sender_name(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank sender name as unset."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    model_config = {"use_enum_values": True}


class RateLimitConfig(BaseModel):
    """Fixed-window limits applied to the submission endpoints."""

    enabled: bool = Field(True, description="Apply the limiter to form endpoints")
    max_requests: int = Field(
        5, ge=1, le=10000, description="Requests allowed per client per window"
    )
    window: str = Field("15m", description="Window length (e.g. 15m, PT15M)")
    message: str = Field(
        DEFAULT_RATE_LIMIT_MESSAGE, min_length=1, description="Rejection message"
    )
    trust_forwarded_for: bool = Field(
        False,
        description="Key clients by the first X-Forwarded-For hop (behind a proxy)",
    )

    # Computed field
    window_seconds: Optional[int] = None

    @field_validator("window")
    @classmethod
    def validate_window(cls, v: str) -> str:
        """Validate the window parses and is between one second and one day."""
        try:
            seconds = parse_duration(v)
            validate_duration_range(seconds, min_seconds=1, max_seconds=86400, label="Rate limit window")
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def compute_window_seconds(self):
        """Store the parsed window length."""
        self.window_seconds = parse_duration(self.window)
        return self


class BrandingConfig(BaseModel):
    """Text shown in rendered notification documents."""

    company_name: str = Field(
        "C&C Construction & Electrical",
        min_length=1,
        description="Business name shown in the contact email header",
    )
    satisfaction_rate: str = Field(
        "99.8%", description="Figure quoted in the contact email footer"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO.value, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE.value, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the form notification service."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    mail: MailConfig = Field(default_factory=MailConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    branding: BrandingConfig = Field(default_factory=BrandingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}
