"""Application settings and configuration.

This module defines all configuration options for the Neko relay.
Settings are loaded from environment variables with sensible defaults.
"""

import secrets

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from neko_relay.models.connection import DeliveryScope


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    Every value is process-lifetime only; nothing here points at storage.
    """

    # Application metadata
    app_name: str = Field(default="Neko Relay", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Sessions do not survive a restart, so a per-process key is a safe default.
    secret_key: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        alias="SECRET_KEY",
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_ttl_minutes: int = Field(default=60 * 24 * 7, alias="SESSION_TTL_MINUTES")
    session_sweep_interval_seconds: float = Field(
        default=300.0,
        alias="SESSION_SWEEP_INTERVAL_SECONDS",
    )
    session_cookie_name: str = Field(default="neko_token", alias="SESSION_COOKIE_NAME")

    # Credential policy
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, alias="BCRYPT_ROUNDS")
    min_credential_length: int = Field(default=6, ge=1, alias="MIN_CREDENTIAL_LENGTH")

    # Reward ledger; deployment profiles raise the cap (e.g. 99999)
    max_reward: int = Field(default=1200, ge=0, alias="MAX_REWARD")
    reward_probability: float = Field(default=0.3, ge=0.0, le=1.0, alias="REWARD_PROBABILITY")
    reward_choices: list[int] = Field(default=[50, 100, 150, 200], alias="REWARD_CHOICES")

    # Chat pipeline
    max_message_length: int = Field(default=500, ge=1, alias="MAX_MESSAGE_LENGTH")
    think_time_min_seconds: float = Field(default=1.0, ge=0.0, alias="THINK_TIME_MIN_SECONDS")
    think_time_max_seconds: float = Field(default=2.5, ge=0.0, alias="THINK_TIME_MAX_SECONDS")

    # Event streams
    delivery_scope: DeliveryScope = Field(
        default=DeliveryScope.SAME_USER_SESSIONS,
        alias="DELIVERY_SCOPE",
    )
    event_queue_size: int = Field(default=100, ge=1, alias="EVENT_QUEUE_SIZE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.think_time_max_seconds < self.think_time_min_seconds:
            raise ValueError("THINK_TIME_MAX_SECONDS must be >= THINK_TIME_MIN_SECONDS")
        if any(choice < 0 for choice in self.reward_choices):
            raise ValueError("REWARD_CHOICES must not contain negative values")
        return self

    @property
    def think_time_window(self) -> tuple[float, float]:
        """Return the (min, max) think-time window in seconds."""
        return self.think_time_min_seconds, self.think_time_max_seconds


settings = Settings()
