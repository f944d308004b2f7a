from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"

    # API
    api_prefix: str = "/api"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Supabase
    supabase_url: str
    supabase_service_role_key: str

    # Tokens
    jwt_secret: str
    jwt_expires_days: int = 30
    sso_secret: str | None = None  # GeekBase shared secret; defaults to jwt_secret
    sso_app_name: str = "notegeek"

    # Hashing and credential rules
    bcrypt_rounds: int = 10
    min_password_length: int = 6
    min_lock_password_length: int = 4

    # Authentication security settings
    max_login_attempts: int = 5  # Maximum failed login attempts before rate limiting
    login_attempt_window: int = 300  # Time window for login attempts (5 minutes)
    enable_rate_limiting: bool = True  # Enable rate limiting for auth endpoints

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def effective_sso_secret(self) -> str:
        return self.sso_secret or self.jwt_secret


settings = Settings()
