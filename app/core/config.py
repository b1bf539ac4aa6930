"""
Application configuration.
Values are read from environment variables, falling back to a local .env
file so development works without exporting anything.
"""
from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Pydantic Settings, read from os.environ or .env
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    # JWT
    JWT_SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # Patient-facing web app, used in emailed links
    FRONTEND_URL: str = "http://localhost:5173"

    # Scheduling
    SLOT_DURATION_MINUTES: int = 30
    DEFAULT_OPENING_TIME: str = "09:00"
    DEFAULT_CLOSING_TIME: str = "20:00"

    # Populate an empty database with a demo catalogue on startup
    SEED_DEMO_DATA: bool = False

    # CORS (comma separated)
    CORS_ORIGINS: str = "*"

    # SendGrid Email
    SENDGRID_API_KEY: str = ""
    SENDGRID_FROM_EMAIL: str = "noreply@clinicbook.app"
    SENDGRID_FROM_NAME: str = "ClinicBook"

    class Config:
        env_file = ".env"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()

# Validate critical security settings
if not settings.JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY is not set. Export it as an environment variable or add it to .env. "
        "Generate one with: python -c 'import secrets; print(secrets.token_urlsafe(32))'"
    )
