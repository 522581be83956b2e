"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Take-am Account Lifecycle API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./takeam_lifecycle.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    persistence_timeout_seconds: float = float(getenv("PERSISTENCE_TIMEOUT_SECONDS", "5"))
    audit_page_size: int = int(getenv("AUDIT_PAGE_SIZE", "50"))
    audit_max_page_size: int = int(getenv("AUDIT_MAX_PAGE_SIZE", "100"))
    super_admin_email: str = getenv("SUPER_ADMIN_EMAIL", "superadmin@takeam.local")
    super_admin_password: str = getenv("SUPER_ADMIN_PASSWORD", "")


settings: Settings = Settings()
