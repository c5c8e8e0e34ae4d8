from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "jersey-orders-session-secret"
DEFAULT_STAFF_PASSWORD = "password123"
ALLOWED_STORE_BACKENDS = {"memory", "db", "auto"}
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    app_name: str = "Jersey Orders Service"
    log_level: str = "INFO"

    database_url: str = Field(
        default="sqlite+pysqlite:///./jersey_orders.db",
        validation_alias="JERSEY_DATABASE_URL",
    )
    cors_allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    testing: bool = Field(default=False, validation_alias="JERSEY_TESTING")
    store_backend: str = Field(default="auto", validation_alias="JERSEY_STORE_BACKEND")
    local_store_path: str = ""
    auto_create_schema: bool = True
    require_migrations: bool = False

    session_secret: str = DEFAULT_SESSION_SECRET
    session_ttl_s: int = 24 * 60 * 60
    staff_username: str = "admin"
    staff_password: str = DEFAULT_STAFF_PASSWORD

    public_base_url: str = ""
    customer_page_path: str = "customer.html"
    embed_link_payload: bool = True

    shortener_providers: str = "shrtco,isgd,tinyurl"
    shortener_timeout_s: float = 3.0

    synthetic_orders_enabled: bool = True
    max_jersey_quantity: int = Field(default=50, ge=1)
    jersey_unit_price: int = Field(default=25, ge=0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, value: str) -> str:
        backend = value.lower().strip()
        if backend not in ALLOWED_STORE_BACKENDS:
            allowed = ", ".join(sorted(ALLOWED_STORE_BACKENDS))
            raise ValueError(f"JERSEY_STORE_BACKEND must be one of: {allowed}")
        return backend

    @field_validator("customer_page_path")
    @classmethod
    def strip_page_path(cls, value: str) -> str:
        return value.strip().lstrip("/")


settings = Settings()


def resolved_store_backend() -> str:
    if settings.store_backend == "auto":
        return "memory" if settings.testing else "db"
    return settings.store_backend


def allowed_origins() -> list[str]:
    return [origin.strip() for origin in settings.cors_allowed_origins.split(",") if origin.strip()]


def shortener_provider_names() -> list[str]:
    return [
        value.strip().lower() for value in settings.shortener_providers.split(",") if value.strip()
    ]


def ensure_secure_runtime_settings() -> None:
    """Fail fast when production-like runtime uses insecure defaults."""
    if settings.testing:
        return
    if settings.session_secret == DEFAULT_SESSION_SECRET:
        raise RuntimeError(
            "SESSION_SECRET must be set to a non-default value when JERSEY_TESTING is false"
        )
    if len(settings.session_secret) < MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"SESSION_SECRET must be at least {MIN_SECRET_LENGTH} characters "
            "when JERSEY_TESTING is false"
        )
    if settings.staff_password == DEFAULT_STAFF_PASSWORD:
        raise RuntimeError(
            "STAFF_PASSWORD must be set to a non-default value when JERSEY_TESTING is false"
        )
    if resolved_store_backend() == "db" and _is_sqlite_url(settings.database_url):
        raise RuntimeError("JERSEY_DATABASE_URL must use postgres when JERSEY_TESTING is false")


def _is_sqlite_url(database_url: str) -> bool:
    value = database_url.strip().lower()
    return value.startswith("sqlite")
