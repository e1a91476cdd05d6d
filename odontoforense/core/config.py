import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv


DEFAULT_JWT_SECRET = "change-me"


def _get_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_env: str = "development"
    port: int = 3000
    database_url: str = "sqlite:///./odontoforense.db"

    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60

    gemini_api_key: str = field(default="", repr=False)
    gemini_model: str = "gemini-1.5-pro"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 60.0

    upload_dir: str = "uploads"
    public_base_url: str = "http://localhost:3000"
    max_upload_size_bytes: int = 20 * 1024 * 1024
    allowed_upload_types: tuple[str, ...] = ()

    cors_allow_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        app_env=os.getenv("APP_ENV", "development"),
        port=int(os.getenv("PORT", "3000")),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./odontoforense.db"),
        jwt_secret_key=os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "60")),
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-pro"),
        gemini_base_url=os.getenv(
            "GEMINI_BASE_URL",
            "https://generativelanguage.googleapis.com/v1beta",
        ),
        gemini_timeout_seconds=float(os.getenv("GEMINI_TIMEOUT_SECONDS", "60")),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/"),
        max_upload_size_bytes=int(os.getenv("MAX_UPLOAD_SIZE_BYTES", str(20 * 1024 * 1024))),
        allowed_upload_types=_get_list(os.getenv("ALLOWED_UPLOAD_TYPES")),
        cors_allow_origins=_get_list(os.getenv("CORS_ALLOW_ORIGINS")) or ("*",),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()


def validate_runtime_config(settings: Settings) -> None:
    if settings.app_env.lower() == "production" and settings.jwt_secret_key == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
