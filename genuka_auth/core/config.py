# genuka_auth/core/config.py
import os
from typing import ClassVar
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}

def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY

def _default_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url and url.strip():
        return url
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(data_dir, 'genuka.db')}"

class Settings(BaseModel):
    # Not a pydantic field
    ALGORITHM: ClassVar[str] = "HS256"

    APP_ENV: str = Field(default_factory=lambda: os.getenv("APP_ENV", "local"))
    APP_KEY: str = Field(default_factory=lambda: os.getenv("APP_KEY", "CHANGE_ME_SUPER_SECRET"))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    HOST: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    PORT: int = Field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    DATABASE_URL: str = Field(default_factory=_default_database_url)
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: _env_bool("RUN_MIGRATIONS_ON_STARTUP", "true"))

    # Provider (Genuka)
    GENUKA_URL: str = Field(default_factory=lambda: os.getenv("GENUKA_URL", "https://api-staging.genuka.com"))
    GENUKA_API_VERSION: str = Field(default_factory=lambda: os.getenv("GENUKA_API_VERSION", "2023-11"))
    GENUKA_CLIENT_ID: str = Field(default_factory=lambda: os.getenv("GENUKA_CLIENT_ID", ""))
    GENUKA_CLIENT_SECRET: str = Field(default_factory=lambda: os.getenv("GENUKA_CLIENT_SECRET", ""))
    GENUKA_REDIRECT_URI: str = Field(default_factory=lambda: os.getenv("GENUKA_REDIRECT_URI", ""))
    GENUKA_DEFAULT_REDIRECT: str = Field(default_factory=lambda: os.getenv("GENUKA_DEFAULT_REDIRECT", "/"))
    GENUKA_ENCRYPT_TOKENS: bool = Field(default_factory=lambda: _env_bool("GENUKA_ENCRYPT_TOKENS", "true"))
    HTTP_TIMEOUT_SECONDS: float = Field(default_factory=lambda: float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")))

    # Callback / sessions
    CALLBACK_FAILURE_MODE: str = Field(default_factory=lambda: os.getenv("CALLBACK_FAILURE_MODE", "raise"))
    HMAC_MAX_AGE_SECONDS: int = Field(default_factory=lambda: int(os.getenv("HMAC_MAX_AGE_SECONDS", "300")))
    SESSION_TTL_SECONDS: int = Field(default_factory=lambda: int(os.getenv("SESSION_TTL_SECONDS", str(60 * 60 * 7))))
    REFRESH_TTL_SECONDS: int = Field(default_factory=lambda: int(os.getenv("REFRESH_TTL_SECONDS", str(60 * 60 * 24 * 30))))
    SESSION_COOKIE_NAME: str = Field(default_factory=lambda: os.getenv("SESSION_COOKIE_NAME", "session"))
    REFRESH_COOKIE_NAME: str = Field(default_factory=lambda: os.getenv("REFRESH_COOKIE_NAME", "refresh_session"))

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_local(self) -> bool:
        return self.APP_ENV == "local"

settings = Settings()
