from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "Quotation Proposal API"
    environment: str = "production"
    log_level: str = "INFO"

    # ─────────── API ───────────
    api_prefix: str = "/api"
    request_id_header: str = "X-Request-Id"

    # ─────────── DATABASE ───────────
    database_url: str

    # ─────────── JWT / AUTH ───────────
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_minutes: int = 1440  # 24 hours

    # ─────────── PUBLIC LINKS ───────────
    frontend_public_url: str = "http://localhost:3000"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in {"dev", "development"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
