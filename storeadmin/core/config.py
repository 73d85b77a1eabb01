from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "storeadmin"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    APP_DATABASE_DSN: str = "sqlite:////tmp/storeadmin.db"

    # CORS
    CORS_ORIGINS: str = "*"

    # Admin client
    ADMIN_API_BASE_URL: str = "http://localhost:8000"
    ADMIN_API_TIMEOUT_SECONDS: float = 30.0
    CATALOG_SEARCH_DEBOUNCE_SECONDS: float = 0.3
    CODE_CHECK_DEBOUNCE_SECONDS: float = 0.5
    AUTO_REFRESH_DELAY_SECONDS: float = 5.0

    # Listing saves retry with exponential backoff; discount saves never retry
    LISTING_SAVE_MAX_RETRIES: int = 3
    LISTING_SAVE_RETRY_BASE_DELAY_SECONDS: float = 1.0

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
