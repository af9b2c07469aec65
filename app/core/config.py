from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",          # unknown keys are ignored
    )

    APP_ENV: str = "local"
    APP_NAME: str = "Strix API"
    APP_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    CORS_ORIGINS: List[str] = ["*"]

    LOG_LEVEL: str = "INFO"

    # progress driver cadence
    SCAN_PROGRESS_STEP: int = 10
    SCAN_TICK_SECONDS: float = 0.5
    # unset = no deadline
    SCAN_TIMEOUT_SECONDS: Optional[float] = None

    SCAN_ID_ATTEMPTS: int = 5


settings = Settings()  # type: ignore
