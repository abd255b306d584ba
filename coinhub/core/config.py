import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=os.getenv("ENV_FILE", ".env"), extra="ignore")

    APP_NAME: str = "coinhub"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str = "please-change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    DATABASE_URL: str

    # 0 = unlimited pending topup requests per user
    TOPUP_MAX_PENDING_PER_USER: int = 0
    TRANSACTION_REFERENCE_PREFIX: str = "COIN"
    # Largest amount accepted by a single spend, adjustment or topup request.
    MAX_COIN_AMOUNT: int = 10**12
    DEFAULT_PAGE_LIMIT: int = 20

    CORS_ORIGINS: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
