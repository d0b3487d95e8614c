from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "DetailerDash Demo"
    DEFAULT_BUSINESS_ID: str = "demo"
    BUSINESS_TIMEZONE: str = "America/Los_Angeles"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    DATA_DIR: str = "./data/store"
    LEDGER_STORE_KEY: str = "appointments"
    CATALOG_PROVIDER: str = "static"  # "static" | "store"

    OPEN_HOUR: int = 9
    CLOSE_HOUR: int = 17
    SLOT_GRANULARITY_MINUTES: int = 30
    SLOT_AVAILABILITY_RATIO: float = 0.8
    RANDOM_SEED: int | None = None

    ASSISTANT_SESSION_TTL_SECONDS: float | None = 3600.0

    NOTIFY_WEBHOOK_URL: str | None = None
    NOTIFY_TIMEOUT_SECONDS: float = 5.0


settings = Settings()
