from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    LEADS_DB_URL: str = "sqlite+aiosqlite:///./leadintake.db"
    LOG_LEVEL: str = "INFO"

    # --- Minimal B2B Auth (API key) for read endpoints ---
    # Send: X-API-Key: <key>
    API_KEY: str | None = None

    # --- Extraction platform (Apify) ---
    APIFY_TOKEN: str | None = None
    APIFY_BASE_URL: str = "https://api.apify.com/v2"
    APIFY_HTTP_TIMEOUT_S: float = 30.0
    APIFY_DATASET_PAGE_SIZE: int = 1000

    # --- Canonicalization ---
    DEFAULT_PHONE_REGION: str = "BR"
    PHONE_MIN_DIGITS: int = 8

    # Websites count as a dedup signal alongside phones
    DEDUP_BY_WEBSITE: bool = True

    # --- Engagement handoff (unset URL => no trigger configured) ---
    ENGAGEMENT_WEBHOOK_URL: str | None = None
    ENGAGEMENT_WEBHOOK_SECRET: str | None = None
    ENGAGEMENT_HTTP_TIMEOUT_S: float = 20.0


settings = Settings()
