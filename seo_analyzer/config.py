from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    # App
    environment: str = "development"
    # Webhook (external automation workflow)
    webhook_url: str = "https://n8n.srv832341.hstgr.cloud/webhook-test/seo-analyze"
    webhook_timeout_seconds: float = 60.0
    # Answer with the local heuristic report when the webhook fails
    local_fallback: bool = False
    include_detailed_analysis: bool = True
    # Rate limiting
    rate_limit_per_minute: int = 10
    # Only honour X-Forwarded-For behind a proxy that overwrites it
    trust_forwarded_for: bool = False
    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    # Comma-separated list of extra CORS origins (preview/staging URLs)
    extra_allowed_origins: str = ""


@lru_cache()
def get_settings() -> Settings:
    return Settings()
