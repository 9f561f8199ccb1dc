from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    # OpenAI (venue analysis)
    openai_key: SecretStr = SecretStr("")
    openai_model: str = "gpt-4o"
    temperature: float = 0.3
    ai_timeout: float = 60.0

    # Firecrawl (website content)
    firecrawl_api_key: SecretStr = SecretStr("")
    firecrawl_base_url: str = "https://api.firecrawl.dev/v1"
    scrape_timeout: float = 120.0
    scrape_wait_ms: int = 5000

    # Supabase (saved leads)
    supabase_url: str = ""
    supabase_key: SecretStr = SecretStr("")
    supabase_leads_table: str = "saved_leads"
    persistence_timeout: float = 30.0

    # Batch enrichment
    batch_max_concurrent: int = 5
    batch_timeout: float = 600.0
    batch_strict_validation: bool = False

    # Lead scoring: "detailed" (weighted signals) or "coarse" (basic signals only)
    scoring_profile: str = "detailed"

    # Job status store
    job_ttl_seconds: int = 3600
    job_unpolled_ttl_seconds: int = 86400

    # Logging
    log_level: str = "INFO"
    log_format: str = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


config = Config()
