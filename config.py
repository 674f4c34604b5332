"""Configuration via pydantic-settings. Reads from .env or environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ===== COMMUNITY WORKFLOWS (remote content store) =====
    # Default to the hosted node-banana-pro service
    community_workflows_api_url: str = "https://nodebananapro.com/api/public/community-workflows"
    community_workflows_timeout: float = 90.0  # seconds, covers both hops
    community_workflows_cache_ttl: float = 60.0  # seconds a resolved download URL stays fresh

    # ===== GENERATION =====
    # Local endpoint that talks to the vendor APIs on our behalf
    generation_endpoint_url: str = "http://localhost:3000/api/generate"
    generation_timeout: float = 300.0

    # ===== PROVIDER CREDENTIALS =====
    # JSON key/value file shared with the front end (its local storage)
    provider_settings_path: str = "~/.node-banana/local-storage.json"
    provider_settings_key: str = "node-banana-provider-settings"

    # ===== SYSTEM =====
    log_level: str = "INFO"
    port: int = 8001
    cors_origins: list[str] = ["*"]


settings = Settings()
