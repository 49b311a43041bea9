from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    app_name: str = "Enque Desk"
    app_env: str = "development"
    app_debug: bool = True
    api_prefix: str = "/api"

    api_base_url: str = "http://127.0.0.1:8000"
    api_timeout_seconds: float = 15.0

    app_host: str = "localhost"
    app_port: int = 3000
    app_protocol: str = "http"
    base_domain: str = "enque.cc"
    base_subdomain: str = "app"
    access_token_cookie: str = "accessToken"
    cors_origins: str = "http://localhost:3000"

    preload_enabled: bool = True
    preload_max_concurrent: int = 3
    preload_delay_ms: int = 500
    preload_priority_threshold: int = 10
    preload_idle_timeout: float = 1800.0

    ticket_html_stale: float = 120.0
    ticket_html_gc: float = 900.0
    tickets_list_stale: float = 120.0
    count_stale: float = 300.0
    workspace_lookup_stale: float = 300.0

    log_json: bool = False
    log_buffer_size: int = 100

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def api_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/v1"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def host(self) -> str:
        if self.app_env == "development":
            return f"{self.app_host}:{self.app_port}"
        return self.app_host

    def platform_url(self, subdomain: str | None = None) -> str:
        if subdomain:
            return f"{self.app_protocol}://{subdomain}.{self.host}"
        return f"{self.app_protocol}://{self.host}"

    def signin_url(self, subdomain: str | None = None) -> str:
        return f"{self.platform_url(subdomain)}/signin"

    @property
    def base_url(self) -> str:
        return f"{self.app_protocol}://{self.base_subdomain}.{self.base_domain}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
