from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"
    log_file: str | None = None

    # Infra
    redis_url: str = "redis://redis:6379/0"
    email_backend: str = "http"  # "http" | "console"
    smtp_base_url: str = "http://smtp-mock:8025"
    smtp_timeout_seconds: float = 5.0
    mail_product_name: str = "Flicker"

    # Security / policies
    bcrypt_rounds: int = 10
    code_ttl_seconds: int = 300
    code_length: int = 6
    code_key_prefix: str = "verification_code_"

    # RPC workers
    verification_host: str = "0.0.0.0"
    verification_port: int = 50051
    cipher_host: str = "0.0.0.0"
    cipher_port: int = 50052

    # Supervisor
    supervisor_services: str = "verification,cipher"
    supervisor_max_restarts: int = 5
    supervisor_backoff_base: float = 1.0
    supervisor_backoff_max: float = 30.0
    supervisor_stable_seconds: float = 60.0
    supervisor_kill_timeout: float = 10.0
    supervisor_log_dir: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    def service_names(self) -> list[str]:
        return [s.strip() for s in self.supervisor_services.split(",") if s.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
