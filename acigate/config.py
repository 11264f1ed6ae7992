from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"

    apic_url: str = ""
    apic_username: str = ""
    apic_password: str = ""
    apic_insecure: bool = True
    apic_request_timeout: float = 60
    apic_max_retries: int = 3
    apic_backoff_min_delay: float = 4
    apic_backoff_max_delay: float = 60
    apic_backoff_delay_factor: float = 3
    apic_logging: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def check_backoff_bounds(self) -> "Settings":
        if self.apic_backoff_min_delay > self.apic_backoff_max_delay:
            raise ValueError(
                f"APIC_BACKOFF_MIN_DELAY ({self.apic_backoff_min_delay}) must not exceed "
                f"APIC_BACKOFF_MAX_DELAY ({self.apic_backoff_max_delay})"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
