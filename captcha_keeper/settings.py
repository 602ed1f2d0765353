from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"

    # Infra
    redis_url: str = "redis://redis:6379/0"

    # Storage
    captcha_storage: Literal["memory", "redis"] = "memory"
    captcha_key_prefix: str = "captcha:"

    # Expiry
    captcha_max_age_seconds: float = Field(default=300, ge=0)
    captcha_sweep_interval_seconds: float = Field(default=60, gt=0)
    captcha_sweeper_enabled: bool = True

    # Verification policy
    captcha_case_sensitive: bool = True
    captcha_finder: Literal["header", "form", "query"] = "header"
    captcha_skip_paths: list[str] = []

    # Generator
    captcha_answer_length: int = Field(default=5, ge=1)
    captcha_image_width: int = 160
    captcha_image_height: int = 60
    # difficulty: TTF paths and pixel sizes the glyphs are drawn from;
    # empty means the captcha library defaults
    captcha_fonts: list[str] = []
    captcha_font_sizes: list[int] = []

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
