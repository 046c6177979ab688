import re

from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

# Telegram only accepts A-Z, a-z, 0-9, _ and - in webhook secrets
_SECRET_DISALLOWED = re.compile(r"[^A-Za-z0-9_-]")


class Settings(BaseSettings):
    # Telegram
    bot_token: str
    webhook_secret: str = ""  # Optional: derived from bot_token when empty
    webhook_url: str = ""  # Optional: registered with Telegram on startup

    # Debug switches webhook mode to polling and enables verbose error logs
    debug: bool = False

    # Web server (webhook mode)
    host: str = "0.0.0.0"
    port: int = 8000

    # Renderer (latex2image)
    renderer_url: str = "https://e1kf0882p7.execute-api.us-east-1.amazonaws.com/default/latex2image"
    renderer_output_format: str = "JPG"
    renderer_output_scale: str = "1000%"
    renderer_timeout: float = 60.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("debug", mode="before")
    @classmethod
    def debug_is_presence_flag(cls, value):
        """DEBUG is on whenever it is set to a non-empty value."""
        if isinstance(value, str):
            return bool(value.strip())
        return value

    @property
    def resolved_webhook_secret(self) -> str:
        """Secret expected in X-Telegram-Bot-Api-Secret-Token."""
        if self.webhook_secret:
            return self.webhook_secret
        return _SECRET_DISALLOWED.sub("", self.bot_token)[:256]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
