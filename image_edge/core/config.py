from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Load env from .env file
    model_config = {"env_file": ".env", "extra": "ignore"}

    # Response cache
    CACHE_MAX_ENTRIES: int = 512
    CACHE_TTL_SECONDS: int = 3600
    CACHE_KEY_HEADERS: List[str] = ["accept"]

    # Origin fetch
    ORIGIN_TIMEOUT_SECONDS: float = 10.0

    # Encoding
    JPEG_QUALITY: int = 90
    MAX_OUTPUT_PIXELS: int = 40_000_000

    # Server
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

# Instantiate settings
settings = Settings()
