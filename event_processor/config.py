from pydantic import AnyUrl
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    SERVICE_PORT: int = 7070
    MAX_EVENT_SIZE: int = 65536
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"
    # Backend adapter selection: "memory" or "redis"
    BUS_ADAPTER: Literal["memory", "redis"] = "memory"
    REDIS_URL: AnyUrl | None = None
    REDIS_STREAM_PREFIX: str = "eventprocessor"
    REDIS_CONSUMER_GROUP: str = "event-processor"
    # Channel names
    OUTPUT_CHANNEL: str = "events-out"
    INPUT_CHANNEL: str = "events-in"
    PROCESSED_CHANNEL: str = "events-processed"
    # Number of processed envelopes kept for auditing
    OBSERVED_HISTORY: int = 100

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
