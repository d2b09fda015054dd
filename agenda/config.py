from datetime import time

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Daily window searched for free slots
    working_day_start: time = time(8, 0)
    working_day_end: time = time(22, 0)

    # Search bounds
    max_horizon_days: int = 365
    alternatives_horizon_days: int = 7

    # Result sizes
    free_slots_limit: int = 10
    alternatives_limit: int = 5

    # Proximity given to slots proposed without a desired start
    default_proximity_score: int = 50

    # Load sample commitments into the in-memory repositories at startup
    seed_sample_data: bool = False

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="AGENDA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
