from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # Database settings
    database_url: str = "sqlite:///./budget_engine.db"

    # Budget engine settings
    upcoming_window_days: int = 7  # Days before the due day that a payment counts as upcoming
    allow_repayment: bool = False  # Paying an already-paid item appends a second transaction when enabled

    log_level: str = "INFO"

    class Config:
        env_file = ".env"

@lru_cache()
def get_settings():
    return Settings()
