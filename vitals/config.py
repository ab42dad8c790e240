from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/smartvitals"
    db_pool_size: int = 5
    db_echo: bool = False
    default_tz: str = "UTC"
    vitals_api_key: str | None = None
    log_level: str = "INFO"

    # Fallback daily goal when the user has no stored profile/goal
    default_calorie_goal: float = 2000.0

    # Lookback windows (days) for the insight endpoints
    insight_days: int = 7
    workout_stats_days: int = 30

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
