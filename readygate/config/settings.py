from pydantic_settings import BaseSettings, SettingsConfigDict

from readygate.core.domain.tie_break import TieBreakPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="READYGATE_")

    LOG_LEVEL: str = "WARNING"
    TIE_BREAK_POLICY: TieBreakPolicy = TieBreakPolicy.ONE_SHOT_FIRST

    # Scenario timings, milliseconds
    READY_BEFORE_MS: int = 50
    READY_AFTER_MS: int = 150
    READY_SIMULTANEOUS_MS: int = 100
    PERIOD_MS: int = 100
    WINDOW_MS: int = 421
    EXPECTED_CALLS: int = 4

    # Real-time scenarios run this many times faster than the nominal timings
    ASYNC_TIME_SCALE: float = 2.0


settings = Settings()
