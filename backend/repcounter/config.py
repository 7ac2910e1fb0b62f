"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings

from repcounter.core.counter_config import CounterConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Rep Counter"
    debug: bool = False
    api_prefix: str = "/api"

    # Database (SQLite for local dev, PostgreSQL for production)
    database_url: str = "sqlite+aiosqlite:///./repcounter.db"
    database_url_sync: str = "sqlite:///./repcounter.db"

    # Set history
    history_limit: int = 5  # Most recent sets kept by the companion

    # Companion sync (device side)
    companion_url: str = "http://localhost:8000"
    sync_timeout_seconds: float = 5.0

    # Sliding window - 50Hz wrist IMU
    window_size: int = 100  # 2 seconds of samples
    sampling_rate: float = 50.0
    overlap: int = 25  # Classify every 0.5 seconds
    aux_state_size: int = 400

    # Classification gate
    target_label: str = "bicep_curl"
    confidence_threshold: float = 0.50

    # Jitter filter - 5 predictions * 0.5s = 2.5 seconds
    history_size: int = 5
    curl_confirmation_threshold: int = 3  # 3 of 5 must agree

    # Defaults until the companion pushes preferences
    target_reps: int = 10
    haptics_enabled: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"

    def counter_config(self) -> CounterConfig:
        """Build the validated core configuration. Raises ConfigurationError."""
        return CounterConfig(
            window_size=self.window_size,
            sampling_rate=self.sampling_rate,
            overlap=self.overlap,
            history_size=self.history_size,
            confidence_threshold=self.confidence_threshold,
            curl_confirmation_threshold=self.curl_confirmation_threshold,
            target_reps=self.target_reps,
            target_label=self.target_label,
            aux_state_size=self.aux_state_size,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
