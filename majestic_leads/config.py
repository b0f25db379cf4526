from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'data' / 'majestic.db'}"

    # Service area
    service_state_code: str = "VA"
    service_state_name: str = "Virginia"

    # Pipeline
    stale_after_hours: int = 24  # uncontacted leads older than this need attention

    # Classification
    whale_value_threshold: float = 100_000
    default_service: str = "Full Renovation"  # fallback when AI text can't be classified

    # Lead finder
    discovery_min_leads: int = 5
    discovery_max_leads: int = 20

    def clamp_lead_count(self, requested: int) -> int:
        """Bound a requested discovery batch size to the configured range."""
        return min(max(self.discovery_min_leads, requested), self.discovery_max_leads)


settings = Settings()
