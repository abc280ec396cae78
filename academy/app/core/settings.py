"""Application settings for the academy back office.

Values are read from ``ACADEMY_*`` environment variables (or a local ``.env``)
so the academy location, geofence radius and pay rules can change per
deployment without code edits.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class AcademyLocation:
    latitude: float
    longitude: float
    radius_meters: float


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ACADEMY_", env_file=".env", extra="ignore")

    app_name: str = "Academy Back Office"
    api_version: str = "1.0.0"
    environment: str = "development"
    log_level: str = "INFO"

    secret_key: str = "CHANGE_ME"
    access_token_expire_minutes: int = 30
    database_url: str = "sqlite:///./academy.db"

    # Attendance geofence
    academy_latitude: float = Field(default=29.073694, ge=-90, le=90)
    academy_longitude: float = Field(default=31.112250, ge=-180, le=180)
    attendance_radius_meters: float = Field(default=50.0, gt=0)
    reference_timezone: str = "UTC"

    # Pay rules
    category_override_tokens: List[str] = Field(default_factory=lambda: ["competition", "competetion"])
    category_override_rate: Decimal = Decimal("75")
    money_precision: int = 2
    hours_precision: int = 2

    # Transactional email
    email_api_url: str = "https://api.resend.com/emails"
    email_api_key: Optional[str] = None
    email_from: str = "Academy <invoices@academy.local>"
    admin_email: Optional[str] = None
    email_timeout_seconds: float = 10.0

    def academy_location(self) -> AcademyLocation:
        return AcademyLocation(
            latitude=self.academy_latitude,
            longitude=self.academy_longitude,
            radius_meters=self.attendance_radius_meters,
        )


_settings_instance = None


def get_settings() -> Settings:
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    global _settings_instance
    _settings_instance = None
