"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Group Auto Scheduler"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"  # Bind to all interfaces for external access
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./auto_scheduler.db"

    # Scheduling
    timezone: str = "UTC"  # IANA name; schedules are stored in this wall clock
    default_weeks_out: int = 7
    assignment_chunk_size: int = 10000  # Keeps IN (...) lists under backend limits
    week_end_day: int = 6  # date.weekday() of the week boundary, 6 = Sunday

    # Periodic auto-schedule job (disabled unless group types are configured)
    auto_schedule_group_type_ids: str = ""  # Comma-separated UUIDs
    auto_schedule_person_id: str = ""
    auto_schedule_attribute_key: str = ""
    auto_schedule_interval_minutes: int = 1440

    @property
    def scheduled_group_type_ids(self) -> list[str]:
        return [
            value.strip()
            for value in self.auto_schedule_group_type_ids.split(",")
            if value.strip()
        ]


settings = Settings()
