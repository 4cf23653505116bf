from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"

DEFAULT_WORKING_DAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


def _split_list_value(value: str) -> list[str]:
    stripped = value.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except json.JSONDecodeError:
            pass
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "Substitution Desk API"
    api_prefix: str = "/api"

    database_url: str = "sqlite:///./substitution_desk.db"
    log_level: str = "INFO"

    max_periods_per_day: int = 6
    pgt_eligible_grades: list[int] = [9, 10, 11, 12]
    tgt_eligible_grades: list[int] = [6, 7, 8, 9, 10]
    working_days: list[str] = list(DEFAULT_WORKING_DAYS)
    leave_reason_prefix: str = "Leave: "

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return _split_list_value(value)
        return value

    @field_validator("pgt_eligible_grades", "tgt_eligible_grades", mode="before")
    @classmethod
    def split_grades(cls, value: str | list[int]) -> list[int]:
        if isinstance(value, str):
            return [int(item) for item in _split_list_value(value)]
        return value

    @field_validator("working_days", mode="before")
    @classmethod
    def normalize_working_days(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            value = _split_list_value(value)
        return [str(item).strip().lower() for item in value if str(item).strip()]

    @field_validator("max_periods_per_day")
    @classmethod
    def validate_daily_cap(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_periods_per_day must be at least 1")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
