from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    # Alembic owns the schema; enable only for local development
    create_tables_on_startup: bool = False

    # JWT
    secret_key: str
    doctor_token_expire_minutes: int = 8 * 60  # one clinic day
    patient_token_expire_days: int = 30
    algorithm: str = "HS256"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Slot business rules (server local time)
    slot_duration_minutes: int = 30
    business_start_hour: int = 9
    business_end_hour: int = 17  # exclusive, so last slot starts at 16:30

    # Bootstrap doctor account, created at startup if missing
    doctor_email: str = ""
    doctor_password: str = ""
    doctor_full_name: str | None = None

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def doctor_bootstrap_enabled(self) -> bool:
        return bool(self.doctor_email and self.doctor_password)


settings = Settings()
