"""Application configuration via Pydantic Settings.

NOTE: We explicitly map env variable names (LOG_LEVEL, ROSTER_CSV_PATH, etc.)
to avoid silent misconfiguration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from app.domain.value_objects.enums import MissingFieldPolicy


class Settings(BaseSettings):
    # App
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        validation_alias="CORS_ORIGINS",
    )

    # Team roster seeded on startup (empty = start with no members)
    roster_csv_path: str = Field(default="", validation_alias="ROSTER_CSV_PATH")

    # Routing
    missing_field_policy: MissingFieldPolicy = Field(
        default=MissingFieldPolicy.IGNORE,
        validation_alias="MISSING_FIELD_POLICY",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def cors_origins_list(self) -> list[str]:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
