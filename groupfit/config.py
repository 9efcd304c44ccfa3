from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central config loaded from environment variables and optionally .env (local).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # -------------------------
    # Model fitting
    # -------------------------
    confidence_level: float = Field(0.95, gt=0.0, lt=1.0, alias="GROUPFIT_CONFIDENCE_LEVEL")
    on_failure: Literal["skip", "raise"] = Field("skip", alias="GROUPFIT_ON_FAILURE")

    # None lets the executor pick its own default; 1 fits sequentially.
    max_workers: Optional[int] = Field(None, ge=1, alias="GROUPFIT_MAX_WORKERS")

    # Design matrices above this condition number are rejected as unstable.
    max_condition_number: float = Field(1e12, gt=0.0, alias="GROUPFIT_MAX_CONDITION")

    # -------------------------
    # Logging
    # -------------------------
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # -------------------------
    # CORS
    # -------------------------
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS")

    def model_post_init(self, __context) -> None:
        """
        Normalize the log level so "debug" and "DEBUG" behave the same.
        """
        self.log_level = (self.log_level or "INFO").strip().upper()


settings = Settings()
