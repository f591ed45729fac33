import secrets
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices, model_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Tenant Notes API"
    ENV: str = Field(default="lab", validation_alias=AliasChoices("NOTES_ENV", "ENV"))  # lab|prod
    DATABASE_URL: str = Field(default="sqlite:///./notes.db", validation_alias=AliasChoices("NOTES_DATABASE_URL", "DATABASE_URL"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("NOTES_LOG_LEVEL", "LOG_LEVEL"))

    # Auth (JWT)
    AUTH_JWT_SECRET: str = Field(default="", validation_alias=AliasChoices("NOTES_AUTH_JWT_SECRET", "AUTH_JWT_SECRET", "JWT_SECRET"))
    AUTH_JWT_ALGORITHM: str = "HS256"
    # 24h, same default lifetime as the login tokens handed to the web client
    AUTH_JWT_EXPIRE_MINUTES: int = Field(default=1440, ge=0, validation_alias=AliasChoices("NOTES_AUTH_JWT_EXPIRE_MINUTES", "AUTH_JWT_EXPIRE_MINUTES"))

    # best_effort: quota checked once at the gate; strict: rechecked under a per-tenant lock
    NOTE_QUOTA_MODE: Literal["best_effort", "strict"] = Field(
        default="best_effort", validation_alias=AliasChoices("NOTES_NOTE_QUOTA_MODE", "NOTE_QUOTA_MODE")
    )

    @model_validator(mode="after")
    def _security_invariants(self):
        sec = (self.AUTH_JWT_SECRET or "").strip()

        if self.ENV == "prod":
            if not sec:
                raise ValueError("SECURITY: AUTH_JWT_SECRET is required when ENV=prod")
            if len(sec) < 32:
                raise ValueError("SECURITY: AUTH_JWT_SECRET too short (min 32 chars)")

        if not sec:
            # lab: one random secret per process, tokens die with the process
            sec = secrets.token_urlsafe(48)

        self.AUTH_JWT_SECRET = sec
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
