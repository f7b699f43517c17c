# /bmi_ussd/config/settings.py

import sys
from typing import Dict, Optional
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


SUPPORTED_LANGUAGE_CODES = ("en", "rw")
INPUT_CONVENTIONS = ("cumulative", "delta")


class Settings(BaseSettings):
    # Deployment
    environment: str = "production"
    api_version: str = "v1"
    workers: int = 1
    log_level: str = "INFO"

    # Session store
    session_backend: str = "memory"  # "memory" or "redis"
    redis_url: Optional[str] = "redis://localhost:6379"
    session_idle_timeout_seconds: int = 1800
    sweep_interval_seconds: int = 300
    store_timeout_seconds: float = 2.0
    lock_timeout_seconds: float = 5.0

    # Result log
    result_log_backend: str = "memory"  # "memory", "mongo" or "none"
    mongo_uri: Optional[str] = None
    mongo_database: str = "bmi_ussd"
    history_limit: int = 3

    # USSD menu behaviour
    languages: Dict[str, str] = {"1": "rw", "2": "en"}
    default_language: str = "en"
    collect_age: bool = True
    exit_token: str = "00"
    back_token: str = "0"
    ussd_input_convention: str = "cumulative"
    strings_override_path: Optional[str] = None

    # HTTP
    request_timeout_seconds: float = 10.0
    metrics_api_key: Optional[str] = None

    # ---------------- Validators ---------------- #

    @field_validator("languages")
    @classmethod
    def languages_must_be_supported(cls, v: Dict[str, str]) -> Dict[str, str]:
        if not v:
            raise ValueError("At least one language option must be configured")
        for option, code in v.items():
            if code not in SUPPORTED_LANGUAGE_CODES:
                raise ValueError(f"Language '{code}' for option '{option}' has no templates")
        return v

    @field_validator("default_language")
    @classmethod
    def default_language_must_be_supported(cls, v: str) -> str:
        if v not in SUPPORTED_LANGUAGE_CODES:
            raise ValueError(f"DEFAULT_LANGUAGE must be one of {SUPPORTED_LANGUAGE_CODES}")
        return v

    @field_validator("ussd_input_convention")
    @classmethod
    def convention_must_be_known(cls, v: str) -> str:
        if v not in INPUT_CONVENTIONS:
            raise ValueError(f"USSD_INPUT_CONVENTION must be one of {INPUT_CONVENTIONS}")
        return v

    @field_validator("session_idle_timeout_seconds", "sweep_interval_seconds", "history_limit")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Timeouts, intervals and limits must be positive")
        return v

    @field_validator("store_timeout_seconds", "lock_timeout_seconds", "request_timeout_seconds")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v

    @model_validator(mode="after")
    def tokens_must_differ(self):
        if self.exit_token == self.back_token:
            raise ValueError("EXIT_TOKEN and BACK_TOKEN must be different")
        if self.exit_token in self.languages or self.back_token in self.languages:
            raise ValueError("Language options cannot reuse the exit or back token")
        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def validate_environment(settings_obj: Settings):
    try:
        if settings_obj.session_backend not in ("memory", "redis"):
            raise ValueError("SESSION_BACKEND must be 'memory' or 'redis'")

        if settings_obj.result_log_backend not in ("memory", "mongo", "none"):
            raise ValueError("RESULT_LOG_BACKEND must be 'memory', 'mongo' or 'none'")

        if settings_obj.session_backend == "redis" and not settings_obj.redis_url:
            raise ValueError("REDIS_URL is required when SESSION_BACKEND is 'redis'")

        if settings_obj.result_log_backend == "mongo" and not settings_obj.mongo_uri:
            raise ValueError("MONGO_URI is required when RESULT_LOG_BACKEND is 'mongo'")

        if settings_obj.environment == "production" and settings_obj.session_backend == "memory" and settings_obj.workers > 1:
            raise ValueError("The in-memory session store cannot be shared by multiple workers")

        return settings_obj

    except Exception as e:
        print(f"--- [ERROR] Environment validation failed: {e}")
        sys.exit(1)


settings = Settings()
validate_environment(settings)
