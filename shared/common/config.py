from __future__ import annotations

import os
from dataclasses import dataclass


def _optional_env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass(frozen=True, slots=True)
class ModelOptions:
    model: str
    temperature: float
    max_tokens: int
    json_mode: bool


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str
    environment: str
    openai_api_key: str | None
    openai_base_url: str | None
    openai_timeout_seconds: float
    generic_model: str
    acronym_model: str
    quickstart_model: str
    max_retries: int
    retry_base_delay_seconds: float
    api_prefix: str
    api_host: str
    assistant_owner: str
    port: int

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def generic_options(self) -> ModelOptions:
        return ModelOptions(model=self.generic_model, temperature=0.8, max_tokens=400, json_mode=True)

    @property
    def acronym_options(self) -> ModelOptions:
        return ModelOptions(model=self.acronym_model, temperature=0.8, max_tokens=512, json_mode=True)

    @property
    def quickstart_options(self) -> ModelOptions:
        return ModelOptions(model=self.quickstart_model, temperature=0.7, max_tokens=256, json_mode=False)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            app_name=os.getenv("APP_NAME", "playful-api"),
            environment=os.getenv("APP_ENV", "production"),
            openai_api_key=_optional_env("OPENAI_API_KEY"),
            openai_base_url=_optional_env("OPENAI_BASE_URL"),
            openai_timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30")),
            generic_model=os.getenv("GENERIC_MODEL", "gpt-4.1-mini"),
            acronym_model=os.getenv("ACRONYM_MODEL", "gpt-4.1-mini"),
            quickstart_model=os.getenv("QUICKSTART_MODEL", "gpt-4o-mini"),
            max_retries=int(os.getenv("MAX_RETRIES", "2")),
            retry_base_delay_seconds=float(os.getenv("RETRY_BASE_DELAY_SECONDS", "0.1")),
            api_prefix=os.getenv("API_PREFIX", "").rstrip("/"),
            api_host=os.getenv("API_HOST", "api.example.com"),
            assistant_owner=os.getenv("ASSISTANT_OWNER", ""),
            port=int(os.getenv("PORT", "3000")),
        )
