# fms_interpreter/config.py
import os
from typing import List, Optional

import dotenv

dotenv.load_dotenv()

DEFAULT_MODELS = {
    "openai": "gpt-4.1-mini",
    "groq": "llama-3.3-70b-versatile",
}


class ConfigurationError(RuntimeError):
    pass


class Settings:
    """Settings read from the process environment (and .env)."""

    PROJECT_NAME: str = "FMS Interpretation Service"

    def __init__(self) -> None:
        self.OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
        self.GROQ_API_KEY: Optional[str] = os.getenv("GROQ_API_KEY")

        self.LLM_PROVIDER: str = os.getenv("FMS_LLM_PROVIDER", "openai").strip().lower()
        self.LLM_MODEL: Optional[str] = os.getenv("FMS_LLM_MODEL") or None
        temperature = os.getenv("FMS_LLM_TEMPERATURE", "0.2")
        try:
            self.LLM_TEMPERATURE: float = float(temperature)
        except ValueError:
            raise ConfigurationError(f"FMS_LLM_TEMPERATURE must be a number, got {temperature!r}") from None

        origins = os.getenv("FMS_CORS_ORIGINS", "*")
        self.CORS_ORIGINS: List[str] = [o.strip() for o in origins.split(",") if o.strip()]

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def model(self) -> str:
        if self.LLM_MODEL:
            return self.LLM_MODEL
        try:
            return DEFAULT_MODELS[self.LLM_PROVIDER]
        except KeyError:
            raise ConfigurationError(f"Unknown LLM provider: {self.LLM_PROVIDER!r}") from None

    @property
    def api_key(self) -> Optional[str]:
        if self.LLM_PROVIDER == "groq":
            return self.GROQ_API_KEY
        return self.OPENAI_API_KEY


settings = Settings()
