import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# .env so desenvolvimento local; variaveis de ambiente reais tem prioridade
load_dotenv(override=False)


class Settings(BaseModel):
    DATABASE_URL: str = "sqlite:///./flashcards.db"

    # Supabase Auth (GoTrue)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None

    # OpenRouter
    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_MAX_RETRIES: int = 2
    OPENROUTER_MIN_RETRY_DELAY_MS: int = 300
    OPENROUTER_TIMEOUT_MS: int = 20000
    GENERATION_MODEL: str = "openai/gpt-4o-mini"

    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        values = {
            name: os.environ[name]
            for name in cls.model_fields
            if os.environ.get(name) not in (None, "")
        }
        return cls(**values)


settings = Settings.from_env()
