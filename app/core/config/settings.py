from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM Configuration (any OpenAI-compatible endpoint, e.g. Groq)
    openai_api_key: Optional[str] = Field(default=None)
    llm_base_url: Optional[str] = Field(default=None)
    llm_model: str = Field(default="gpt-4o-mini")
    llm_temperature: Optional[float] = Field(default=0.3)

    # FastAPI Configuration
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=3001)
    debug: bool = Field(default=False)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    # Run Configuration
    run_timeout_seconds: float = Field(default=120.0, gt=0)
    max_stage_executions: int = Field(default=100, ge=1)
    enforce_date_format: bool = Field(default=False)

    # Default Ticket Contract Configuration
    ticket_price: str = Field(default="0.1")
    ticket_max_supply: str = Field(default="100")
    ticket_currency: str = Field(default="MASSA")
    ticket_transferable: bool = Field(default=True)
    ticket_refundable: bool = Field(default=False)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
