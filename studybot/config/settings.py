"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


DEFAULT_SYSTEM_INSTRUCTION = (
    "You are Study Bot, an AI-powered academic assistant. You help students understand "
    "study topics, explain difficult concepts clearly, and guide them in their learning "
    "journey. Be encouraging, precise, and educational in your tone. Remember context "
    "from previous questions."
)


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Study Bot"
    app_version: str = "1.0.0"
    debug: bool = False
    port: int = 8000
    api_prefix: str = ""  # "/api" to match the original web frontend

    # Storage
    storage_backend: str = "auto"  # auto, mongo, local
    mongodb_uri: str = "mongodb://127.0.0.1:27017/studybot"
    mongodb_database: Optional[str] = None  # uses the database named in the URI if not set
    mongodb_collection: str = "chathistories"
    mongodb_timeout_ms: int = 3000
    local_db_path: str = "./database.json"

    # LLM Provider settings
    llm_provider: str = "gemini"
    gemini_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_temperature: float = 0.7
    llm_max_tokens: Optional[int] = None  # no output cap unless set
    llm_timeout: float = 120.0
    system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION

    # CORS
    cors_origins: list[str] = ["*"]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/studybot.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses
    log_llm_calls: bool = True  # Log all LLM calls with token usage

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
