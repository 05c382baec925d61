from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docaudit"
    db_username: str = "docaudit"
    db_password: str = "secret"

    job_poll_interval_seconds: int = 5
    files_root: str = "/app/uploads"

    pdf_engine: str = "pdfplumber"

    reasoning_provider: str = "openai"
    reasoning_model_name: str = "gpt-4o-mini"
    reasoning_timeout_seconds: int = 60
    reasoning_max_tokens: int = 2000
    reasoning_temperature: float = 0.0

    reasoning_openai_api_key: str = ""
    reasoning_openai_compatible_api_key: str = ""
    reasoning_openai_compatible_base_url: str = ""
    reasoning_openrouter_api_key: str = ""
    reasoning_groq_api_key: str = ""
    reasoning_together_api_key: str = ""
    reasoning_deepseek_api_key: str = ""
    reasoning_ollama_api_key: str = "ollama"

    cross_document_excerpt_chars: int = 2000
