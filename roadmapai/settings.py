## Application settings configuration

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # "production" switches the CORS origin to the deployed frontend
    environment: str = "development"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    production_origin: str = "https://roadmapai.netlify.app"
    dev_origin: str = "http://localhost:8080"
    extra_allowed_origins: list[str] = []

    LLM_PROVIDER: str = "gemini"

    # Gemini settings
    GEMINI_API_KEY: str | None = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-1.5-pro"

    # Groq settings
    GROQ_API_KEY: str | None = None
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama-3.1-8b-instant"

    # Ollama settings
    ollama_base_url: str = "http://localhost:11434/v1"
    ollama_model: str = "llama3.1"

    # Generation call policy
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 3
    llm_backoff_base_seconds: float = 1.0

    # End-to-end budget for one roadmap request
    request_timeout_seconds: float = 140.0

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        primary = self.production_origin if self.is_production else self.dev_origin
        return [primary, *[o for o in self.extra_allowed_origins if o != primary]]


settings = Settings()
