from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # AI gateway (OpenAI-compatible chat completions)
    lovable_api_key: str = ""
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    ai_request_timeout: float = 60.0

    # Models per mode
    classify_model: str = "google/gemini-3-flash-preview"
    plan_model: str = "google/gemini-3-flash-preview"
    council_model: str = "google/gemini-2.5-pro"
    chat_model: str = "google/gemini-3-flash-preview"

    # Langfuse
    langfuse_secret_key: str = ""
    langfuse_public_key: str = ""
    langfuse_host: str = "http://localhost:3000"

    # App
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def gateway_configured(self) -> bool:
        return bool(self.lovable_api_key)


settings = Settings()
