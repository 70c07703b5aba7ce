from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the legal assistant server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Hosted assistant (OpenAI Assistants API)
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    assistant_id: str | None = Field(default=None, alias="ASSISTANT_ID")

    # Serper web search
    serper_api_key: str | None = Field(default=None, alias="SERPER_API_KEY")
    serper_url: str = Field(default="https://google.serper.dev/search", alias="SERPER_URL")
    trusted_domains: list[str] = Field(
        default_factory=lambda: ["jusinfo.no", "lovdata.no"],
        alias="TRUSTED_DOMAINS",
    )
    search_result_count: int = Field(default=20, alias="SEARCH_RESULT_COUNT")
    search_timeout_seconds: float = Field(default=15.0, alias="SEARCH_TIMEOUT_SECONDS")

    # Upper bound on tool-call rounds within a single turn
    max_tool_rounds: int = Field(default=8, alias="MAX_TOOL_ROUNDS")

    # Appended to the streamed answer when the turn fails mid-stream
    stream_error_message: str = Field(
        default="\n\nBeklager, det oppstod en feil under behandlingen av spørsmålet ditt. Prøv igjen.",
        alias="STREAM_ERROR_MESSAGE",
    )

    # Provisioning
    assistant_name: str = Field(default="Skillsmisse Jus Agent", alias="ASSISTANT_NAME")
    assistant_model: str = Field(default="gpt-4o", alias="ASSISTANT_MODEL")
    assistant_instructions: str | None = Field(default=None, alias="ASSISTANT_INSTRUCTIONS")
    vector_store_name: str = Field(default="Skillsmisse Jus Store", alias="VECTOR_STORE_NAME")
    sources_dir: str = Field(default="../kilder", alias="SOURCES_DIR")

    # FastAPI configuration
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8080, alias="APP_PORT")
    debug: bool = Field(default=False, alias="DEBUG")

    # Terminal client
    chat_server_url: str = Field(default="http://localhost:8080", alias="CHAT_SERVER_URL")


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings so multiple imports share a single instance."""

    return Settings()
