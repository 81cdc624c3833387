"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Agile Scenario Trainer"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./agile_trainer.db"
    seed_on_startup: bool = True

    # Text generation (OpenAI)
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    generation_timeout_seconds: float = 10.0

    # No auth: requests without X-User-Id act as this user
    demo_user_id: int = 1

    scenario_image_url: str = (
        "https://images.unsplash.com/photo-1552664730-d307ca884978"
        "?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=300"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
