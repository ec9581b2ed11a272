from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "SkillStrong"
    debug: bool = False

    # Database (any SQLAlchemy URL; point at the Supabase Postgres in production)
    database_url: str = f"sqlite:///{Path(__file__).resolve().parent.parent.parent / 'skillstrong.db'}"

    # LLM
    llm_provider: str = "openai"  # openai | gemini
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # Google Custom Search
    google_cse_key: str = ""
    google_cse_id: str = ""

    # College Scorecard (api.data.gov)
    college_scorecard_api_key: str = ""

    # Auth
    supabase_jwt_secret: str = ""
    supabase_jwt_audience: str = "authenticated"
    admin_secret: str = ""

    # Outbound HTTP
    http_user_agent: str = "Mozilla/5.0 SkillStrongBot"
    ingest_delay_seconds: float = 0.4

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent.parent / ".env"),
        "env_prefix": "SKILLSTRONG_",
    }


settings = Settings()
