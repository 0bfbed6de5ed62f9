from pathlib import Path
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

ENV_FILE = Path(__file__).resolve().parents[3] / ".env"
load_dotenv(dotenv_path=ENV_FILE)


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"

    # Conversation summary memory
    MEMORY_DISABLED: bool = False
    # Kept as raw strings; invalid values fall back to policy defaults.
    MEMORY_SUMMARY_CADENCE: str = ""
    MEMORY_CHAR_LIMIT: str = ""
    MEMORY_STORE_PROVIDER: str = "sql"

    # Memory store database
    APP_DATABASE_URL: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "summary_memory"
    POSTGRES_SSLMODE: str = "disable"

    def _derive_postgres_database_url(self) -> str:
        host = (self.POSTGRES_HOST or "").strip()
        username = (self.POSTGRES_USER or "").strip()
        database = (self.POSTGRES_DB or "").strip()
        if not host or not username or not database:
            return ""

        encoded_user = quote_plus(username)
        encoded_password = quote_plus(self.POSTGRES_PASSWORD or "")
        auth = f"{encoded_user}:{encoded_password}" if self.POSTGRES_PASSWORD else encoded_user

        base = (
            f"postgresql+psycopg://{auth}"
            f"@{host}:{int(self.POSTGRES_PORT or 5432)}/{database}"
        )
        sslmode = (self.POSTGRES_SSLMODE or "").strip()
        if sslmode:
            return f"{base}?sslmode={sslmode}"
        return base

    @property
    def app_database_url(self) -> str:
        configured_url = (self.APP_DATABASE_URL or "").strip()
        if configured_url:
            return configured_url

        derived_url = self._derive_postgres_database_url()
        if derived_url:
            return derived_url

        raise ValueError(
            "Database configuration is missing. Set APP_DATABASE_URL or "
            "POSTGRES_HOST/POSTGRES_USER/POSTGRES_DB."
        )

    class Config:
        env_file = str(ENV_FILE)
        extra = "ignore"


settings = Settings()
