import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env
load_dotenv()


def _default_database_url() -> str:
    # Same connection variables the Postgres deployment has always used.
    db_user = os.getenv("user")
    db_password = os.getenv("password")
    db_host = os.getenv("host")
    db_port = os.getenv("port")
    db_name = os.getenv("dbname")

    if all([db_user, db_password, db_host, db_port, db_name]):
        return (
            f"postgresql+psycopg2://{db_user}:{db_password}"
            f"@{db_host}:{db_port}/{db_name}?sslmode=require"
        )
    return "sqlite:///./importer.db"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = Field(default_factory=_default_database_url)

    secret_key: Optional[str] = None
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    email_domain: str = "company.com"
    password_length: int = Field(16, ge=8, le=128)

    max_csv_rows: int = Field(1000, ge=1)
    max_csv_bytes: int = Field(1024 * 1024, ge=1)

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
