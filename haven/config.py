from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"

    # Data access
    data_backend: Literal["csv", "sql"] = "csv"
    data_dir: str = "sample_data"
    database_url: str = "sqlite:///haven.db"
    database_echo: bool = False

    # Catalog settings
    catalog_page_size: int = 9
    min_page_size: int = 1
    max_page_size: int = 60
    featured_products_limit: int = 6

    # Auth
    password_hash_rounds: int = 12
    session_key: str = "haven_user"

    # Seed data settings
    default_seed_target: Literal["csv", "sql"] = "csv"
    default_seed_password: str = "password123"
    default_seed_hash_rounds: int = 10

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)
