"""
Application Settings.

Centraliza toda configuração via .env / variáveis de ambiente.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configurações carregadas de variáveis de ambiente."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # --- Storage ---
    database_url: str = "sqlite:///carrier_verification.db"
    storage_backend: str = "sql"          # "sql" | "memory"
    load_demo_data: bool = False

    # --- Admin ---
    admin_api_key: str = ""                # vazio = nenhuma chave concede admin

    # --- Gating ---
    gating_cache_enabled: bool = True       # só vale com storage_backend=memory

    # --- Notifications ---
    notification_log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Singleton de settings."""
    return Settings()
