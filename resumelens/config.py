# resumelens/config.py
from __future__ import annotations
import os

def _flag(name: str, default: str = "1") -> bool:
    return (os.environ.get(name, default) or "").strip().lower() in ("1", "true", "yes", "on")

class Config:
    # Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key")

    # Supabase (service-role client; optional, status bookkeeping only)
    SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
    SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")

    # n8n workflow
    N8N_ENABLED = _flag("N8N_ENABLED")
    N8N_BASE_URL = os.environ.get("N8N_BASE_URL", "https://umerrahman.app.n8n.cloud")
    N8N_API_KEY = os.environ.get("N8N_API_KEY", "")
    N8N_RETRIES = int(os.environ.get("N8N_RETRIES", "1"))
    N8N_CONNECT_TIMEOUT = float(os.environ.get("N8N_CONNECT_TIMEOUT", "5"))
    N8N_READ_TIMEOUT = float(os.environ.get("N8N_READ_TIMEOUT", "60"))

    # CORS origins if you need them (comma-separated)
    CORS_ORIGINS = [s.strip() for s in os.environ.get("CORS_ORIGINS", "").split(",") if s.strip()]

class DevConfig(Config):
    DEBUG = True

class ProdConfig(Config):
    DEBUG = False

class TestConfig(Config):
    TESTING = True
    DEBUG = True
    # tests never talk to real services
    N8N_ENABLED = False
    SUPABASE_URL = ""
    SUPABASE_SERVICE_ROLE_KEY = ""

def get_config(env: str | None = None):
    """Resolve config by env string or environment variables."""
    env = (env or os.environ.get("RESUMELENS_ENV") or os.environ.get("FLASK_ENV") or "production").lower()
    if env in ("dev", "development"):
        return DevConfig
    if env in ("test", "testing"):
        return TestConfig
    return ProdConfig
