# resumelens/__init__.py
from __future__ import annotations
import logging
from datetime import datetime, timezone
from flask import Flask
from flask_cors import CORS

from .config import get_config
from .extensions import init_supabase, init_n8n
from .routes import register_routes

def create_app(env: str | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(get_config(env))

    # CORS & logging
    CORS(app, origins=app.config["CORS_ORIGINS"] or "*")
    logging.basicConfig(level=logging.INFO)

    # Extensions / clients
    app.config["SUPABASE_ADMIN"] = init_supabase(app.config)
    app.config["N8N_CLIENT"] = init_n8n(app.config)

    # ---------- Blueprints ----------
    register_routes(app)

    @app.get("/healthz")
    def health():
        return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}

    return app
