from __future__ import annotations
from flask import Flask

def register_routes(app: Flask) -> None:
    from .analysis import analysis_bp
    from .resumes import resumes_bp

    app.register_blueprint(analysis_bp)
    app.register_blueprint(resumes_bp)
