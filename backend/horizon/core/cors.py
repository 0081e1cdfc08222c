"""CORS policy for the browser client."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from horizon.core.logger import REQUEST_ID_HEADER


def init_app(app: Flask) -> None:
    """Allow the configured origins to call the API with bearer tokens.

    ``CORS_ORIGINS`` is a comma-separated list. Blank or ``"*"`` opens the API to
    any origin; credentials are then disabled since browsers reject the
    combination.
    """
    origins = [o.strip() for o in app.config.get("CORS_ORIGINS", "").split(",") if o.strip()]
    wildcard = not origins or origins == ["*"]
    prefix = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")

    CORS(
        app,
        resources={rf"{prefix}/*": {"origins": "*" if wildcard else origins}},
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
