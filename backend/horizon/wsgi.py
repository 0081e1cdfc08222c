"""WSGI entry point for gunicorn: ``gunicorn -c gunicorn.conf.py horizon.wsgi:app``."""

from __future__ import annotations

from horizon.factory import create_app

app = create_app()
