"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from horizon.core.config import BaseConfig, get_config
from horizon.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    The identity backend is chosen here, once, and stored in
    ``app.extensions["auth_provider"]``.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from horizon.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from horizon.core import cors

    cors.init_app(app)

    from horizon.services.auth import build_auth_provider

    app.extensions["auth_provider"] = build_auth_provider(app)

    from horizon.api import init_app as init_api

    init_api(app)

    from horizon.core import errors

    errors.init_app(app)

    from horizon import cli as horizon_cli

    horizon_cli.init_app(app)

    return app
