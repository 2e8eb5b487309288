"""Application factory wiring Flask extensions, auth and blueprints."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from chirp.core.config import BaseConfig, get_config
from chirp.core.logger import configure_logging
from chirp.core.logger import init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object, class or import string; defaults to the
        class selected by ``APP_ENV``.
    :param instance_relative_config: Load overrides from the instance folder.
    :param instance_config_filename: File name of the optional instance config.
    :returns: Ready-to-serve application.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Trust a single reverse-proxy hop for X-Forwarded-* headers
    if app.config.get("USE_PROXYFIX", True):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)  # type: ignore[method-assign]

    from chirp.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from chirp.core import security

    security.init_app(app)

    from chirp.core import cors

    cors.init_app(app)

    from chirp.api import init_app as init_api

    init_api(app)

    from chirp.core import errors

    errors.init_app(app)

    from chirp import cli as app_cli

    app_cli.init_app(app)

    return app
