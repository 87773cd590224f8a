"""
Buzerant mirror - proxy server
Main entry point for the Flask-based rewriting proxy.
"""

import argparse
import logging
from typing import Optional

from flask import Flask

from fetcher.services.generate_default_user_agent_service import generate_default_user_agent
from mirror.controllers.mirror_controller import MirrorController
from mirror.core.loop_runner import ensure_background_loop, stop_background_loop
from mirror.core.managers.config_manager import config_manager
from mirror.core.utils.configure_logging import configure_logger
from mirror.model import ProxySettings
from mirror.server.routers.page_router import page_router

logger = logging.getLogger(__name__)


def create_app(
        settings: Optional[ProxySettings] = None,
        controller: Optional[MirrorController] = None,
) -> Flask:
    """
    Application factory wiring the mirror controller into a Flask instance.
    Tests pass their own controller; the CLI builds one from settings.json.
    """
    flask_app = Flask(__name__)

    # 1. Resolve settings and the controller
    settings = settings or ProxySettings.from_config(config_manager)
    if controller is None:
        controller = MirrorController(settings, generate_default_user_agent())

    # 2. Inject Controller into App Config for Blueprint access
    flask_app.config['MIRROR_CONTROLLER'] = controller
    flask_app.config['PROXY_SETTINGS'] = settings

    # 3. Register Blueprints
    flask_app.register_blueprint(page_router)

    return flask_app


def main(argv: Optional[list] = None) -> int:
    """
    Parses arguments, configures logging and starts the server.
    """
    parser = argparse.ArgumentParser(description="Buzerant mirror - rewriting proxy server")
    parser.add_argument("--host", type=str, help="Host interface to bind to (overrides server.host)")
    parser.add_argument("--port", type=int, help="Port to bind the server to (overrides server.port)")
    parser.add_argument("--log-level", type=str, help="Root log level (overrides debug.level)")

    args = parser.parse_args(argv)

    if args.host:
        config_manager.set_nested("server.host", args.host)
    if args.port:
        config_manager.set_nested("server.port", args.port)
    if args.log_level:
        config_manager.set_nested("debug.level", args.log_level)

    configure_logger(
        config_manager.get_nested("debug.level", "INFO"),
        module_specific_levels=config_manager.get_nested("debug.modules"),
        silenced_loggers=config_manager.get_nested("debug.silenced"),
    )

    settings = ProxySettings.from_config(config_manager)
    app = create_app(settings)

    ensure_background_loop()
    logger.debug("Background asyncio event loop is running.")
    logger.info("Mirror listening on http://%s:%s", settings.host, settings.port)

    # threaded: each request thread blocks on its own fetch future
    try:
        app.run(host=settings.host, port=settings.port, threaded=True, use_reloader=False)
    finally:
        stop_background_loop()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
