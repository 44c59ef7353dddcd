"""Flask application factory for the soil sensor dashboard backend."""

import logging

from flask_cors import CORS

from app.app import App
from app.config import Settings
from app.services.container import ServiceContainer


def create_app(settings: Settings | None = None) -> App:
    """Create and configure Flask application."""
    app = App(__name__)

    # Load configuration
    if settings is None:
        settings = Settings.load()

    # Validate production configuration
    settings.validate_production_config()

    app.config.from_mapping(settings.to_flask_config())

    # Initialize SpecTree for OpenAPI docs
    from app.utils.spectree_config import configure_spectree

    configure_spectree(app)

    # Initialize service container
    container = ServiceContainer()
    container.config.override(settings)

    # Wire container with API modules
    wire_modules = [
        "app.api.configs",
        "app.api.devices",
        "app.api.firmware",
        "app.api.health",
        "app.api.metrics",
        "app.api.overview",
    ]

    container.wire(modules=wire_modules)

    app.container = container

    # Configure CORS
    CORS(app, origins=settings.cors_origins)

    # Configure logging
    debug_mode = settings.flask_env in ("development", "testing")
    logging.basicConfig(
        level=logging.DEBUG if debug_mode else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Register main API blueprint
    from app.api import api_bp

    app.register_blueprint(api_bp)

    # Register metrics blueprint (at root, not under /api)
    from app.api.metrics import metrics_bp

    app.register_blueprint(metrics_bp)

    return app
