"""API blueprints for the soil sensor dashboard backend."""

from flask import Blueprint

# Create main API blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")


# Import and register all resource blueprints
# Note: Imports are done after api_bp creation to avoid circular imports
from app.api.configs import configs_bp  # noqa: E402
from app.api.devices import devices_bp  # noqa: E402
from app.api.firmware import firmware_bp  # noqa: E402
from app.api.health import health_bp  # noqa: E402
from app.api.overview import overview_bp  # noqa: E402

api_bp.register_blueprint(configs_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(devices_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(firmware_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(health_bp)  # type: ignore[attr-defined]
api_bp.register_blueprint(overview_bp)  # type: ignore[attr-defined]
