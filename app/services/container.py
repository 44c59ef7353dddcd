"""Dependency injection container for services."""

from dependency_injector import containers, providers

from app.config import Settings
from app.services.backend_client import BackendClient
from app.services.config_service import ConfigService
from app.services.dashboard_service import DashboardService
from app.services.device_service import DeviceService
from app.services.firmware_service import FirmwareService
from app.services.metrics_service import MetricsService
from app.services.reading_service import ReadingService
from app.services.render_cache import RenderCache


class ServiceContainer(containers.DeclarativeContainer):
    """Container for service dependency injection."""

    # Configuration provider
    config = providers.Dependency(instance_of=Settings)

    # Metrics service - Singleton owning the Prometheus metric objects
    metrics_service = providers.Singleton(MetricsService)

    # Render cache - Singleton shared by all request threads
    render_cache = providers.Singleton(
        RenderCache,
        ttl_seconds=config.provided.config_cache_ttl_seconds,
    )

    # BackendClient - Singleton holding the pooled HTTP connection
    backend_client = providers.Singleton(
        BackendClient,
        config=config,
        metrics_service=metrics_service,
    )

    # Data access services - Factory creates new instance per request
    device_service = providers.Factory(DeviceService, backend_client=backend_client)
    reading_service = providers.Factory(ReadingService, backend_client=backend_client)
    firmware_service = providers.Factory(FirmwareService, backend_client=backend_client)

    # ConfigService - Factory; writes invalidate the shared render cache
    config_service = providers.Factory(
        ConfigService,
        backend_client=backend_client,
        render_cache=render_cache,
        metrics_service=metrics_service,
    )

    # DashboardService - Factory assembling page view models
    dashboard_service = providers.Factory(
        DashboardService,
        config=config,
        device_service=device_service,
        reading_service=reading_service,
        firmware_service=firmware_service,
        config_service=config_service,
        render_cache=render_cache,
        metrics_service=metrics_service,
    )
