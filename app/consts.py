"""Project constants."""

PROJECT_NAME = "soil-dashboard"
API_TITLE = "Soil Sensor Dashboard API"
API_DESCRIPTION = "REST facade over the soil sensor backend: devices, readings, firmware and configuration"
DEFAULT_BACKEND_PORT = 3201
