from .app import HealthStatus, create_app

__all__ = ["HealthStatus", "create_app"]
