# Controllers package initialization
# Backend pages, authentication, health checks and the REST API v1

from . import auth_controller, backend_controller, health_controller

__all__ = [
    "auth_controller",
    "backend_controller",
    "health_controller",
]
