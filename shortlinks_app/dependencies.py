"""
FastAPI dependencies for dependency injection.

The registry and the service built on it are created by the application
lifespan and kept on ``app.state``; there are no module-level singletons.
Tests override ``get_url_service`` to inject a service with a fixed clock.
"""

from fastapi import Request

from shortlinks_app.services.url_service import URLService
from shortlinks_app.storage.strategies import RegistryStore


def get_registry(request: Request) -> RegistryStore:
    """Registry owned by the running application"""
    return request.app.state.registry


def get_url_service(request: Request) -> URLService:
    """URLService owned by the running application"""
    return request.app.state.url_service
