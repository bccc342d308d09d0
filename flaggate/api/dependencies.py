"""
FastAPI dependencies for the debug panel routes.

The registry and settings live on the application state, set by create_app;
routes receive them through these functions rather than a module global.
"""
from fastapi import Request

from flaggate.config import Settings
from flaggate.features import FlagRegistry


def get_registry(request: Request) -> FlagRegistry:
    """
    Dependency returning the registry the application was created with.

    Usage:
        @router.get("/flags")
        def list_flags(registry: FlagRegistry = Depends(get_registry)):
            return registry.get_all()
    """
    return request.app.state.registry


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the application was created with."""
    return request.app.state.settings
