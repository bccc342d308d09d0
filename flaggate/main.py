"""
FlagGate debug panel application.

Application factory wiring a FlagRegistry into FastAPI. The registry is
stored on app.state and handed to routes through dependencies.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from flaggate.api.routes import features
from flaggate.config import Settings, configure_logging
from flaggate.errors import FlagGateError
from flaggate.features import FlagRegistry

logger = logging.getLogger(__name__)


def create_app(
    registry: Optional[FlagRegistry] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create the debug panel application.

    Args:
        registry: The registry to expose. A new one is built from the
            settings when omitted.
        app_settings: Configuration. Defaults to the registry's settings,
            or Settings() when no registry is given.

    Returns:
        Configured FastAPI application
    """
    if app_settings is None:
        app_settings = registry.settings if registry is not None else Settings()
    if registry is None:
        registry = FlagRegistry(settings=app_settings)

    configure_logging(app_settings)

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="Runtime feature flag debug panel",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.registry = registry
    app.state.settings = app_settings

    @app.exception_handler(FlagGateError)
    async def flaggate_error_handler(request: Request, exc: FlagGateError):
        logger.warning(f"{exc.error_code.value}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.to_response().model_dump()},
        )

    app.include_router(features.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint with registry summary."""
        return {
            "status": "healthy",
            "version": app_settings.app_version,
            "features": len(registry.get_all()),
        }

    logger.info(f"Created {app_settings.app_name} v{app_settings.app_version}")
    return app


if __name__ == "__main__":
    import uvicorn

    from flaggate.config import settings

    uvicorn.run(create_app(app_settings=settings), host="0.0.0.0", port=8000)
