"""
Feature flag debug panel routes.

Lists every flag with its rules and whether the host satisfies them, lets a
developer toggle or replace a flag at runtime, and streams a flag's state as
server-sent events.
"""
import asyncio
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from flaggate.api.dependencies import get_app_settings, get_registry
from flaggate.config import Settings
from flaggate.errors import FeatureNotFoundError, InvalidFeatureError
from flaggate.features import FlagRegistry
from flaggate.models.schemas import Condition, FeatureDefinition

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/features", tags=["features"])


class FeatureFlagResponse(BaseModel):
    """Single feature flag with its eligibility for the requested host."""

    name: str
    enabled: bool
    supported_levels: List[str]
    supported_versions: List[str]
    level_supported: Optional[bool] = None
    version_supported: Optional[bool] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "new_checkout",
                    "enabled": True,
                    "supported_levels": [">=29"],
                    "supported_versions": [">=1.0.0"],
                    "level_supported": True,
                    "version_supported": False,
                }
            ]
        }
    }


class FeatureFlagsResponse(BaseModel):
    """All feature flags response."""

    features: List[FeatureFlagResponse]
    enabled_count: int
    disabled_count: int
    total_count: int


class FeatureUpdateRequest(BaseModel):
    """
    Replacement state for a flag.

    When `condition` is omitted the flag keeps its current rules.
    """

    enabled: bool
    condition: Optional[Condition] = None


def _to_response(
    registry: FlagRegistry,
    definition: FeatureDefinition,
    level: Optional[int],
    version: Optional[str],
) -> FeatureFlagResponse:
    return FeatureFlagResponse(
        name=definition.name,
        enabled=definition.enabled,
        supported_levels=list(definition.condition.supported_levels),
        supported_versions=list(definition.condition.supported_versions),
        level_supported=(
            registry.is_supported_level(definition.name, level) if level is not None else None
        ),
        version_supported=(
            registry.is_supported_version(definition.name, version) if version is not None else None
        ),
    )


@router.get("", response_model=FeatureFlagsResponse)
async def list_features(
    registry: FlagRegistry = Depends(get_registry),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    Get every flag in registration order.

    Eligibility is reported against the host level and version from settings,
    and left empty when those are not configured.
    """
    definitions = registry.get_all()
    enabled_count = sum(1 for d in definitions if d.enabled)

    return FeatureFlagsResponse(
        features=[
            _to_response(registry, d, app_settings.platform_level, app_settings.host_version)
            for d in definitions
        ],
        enabled_count=enabled_count,
        disabled_count=len(definitions) - enabled_count,
        total_count=len(definitions),
    )


@router.post("", response_model=FeatureFlagResponse, status_code=status.HTTP_201_CREATED)
async def create_feature(
    definition: FeatureDefinition,
    registry: FlagRegistry = Depends(get_registry),
    app_settings: Settings = Depends(get_app_settings),
):
    """Register a new flag definition. Existing names are not replaced."""
    registry.save(definition)
    return _to_response(
        registry, definition, app_settings.platform_level, app_settings.host_version
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_features(registry: FlagRegistry = Depends(get_registry)):
    """Remove every flag definition."""
    registry.clear_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{name}", response_model=FeatureFlagResponse)
async def get_feature(
    name: str,
    level: Optional[int] = Query(None, ge=0, description="Platform level to check"),
    version: Optional[str] = Query(None, description="Application version to check"),
    registry: FlagRegistry = Depends(get_registry),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    Get one flag and its eligibility.

    `level` and `version` default to the host values from settings.
    """
    definition = registry.get_definition(name)
    if definition is None:
        raise FeatureNotFoundError(name)

    return _to_response(
        registry,
        definition,
        level if level is not None else app_settings.platform_level,
        version if version is not None else app_settings.host_version,
    )


@router.put("/{name}", response_model=FeatureFlagResponse)
async def update_feature(
    name: str,
    payload: FeatureUpdateRequest,
    registry: FlagRegistry = Depends(get_registry),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    Replace a flag's state, creating it if it does not exist.

    Observers of the flag receive the new enabled state.
    """
    existing = registry.get_definition(name)
    condition = payload.condition
    if condition is None:
        condition = existing.condition if existing is not None else Condition()

    try:
        definition = FeatureDefinition(name=name, enabled=payload.enabled, condition=condition)
    except ValueError as e:
        raise InvalidFeatureError(name, str(e)) from e

    registry.update(definition)
    return _to_response(
        registry, definition, app_settings.platform_level, app_settings.host_version
    )


@router.post("/{name}/toggle", response_model=FeatureFlagResponse)
async def toggle_feature(
    name: str,
    registry: FlagRegistry = Depends(get_registry),
    app_settings: Settings = Depends(get_app_settings),
):
    """Flip a flag's enabled state, keeping its rules."""
    existing = registry.get_definition(name)
    if existing is None:
        raise FeatureNotFoundError(name)

    definition = existing.model_copy(update={"enabled": not existing.enabled})
    registry.update(definition)
    logger.info(f"Toggled feature '{name}' from the debug panel")
    return _to_response(
        registry, definition, app_settings.platform_level, app_settings.host_version
    )


@router.get("/{name}/stream")
async def stream_feature(
    name: str,
    request: Request,
    registry: FlagRegistry = Depends(get_registry),
    app_settings: Settings = Depends(get_app_settings),
):
    """
    Stream a flag's enabled state as server-sent events.

    The first event carries the current value; each later event follows an
    update. The stream ends when the client disconnects, which is checked at
    least every `stream_poll_interval` seconds even if the flag never changes.
    """
    poll_interval = app_settings.stream_poll_interval

    async def event_stream():
        async with registry.observe_async(name) as observation:
            while not await request.is_disconnected():
                try:
                    enabled = await asyncio.wait_for(observation.__anext__(), poll_interval)
                except asyncio.TimeoutError:
                    continue
                except StopAsyncIteration:
                    break
                yield f"data: {json.dumps({'name': name, 'enabled': enabled})}\n\n"

    return StreamingResponse(event_stream(), media_type="text/event-stream")
