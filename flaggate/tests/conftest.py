"""
Shared pytest fixtures for FlagGate tests.

This module provides common fixtures for:
- Settings with caching disabled
- Registries, empty and pre-populated
- FastAPI test client over the debug panel
- Definition files on disk
"""
import json
import os
from pathlib import Path
from typing import Callable, Generator, List

import pytest

# Set test environment variables BEFORE importing app modules
# This keeps a developer's shell configuration out of the tests
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from fastapi.testclient import TestClient

from flaggate.config import Settings, get_settings
from flaggate.features import FlagRegistry
from flaggate.main import create_app
from flaggate.models.schemas import Condition, FeatureDefinition


# ============================================================================
# Definition Factories
# ============================================================================

def _build_feature(
    name: str,
    enabled: bool = True,
    levels: List[str] = None,
    versions: List[str] = None,
) -> FeatureDefinition:
    """Build a FeatureDefinition with optional rules."""
    return FeatureDefinition(
        name=name,
        enabled=enabled,
        condition=Condition(
            supported_levels=levels or [],
            supported_versions=versions or [],
        ),
    )


@pytest.fixture
def make_feature() -> Callable[..., FeatureDefinition]:
    """Factory fixture: make_feature(name, enabled=True, levels=None, versions=None)."""
    return _build_feature


@pytest.fixture
def sample_features() -> List[FeatureDefinition]:
    """Three flags with mixed states and rules."""
    return [
        _build_feature("feature1", True, levels=[">=29"], versions=[">=1.0.0"]),
        _build_feature("feature2", False, levels=["<=29"], versions=[">=1.0.1"]),
        _build_feature("feature3", True, levels=["32-36"], versions=[">=1.0.2"]),
    ]


# ============================================================================
# Registry Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings with caching off and a known host identity."""
    return get_settings(cache_enabled=False, platform_level=29, host_version="1.0.0")


@pytest.fixture
def registry(test_settings) -> FlagRegistry:
    """An empty registry."""
    return FlagRegistry(settings=test_settings)


@pytest.fixture
def populated_registry(registry, sample_features) -> FlagRegistry:
    """A registry holding the sample features."""
    registry.save_many(sample_features)
    return registry


# ============================================================================
# HTTP Fixtures
# ============================================================================

@pytest.fixture
def client(populated_registry, test_settings) -> Generator[TestClient, None, None]:
    """FastAPI test client over the debug panel, backed by the populated registry."""
    app = create_app(populated_registry, test_settings)
    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def definitions_file(tmp_path, sample_features) -> Path:
    """A JSON file holding the sample features as a bare list."""
    path = tmp_path / "features.json"
    path.write_text(
        json.dumps([feature.model_dump() for feature in sample_features]),
        encoding="utf-8",
    )
    return path
