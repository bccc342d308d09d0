"""
Feature flag registry for FlagGate.

This module provides the in-memory flag registry: definitions gated by
platform level and application version rules, with reactive observation
of each flag's enabled state.
"""

from flaggate.features.cache import DefinitionLoader, JsonFileDefinitionLoader
from flaggate.features.registry import FlagRegistry
from flaggate.features.store import FlagStore, InMemoryFlagStore
from flaggate.features.subscriptions import (
    AsyncFlagObservation,
    FlagObservation,
    SubscriptionCell,
    SubscriptionHub,
)

__all__ = [
    "FlagRegistry",
    "FlagStore",
    "InMemoryFlagStore",
    "SubscriptionHub",
    "SubscriptionCell",
    "FlagObservation",
    "AsyncFlagObservation",
    "DefinitionLoader",
    "JsonFileDefinitionLoader",
]
