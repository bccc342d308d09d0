"""
Feature registry: the public surface for defining, querying and observing flags.

The registry composes the definition store, the subscription hub and the two
rule evaluators. Construct one explicitly and pass it to whatever needs it;
there is no process-wide instance.
"""

import logging
import threading
from typing import Callable, Iterable, List, Optional

from flaggate.config import Settings
from flaggate.engine.conditions import LevelEvaluator, RuleEvaluator, VersionEvaluator
from flaggate.errors import CacheLoadError
from flaggate.features.cache import DefinitionLoader, JsonFileDefinitionLoader
from flaggate.features.store import FlagStore, InMemoryFlagStore
from flaggate.features.subscriptions import (
    AsyncFlagObservation,
    FlagObservation,
    SubscriptionHub,
)
from flaggate.models.schemas import FeatureDefinition

logger = logging.getLogger(__name__)


class FlagRegistry:
    """
    Facade over flag storage, eligibility rules and reactive observation.

    Lookup misses are not errors: enabled-state queries default to False,
    eligibility queries default to True (unrestricted), and rule lookups
    return an empty list.

    Attributes:
        settings: The configuration the registry was built with
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[FlagStore] = None,
        hub: Optional[SubscriptionHub] = None,
        loader: Optional[DefinitionLoader] = None,
    ):
        """
        Initialize the registry.

        Args:
            settings: Configuration. Defaults to Settings() with caching disabled
                unless the environment says otherwise.
            store: Definition storage. Defaults to an InMemoryFlagStore.
            hub: Subscription hub. Defaults to a fresh SubscriptionHub.
            loader: Source of persisted definitions, used only when
                settings.cache_enabled is true. Defaults to a JSON file
                loader over settings.cache_path.
        """
        self.settings = settings or Settings()
        self._store: FlagStore = store if store is not None else InMemoryFlagStore()
        self._hub = hub or SubscriptionHub()
        self._levels: RuleEvaluator[int] = LevelEvaluator()
        self._versions: RuleEvaluator[str] = VersionEvaluator()
        # Serializes store writes with their publish so cells never lag the store
        self._lock = threading.RLock()

        if self.settings.cache_enabled:
            self._load_cached(loader or JsonFileDefinitionLoader(self.settings.cache_path))

    def _load_cached(self, loader: DefinitionLoader) -> None:
        try:
            definitions = loader.load()
        except CacheLoadError as e:
            logger.warning(f"Starting with no features, cache load failed: {e.message}")
            return
        except Exception:
            logger.warning("Starting with no features, cache loader raised", exc_info=True)
            return
        self._store.insert_many(definitions)

    # Mutations

    def save(self, definition: FeatureDefinition) -> None:
        """Append a definition. Names are not deduplicated."""
        self._store.insert(definition)

    def save_many(self, definitions: Iterable[FeatureDefinition]) -> None:
        """Append definitions in order. Names are not deduplicated."""
        self._store.insert_many(definitions)

    def update(self, definition: FeatureDefinition) -> None:
        """
        Replace the first definition with the same name, or add it, then
        push the new enabled state to every observer of that name.
        """
        with self._lock:
            self._store.upsert(definition)
            self._hub.publish(definition.name, definition.enabled)
        logger.info(f"Updated feature '{definition.name}' (enabled={definition.enabled})")

    def clear_all(self) -> None:
        """
        Remove every definition.

        Subscription cells keep their last value; observers are not notified.
        """
        self._store.clear_all()
        logger.info("Cleared all features")

    # Queries

    def is_enabled(self, name: str) -> bool:
        return self._store.is_enabled(name)

    def get(self, name: str, default: bool = False) -> bool:
        """Enabled state of a flag, or `default` when it is not defined."""
        definition = self._store.get(name)
        return definition.enabled if definition is not None else default

    def get_definition(self, name: str) -> Optional[FeatureDefinition]:
        return self._store.get(name)

    def exists(self, name: str) -> bool:
        return self._store.exists(name)

    def get_all(self) -> List[FeatureDefinition]:
        return self._store.list_all()

    def get_enabled(self) -> List[FeatureDefinition]:
        return self._store.list_enabled()

    def get_disabled(self) -> List[FeatureDefinition]:
        return self._store.list_disabled()

    def has_enabled(self) -> bool:
        return self._store.has_any_enabled()

    # Eligibility

    def get_supported_levels(self, name: str) -> List[str]:
        definition = self._store.get(name)
        return list(definition.condition.supported_levels) if definition else []

    def is_supported_level(self, name: str, current_level: int) -> bool:
        """
        Check the flag's level rules against the current platform level.

        Returns True when the flag is unknown or has no level rules.
        """
        return self._levels.evaluate_any(self.get_supported_levels(name), current_level)

    def get_supported_versions(self, name: str) -> List[str]:
        definition = self._store.get(name)
        return list(definition.condition.supported_versions) if definition else []

    def is_supported_version(self, name: str, current_version: str) -> bool:
        """
        Check the flag's version rules against the current application version.

        Returns True when the flag is unknown or has no version rules.
        """
        return self._versions.evaluate_any(self.get_supported_versions(name), current_version)

    def is_supported(self, name: str, current_level: int, current_version: str) -> bool:
        """Both eligibility checks, as shown per flag in the debug panel."""
        return self.is_supported_level(name, current_level) and self.is_supported_version(
            name, current_version
        )

    # Observation

    def observe(self, name: str) -> FlagObservation:
        """
        Observe a flag's enabled state.

        The observation yields the current value immediately (False for a name
        that was never defined or published), then each value pushed by
        `update`, until the caller closes it.
        """
        with self._lock:
            return self._hub.observe(name, initial=self._store.is_enabled(name))

    def observe_async(self, name: str) -> AsyncFlagObservation:
        """Async variant of `observe`; call from a running event loop."""
        with self._lock:
            return self._hub.observe_async(name, initial=self._store.is_enabled(name))

    def subscribe(self, name: str, callback: Callable[[bool], None]) -> Callable[[], None]:
        """
        Register a callback for the current value and later updates.

        Callbacks run on the updating thread while the registry lock is held.
        A callback must not wait on another thread that updates flags, or
        both will block.

        Returns:
            A function that detaches the callback.
        """
        with self._lock:
            return self._hub.subscribe(name, callback, initial=self._store.is_enabled(name))
