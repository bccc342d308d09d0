"""
Flag definition storage.

FlagStore is the contract the registry depends on; InMemoryFlagStore is the
default implementation, an insertion-ordered list guarded by a lock so that
UI and background tasks can read and mutate it concurrently.
"""

import logging
import threading
from typing import Iterable, List, Optional, Protocol

from flaggate.models.schemas import FeatureDefinition

logger = logging.getLogger(__name__)


class FlagStore(Protocol):
    """Protocol for flag definition storage."""

    def insert(self, definition: FeatureDefinition) -> None:
        """Append a definition without checking for an existing name."""
        ...

    def insert_many(self, definitions: Iterable[FeatureDefinition]) -> None:
        """Append definitions in order without deduplication."""
        ...

    def upsert(self, definition: FeatureDefinition) -> None:
        """Replace the first definition with the same name, or append it."""
        ...

    def get(self, name: str) -> Optional[FeatureDefinition]:
        """Return the first definition with this name, if any."""
        ...

    def list_all(self) -> List[FeatureDefinition]:
        ...

    def list_enabled(self) -> List[FeatureDefinition]:
        ...

    def list_disabled(self) -> List[FeatureDefinition]:
        ...

    def exists(self, name: str) -> bool:
        ...

    def is_enabled(self, name: str) -> bool:
        ...

    def has_any_enabled(self) -> bool:
        ...

    def clear_all(self) -> None:
        ...


class InMemoryFlagStore:
    """
    Insertion-ordered, lock-guarded list of feature definitions.

    Duplicate names are accepted by insert/insert_many. Lookups and upsert
    act on the first entry with a matching name; later duplicates are left
    untouched. Every query returns a snapshot copy, never the live list.
    """

    def __init__(self, definitions: Optional[Iterable[FeatureDefinition]] = None):
        self._definitions: List[FeatureDefinition] = list(definitions or [])
        self._lock = threading.RLock()

    def insert(self, definition: FeatureDefinition) -> None:
        with self._lock:
            self._definitions.append(definition)
        logger.debug(f"Saved feature '{definition.name}'")

    def insert_many(self, definitions: Iterable[FeatureDefinition]) -> None:
        batch = list(definitions)
        with self._lock:
            self._definitions.extend(batch)
        logger.debug(f"Saved {len(batch)} features")

    def upsert(self, definition: FeatureDefinition) -> None:
        with self._lock:
            index = self._index_of(definition.name)
            if index is None:
                self._definitions.append(definition)
            else:
                self._definitions[index] = definition

    def get(self, name: str) -> Optional[FeatureDefinition]:
        with self._lock:
            index = self._index_of(name)
            return None if index is None else self._definitions[index]

    def list_all(self) -> List[FeatureDefinition]:
        with self._lock:
            return list(self._definitions)

    def list_enabled(self) -> List[FeatureDefinition]:
        with self._lock:
            return [d for d in self._definitions if d.enabled]

    def list_disabled(self) -> List[FeatureDefinition]:
        with self._lock:
            return [d for d in self._definitions if not d.enabled]

    def exists(self, name: str) -> bool:
        return self.get(name) is not None

    def is_enabled(self, name: str) -> bool:
        definition = self.get(name)
        return definition.enabled if definition is not None else False

    def has_any_enabled(self) -> bool:
        with self._lock:
            return any(d.enabled for d in self._definitions)

    def clear_all(self) -> None:
        with self._lock:
            self._definitions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)

    def _index_of(self, name: str) -> Optional[int]:
        for index, definition in enumerate(self._definitions):
            if definition.name == name:
                return index
        return None
