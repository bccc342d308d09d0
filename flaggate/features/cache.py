"""
Loading persisted feature definitions.

The registry treats the loader as an external collaborator: it is called once
at start-up when caching is enabled, and a failure leaves the registry empty
rather than preventing it from starting.
"""

import json
import logging
from pathlib import Path
from typing import List, Protocol, Union

from pydantic import TypeAdapter, ValidationError

from flaggate.errors import CacheLoadError
from flaggate.models.schemas import FeatureDefinition

logger = logging.getLogger(__name__)

_DEFINITIONS_ADAPTER = TypeAdapter(List[FeatureDefinition])


class DefinitionLoader(Protocol):
    """Protocol for sources of persisted feature definitions."""

    def load(self) -> List[FeatureDefinition]:
        """
        Load persisted definitions.

        Returns:
            Definitions in their persisted order.

        Raises:
            CacheLoadError: If the source exists but cannot be read or parsed.
        """
        ...


class JsonFileDefinitionLoader:
    """
    Load definitions from a JSON file.

    The document is either a list of definitions or an object with a
    "features" list. A missing file means nothing has been persisted yet and
    loads as an empty list.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[FeatureDefinition]:
        if not self.path.exists():
            logger.debug(f"No cached features at {self.path}")
            return []

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise CacheLoadError(str(self.path), f"unreadable file ({e})") from e
        except json.JSONDecodeError as e:
            raise CacheLoadError(str(self.path), f"invalid JSON ({e.msg} at line {e.lineno})") from e

        if isinstance(document, dict):
            document = document.get("features", [])

        try:
            definitions = _DEFINITIONS_ADAPTER.validate_python(document)
        except ValidationError as e:
            raise CacheLoadError(
                str(self.path), f"invalid feature data ({e.error_count()} errors)"
            ) from e

        logger.info(f"Loaded {len(definitions)} cached features from {self.path}")
        return definitions
