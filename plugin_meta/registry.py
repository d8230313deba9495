"""Metadata registry - tracks metadata by plugin id and applies overrides."""

import logging
from typing import Dict, List, Optional

from plugin_meta.metadata import PluginMetadata

logger = logging.getLogger(__name__)


class MetadataRegistry:
    """Central registry of plugin metadata keyed by plugin id.

    Not thread-safe; populate it from one loader and publish it read-only.
    """

    def __init__(self):
        self._metadata: Dict[str, PluginMetadata] = {}

    def register(self, metadata: PluginMetadata) -> None:
        """Register metadata, replacing any entry with the same id."""
        if metadata.id in self._metadata:
            logger.warning(f"Plugin '{metadata.id}' already registered, overwriting")
        self._metadata[metadata.id] = metadata
        logger.info(f"Registered plugin metadata: {metadata.id}")

    def apply_override(self, override: PluginMetadata) -> PluginMetadata:
        """Merge ``override`` onto the registered metadata with the same id.

        Registers a copy of ``override`` when no metadata exists for its id.

        Returns:
            The registered (merged) metadata
        """
        current = self._metadata.get(override.id)
        if current is None:
            current = override.copy()
            self._metadata[override.id] = current
            logger.info(f"Registered plugin metadata from override: {override.id}")
        else:
            current.accept(override)
            logger.debug(f"Applied override to plugin metadata: {override.id}")
        return current

    def get(self, plugin_id: str) -> Optional[PluginMetadata]:
        return self._metadata.get(plugin_id)

    def get_all(self) -> List[PluginMetadata]:
        return list(self._metadata.values())

    def remove(self, plugin_id: str) -> Optional[PluginMetadata]:
        return self._metadata.pop(plugin_id, None)

    def has(self, plugin_id: str) -> bool:
        return plugin_id in self._metadata

    def count(self) -> int:
        return len(self._metadata)
