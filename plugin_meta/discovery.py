"""Plugin discovery - scans directories for descriptor files."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from plugin_meta import constants
from plugin_meta.codec import DEFAULT_SIMPLE_CODEC, MetadataCodec
from plugin_meta.errors import PluginMetaError
from plugin_meta.metadata import PluginMetadata

logger = logging.getLogger(__name__)


@dataclass
class DiscoveredPlugin:
    """Metadata parsed from a descriptor file on disk."""

    metadata: PluginMetadata
    path: Path  # plugin directory
    source: str  # search path label, e.g. "bundled" | "installed"

    @property
    def id(self) -> str:
        return self.metadata.id


class PluginDiscovery:
    """Discovers plugins by scanning directories for descriptor files."""

    def __init__(
        self,
        search_paths: Sequence[Tuple[Path, str]],
        codec: Optional[MetadataCodec] = None,
        descriptor_file: Optional[str] = None,
    ):
        """Initialize discovery with search paths.

        Args:
            search_paths: List of (path, source_label) tuples, searched in order
            codec: Codec used to parse descriptors (flat schema by default)
            descriptor_file: Descriptor file name (PLUGIN_META_DESCRIPTOR_FILE
                by default)
        """
        self.search_paths = list(search_paths)
        self.codec = codec or DEFAULT_SIMPLE_CODEC
        self.descriptor_file = descriptor_file or constants.DESCRIPTOR_FILE
        self.errors: List[Tuple[Path, str]] = []

    def discover_all(self) -> List[DiscoveredPlugin]:
        """Discover all plugins from configured search paths.

        Invalid descriptors are logged, recorded in ``errors`` and skipped.
        The first plugin found for an id wins.

        Returns:
            List of discovered plugins in search order
        """
        self.errors = []
        discovered = []
        seen_ids = set()

        for search_path, source in self.search_paths:
            if not search_path.exists():
                logger.debug(f"Plugin search path does not exist: {search_path}")
                continue

            for plugin in self._scan_directory(search_path, source):
                if plugin.id in seen_ids:
                    logger.warning(
                        f"Duplicate plugin ID '{plugin.id}' found at {plugin.path}, "
                        f"skipping (first-found wins)"
                    )
                    continue
                seen_ids.add(plugin.id)
                discovered.append(plugin)

        logger.info(f"Discovered {len(discovered)} plugin(s)")
        return discovered

    def discover_single(self, plugin_path: Path, source: str = "external") -> Optional[DiscoveredPlugin]:
        """Discover a single plugin from a plugin directory or descriptor file.

        Returns:
            DiscoveredPlugin if valid, None otherwise
        """
        self.errors = []
        descriptor = plugin_path if plugin_path.is_file() else plugin_path / self.descriptor_file
        if not descriptor.exists():
            self._record(descriptor, f"No {self.descriptor_file} found")
            return None
        return self._load_descriptor(descriptor, source)

    def _scan_directory(self, search_path: Path, source: str) -> List[DiscoveredPlugin]:
        plugins = []

        for item in sorted(search_path.iterdir()):
            if not item.is_dir():
                continue
            descriptor = item / self.descriptor_file
            if not descriptor.exists():
                continue

            plugin = self._load_descriptor(descriptor, source)
            if plugin:
                plugins.append(plugin)

        return plugins

    def _load_descriptor(self, descriptor: Path, source: str) -> Optional[DiscoveredPlugin]:
        try:
            with open(descriptor, "rb") as f:
                metadata = self.codec.load(f)
        except PluginMetaError as e:
            self._record(descriptor, f"Invalid descriptor: {e}")
            return None
        except OSError as e:
            self._record(descriptor, f"Cannot read descriptor: {e}")
            return None

        logger.debug(f"Discovered plugin: {metadata.id} at {descriptor.parent}")
        return DiscoveredPlugin(metadata=metadata, path=descriptor.parent, source=source)

    def _record(self, path: Path, message: str) -> None:
        logger.error(f"{message} ({path})")
        self.errors.append((path, message))
