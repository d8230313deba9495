"""Codec for flat plugin descriptors (plugin.json)."""

import logging
from typing import Any, Dict

from plugin_meta.codec.base import JsonObject, MetadataCodec
from plugin_meta.dependency import LoadOrder
from plugin_meta.metadata import PluginMetadata

logger = logging.getLogger(__name__)


class SimpleMetadataCodec(MetadataCodec):
    """Flat descriptor schema.

    Recognized keys are ``id`` (required), ``name``, ``version``,
    ``description``, ``url``, ``authors`` and ``dependencies``. Every other
    top-level key is stored as an extension, e.g.::

        {
          "id": "testplugin",
          "version": "1.0-SNAPSHOT",
          "authors": ["Minecrell"],
          "dependencies": [{"id": "requireddependency", "optional": false}],
          "main": "com.example.TestPlugin"
        }
    """

    DEFAULT_LOAD_ORDER = LoadOrder.AFTER
    SCALAR_FIELDS = ("id", "name", "version", "description", "url")
    SCHEMA_KEYS = frozenset(SCALAR_FIELDS + ("authors", "dependencies"))

    def from_dict(self, obj: JsonObject) -> PluginMetadata:
        fields: Dict[str, Any] = {}
        extensions: Dict[str, Any] = {}

        for key, value in obj.items():
            if key in self.SCALAR_FIELDS:
                fields[key] = self._read_str(value, key)
            elif key == "authors":
                fields[key] = self._read_authors(value, key)
            elif key == "dependencies":
                fields[key] = self._read_dependencies(value, key)
            elif value is None:
                logger.debug(f"Skipping null extension '{key}'")
            else:
                extensions[key] = self.decode_extension(key, value)

        self._check_required(fields, ("id",))

        metadata = PluginMetadata(fields["id"], self.grammar)
        metadata.name = fields.get("name")
        metadata.version = fields.get("version")
        metadata.description = fields.get("description")
        metadata.url = fields.get("url")
        for author in fields.get("authors", ()):
            metadata.add_author(author)
        for dependency in fields.get("dependencies", ()):
            metadata.add_dependency(dependency)
        for key, value in extensions.items():
            metadata.set_extension(key, value)
        return metadata

    def to_dict(self, metadata: PluginMetadata) -> JsonObject:
        out: JsonObject = {"id": metadata.id}
        self._put_if_present(out, "name", metadata.name)
        self._put_if_present(out, "version", metadata.version)
        self._put_if_present(out, "description", metadata.description)
        self._put_if_present(out, "url", metadata.url)
        self._write_common(out, metadata)
        out.update(self._write_extensions(metadata, self.SCHEMA_KEYS))
        return out


DEFAULT_SIMPLE_CODEC = SimpleMetadataCodec()
