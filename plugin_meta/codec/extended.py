"""Codec for extended plugin descriptors (plugin-meta.json)."""

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from plugin_meta.codec.base import JsonObject, MetadataCodec
from plugin_meta.dependency import LoadOrder
from plugin_meta.descriptor import ExtendedPluginMetadata, PluginContributor, PluginLinks
from plugin_meta.errors import MetadataParseError, MissingRequiredFieldError
from plugin_meta.metadata import PluginMetadata

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    return first["msg"]


class ExtendedMetadataCodec(MetadataCodec):
    """Extended descriptor schema.

    Adds the required ``loader`` and ``main-class`` keys, a ``links`` object
    (``homepage``, ``source``, ``issues``) and a ``contributors`` array.
    Extensions live under an explicit ``extra`` object; unknown top-level
    keys are skipped.
    """

    DEFAULT_LOAD_ORDER = LoadOrder.NONE
    REQUIRED_FIELDS = ("loader", "id", "main-class")
    SCALAR_FIELDS = ("loader", "id", "name", "version", "main-class", "description", "url")
    LINK_FIELDS = ("homepage", "source", "issues")
    # Required and also non-empty
    NAMED_FIELDS = ("loader", "main-class")

    def from_dict(self, obj: JsonObject) -> ExtendedPluginMetadata:
        fields: Dict[str, Any] = {}
        extensions: Dict[str, Any] = {}

        for key, value in obj.items():
            if key in self.SCALAR_FIELDS:
                fields[key] = self._read_str(value, key)
            elif key == "authors":
                fields[key] = self._read_authors(value, key)
            elif key == "links":
                fields[key] = self._read_links(value, key)
            elif key == "contributors":
                fields[key] = self._read_contributors(value, key)
            elif key == "dependencies":
                fields[key] = self._read_dependencies(value, key)
            elif key == "extra":
                extensions = self._read_extra(value, key)
            else:
                logger.warning(f"Skipping unknown descriptor key '{key}'")

        self._check_required(fields, self.REQUIRED_FIELDS)
        for field in self.NAMED_FIELDS:
            if not fields[field]:
                raise MissingRequiredFieldError(field)

        metadata = ExtendedPluginMetadata(
            fields["id"],
            loader=fields["loader"],
            main_class=fields["main-class"],
            grammar=self.grammar,
        )
        metadata.name = fields.get("name")
        metadata.version = fields.get("version")
        metadata.description = fields.get("description")
        metadata.url = fields.get("url")
        for author in fields.get("authors", ()):
            metadata.add_author(author)
        if "links" in fields:
            metadata.links = fields["links"]
        metadata.add_contributors(fields.get("contributors", ()))
        for dependency in fields.get("dependencies", ()):
            metadata.add_dependency(dependency)
        for key, value in extensions.items():
            metadata.set_extension(key, value)
        return metadata

    def _read_links(self, value: Any, path: str) -> PluginLinks:
        links: Dict[str, str] = {}
        for key, item in self._read_object(value, path).items():
            if key in self.LINK_FIELDS:
                url = self._read_str(item, f"{path}.{key}")
                if url:
                    links[key] = url
            else:
                logger.debug(f"Ignoring unknown link '{key}'")
        try:
            return PluginLinks(**links)
        except ValidationError as e:
            field = e.errors()[0]["loc"][0]
            raise MetadataParseError(f"Invalid URL: {_validation_message(e)}", f"{path}.{field}") from e

    def _read_contributors(self, value: Any, path: str) -> List[PluginContributor]:
        return [
            self._read_contributor(item, f"{path}[{i}]")
            for i, item in enumerate(self._read_array(value, path))
        ]

    def _read_contributor(self, value: Any, path: str) -> PluginContributor:
        fields: Dict[str, Any] = {}
        for key, item in self._read_object(value, path).items():
            if key in ("name", "description"):
                fields[key] = self._read_str(item, f"{path}.{key}")
            else:
                logger.debug(f"Ignoring unknown contributor key '{key}' at {path}")
        self._check_required(fields, ("name",), path)
        try:
            return PluginContributor(**fields)
        except ValidationError as e:
            raise MetadataParseError(f"Invalid contributor: {_validation_message(e)}", path) from e

    def _read_extra(self, value: Any, path: str) -> Dict[str, Any]:
        extensions: Dict[str, Any] = {}
        for key, item in self._read_object(value, path).items():
            if item is None:
                logger.debug(f"Skipping null extension '{key}'")
                continue
            extensions[key] = self.decode_extension(key, item, f"{path}.{key}")
        return extensions

    def to_dict(self, metadata: PluginMetadata) -> JsonObject:
        if not isinstance(metadata, ExtendedPluginMetadata):
            raise TypeError(f"{type(self).__name__} writes ExtendedPluginMetadata, got {type(metadata).__name__}")

        if metadata.loader is None:
            raise MissingRequiredFieldError("loader")
        if metadata.main_class is None:
            raise MissingRequiredFieldError("main-class")

        out: JsonObject = {"loader": metadata.loader, "id": metadata.id}
        self._put_if_present(out, "name", metadata.name)
        self._put_if_present(out, "version", metadata.version)
        out["main-class"] = metadata.main_class
        self._put_if_present(out, "description", metadata.description)
        self._put_if_present(out, "url", metadata.url)
        if metadata.authors:
            out["authors"] = metadata.authors

        links = metadata.links
        if not links.is_empty():
            out["links"] = {
                key: str(getattr(links, key))
                for key in self.LINK_FIELDS
                if getattr(links, key) is not None
            }

        contributors = metadata.contributors
        if contributors:
            out["contributors"] = [c.model_dump(exclude_none=True) for c in contributors]

        dependencies = metadata.dependencies
        if dependencies:
            out["dependencies"] = [self._write_dependency(d) for d in dependencies]

        extra = self._write_extensions(metadata)
        if extra:
            out["extra"] = extra
        return out


DEFAULT_EXTENDED_CODEC = ExtendedMetadataCodec()
