"""Strict JSON decoding and the shared codec machinery."""

import json
import logging
from types import MappingProxyType
from typing import IO, Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from plugin_meta import constants
from plugin_meta.dependency import LoadOrder, PluginDependency
from plugin_meta.errors import (
    DuplicateKeyError,
    InvalidLoadOrderError,
    MetadataParseError,
    MissingRequiredFieldError,
)
from plugin_meta.identifier import IdGrammar
from plugin_meta.metadata import PluginMetadata

logger = logging.getLogger(__name__)

JsonObject = Dict[str, Any]


def _reject_duplicates(pairs: List[Tuple[str, Any]]) -> JsonObject:
    """object_pairs_hook tracking the keys seen in one object."""
    obj: JsonObject = {}
    for key, value in pairs:
        if key in obj:
            raise DuplicateKeyError(key)
        obj[key] = value
    return obj


def _reject_constant(token: str) -> Any:
    raise MetadataParseError(f"Invalid JSON constant '{token}'")


def strict_loads(data: Union[str, bytes, bytearray]) -> JsonObject:
    """Decode a JSON object, rejecting duplicate keys and NaN/Infinity.

    Malformed JSON is reported with line, column and offset. Duplicate keys
    are detected per object through ``object_pairs_hook``, which never sees
    source positions, so DuplicateKeyError names the repeated key only.

    Raises:
        DuplicateKeyError: If any object repeats a key
        MetadataParseError: If the document is malformed or not an object
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MetadataParseError(f"Descriptor is not valid UTF-8 (offset {e.start})") from e

    try:
        obj = json.loads(data, object_pairs_hook=_reject_duplicates, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MetadataParseError(
            f"Malformed JSON: {e.msg} (line {e.lineno}, column {e.colno}, offset {e.pos})"
        ) from e

    if not isinstance(obj, dict):
        raise MetadataParseError(f"Expected a JSON object, got {type(obj).__name__}")
    return obj


class MetadataCodec:
    """Reads and writes PluginMetadata as JSON.

    Subclasses implement ``from_dict`` and ``to_dict`` for one descriptor
    schema. Values stored under extension keys are converted through a
    key -> type registry with pydantic TypeAdapters; unregistered keys keep
    the raw decoded JSON value.
    """

    # Load order of a dependency object without "load-order"
    DEFAULT_LOAD_ORDER = LoadOrder.AFTER

    def __init__(
        self,
        extensions: Optional[Mapping[str, Any]] = None,
        grammar: Optional[IdGrammar] = None,
        indent: Optional[int] = None,
    ):
        """Initialize the codec.

        Args:
            extensions: Extension key -> type used to decode/encode its value
            grammar: Identifier grammar for the instances created while
                reading (configured default if omitted)
            indent: JSON indentation of the writer (PLUGIN_META_JSON_INDENT
                if omitted, 0 for compact output)
        """
        self._extensions: Dict[str, Any] = dict(extensions or {})
        self._adapters: Dict[str, TypeAdapter] = {}
        self.grammar = grammar
        self.indent = constants.JSON_INDENT if indent is None else indent

    @property
    def extensions(self) -> Mapping[str, Any]:
        return MappingProxyType(self._extensions)

    def extension_type(self, key: str) -> Any:
        """Registered type for ``key``, ``Any`` if there is none."""
        return self._extensions.get(key, Any)

    def _adapter(self, key: str) -> TypeAdapter:
        adapter = self._adapters.get(key)
        if adapter is None:
            adapter = TypeAdapter(self.extension_type(key))
            self._adapters[key] = adapter
        return adapter

    def decode_extension(self, key: str, raw: Any, path: Optional[str] = None) -> Any:
        try:
            return self._adapter(key).validate_python(raw)
        except ValidationError as e:
            raise MetadataParseError(
                f"Invalid value for extension '{key}': {e.errors()[0]['msg']}", path or key
            ) from e

    def encode_extension(self, key: str, value: Any) -> Any:
        return self._adapter(key).dump_python(value, mode="json")

    # =================================================================
    # json-module style API
    # =================================================================

    def loads(self, data: Union[str, bytes, bytearray]) -> PluginMetadata:
        """Parse a descriptor from a JSON string or UTF-8 bytes."""
        return self.from_dict(strict_loads(data))

    def load(self, fp: IO) -> PluginMetadata:
        """Parse a descriptor from a readable text or binary stream.

        The caller owns the stream and is responsible for closing it.
        """
        return self.loads(fp.read())

    def dumps(self, metadata: PluginMetadata) -> str:
        return json.dumps(
            self.to_dict(metadata),
            indent=self.indent if self.indent > 0 else None,
            ensure_ascii=False,
        )

    def dump(self, metadata: PluginMetadata, fp: IO[str]) -> None:
        fp.write(self.dumps(metadata))
        fp.write("\n")

    def from_dict(self, obj: JsonObject) -> PluginMetadata:
        raise NotImplementedError

    def to_dict(self, metadata: PluginMetadata) -> JsonObject:
        raise NotImplementedError

    # =================================================================
    # Value readers
    # =================================================================

    @staticmethod
    def _read_str(value: Any, path: str, optional: bool = True) -> Optional[str]:
        if value is None and optional:
            return None
        if not isinstance(value, str):
            raise MetadataParseError(f"Expected a string, got {_json_type(value)}", path)
        return value

    @staticmethod
    def _read_bool(value: Any, path: str) -> bool:
        if not isinstance(value, bool):
            raise MetadataParseError(f"Expected a boolean, got {_json_type(value)}", path)
        return value

    @staticmethod
    def _read_array(value: Any, path: str) -> List[Any]:
        if not isinstance(value, list):
            raise MetadataParseError(f"Expected an array, got {_json_type(value)}", path)
        return value

    @staticmethod
    def _read_object(value: Any, path: str) -> JsonObject:
        if not isinstance(value, dict):
            raise MetadataParseError(f"Expected an object, got {_json_type(value)}", path)
        return value

    @staticmethod
    def _check_required(seen: Mapping[str, Any], required: Tuple[str, ...], path: str = "") -> None:
        for field in required:
            if seen.get(field) is None:
                raise MissingRequiredFieldError(field, path)

    def _read_authors(self, value: Any, path: str) -> List[str]:
        return [
            self._read_str(author, f"{path}[{i}]", optional=False)
            for i, author in enumerate(self._read_array(value, path))
        ]

    def _read_dependencies(self, value: Any, path: str) -> List[PluginDependency]:
        return [
            self._read_dependency(item, f"{path}[{i}]")
            for i, item in enumerate(self._read_array(value, path))
        ]

    def _read_dependency(self, value: Any, path: str) -> PluginDependency:
        obj = self._read_object(value, path)
        plugin_id = None
        version = None
        optional = False
        load_order = self.DEFAULT_LOAD_ORDER

        for key, item in obj.items():
            if key == "id":
                plugin_id = self._read_str(item, f"{path}.id")
            elif key == "version":
                version = self._read_str(item, f"{path}.version")
            elif key == "optional":
                optional = self._read_bool(item, f"{path}.optional")
            elif key == "load-order":
                try:
                    load_order = LoadOrder.parse(item)
                except InvalidLoadOrderError:
                    raise InvalidLoadOrderError(item, f"{path}.load-order") from None
            else:
                logger.debug(f"Ignoring unknown dependency key '{key}' at {path}")

        self._check_required({"id": plugin_id}, ("id",), path)
        return PluginDependency(load_order, plugin_id, version, optional, grammar=self.grammar)

    # =================================================================
    # Value writers
    # =================================================================

    @staticmethod
    def _put_if_present(out: JsonObject, key: str, value: Optional[str]) -> None:
        if value is not None:
            out[key] = value

    @staticmethod
    def _write_dependency(dependency: PluginDependency) -> JsonObject:
        out: JsonObject = {"id": dependency.id}
        if dependency.version is not None:
            out["version"] = dependency.version
        out["optional"] = dependency.optional
        out["load-order"] = dependency.load_order.value
        return out

    def _write_common(self, out: JsonObject, metadata: PluginMetadata) -> None:
        """Authors and dependencies, omitted when empty."""
        authors = metadata.authors
        if authors:
            out["authors"] = authors
        dependencies = metadata.dependencies
        if dependencies:
            out["dependencies"] = [self._write_dependency(d) for d in dependencies]

    def _write_extensions(self, metadata: PluginMetadata, reserved: frozenset = frozenset()) -> JsonObject:
        out: JsonObject = {}
        for key, value in metadata.extensions.items():
            if key in reserved:
                raise DuplicateKeyError(key)
            out[key] = self.encode_extension(key, value)
        return out


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"
