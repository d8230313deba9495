"""Exceptions raised by the metadata model and the JSON codecs."""

from typing import Any, Optional


class PluginMetaError(Exception):
    """Base exception for plugin metadata errors."""
    pass


class MetadataError(PluginMetaError, ValueError):
    """A metadata instance rejected a value."""
    pass


class InvalidIdentifierError(MetadataError):
    """Plugin id is empty or does not match the identifier grammar."""

    def __init__(self, plugin_id: Any, grammar: Optional[str] = None):
        self.plugin_id = plugin_id
        self.grammar = grammar
        detail = f" (grammar: {grammar})" if grammar else ""
        super().__init__(f"Invalid plugin id {plugin_id!r}{detail}")


class EmptyValueError(MetadataError):
    """A required string or value was empty."""
    pass


class EmptyListError(MetadataError):
    """A collection that needs at least one element was empty."""
    pass


class DuplicateDependencyError(MetadataError):
    """A dependency on the same plugin id is already present."""

    def __init__(self, plugin_id: str):
        self.plugin_id = plugin_id
        super().__init__(f"Duplicate dependency with plugin ID: {plugin_id}")


class MismatchedIdentityError(MetadataError):
    """Two metadata instances with different ids cannot be merged."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Plugin IDs don't match: '{expected}' != '{actual}'")


class TypeMismatchError(MetadataError, TypeError):
    """An extension value is not of the requested type."""

    def __init__(self, key: str, expected: type, actual: type):
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Extension '{key}' is {actual.__name__}, not {expected.__name__}"
        )


class MetadataParseError(PluginMetaError, ValueError):
    """A JSON descriptor could not be decoded into metadata."""

    def __init__(self, message: str, path: str = ""):
        self.message = message
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        if self.path:
            return f"{self.message} at '{self.path}'"
        return self.message


class DuplicateKeyError(MetadataParseError):
    """The same key appeared twice in one JSON object."""

    def __init__(self, key: str, path: str = ""):
        self.key = key
        super().__init__(f"Duplicate key '{key}'", path)


class MissingRequiredFieldError(MetadataParseError):
    """A required key was absent when the JSON object ended."""

    def __init__(self, field: str, path: str = ""):
        self.field = field
        super().__init__(f"Missing required element '{field}'", path)


class InvalidLoadOrderError(MetadataParseError):
    """A load-order token is not one of none, before or after."""

    def __init__(self, value: Any, path: str = ""):
        self.value = value
        super().__init__(f"Invalid load order {value!r}", path)
