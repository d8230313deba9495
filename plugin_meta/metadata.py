"""Plugin metadata model - identity, authors, dependencies and extensions."""

import copy
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from plugin_meta.dependency import LoadOrder, PluginDependency
from plugin_meta.errors import (
    DuplicateDependencyError,
    EmptyListError,
    EmptyValueError,
    MismatchedIdentityError,
    TypeMismatchError,
)
from plugin_meta.extensions import merge_extension
from plugin_meta.identifier import IdGrammar, check_id, default_grammar

_EMPTY_GROUPS: Mapping[LoadOrder, FrozenSet[PluginDependency]] = MappingProxyType({})


def empty_to_none(value: Optional[str]) -> Optional[str]:
    return value if value else None


class PluginMetadata:
    """Additional metadata for a specific version of a plugin.

    Instances are plain mutable aggregates without locking. Collections are
    handed out as copies (``authors``, ``dependencies``) or read-only views
    (``extensions``); mutation goes through the add/remove/replace methods.

    Example:
        meta = PluginMetadata("worldguard")
        meta.version = "7.0.9"
        meta.add_author("sk89q")
        meta.add_dependency(PluginDependency(LoadOrder.BEFORE, "worldedit"))
    """

    def __init__(self, id: str, grammar: Optional[IdGrammar] = None):
        self._grammar = grammar or default_grammar()
        self._id = check_id(id, self._grammar)
        self._name: Optional[str] = None
        self._version: Optional[str] = None
        self._description: Optional[str] = None
        self._url: Optional[str] = None
        self._authors: List[str] = []
        self._dependencies: Dict[str, PluginDependency] = {}
        self._extensions: Dict[str, Any] = {}

    # =================================================================
    # Identity and descriptive fields
    # =================================================================

    @property
    def grammar(self) -> IdGrammar:
        """Grammar the plugin id is validated against."""
        return self._grammar

    @property
    def id(self) -> str:
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        self._id = check_id(value, self._grammar)

    @property
    def name(self) -> Optional[str]:
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        self._name = empty_to_none(value)

    @property
    def version(self) -> Optional[str]:
        return self._version

    @version.setter
    def version(self, value: Optional[str]) -> None:
        self._version = empty_to_none(value)

    @property
    def description(self) -> Optional[str]:
        return self._description

    @description.setter
    def description(self, value: Optional[str]) -> None:
        self._description = empty_to_none(value)

    @property
    def url(self) -> Optional[str]:
        """URL where additional information about the plugin may be found."""
        return self._url

    @url.setter
    def url(self, value: Optional[str]) -> None:
        self._url = empty_to_none(value)

    # =================================================================
    # Authors
    # =================================================================

    @property
    def authors(self) -> List[str]:
        """Copy of the author list in insertion order."""
        return list(self._authors)

    def add_author(self, author: str) -> None:
        """Append an author. Duplicates are allowed.

        Raises:
            EmptyValueError: If the author is None or empty
        """
        self._authors.append(self._check_author(author))

    def add_authors(self, authors: Iterable[str]) -> None:
        """Append several authors, all or nothing.

        Raises:
            EmptyListError: If ``authors`` is empty
            EmptyValueError: If any author is empty; no author is added then
            TypeError: If ``authors`` is a single string
        """
        if isinstance(authors, str):
            raise TypeError("add_authors expects an iterable of authors, not a string")
        pending = [self._check_author(author) for author in authors]
        if not pending:
            raise EmptyListError("Author list cannot be empty")
        self._authors.extend(pending)

    def remove_author(self, author: str) -> bool:
        """Remove the first matching author, returning whether one was removed."""
        try:
            self._authors.remove(author)
        except ValueError:
            return False
        return True

    @staticmethod
    def _check_author(author: str) -> str:
        if not author:
            raise EmptyValueError("Author cannot be empty")
        return author

    # =================================================================
    # Dependencies
    # =================================================================

    @property
    def dependencies(self) -> List[PluginDependency]:
        """Copy of all dependencies in insertion order."""
        return list(self._dependencies.values())

    @property
    def dependencies_by_id(self) -> Dict[str, PluginDependency]:
        """Copy of the dependency table keyed by plugin id."""
        return dict(self._dependencies)

    def dependency(self, plugin_id: str) -> Optional[PluginDependency]:
        return self._dependencies.get(plugin_id)

    def add_dependency(self, dependency: PluginDependency) -> None:
        """Add a dependency on a plugin id not yet referenced.

        Raises:
            DuplicateDependencyError: If a dependency with the same id exists
        """
        if dependency.id in self._dependencies:
            raise DuplicateDependencyError(dependency.id)
        self._dependencies[dependency.id] = dependency

    def add_dependencies(self, dependencies: Iterable[PluginDependency]) -> None:
        """Add several dependencies, all or nothing.

        Raises:
            DuplicateDependencyError: If any id is already present or repeats
                within ``dependencies``; nothing is added then
        """
        pending: Dict[str, PluginDependency] = {}
        for dependency in dependencies:
            if dependency.id in self._dependencies or dependency.id in pending:
                raise DuplicateDependencyError(dependency.id)
            pending[dependency.id] = dependency
        self._dependencies.update(pending)

    def replace_dependency(self, dependency: PluginDependency) -> Optional[PluginDependency]:
        """Insert or overwrite the dependency for ``dependency.id``.

        Returns:
            The dependency previously registered for that id, or None
        """
        previous = self._dependencies.get(dependency.id)
        self._dependencies[dependency.id] = dependency
        return previous

    def remove_dependency(self, plugin_id: str) -> bool:
        return self._dependencies.pop(plugin_id, None) is not None

    def collect_required_dependencies(self) -> FrozenSet[PluginDependency]:
        """All dependencies that are not optional."""
        if not self._dependencies:
            return frozenset()
        return frozenset(d for d in self._dependencies.values() if not d.optional)

    def group_dependencies_by_load_order(self) -> Mapping[LoadOrder, FrozenSet[PluginDependency]]:
        """Group dependencies by their load order.

        Every LoadOrder member is present (possibly mapped to an empty set)
        unless there are no dependencies at all, in which case the mapping is
        empty.
        """
        if not self._dependencies:
            return _EMPTY_GROUPS
        groups = {
            order: frozenset(d for d in self._dependencies.values() if d.load_order is order)
            for order in LoadOrder
        }
        return MappingProxyType(groups)

    # =================================================================
    # Extensions
    # =================================================================

    @property
    def extensions(self) -> Mapping[str, Any]:
        """Read-only view of the extension map in insertion order."""
        return MappingProxyType(self._extensions)

    def get_extension(self, key: str, expected_type: Optional[type] = None, default: Any = None) -> Any:
        """Return the extension stored under ``key``.

        Args:
            key: Extension key
            expected_type: If given, the stored value must be an instance of it
            default: Returned when no value is stored

        Raises:
            TypeMismatchError: If the stored value is not an ``expected_type``
        """
        value = self._extensions.get(key)
        if value is None:
            return default
        if expected_type is not None:
            # bool is an int subclass, but a flag is not a number here
            is_bool_as_number = isinstance(value, bool) and expected_type in (int, float)
            if is_bool_as_number or not isinstance(value, expected_type):
                raise TypeMismatchError(key, expected_type, type(value))
        return value

    def set_extension(self, key: str, value: Any) -> None:
        if not key:
            raise EmptyValueError("Extension key cannot be empty")
        if value is None:
            raise EmptyValueError(f"Extension '{key}' cannot be None")
        self._extensions[key] = value

    def remove_extension(self, key: str) -> bool:
        return self._extensions.pop(key, None) is not None

    # =================================================================
    # Merging
    # =================================================================

    def accept(self, other: "PluginMetadata") -> None:
        """Apply the non-empty properties of ``other`` onto this metadata.

        Scalars present on ``other`` overwrite ours, a non-empty author list
        replaces ours wholesale, dependencies are upserted per id and
        extensions are merged through ``merge_extension``. ``other`` is left
        untouched.

        Raises:
            MismatchedIdentityError: If the plugin ids differ
        """
        if self._id != other._id:
            raise MismatchedIdentityError(self._id, other._id)

        if other._name is not None:
            self._name = other._name
        if other._version is not None:
            self._version = other._version
        if other._description is not None:
            self._description = other._description
        if other._url is not None:
            self._url = other._url

        if other._authors:
            self._authors = list(other._authors)

        for dependency in other._dependencies.values():
            self.replace_dependency(dependency)

        for key, value in other._extensions.items():
            self._extensions[key] = merge_extension(self._extensions.get(key), copy.deepcopy(value))

    def copy(self) -> "PluginMetadata":
        """Independent deep copy validating against the same grammar."""
        return copy.deepcopy(self, {id(self._grammar): self._grammar})

    # =================================================================
    # Dunder helpers
    # =================================================================

    def _fields(self) -> tuple:
        return (
            self._id,
            self._name,
            self._version,
            self._description,
            self._url,
            self._authors,
            self._dependencies,
            self._extensions,
        )

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._fields() == other._fields()

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        parts = [f"id='{self._id}'"]
        for label in ("name", "version", "description", "url"):
            value = getattr(self, f"_{label}")
            if value is not None:
                parts.append(f"{label}='{value}'")
        parts.append(f"authors={self._authors}")
        parts.append(f"dependencies={list(self._dependencies.values())}")
        parts.append(f"extensions={self._extensions}")
        return f"{type(self).__name__}({', '.join(parts)})"
