"""Dependency of a plugin on another plugin."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Union

from plugin_meta.errors import InvalidLoadOrderError
from plugin_meta.identifier import IdGrammar, check_id


class LoadOrder(str, Enum):
    """When a dependency should be loaded relative to the plugin."""

    NONE = "none"  # any order
    BEFORE = "before"  # dependency loads before the plugin
    AFTER = "after"  # dependency loads after the plugin

    @classmethod
    def parse(cls, token: Union[str, "LoadOrder"]) -> "LoadOrder":
        """Case-insensitive lookup by name."""
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            try:
                return cls[token.upper()]
            except KeyError:
                pass
        raise InvalidLoadOrderError(token)


@dataclass(frozen=True)
class PluginDependency:
    """A reference to another plugin id.

    ``version`` is a Maven style version range such as ``[1.0,2.0)`` and is
    kept verbatim. Equality and hashing cover load order, id, version and the
    optional flag; the grammar only travels along to derived copies.

    Example:
        dep = PluginDependency(LoadOrder.BEFORE, "worldedit", "[7.0,)")
        soft = dep.as_optional()
    """

    load_order: LoadOrder
    id: str
    version: Optional[str] = None
    optional: bool = False
    grammar: Optional[IdGrammar] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "load_order", LoadOrder.parse(self.load_order))
        check_id(self.id, self.grammar)
        object.__setattr__(self, "version", self.version or None)
        object.__setattr__(self, "optional", bool(self.optional))

    def as_optional(self) -> "PluginDependency":
        return self._with_optional(True)

    def as_required(self) -> "PluginDependency":
        return self._with_optional(False)

    def _with_optional(self, optional: bool) -> "PluginDependency":
        if self.optional == optional:
            return self
        return replace(self, optional=optional)

    def __str__(self) -> str:
        version = f"@{self.version}" if self.version else ""
        kind = "optional" if self.optional else "required"
        return f"{self.id}{version} ({kind}, {self.load_order.value})"
