"""Extended descriptor model - loader, entry class, links and contributors."""

from typing import Iterable, List, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, field_validator

from plugin_meta.errors import EmptyValueError
from plugin_meta.identifier import IdGrammar
from plugin_meta.metadata import PluginMetadata, empty_to_none


class PluginLinks(BaseModel):
    """Web links published by a plugin."""

    model_config = ConfigDict(frozen=True)

    homepage: Optional[AnyUrl] = Field(default=None, description="Project homepage")
    source: Optional[AnyUrl] = Field(default=None, description="Source code repository")
    issues: Optional[AnyUrl] = Field(default=None, description="Issue tracker")

    def is_empty(self) -> bool:
        return self.homepage is None and self.source is None and self.issues is None

    def merged_with(self, other: "PluginLinks") -> "PluginLinks":
        """Links of ``other`` where present, ours otherwise."""
        overrides = other.model_dump(exclude_none=True)
        return self.model_copy(update=overrides)


class PluginContributor(BaseModel):
    """Someone who contributed to a plugin."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Contributor name")
    description: Optional[str] = Field(default=None, description="Role or contribution")

    @field_validator("description")
    @classmethod
    def _blank_description(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class ExtendedPluginMetadata(PluginMetadata):
    """Plugin metadata for descriptors that name their loader and entry class.

    Example:
        meta = ExtendedPluginMetadata("essentials", loader="java_plain",
                                      main_class="com.example.Essentials")
        meta.links = PluginLinks(homepage="https://example.com")
        meta.add_contributor(PluginContributor(name="Alice", description="Lead"))
    """

    def __init__(
        self,
        id: str,
        loader: Optional[str] = None,
        main_class: Optional[str] = None,
        grammar: Optional[IdGrammar] = None,
    ):
        super().__init__(id, grammar)
        self._loader = empty_to_none(loader)
        self._main_class = empty_to_none(main_class)
        self._links = PluginLinks()
        self._contributors: List[PluginContributor] = []

    @property
    def loader(self) -> Optional[str]:
        """Name of the loader responsible for the plugin."""
        return self._loader

    @loader.setter
    def loader(self, value: Optional[str]) -> None:
        self._loader = empty_to_none(value)

    @property
    def main_class(self) -> Optional[str]:
        """Fully qualified entry point of the plugin."""
        return self._main_class

    @main_class.setter
    def main_class(self, value: Optional[str]) -> None:
        self._main_class = empty_to_none(value)

    @property
    def links(self) -> PluginLinks:
        return self._links

    @links.setter
    def links(self, value: Optional[PluginLinks]) -> None:
        self._links = value if value is not None else PluginLinks()

    @property
    def contributors(self) -> List[PluginContributor]:
        """Copy of the contributor list in insertion order."""
        return list(self._contributors)

    def add_contributor(self, contributor: PluginContributor) -> None:
        if contributor is None:
            raise EmptyValueError("Contributor cannot be None")
        self._contributors.append(contributor)

    def add_contributors(self, contributors: Iterable[PluginContributor]) -> None:
        """Append several contributors, all or nothing."""
        if isinstance(contributors, (str, PluginContributor)):
            raise TypeError("add_contributors expects an iterable of contributors")
        pending = list(contributors)
        if any(contributor is None for contributor in pending):
            raise EmptyValueError("Contributor cannot be None")
        self._contributors.extend(pending)

    def remove_contributor(self, contributor: PluginContributor) -> bool:
        try:
            self._contributors.remove(contributor)
        except ValueError:
            return False
        return True

    def accept(self, other: PluginMetadata) -> None:
        """Apply ``other`` onto this metadata.

        On top of the base merge, a present loader or main class overwrites
        ours, each present link replaces its slot and a non-empty contributor
        list replaces ours wholesale.
        """
        super().accept(other)
        if not isinstance(other, ExtendedPluginMetadata):
            return
        if other._loader is not None:
            self._loader = other._loader
        if other._main_class is not None:
            self._main_class = other._main_class
        self._links = self._links.merged_with(other._links)
        if other._contributors:
            self._contributors = list(other._contributors)

    def _fields(self) -> tuple:
        return super()._fields() + (
            self._loader,
            self._main_class,
            self._links,
            self._contributors,
        )

    def __repr__(self) -> str:
        base = super().__repr__()[:-1]
        return (
            f"{base}, loader={self._loader!r}, main_class={self._main_class!r}, "
            f"links={self._links!r}, contributors={self._contributors!r})"
        )
