"""Tests for the extended descriptor codec and model."""

import json

import pytest

from plugin_meta.codec import DEFAULT_EXTENDED_CODEC
from plugin_meta.dependency import LoadOrder, PluginDependency
from plugin_meta.descriptor import ExtendedPluginMetadata, PluginContributor, PluginLinks
from plugin_meta.errors import (
    DuplicateKeyError,
    EmptyValueError,
    InvalidLoadOrderError,
    MetadataParseError,
    MismatchedIdentityError,
    MissingRequiredFieldError,
)
from plugin_meta.metadata import PluginMetadata

DESCRIPTOR = {
    "loader": "java_plain",
    "id": "essentials",
    "name": "Essentials",
    "version": "2.19.0",
    "main-class": "com.example.Essentials",
    "description": "Essential commands",
    "links": {
        "homepage": "https://example.com/essentials",
        "source": "https://github.com/example/essentials",
        "issues": "https://github.com/example/essentials/issues",
    },
    "contributors": [
        {"name": "Alice", "description": "Lead developer"},
        {"name": "Bob"},
    ],
    "dependencies": [
        {"id": "vault", "version": "[1.7,)", "load-order": "before", "optional": False},
        {"id": "worldedit", "optional": True},
    ],
    "extra": {"permissions": {"essentials.home": "true"}, "build": "1234"},
}


def parse(obj):
    return DEFAULT_EXTENDED_CODEC.loads(json.dumps(obj))


class TestExtendedRead:
    """Tests for reading extended descriptors."""

    def test_full_descriptor(self):
        meta = parse(DESCRIPTOR)

        assert isinstance(meta, ExtendedPluginMetadata)
        assert meta.loader == "java_plain"
        assert meta.id == "essentials"
        assert meta.main_class == "com.example.Essentials"
        assert meta.description == "Essential commands"
        assert str(meta.links.source) == "https://github.com/example/essentials"
        assert meta.contributors == [
            PluginContributor(name="Alice", description="Lead developer"),
            PluginContributor(name="Bob"),
        ]
        assert meta.dependency("vault") == PluginDependency(LoadOrder.BEFORE, "vault", "[1.7,)", False)
        assert meta.dependency("worldedit") == PluginDependency(LoadOrder.NONE, "worldedit", None, True)
        assert meta.get_extension("permissions") == {"essentials.home": "true"}
        assert meta.get_extension("build") == "1234"

    @pytest.mark.parametrize("field", ["loader", "id", "main-class"])
    def test_required_fields(self, field):
        obj = {k: v for k, v in DESCRIPTOR.items() if k != field}
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse(obj)
        assert exc_info.value.field == field

    @pytest.mark.parametrize("field", ["loader", "main-class"])
    @pytest.mark.parametrize("value", ["", None])
    def test_required_fields_not_empty(self, field, value):
        obj = dict(DESCRIPTOR, **{field: value})
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse(obj)
        assert exc_info.value.field == field

    def test_unknown_top_level_keys_skipped(self):
        obj = dict(DESCRIPTOR, unknown={"x": 1})
        meta = parse(obj)
        assert "unknown" not in meta.extensions

    def test_duplicate_key_in_links(self):
        text = (
            '{"loader": "l", "id": "essentials", "main-class": "M",'
            ' "links": {"homepage": "https://a.example", "homepage": "https://b.example"}}'
        )
        with pytest.raises(DuplicateKeyError) as exc_info:
            DEFAULT_EXTENDED_CODEC.loads(text)
        assert exc_info.value.key == "homepage"

    def test_invalid_link(self):
        obj = dict(DESCRIPTOR, links={"homepage": "not a url"})
        with pytest.raises(MetadataParseError) as exc_info:
            parse(obj)
        assert exc_info.value.path == "links.homepage"

    def test_contributor_requires_name(self):
        obj = dict(DESCRIPTOR, contributors=[{"description": "nameless"}])
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse(obj)
        assert exc_info.value.field == "name"
        assert exc_info.value.path == "contributors[0]"

    def test_contributor_null_name(self):
        obj = dict(DESCRIPTOR, contributors=[{"name": None, "description": "Tester"}])
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse(obj)
        assert exc_info.value.path == "contributors[0]"

    def test_contributor_empty_name(self):
        obj = dict(DESCRIPTOR, contributors=[{"name": ""}])
        with pytest.raises(MetadataParseError, match="Invalid contributor"):
            parse(obj)

    def test_invalid_load_order(self):
        obj = dict(DESCRIPTOR, dependencies=[{"id": "vault", "load-order": "sideways"}])
        with pytest.raises(InvalidLoadOrderError):
            parse(obj)

    def test_extra_must_be_object(self):
        obj = dict(DESCRIPTOR, extra=["a"])
        with pytest.raises(MetadataParseError, match="Expected an object") as exc_info:
            parse(obj)
        assert exc_info.value.path == "extra"


class TestExtendedWrite:
    """Tests for writing extended descriptors."""

    def test_key_order(self):
        out = DEFAULT_EXTENDED_CODEC.to_dict(parse(DESCRIPTOR))
        assert list(out) == [
            "loader", "id", "name", "version", "main-class", "description",
            "links", "contributors", "dependencies", "extra",
        ]
        assert out["contributors"] == [
            {"name": "Alice", "description": "Lead developer"},
            {"name": "Bob"},
        ]
        assert out["extra"] == DESCRIPTOR["extra"]

    def test_empty_collections_omitted(self):
        meta = ExtendedPluginMetadata("essentials", loader="java_plain", main_class="M")
        assert DEFAULT_EXTENDED_CODEC.to_dict(meta) == {
            "loader": "java_plain",
            "id": "essentials",
            "main-class": "M",
        }

    def test_round_trip(self):
        meta = parse(DESCRIPTOR)
        assert DEFAULT_EXTENDED_CODEC.loads(DEFAULT_EXTENDED_CODEC.dumps(meta)) == meta

    @pytest.mark.parametrize(
        "loader, main_class, missing",
        [(None, "com.example.Essentials", "loader"), ("java_plain", "", "main-class")],
    )
    def test_required_fields_written(self, loader, main_class, missing):
        meta = ExtendedPluginMetadata("essentials", loader=loader, main_class=main_class)
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            DEFAULT_EXTENDED_CODEC.dumps(meta)
        assert exc_info.value.field == missing

    def test_rejects_plain_metadata(self):
        with pytest.raises(TypeError):
            DEFAULT_EXTENDED_CODEC.dumps(PluginMetadata("essentials"))


class TestExtendedAccept:
    """Tests for merging extended metadata."""

    def test_extended_fields_merge(self):
        base = parse(DESCRIPTOR)
        override = ExtendedPluginMetadata("essentials", main_class="com.example.Other")
        override.links = PluginLinks(homepage="https://new.example.com")
        override.add_contributor(PluginContributor(name="Carol"))

        base.accept(override)

        assert base.loader == "java_plain"
        assert base.main_class == "com.example.Other"
        assert str(base.links.homepage).startswith("https://new.example.com")
        assert str(base.links.source) == "https://github.com/example/essentials"
        assert base.contributors == [PluginContributor(name="Carol")]

    def test_plain_override(self):
        base = parse(DESCRIPTOR)
        override = PluginMetadata("essentials")
        override.version = "3.0"
        base.accept(override)
        assert base.version == "3.0"
        assert base.main_class == "com.example.Essentials"
        assert len(base.contributors) == 2

    def test_mismatched_identity(self):
        with pytest.raises(MismatchedIdentityError):
            parse(DESCRIPTOR).accept(ExtendedPluginMetadata("other"))

    def test_add_contributors(self):
        meta = ExtendedPluginMetadata("essentials")
        meta.add_contributors([PluginContributor(name="Alice"), PluginContributor(name="Bob")])
        assert [c.name for c in meta.contributors] == ["Alice", "Bob"]

    def test_add_contributors_rejects_single_item(self):
        meta = ExtendedPluginMetadata("essentials")
        with pytest.raises(TypeError):
            meta.add_contributors(PluginContributor(name="Alice"))
        with pytest.raises(TypeError):
            meta.add_contributors("Alice")
        assert meta.contributors == []

    def test_add_contributors_is_atomic(self):
        meta = ExtendedPluginMetadata("essentials")
        with pytest.raises(EmptyValueError):
            meta.add_contributors([PluginContributor(name="Alice"), None])
        assert meta.contributors == []

    def test_contributor_blank_description(self):
        assert PluginContributor(name="Alice", description="").description is None

    def test_links_is_empty(self):
        assert PluginLinks().is_empty()
        assert not PluginLinks(issues="https://example.com/issues").is_empty()
