"""Tests for registry module."""

from plugin_meta.dependency import LoadOrder, PluginDependency
from plugin_meta.metadata import PluginMetadata
from plugin_meta.registry import MetadataRegistry


def make_metadata(plugin_id, version=None):
    meta = PluginMetadata(plugin_id)
    meta.version = version
    return meta


class TestMetadataRegistry:
    """Tests for MetadataRegistry."""

    def test_register_and_get(self):
        registry = MetadataRegistry()
        meta = make_metadata("alpha")
        registry.register(meta)

        assert registry.get("alpha") is meta
        assert registry.has("alpha")
        assert not registry.has("beta")
        assert registry.count() == 1
        assert registry.get_all() == [meta]

    def test_register_overwrites(self):
        registry = MetadataRegistry()
        registry.register(make_metadata("alpha", "1.0"))
        registry.register(make_metadata("alpha", "2.0"))
        assert registry.count() == 1
        assert registry.get("alpha").version == "2.0"

    def test_remove(self):
        registry = MetadataRegistry()
        meta = make_metadata("alpha")
        registry.register(meta)
        assert registry.remove("alpha") is meta
        assert registry.remove("alpha") is None
        assert registry.count() == 0

    def test_apply_override_merges(self):
        registry = MetadataRegistry()
        base = make_metadata("alpha", "1.0")
        base.name = "Alpha"
        base.add_dependency(PluginDependency(LoadOrder.AFTER, "vault", optional=True))
        registry.register(base)

        override = make_metadata("alpha", "1.1")
        override.add_dependency(PluginDependency(LoadOrder.AFTER, "vault"))
        merged = registry.apply_override(override)

        assert merged is base
        assert merged.version == "1.1"
        assert merged.name == "Alpha"
        assert merged.dependency("vault").optional is False

    def test_apply_override_registers_copy(self):
        registry = MetadataRegistry()
        override = make_metadata("alpha", "1.0")

        registered = registry.apply_override(override)

        assert registered == override
        assert registered is not override
        override.version = "2.0"
        assert registry.get("alpha").version == "1.0"
