"""Plugin metadata model and strict JSON descriptor codecs.

Public names are imported on first attribute access.
"""

__all__ = [
    "PluginMetadata",
    "PluginDependency",
    "LoadOrder",
    "IdGrammar",
    "STRICT",
    "LENIENT",
    "validate",
    "ExtendedPluginMetadata",
    "PluginLinks",
    "PluginContributor",
    "SimpleMetadataCodec",
    "ExtendedMetadataCodec",
    "PluginDiscovery",
    "MetadataRegistry",
]


def __getattr__(name):
    if name == "PluginMetadata":
        from plugin_meta.metadata import PluginMetadata
        return PluginMetadata
    if name in ("PluginDependency", "LoadOrder"):
        from plugin_meta import dependency
        return getattr(dependency, name)
    if name in ("IdGrammar", "STRICT", "LENIENT", "validate"):
        from plugin_meta import identifier
        return getattr(identifier, name)
    if name in ("ExtendedPluginMetadata", "PluginLinks", "PluginContributor"):
        from plugin_meta import descriptor
        return getattr(descriptor, name)
    if name in ("SimpleMetadataCodec", "ExtendedMetadataCodec"):
        from plugin_meta import codec
        return getattr(codec, name)
    if name == "PluginDiscovery":
        from plugin_meta.discovery import PluginDiscovery
        return PluginDiscovery
    if name == "MetadataRegistry":
        from plugin_meta.registry import MetadataRegistry
        return MetadataRegistry
    raise AttributeError(f"module 'plugin_meta' has no attribute {name!r}")
