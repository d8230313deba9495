"""JSON codecs for plugin descriptors."""

from plugin_meta.codec.base import MetadataCodec, strict_loads
from plugin_meta.codec.extended import DEFAULT_EXTENDED_CODEC, ExtendedMetadataCodec
from plugin_meta.codec.simple import DEFAULT_SIMPLE_CODEC, SimpleMetadataCodec

__all__ = [
    "MetadataCodec",
    "SimpleMetadataCodec",
    "ExtendedMetadataCodec",
    "DEFAULT_SIMPLE_CODEC",
    "DEFAULT_EXTENDED_CODEC",
    "strict_loads",
]
