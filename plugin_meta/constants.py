"""Global defaults for plugin metadata handling (overridable via environment)."""

import os
from pathlib import Path

# Identifier grammar used when none is passed explicitly ("strict" or "lenient")
DEFAULT_ID_GRAMMAR = os.getenv("PLUGIN_META_ID_GRAMMAR", "strict")

# Descriptor file names looked up by discovery
DESCRIPTOR_FILE = os.getenv("PLUGIN_META_DESCRIPTOR_FILE", "plugin.json")
EXTENDED_DESCRIPTOR_FILE = os.getenv("PLUGIN_META_EXTENDED_DESCRIPTOR_FILE", "plugin-meta.json")

# Default discovery root for the CLI (relative paths resolve against the cwd)
PLUGINS_DIR = Path(os.getenv("PLUGIN_META_PLUGINS_DIR", "plugins")).resolve()

# Indentation used by the JSON writers (0 or negative writes compact output)
JSON_INDENT = int(os.getenv("PLUGIN_META_JSON_INDENT", "2"))
