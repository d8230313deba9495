#!/usr/bin/env python3
"""Plugin descriptor management CLI tool."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before reading plugin_meta.constants
load_dotenv()

log_level = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from plugin_meta import constants
from plugin_meta.codec import DEFAULT_EXTENDED_CODEC, DEFAULT_SIMPLE_CODEC, MetadataCodec
from plugin_meta.discovery import PluginDiscovery
from plugin_meta.errors import PluginMetaError
from plugin_meta.identifier import GRAMMARS, get_grammar

console = Console()


def get_codec(extended: bool) -> MetadataCodec:
    return DEFAULT_EXTENDED_CODEC if extended else DEFAULT_SIMPLE_CODEC


def get_discovery(args) -> PluginDiscovery:
    """Create a PluginDiscovery instance for the selected descriptor schema."""
    extended = getattr(args, "extended", False)
    descriptor_file = constants.EXTENDED_DESCRIPTOR_FILE if extended else constants.DESCRIPTOR_FILE
    plugins_dir = Path(args.dir).resolve() if getattr(args, "dir", None) else constants.PLUGINS_DIR
    return PluginDiscovery([(plugins_dir, "local")], get_codec(extended), descriptor_file)


def cmd_list(args):
    """List all discovered plugins."""
    discovery = get_discovery(args)
    plugins = discovery.discover_all()

    if not plugins:
        console.print("No plugins found.")
        return

    table = Table(title=f"Plugins ({len(plugins)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Dependencies", justify="right")
    table.add_column("Path", style="dim")

    for p in plugins:
        meta = p.metadata
        table.add_row(meta.id, meta.name or "-", meta.version or "-", str(len(meta.dependencies)), str(p.path))

    console.print(table)


def cmd_info(args):
    """Show detailed plugin information."""
    discovery = get_discovery(args)
    plugins = discovery.discover_all()

    plugin = next((p for p in plugins if p.id == args.plugin_id), None)
    if not plugin:
        console.print(f"[red]Plugin '{args.plugin_id}' not found.[/red]")
        sys.exit(1)

    meta = plugin.metadata
    lines = [
        f"Name:        {meta.name or '-'}",
        f"Version:     {meta.version or '-'}",
        f"Description: {meta.description or '-'}",
        f"URL:         {meta.url or '-'}",
        f"Authors:     {', '.join(meta.authors) or '-'}",
        f"Path:        {plugin.path}",
    ]
    groups = meta.group_dependencies_by_load_order()
    for order, dependencies in groups.items():
        if dependencies:
            rendered = ", ".join(sorted(str(d) for d in dependencies))
            lines.append(f"Load {order.value:<7}  {rendered}")
    if meta.extensions:
        lines.append(f"Extensions:  {', '.join(meta.extensions)}")

    console.print(Panel("\n".join(lines), title=f"Plugin: {meta.id}"))


def cmd_validate(args):
    """Validate descriptor files."""
    codec = get_codec(args.extended)
    failures = 0

    for name in args.files:
        path = Path(name)
        try:
            with open(path, "rb") as f:
                meta = codec.load(f)
        except (PluginMetaError, OSError) as e:
            failures += 1
            console.print(f"[red]✗[/red] {path}: {e}")
            continue
        required = len(meta.collect_required_dependencies())
        console.print(
            f"[green]✓[/green] {path}: {meta.id} "
            f"({len(meta.dependencies)} dependencies, {required} required)"
        )

    if failures:
        sys.exit(1)


def cmd_format(args):
    """Rewrite a descriptor in canonical form."""
    codec = get_codec(args.extended)
    path = Path(args.file)
    try:
        with open(path, "rb") as f:
            meta = codec.load(f)
    except (PluginMetaError, OSError) as e:
        console.print(f"[red]{path}: {e}[/red]")
        sys.exit(1)

    if args.in_place:
        with open(path, "w", encoding="utf-8") as f:
            codec.dump(meta, f)
        console.print(f"Formatted {path}")
    else:
        print(codec.dumps(meta))


def cmd_check_id(args):
    """Check a plugin id against an identifier grammar."""
    grammar = get_grammar(args.grammar)
    if grammar.matches(args.plugin_id):
        console.print(f"[green]'{args.plugin_id}' is a valid id ({grammar.name})[/green]")
    else:
        console.print(
            f"[red]'{args.plugin_id}' is not a valid id ({grammar.name}: "
            f"{grammar.min_length}-{grammar.max_length} chars, [a-z][a-z0-9_-]*)[/red]"
        )
        sys.exit(1)


def cmd_doctor(args):
    """Run health checks on the plugin directory."""
    issues = []

    discovery = get_discovery(args)
    root = discovery.search_paths[0][0]
    if not root.exists():
        issues.append(f"Plugins directory missing: {root}")

    plugins = discovery.discover_all()
    for path, message in discovery.errors:
        issues.append(f"{path}: {message}")

    # Dependencies pointing at plugins that are not present
    discovered_ids = {p.id for p in plugins}
    for p in plugins:
        for dependency in p.metadata.collect_required_dependencies():
            if dependency.id not in discovered_ids:
                issues.append(f"Plugin '{p.id}': required dependency '{dependency.id}' not found")

    if issues:
        console.print(f"[red]Found {len(issues)} issue(s):[/red]")
        for i, issue in enumerate(issues, 1):
            console.print(f"  {i}. {issue}")
        sys.exit(1)
    else:
        console.print(f"[green]All checks passed. {len(plugins)} plugin(s) found.[/green]")


def main():
    parser = argparse.ArgumentParser(description="Plugin descriptor manager")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_discovery_args(sub):
        sub.add_argument("--dir", help=f"Plugins directory (default: {constants.PLUGINS_DIR})")
        sub.add_argument("--extended", action="store_true", help="Use the extended descriptor schema")

    # list
    list_parser = subparsers.add_parser("list", help="List all plugins")
    add_discovery_args(list_parser)

    # info
    info_parser = subparsers.add_parser("info", help="Show plugin details")
    info_parser.add_argument("plugin_id", help="Plugin ID")
    add_discovery_args(info_parser)

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate descriptor files")
    validate_parser.add_argument("files", nargs="+", help="Descriptor files")
    validate_parser.add_argument("--extended", action="store_true", help="Use the extended descriptor schema")

    # format
    format_parser = subparsers.add_parser("format", help="Rewrite a descriptor in canonical form")
    format_parser.add_argument("file", help="Descriptor file")
    format_parser.add_argument("--extended", action="store_true", help="Use the extended descriptor schema")
    format_parser.add_argument("--in-place", action="store_true", help="Overwrite the file")

    # check-id
    check_parser = subparsers.add_parser("check-id", help="Check a plugin id")
    check_parser.add_argument("plugin_id", help="Plugin ID")
    check_parser.add_argument(
        "--grammar", default=constants.DEFAULT_ID_GRAMMAR, choices=sorted(GRAMMARS),
        help="Identifier grammar",
    )

    # doctor
    doctor_parser = subparsers.add_parser("doctor", help="Run health checks")
    add_discovery_args(doctor_parser)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "validate": cmd_validate,
        "format": cmd_format,
        "check-id": cmd_check_id,
        "doctor": cmd_doctor,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
