# Copyright (c) 2024 Platctx Contributors
# MIT License

"""
Command-line report of the resolved platform facts.

Usage:
    platctx --version
    platctx [-c props.yml] [-D name=value ...] [--format yaml|json]
"""

from __future__ import annotations

import argparse
import json
import logging
import platform
import sys

import yaml

from platctx import __version__
from platctx.context import PlatformContext
from platctx.errors import ExitCode, PlatformError
from platctx.properties import PropertyTable


def get_version_string() -> str:
    """Generate a detailed version string."""
    python_version = platform.python_version()
    os_info = f"{platform.system()} {platform.release()}"
    return (
        f"platctx {__version__}\n"
        f"  python: {python_version}\n"
        f"  platform: {os_info}"
    )


def parse_define(value: str) -> tuple[str, str]:
    """Parse a -D name=value argument."""
    name, sep, prop_value = value.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected name=value, got {value!r}")
    return name.strip(), prop_value


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for platctx."""
    parser = argparse.ArgumentParser(
        prog="platctx",
        description="Report the platform facts platctx resolves for this process",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  platctx
  platctx --format json
  platctx -D platctx.osType=windows -D platctx.currentUser='CORP\\jdoe'
  platctx -c overrides.yml
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=get_version_string(),
    )

    parser.add_argument(
        "-c", "--config",
        dest="config",
        default=None,
        help="YAML file of properties",
    )

    parser.add_argument(
        "-D", "--define",
        dest="defines",
        action="append",
        type=parse_define,
        default=[],
        metavar="NAME=VALUE",
        help="Set a property (repeatable)",
    )

    parser.add_argument(
        "--format",
        dest="output_format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Enable debug logging",
    )

    return parser


def build_context(config: str | None, defines: list[tuple[str, str]]) -> PlatformContext:
    """Build a context from an optional property file and -D overrides."""
    if config:
        table = PropertyTable.from_yaml(config)
    else:
        table = PropertyTable()
    if defines:
        table = table.with_properties(dict(defines))
    return PlatformContext(table)


def render(facts: dict, output_format: str) -> str:
    if output_format == "json":
        return json.dumps(facts, indent=2)
    return yaml.safe_dump(facts, default_flow_style=False, sort_keys=False)


def main(args: list[str] | None = None) -> int:
    """Main entrypoint for platctx CLI."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        context = build_context(parsed.config, parsed.defines)
        facts = context.describe()
    except PlatformError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return int(e.exit_code)

    sys.stdout.write(render(facts, parsed.output_format))
    if parsed.output_format == "json":
        sys.stdout.write("\n")
    return int(ExitCode.SUCCESS)


if __name__ == "__main__":
    sys.exit(main())
