#!/usr/bin/env python3
"""
CLI entry point for the shell (msh command).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from msh import __version__
from msh.config import DEFAULTS, Config, get_config_manager
from msh.core.context import Context
from msh.core.exceptions import RegistryFileError
from msh.core.registry import read_registry_file, register_paths
from msh.logging import configure_logging, resolve_level

logger = logging.getLogger(__name__)


def preload_dirs(cfg: Config, registry_file: Optional[str]) -> list[str]:
    """Directories to register before the first prompt, in order.

    Config `preload_dirs` come first, then the registry file entries. An
    unreadable registry file is logged and skipped.
    """
    dirs = list(cfg.get("preload_dirs") or [])
    registry_file = registry_file or cfg.get("registry_file")
    if registry_file:
        try:
            dirs.extend(read_registry_file(Path(registry_file).expanduser()))
        except RegistryFileError as e:
            logger.warning(f"Could not read registry file \"{registry_file}\" -> error: {e}")
    return dirs


def init_context(dirs: Iterable[str], workers: Optional[int] = None) -> Context:
    """Build a context with `dirs` registered."""
    logger.debug("Initializing context")
    ctx = Context(workers=workers)
    register_paths(ctx.registry, dirs, ctx.session.cwd)
    return ctx


def print_config():
    """Print current configuration."""
    cfg_mgr = get_config_manager()
    settings = cfg_mgr.list_settings()

    print(f"Config file: {cfg_mgr.CONFIG_FILE}")

    if settings:
        print("\nCustom settings:")
        for key, value in settings.items():
            print(f"  {key}: {value}")

    print("\nDefaults (used when not set):")
    for key, value in DEFAULTS.items():
        if key not in settings:
            print(f"  {key}: {value}")

    print("\nSet with: msh --set-config key=value")
    print(f"Available keys: {', '.join(Config.model_fields)}")
    print()


def _convert_value(key: str, value: str):
    """Convert a --set-config string to the key's type."""
    if key == "workers":
        return int(value)
    if key == "simple":
        return value.lower() in ("true", "1", "yes")
    if key == "preload_dirs":
        return value.split()
    return value


def build_parser(cfg: Config) -> argparse.ArgumentParser:
    cfg_file = get_config_manager().CONFIG_FILE
    parser = argparse.ArgumentParser(
        prog="msh",
        description="Shell that runs each command in every registered directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Config file: {cfg_file}

Examples:
    msh                                # Start with the configured registry
    msh -r dirs.txt                    # Pre-register directories from a file
    msh --config                       # Show current config
    msh --set-config workers=4         # Limit concurrent processes
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-r", "--registry", metavar="FILE",
                        help="A whitespace-separated list of directories to automatically register")
    parser.add_argument("-j", "--workers", type=int, default=cfg.get("workers"),
                        help="Maximum concurrent processes per command (default: CPU count)")
    parser.add_argument("--simple", action="store_true", default=cfg.get("simple"),
                        help="Use simple REPL (no prompt_toolkit features)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log verbosity (-v info, -vv debug)")
    parser.add_argument("--log-file", metavar="FILE",
                        help="Also write log records to FILE")

    # Config management
    parser.add_argument("--config", action="store_true",
                        help="Show current configuration")
    parser.add_argument("--set-config", metavar="KEY=VALUE",
                        help=f"Set a config value. Keys: {', '.join(Config.model_fields)}")
    parser.add_argument("--unset-config", metavar="KEY",
                        help="Unset a config value (reset to default)")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the msh CLI."""
    cfg_mgr = get_config_manager()
    cfg = cfg_mgr.config

    args = build_parser(cfg).parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(resolve_level(args.verbose, cfg.get("log_level")), log_file)

    if args.config:
        print_config()
        return 0

    if args.set_config:
        try:
            key, value = args.set_config.split("=", 1)
            key = key.strip()
            cfg_mgr.set(key, _convert_value(key, value.strip()))
            print(f"Set {key} = {value.strip()}")
            print(f"Saved to {cfg_mgr.CONFIG_FILE}")
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        return 0

    if args.unset_config:
        try:
            cfg_mgr.unset(args.unset_config)
            print(f"Unset {args.unset_config}")
            print(f"Saved to {cfg_mgr.CONFIG_FILE}")
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        return 0

    if not sys.stdin.isatty():
        print("Cannot accept piped input", file=sys.stderr)
        return 1

    ctx = init_context(preload_dirs(cfg, args.registry), args.workers)
    history_file = Path(cfg.get("history_file")).expanduser()

    if args.simple:
        from msh.cli._simple_repl import repl
    else:
        from msh.cli._repl import repl

    repl(ctx, history_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
