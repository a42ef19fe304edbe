"""nodeopts CLI: inspect and change node-wide options in the durable store."""

import argparse
import asyncio
import json
import logging
import sys

from nodeopts.config import BootConfigError, NodeConfig
from nodeopts.options.errors import OptionValidationError, UnknownOptionError
from nodeopts.options.system import SystemOptionManager
from nodeopts.options.value import OptionScope


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="nodeopts",
        description="Node option manager: list, get, set and reset SYSTEM options",
    )
    parser.add_argument("--db", default=None, help="Option store database (default: $NODEOPTS_DB or ~/.nodeopts/options.db)")
    parser.add_argument(
        "--boot-config",
        action="append",
        default=None,
        metavar="PATH",
        help="Boot config TOML file; repeat to layer files (default: $NODEOPTS_BOOT_CONFIG)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("--quiet", action="store_true", help="Only show ERROR and above")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List effective option values")
    visibility = list_parser.add_mutually_exclusive_group()
    visibility.add_argument("--internal", action="store_true", help="List internal options only")
    visibility.add_argument("--all", action="store_true", dest="all_options", help="List internal and external options")
    list_parser.add_argument("--json", action="store_true", dest="json_output", help="Output as JSON")

    get_parser = subparsers.add_parser("get", help="Show one option's effective value")
    get_parser.add_argument("name", help="Option name")
    get_parser.add_argument("--json", action="store_true", dest="json_output", help="Output as JSON")

    set_parser = subparsers.add_parser("set", help="Set an option at SYSTEM scope")
    set_parser.add_argument("name", help="Option name")
    set_parser.add_argument("value", help="New value, parsed according to the option's type")

    reset_parser = subparsers.add_parser("reset", help="Reset an option to its default")
    reset_parser.add_argument("name", help="Option name")

    subparsers.add_parser("reset-all", help="Reset every option to its default")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    log_level = "WARNING"
    if args.verbose:
        log_level = "DEBUG"
    elif args.quiet:
        log_level = "ERROR"
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        asyncio.run(_dispatch(args))
    except (UnknownOptionError, OptionValidationError, BootConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _build_manager(args) -> SystemOptionManager:
    config = NodeConfig.from_env()
    if args.db:
        config.db_path = args.db
    if args.boot_config:
        config.boot_config_paths = args.boot_config
    return SystemOptionManager.create(config.db_path, boot_config=config.load_boot_config())


async def _dispatch(args):
    """Route CLI commands to option manager calls."""
    async with _build_manager(args) as manager:
        if args.command == "list":
            if args.all_options:
                values = await manager.get_option_list()
            elif args.internal:
                values = await manager.get_internal_option_list()
            else:
                values = await manager.get_external_option_list()
            _print_values(values, args.json_output)

        elif args.command == "get":
            value = await manager.get_option(args.name)
            _print_values([value], args.json_output)

        elif args.command == "set":
            validator = manager.get_option_validator(args.name)
            await manager.set_option(validator.parse(args.value, OptionScope.SYSTEM))
            print(f"{validator.name} updated.")

        elif args.command == "reset":
            await manager.delete_option(args.name, OptionScope.SYSTEM)
            print(f"{args.name.lower()} reset to default.")

        elif args.command == "reset-all":
            await manager.delete_all_options(OptionScope.SYSTEM)
            print("All options reset to default.")


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _print_values(values, json_output: bool):
    if json_output:
        print(json.dumps([v.to_dict() for v in values], indent=2))
        return
    for v in values:
        print(f"{v.name} = {_format_value(v.value)}  ({v.kind.value})")


if __name__ == "__main__":
    main()
