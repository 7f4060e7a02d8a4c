"""Command line entry point for generating and managing sequence ids."""

import argparse
import asyncio
import sys

import pydantic
from pymongo.errors import PyMongoError

from mongoseq.config import Config
from mongoseq.core.core import Core
from mongoseq.errors import SequenceError
from mongoseq.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mongoseq", description="MongoDB backed sequence ids")
    commands = parser.add_subparsers(dest="command", required=True)

    next_cmd = commands.add_parser("next", help="generate the next id of a counter")
    next_cmd.add_argument("name")

    set_cmd = commands.add_parser("set", help="reset a counter to an initial value")
    set_cmd.add_argument("name")
    set_cmd.add_argument("value", type=int)

    exists_cmd = commands.add_parser("exists", help="check whether a counter exists")
    exists_cmd.add_argument("name")

    current_cmd = commands.add_parser("current", help="print the current value of a counter")
    current_cmd.add_argument("name")

    return parser


async def run(core: Core, args: argparse.Namespace) -> int:
    """Execute one command and return the process exit code."""
    async with core.lifespan():
        counter = core.counter
        match args.command:
            case "next":
                print(await counter.generate_id(args.name))
            case "set":
                await counter.set_initial_value(args.name, args.value)
            case "exists":
                found = await counter.exists(args.name)
                print("yes" if found else "no")
                return 0 if found else 1
            case "current":
                value = await counter.get_current_value(args.name)
                if value is None:
                    return 1
                print(value)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = Config()
    except pydantic.ValidationError as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return 1
    setup_logging(config.debug, config.collection_name)

    try:
        core = Core(config)
    except PyMongoError as e:
        # Malformed database URL or client options
        print(f"error: invalid database settings: {e}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(run(core, args))
    except SequenceError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
