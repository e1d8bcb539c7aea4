"""A small command-line tool with ``flags`` and ``hello`` subcommands."""

from __future__ import annotations

import argparse
from collections.abc import Sequence


def hello_world(args: Sequence[str]) -> None:
    """Greet the name given in ``args``, or the world if there is none."""
    if len(args) > 1:
        raise ValueError(f"accepts at most 1 arg(s), received {len(args)}")
    name = args[0] if args else "World"
    print(f"Hello, {name}.")


def show_flags(options: argparse.Namespace, args: Sequence[str]) -> None:
    """Print the flag values held in ``options`` and the remaining ``args``."""
    print("string:", options.string)
    print("integer:", options.number)
    print("boolean:", "true" if options.boolean else "false")
    print("args:", "[" + " ".join(args) + "]")


def build_parser() -> argparse.ArgumentParser:
    """Return the parser for the ``cng`` command and its subcommands."""
    parser = argparse.ArgumentParser(prog="cng", description="A super simple command.")
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    flags = commands.add_parser(
        "flags",
        help="Experiment with flags",
        description="A simple flags experimentation command.",
    )
    flags.add_argument("-s", "--string", default="foo", help="a string")
    flags.add_argument("-n", "--number", type=int, default=42, help="an integer")
    flags.add_argument("-b", "--boolean", action="store_true", help="a boolean")
    flags.add_argument("args", nargs="*")
    flags.set_defaults(run=lambda ns: show_flags(ns, ns.args))

    hello = commands.add_parser(
        "hello",
        help='Print "Hello, World"',
        description='This command will print "Hello, World"',
    )
    hello.add_argument("name", nargs="?")
    hello.set_defaults(
        run=lambda ns: hello_world([] if ns.name is None else [ns.name])
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command named in ``argv``; print help when none is given."""
    parser = build_parser()
    options = parser.parse_args(argv)
    run = getattr(options, "run", None)
    if run is None:
        parser.print_help()
        return 0
    run(options)
    return 0