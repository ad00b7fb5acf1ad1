from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmdpool",
        description="A command-pool to run multiple commands in parallel.",
    )

    # Options default to None so values from --config are only
    # overridden when given explicitly.
    parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        default=None,
        help="Number of concurrent tasks (default: 1)",
    )
    parser.add_argument(
        "-n",
        "--total-tasks",
        type=int,
        default=None,
        help="Total number of tasks to execute",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Hide command stdout, only show task start/end info",
    )
    parser.add_argument(
        "-d",
        "--delay",
        type=int,
        default=None,
        metavar="MS",
        help="Delay between initial task launches in milliseconds (default: 100)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML/TOML/JSON config file",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="The command and its arguments to execute",
    )

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    if args.command and args.command[0] == "--":
        args.command = args.command[1:]
    return args
