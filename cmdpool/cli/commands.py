from __future__ import annotations

import argparse
import sys
import time

from cmdpool._logging import get_logger, setup_logging
from cmdpool.config import ConfigError, PoolConfig, load_config, merge_cli, validate
from cmdpool.pool import EmptyCommandError, PoolError, PoolScheduler
from cmdpool.stats import FinalReport

from .args import parse_args
from .report import print_config, print_report

_cli_log = get_logger("cli")


def run_cli(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(argv)
        return cmd_run(args)

    except EmptyCommandError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except PoolError as exc:
        _cli_log.error("run aborted: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        return 130


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    started = time.perf_counter()
    _cli_log.info("cli_command_start argv=%s", " ".join(argv or sys.argv[1:]))
    exit_code = run_cli(argv)
    _cli_log.info(
        "cli_command_end exit_code=%s duration_sec=%.3f",
        exit_code,
        time.perf_counter() - started,
    )
    return exit_code


def cmd_run(args: argparse.Namespace) -> int:
    config = _load_with(args)
    print_config(config)
    report = _run_with(config)
    print_report(report)
    return 0


def _load_with(args: argparse.Namespace) -> PoolConfig:
    config = load_config(args.config) if args.config else PoolConfig()
    config = merge_cli(config, args)

    if not config.command or not config.executable:
        raise EmptyCommandError()

    return validate(config)


def _run_with(config: PoolConfig) -> FinalReport:
    assert config.total_tasks is not None
    scheduler = PoolScheduler(
        quiet=config.quiet,
        env=config.env,
        working_dir=config.working_dir,
    )
    return scheduler.run(
        config.total_tasks,
        config.concurrency,
        config.launch_delay_s,
        config.executable,
        config.args,
    )
