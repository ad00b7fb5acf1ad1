import argparse
import json
import shlex
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import ConfigError, PoolConfig, UnsupportedConfigFormatError


def load_config(path: str | Path) -> PoolConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return _build_pool_config(raw_file)


def merge_cli(config: PoolConfig, args: argparse.Namespace) -> PoolConfig:
    """Overlay the values given explicitly on the command line onto ``config``."""
    if args.command:
        config.command = list(args.command)
    if args.total_tasks is not None:
        config.total_tasks = args.total_tasks
    if args.concurrency is not None:
        config.concurrency = args.concurrency
    if args.quiet:
        config.quiet = True
    if args.delay is not None:
        config.launch_delay_ms = args.delay
    return config


def validate(config: PoolConfig) -> PoolConfig:
    if config.total_tasks is None:
        raise ConfigError("Total tasks is required (use -n/--total-tasks)")

    if config.total_tasks < 0:
        raise ConfigError(f"Total tasks must be >= 0, got {config.total_tasks}")

    if config.concurrency < 1:
        raise ConfigError(f"Concurrency must be >= 1, got {config.concurrency}")

    if config.launch_delay_ms < 0:
        raise ConfigError(
            f"Launch delay must be >= 0 ms, got {config.launch_delay_ms}"
        )

    return config


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    return _require_mapping(path, "YAML", raw_file)


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    return _require_mapping(path, "TOML", raw_file)


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    return _require_mapping(path, "JSON", raw_file)


def _require_mapping(path: Path, kind: str, raw_file: Any) -> Mapping[str, Any]:
    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {kind} parsed succesfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_pool_config(raw: Mapping[str, Any]) -> PoolConfig:
    keys = {
        "command",
        "total_tasks",
        "concurrency",
        "quiet",
        "launch_delay_ms",
        "env",
        "working_dir",
    }

    if "pool" not in raw:
        raise ConfigError("Missing 'pool' field")

    fields = raw["pool"]
    if not isinstance(fields, Mapping):
        raise ConfigError(f"'pool' must be a mapping, got {type(fields)}")

    for field in fields.keys():
        if field not in keys:
            raise ConfigError(f"pool: Can't process: {field}")

    config = PoolConfig()

    if "command" in fields:
        config.command = _build_command(fields["command"])

    if "total_tasks" in fields:
        config.total_tasks = _non_negative_int("total_tasks", fields["total_tasks"])

    if "concurrency" in fields:
        config.concurrency = _non_negative_int("concurrency", fields["concurrency"])
        if config.concurrency < 1:
            raise ConfigError("pool: concurrency must be at least 1")

    if "quiet" in fields:
        if not isinstance(fields["quiet"], bool):
            raise ConfigError("pool: quiet should be a boolean")
        config.quiet = fields["quiet"]

    if "launch_delay_ms" in fields:
        config.launch_delay_ms = _non_negative_int(
            "launch_delay_ms", fields["launch_delay_ms"]
        )

    if "env" in fields:
        config.env = _build_env(fields["env"])

    if "working_dir" in fields:
        if not isinstance(fields["working_dir"], str):
            raise ConfigError("pool: The working_dir should be a string")

        if len(fields["working_dir"].strip()) < 1:
            raise ConfigError("pool: Please provide a string or remove working_dir")

        config.working_dir = fields["working_dir"].strip()

    return config


def _build_command(value: Any) -> list[str]:
    if isinstance(value, str):
        try:
            tokens = shlex.split(value)
        except ValueError as exc:
            raise ConfigError(f"pool: Can't split command: {exc}") from exc
    elif isinstance(value, list):
        for item in value:
            if not isinstance(item, str):
                raise ConfigError(f"pool: {item!r} should be a string in the command list")
        tokens = list(value)
    else:
        raise ConfigError("pool: The command should be a string or a list of strings")

    if len(tokens) < 1 or len(tokens[0].strip()) < 1:
        raise ConfigError("pool: Command missing")

    return tokens


def _build_env(value: Any) -> dict[str, str]:
    env = {}

    if not isinstance(value, Mapping):
        raise ConfigError("pool: Env should be a mapping")

    for key, item in value.items():
        if not isinstance(key, str):
            raise ConfigError(f"pool: {key} should be a string")

        if len(key.strip()) < 1:
            raise ConfigError("pool: A key can't be empty")

        if not isinstance(item, str):
            raise ConfigError(f"pool: {item} should be a string")

        env[key.strip()] = item

    return env


def _non_negative_int(name: str, value: Any) -> int:
    # bool is an int subclass; YAML `yes` must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"pool: {name} should be an integer, got {type(value)}")

    if value < 0:
        raise ConfigError(f"pool: {name} can't be negative")

    return value
