from dataclasses import dataclass, field


@dataclass
class PoolConfig:
    command: list[str] = field(default_factory=list)
    total_tasks: int | None = None
    concurrency: int = 1
    quiet: bool = False
    launch_delay_ms: int = 100
    env: dict[str, str] = field(default_factory=dict)
    working_dir: str | None = None

    @property
    def executable(self) -> str:
        return self.command[0] if self.command else ""

    @property
    def args(self) -> list[str]:
        return self.command[1:]

    @property
    def launch_delay_s(self) -> float:
        return self.launch_delay_ms / 1000.0


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
