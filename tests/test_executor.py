# tests/test_executor.py
from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from cmdpool.executor.executor import TaskExecutor
from cmdpool.executor.types import ExitFailure, SpawnError, Success
from cmdpool.stats.types import PoolState


def _py(code: str) -> list[str]:
    """
    Build `python -c "<code>"` argv for the current interpreter.
    The executor spawns without a shell, so this is a list, not a string.
    """
    return [str(Path(sys.executable)), "-c", code]


def _execute(ex: TaskExecutor, code: str, task_id: int = 1):
    argv = _py(code)
    return ex.execute(task_id, argv[0], argv[1:])


def test_exit_zero_is_success(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState())

    record = _execute(ex, "raise SystemExit(0)")

    assert record.task_id == 1
    assert record.outcome == Success(0)
    assert record.outcome.is_success
    assert record.duration_s >= 0
    assert record.start_time.endswith("Z")


def test_nonzero_exit_is_exit_failure(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState())

    record = _execute(ex, "raise SystemExit(7)")

    assert record.outcome == ExitFailure(7)
    assert not record.outcome.is_success
    assert "Failed (Exit Code: 7)" in capsys.readouterr().out


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_killed_by_signal_has_no_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState())

    record = _execute(ex, "import os, signal; os.kill(os.getpid(), signal.SIGKILL)")

    assert isinstance(record.outcome, ExitFailure)
    assert record.outcome.exit_code is None
    assert record.outcome.signal == 9
    assert "Terminated by signal 9" in capsys.readouterr().out


def test_missing_executable_is_spawn_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    ex = TaskExecutor(PoolState())

    record = ex.execute(3, str(tmp_path / "does-not-exist"), ["arg"])

    assert isinstance(record.outcome, SpawnError)
    assert record.outcome.exit_code is None
    assert record.outcome.message != ""
    assert record.stdout == ""
    assert record.stderr == ""
    assert "[Task 3] Finished: Error: " in capsys.readouterr().out


def test_duration_covers_process_lifetime(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState())

    record = _execute(ex, "import time; time.sleep(0.3)")

    assert record.duration_s >= 0.3


def test_start_and_finish_lines_carry_running_count(
    capsys: pytest.CaptureFixture[str],
) -> None:
    state = PoolState()
    ex = TaskExecutor(state)

    _execute(ex, "raise SystemExit(0)", task_id=4)
    out = capsys.readouterr().out.splitlines()

    assert out[0] == "[Task 4] Starting... (Running: 1)"
    assert out[1] == "[Task 4] Finished: Success (Exit Code: 0) (Running: 0)"
    assert state.running == 0
    assert state.peak_running == 1


def test_stdout_is_printed_unless_quiet(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState())
    _execute(ex, "print('hello from child')")
    loud = capsys.readouterr().out

    ex = TaskExecutor(PoolState(), quiet=True)
    record = _execute(ex, "print('hello from child')")
    quiet = capsys.readouterr().out

    assert "[Task 1] Stdout:\nhello from child" in loud
    assert "hello from child" not in quiet
    assert record.stdout.strip() == "hello from child"


def test_stderr_is_printed_even_when_quiet(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState(), quiet=True)

    _execute(ex, "import sys; sys.stderr.write('boom')")
    captured = capsys.readouterr()

    assert "[Task 1] Stderr:\nboom" in captured.err
    assert "boom" not in captured.out


def test_empty_output_prints_no_blocks(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState())

    _execute(ex, "pass")
    captured = capsys.readouterr()

    assert "Stdout:" not in captured.out
    assert captured.err == ""


def test_env_is_applied(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState(), env={"CP_TEST": "ok"})

    record = _execute(
        ex, "import os; raise SystemExit(0 if os.environ.get('CP_TEST')=='ok' else 2)"
    )

    assert record.outcome == Success(0)


def test_working_dir_is_respected(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    ex = TaskExecutor(PoolState(), working_dir=str(tmp_path))

    _execute(
        ex,
        "from pathlib import Path; Path('written.txt').write_text('ok', encoding='utf-8')",
    )

    assert (tmp_path / "written.txt").read_text(encoding="utf-8") == "ok"


def test_invalid_utf8_output_is_replaced(capsys: pytest.CaptureFixture[str]) -> None:
    ex = TaskExecutor(PoolState())

    record = _execute(ex, "import sys; sys.stdout.buffer.write(b'a\\xffb')")

    assert record.stdout == "a�b"


def test_spawn_error_is_logged_as_warning(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    ex = TaskExecutor(PoolState())

    with caplog.at_level(logging.WARNING, logger="cmdpool.executor"):
        ex.execute(2, str(tmp_path / "absent"), [])

    warnings = [r for r in caplog.records if r.name == "cmdpool.executor"]
    assert len(warnings) == 1
    assert warnings[0].levelno == logging.WARNING
    assert "task 2 could not be spawned" in warnings[0].getMessage()
