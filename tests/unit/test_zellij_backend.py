from __future__ import annotations

import asyncio
import sys
from typing import Sequence

import pytest

import zpatch.runtime.detection as detection
from zpatch.runtime.backend import PaneCommandError, ZellijBackend
from zpatch.runtime.detection import is_inside_zellij, is_zellij_available, leader_pane_id
from zpatch.runtime.process import CommandResult, CommandTimeout, run_command


class FakeRunner:
    """Records ``zellij action`` calls and fails selected actions."""

    def __init__(self, failures: dict[str, int] | None = None, timeouts: Sequence[str] = ()) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.failures = dict(failures or {})
        self.timeouts = set(timeouts)

    async def __call__(self, program: str, args: Sequence[str], *, timeout: float) -> CommandResult:
        self.calls.append((program, *args))
        await asyncio.sleep(0)
        action = args[1]
        if action in self.timeouts:
            raise CommandTimeout(f"{action} timed out")
        code = self.failures.get(action, 0)
        return CommandResult(command=(program, *args), stdout="", stderr="boom" if code else "", code=code)


def _actions(runner: FakeRunner) -> list[str]:
    return [call[2] for call in runner.calls]


@pytest.mark.asyncio
async def test_spawn_creates_pane_then_types_command() -> None:
    runner = FakeRunner()
    backend = ZellijBackend(runner=runner, pane_init_delay=0)

    first = await backend.spawn_teammate("researcher", "claude --agent researcher")
    second = await backend.spawn_teammate("tester", "claude --agent tester")

    assert first.pane_id == "zellij-researcher-1"
    assert first.is_first_teammate
    assert second.pane_id == "zellij-tester-2"
    assert not second.is_first_teammate
    assert runner.calls[:3] == [
        ("zellij", "action", "new-pane", "--name", "researcher"),
        ("zellij", "action", "write-chars", "claude --agent researcher"),
        ("zellij", "action", "write", "13"),
    ]


@pytest.mark.asyncio
async def test_concurrent_spawns_do_not_interleave() -> None:
    runner = FakeRunner()
    backend = ZellijBackend(runner=runner, pane_init_delay=0)

    await asyncio.gather(*(backend.spawn_teammate(f"agent-{index}", f"run {index}") for index in range(4)))

    assert _actions(runner) == ["new-pane", "write-chars", "write"] * 4
    typed = [call[3] for call in runner.calls if call[2] == "write-chars"]
    named = [call[4] for call in runner.calls if call[2] == "new-pane"]
    assert typed == [f"run {name.split('-')[1]}" for name in named]


@pytest.mark.asyncio
async def test_failed_pane_creation_releases_lock() -> None:
    runner = FakeRunner(failures={"new-pane": 1})
    backend = ZellijBackend(runner=runner, pane_init_delay=0)

    with pytest.raises(PaneCommandError, match="Failed to create Zellij pane for alpha: boom"):
        await backend.spawn_teammate("alpha", "echo hi")

    assert not backend.lock.locked
    runner.failures.clear()
    pane = await backend.spawn_teammate("beta", "echo hi")
    assert pane.pane_id == "zellij-beta-2"


@pytest.mark.asyncio
async def test_timeout_during_write_releases_lock() -> None:
    runner = FakeRunner(timeouts=("write-chars",))
    backend = ZellijBackend(runner=runner, pane_init_delay=0)

    with pytest.raises(CommandTimeout):
        await backend.spawn_teammate("alpha", "echo hi")

    assert not backend.lock.locked


@pytest.mark.asyncio
async def test_failed_enter_is_reported() -> None:
    runner = FakeRunner(failures={"write": 2})
    backend = ZellijBackend(runner=runner, pane_init_delay=0)

    with pytest.raises(PaneCommandError) as exc_info:
        await backend.spawn_teammate("alpha", "echo hi")

    assert exc_info.value.result.code == 2
    assert not backend.lock.locked


@pytest.mark.asyncio
async def test_unsupported_operations_are_noops() -> None:
    backend = ZellijBackend(runner=FakeRunner())

    assert backend.type == "zellij"
    assert backend.supports_hide_show is False
    assert await backend.kill_pane("zellij-a-1") is True
    assert await backend.hide_pane("zellij-a-1") is False
    assert await backend.show_pane("zellij-a-1", "main") is False
    assert await backend.set_pane_title("zellij-a-1", "a", "blue") is None
    assert await backend.rebalance_panes("main") is None


@pytest.mark.asyncio
async def test_is_available_inside_session_skips_probe(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZELLIJ", "0")
    monkeypatch.setenv("ZELLIJ_SESSION_NAME", "work")

    async def _unexpected(*args, **kwargs):
        raise AssertionError("probe must not run inside a session")

    monkeypatch.setattr(detection, "run_command", _unexpected)

    assert await ZellijBackend().is_available()
    assert await ZellijBackend().is_running_inside()


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ({"ZELLIJ": "0", "ZELLIJ_SESSION_NAME": "work"}, True),
        ({"ZELLIJ": "0"}, False),
        ({"ZELLIJ": "1", "ZELLIJ_SESSION_NAME": "work"}, False),
        ({}, False),
    ],
)
def test_is_inside_zellij(env: dict[str, str], expected: bool) -> None:
    assert is_inside_zellij(env) is expected


def test_leader_pane_id() -> None:
    assert leader_pane_id({"ZELLIJ_PANE_ID": "3"}) == "3"
    assert leader_pane_id({"ZELLIJ_PANE_ID": ""}) is None


@pytest.mark.asyncio
async def test_availability_probe_treats_spawn_errors_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _missing(*args, **kwargs):
        raise FileNotFoundError("which")

    monkeypatch.setattr(detection, "run_command", _missing)

    assert await is_zellij_available() is False


@pytest.mark.asyncio
async def test_run_command_captures_output() -> None:
    result = await run_command(sys.executable, ["-c", "import sys; print('out'); sys.exit(3)"])

    assert result.stdout.strip() == "out"
    assert result.code == 3
    assert not result.ok


@pytest.mark.asyncio
async def test_run_command_times_out() -> None:
    with pytest.raises(CommandTimeout):
        await run_command(sys.executable, ["-c", "import time; time.sleep(5)"], timeout=0.2)
