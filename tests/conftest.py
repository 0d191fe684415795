from __future__ import annotations

from typing import Callable

import pytest

from commandy.process import CommandLaunchError, CommandResult, CommandSpec


class FakeRunner:
    """Records every command; answers from a handler or a default result."""

    def __init__(self, handler: Callable[[CommandSpec], CommandResult] | None = None) -> None:
        self.handler = handler
        self.captured: list[CommandSpec] = []
        self.attached: list[CommandSpec] = []
        self.detached: list[CommandSpec] = []
        self.missing: set[str] = set()

    def _check(self, spec: CommandSpec) -> None:
        if spec.argv[0] in self.missing:
            raise CommandLaunchError(spec.argv, "No such file or directory")

    def run_captured(self, spec: CommandSpec) -> CommandResult:
        self._check(spec)
        self.captured.append(spec)
        if self.handler is None:
            return CommandResult(0, "")
        return self.handler(spec)

    def run_attached(self, spec: CommandSpec) -> int:
        self._check(spec)
        self.attached.append(spec)
        return 0

    def spawn_detached(self, spec: CommandSpec) -> None:
        self._check(spec)
        self.detached.append(spec)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()
