from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class CommandLaunchError(Exception):
    """The external program could not be started (missing binary, bad cwd, permissions)."""

    def __init__(self, argv: tuple[str, ...], reason: str) -> None:
        super().__init__(f"could not launch {argv[0] if argv else '?'}: {reason}")
        self.argv = argv
        self.reason = reason


@dataclass(frozen=True)
class CommandSpec:
    argv: tuple[str, ...]
    cwd: Optional[str] = None

    @classmethod
    def of(cls, *argv: str, cwd: str | None = None) -> "CommandSpec":
        return cls(tuple(argv), cwd)

    def describe(self) -> str:
        text = " ".join(self.argv)
        if self.cwd:
            return f"{text} (in {self.cwd})"
        return text


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """Thin subprocess wrapper; every external tool goes through one of these calls."""

    def run_captured(self, spec: CommandSpec) -> CommandResult:
        logger.debug("run captured: %s", spec.describe())
        try:
            completed = subprocess.run(
                list(spec.argv),
                cwd=spec.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            raise CommandLaunchError(spec.argv, str(exc)) from exc
        return CommandResult(completed.returncode, completed.stdout or "")

    def run_attached(self, spec: CommandSpec) -> int:
        logger.debug("run attached: %s", spec.describe())
        try:
            completed = subprocess.run(list(spec.argv), cwd=spec.cwd)
        except OSError as exc:
            raise CommandLaunchError(spec.argv, str(exc)) from exc
        return completed.returncode

    def spawn_detached(self, spec: CommandSpec) -> None:
        logger.debug("spawn detached: %s", spec.describe())
        try:
            subprocess.Popen(
                list(spec.argv),
                cwd=spec.cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise CommandLaunchError(spec.argv, str(exc)) from exc
