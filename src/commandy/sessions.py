from __future__ import annotations

import logging

from commandy.process import CommandLaunchError, CommandSpec, ProcessRunner

logger = logging.getLogger(__name__)

# tmux rejects these in target names ("." splits window/pane, ":" splits session/window).
_UNSAFE_SESSION_CHARS = (".", ":")


def sanitize_session_name(name: str) -> str:
    for char in _UNSAFE_SESSION_CHARS:
        name = name.replace(char, "-")
    return name


class SessionTracker:
    """Live view of tmux sessions. Nothing is cached between calls."""

    def __init__(self, tmux_binary: str = "tmux", inside_tmux: bool = False, runner: ProcessRunner | None = None):
        self.tmux_binary = tmux_binary
        self.inside_tmux = inside_tmux
        self.runner = runner or ProcessRunner()

    def list_sessions(self) -> frozenset[str]:
        spec = self._tmux("list-sessions", "-F", "#{session_name}")
        try:
            result = self.runner.run_captured(spec)
        except CommandLaunchError as exc:
            logger.warning("tmux unavailable: %s", exc)
            return frozenset()
        if not result.ok:
            # no server running
            return frozenset()
        return frozenset(line.strip() for line in result.output.splitlines() if line.strip())

    def session_exists(self, name: str) -> bool:
        try:
            result = self.runner.run_captured(self._tmux("has-session", "-t", name))
        except CommandLaunchError as exc:
            logger.warning("tmux unavailable: %s", exc)
            return False
        return result.ok

    def kill_session(self, name: str) -> CommandSpec:
        return self._tmux("kill-session", "-t", name)

    def attach_commands(self, name: str) -> tuple[CommandSpec, ...]:
        if self.inside_tmux:
            return (self._tmux("switch-client", "-t", name),)
        return (self._tmux("attach", "-t", name),)

    def create_commands(self, name: str, path: str, command: str | None = None) -> tuple[CommandSpec, ...]:
        if self.inside_tmux:
            return (
                self._tmux(*self._new_session_args(name, path, command, detached=True)),
                self._tmux("switch-client", "-t", name),
            )
        return (self._tmux(*self._new_session_args(name, path, command, detached=False)),)

    def new_window(self, name: str, path: str, command: str | None = None) -> CommandSpec:
        args = ["new-window", "-t", name, "-c", path]
        if command:
            args.append(command)
        return self._tmux(*args)

    def _new_session_args(self, name: str, path: str, command: str | None, detached: bool) -> list[str]:
        args = ["new-session"]
        if detached:
            args.append("-d")
        args.extend(["-s", name, "-c", path])
        if command:
            args.append(command)
        return args

    def _tmux(self, *args: str) -> CommandSpec:
        return CommandSpec((self.tmux_binary, *args))
