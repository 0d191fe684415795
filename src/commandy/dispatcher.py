from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path

from commandy.catalog import ProjectCatalog
from commandy.config import AppConfig
from commandy.models import CommandOutcome
from commandy.process import CommandLaunchError, CommandSpec, ProcessRunner
from commandy.services import maintenance
from commandy.services.port_authority import PortAuthorityClient, PortAuthorityError
from commandy.sessions import SessionTracker
from commandy.state_machine import (
    AttachSession,
    CreateProject,
    Effect,
    Foreground,
    KillSession,
    Launch,
    Notice,
    OpenSession,
    Quit,
    RemoveDependencyCache,
    RunCommand,
    RunTask,
    TaskKind,
)

logger = logging.getLogger(__name__)


class DispatchMode(Enum):
    FOREGROUND = "foreground"
    BACKGROUND = "background"
    IMMEDIATE = "immediate"


def mode_for(effect: Effect) -> DispatchMode:
    if isinstance(effect, (Foreground, OpenSession, AttachSession)):
        return DispatchMode.FOREGROUND
    if isinstance(effect, (RunCommand, RunTask)):
        return DispatchMode.BACKGROUND
    return DispatchMode.IMMEDIATE


def failure_outcome(result_code: int, output: str) -> CommandOutcome:
    text = f"Error: exit status {result_code}"
    if output.strip():
        text = f"{text}\n{output.rstrip()}"
    return CommandOutcome.error(text)


class Dispatcher:
    def __init__(
        self,
        config: AppConfig,
        runner: ProcessRunner | None = None,
        tracker: SessionTracker | None = None,
        catalog: ProjectCatalog | None = None,
        port_authority: PortAuthorityClient | None = None,
    ):
        self.config = config
        self.runner = runner or ProcessRunner()
        self.tracker = tracker or SessionTracker(config.tmux_binary, config.inside_tmux, self.runner)
        self.catalog = catalog or ProjectCatalog(config.projects_dir, config.manifest_file)
        self.port_authority = port_authority or PortAuthorityClient(
            config.port_authority_api, timeout=config.port_authority_timeout
        )

    # foreground

    def foreground_commands(self, effect: Effect) -> tuple[CommandSpec, ...]:
        """Resolve a handoff effect into the commands to run, checking tmux live."""
        if isinstance(effect, Foreground):
            return (effect.command,)
        if isinstance(effect, AttachSession):
            return self.tracker.attach_commands(effect.name)
        if isinstance(effect, OpenSession):
            if self.tracker.session_exists(effect.name):
                prelude: tuple[CommandSpec, ...] = ()
                if effect.command:
                    prelude = (self.tracker.new_window(effect.name, effect.path, effect.command),)
                return prelude + self.tracker.attach_commands(effect.name)
            return self.tracker.create_commands(effect.name, effect.path, effect.command)
        raise TypeError(f"not a foreground effect: {effect!r}")

    def needs_terminal(self, effect: Effect) -> bool:
        # inside tmux the client is switched instead of attaching in this terminal
        if isinstance(effect, (OpenSession, AttachSession)):
            return not self.config.inside_tmux
        return True

    def run_foreground(self, commands: tuple[CommandSpec, ...]) -> CommandOutcome | None:
        """Run the handoff commands in order; ``None`` means they ran and the app should exit."""
        for spec in commands:
            try:
                code = self.runner.run_attached(spec)
            except CommandLaunchError as exc:
                logger.warning("foreground launch failed: %s", exc)
                return CommandOutcome.error(f"Error: {exc}")
            logger.info("%s exited with %s", spec.describe(), code)
        return None

    # background

    def run_background(self, effect: Effect) -> CommandOutcome:
        try:
            if isinstance(effect, RunCommand):
                return self._run_command(effect.command)
            if isinstance(effect, RunTask):
                return self._run_task(effect.task)
        except CommandLaunchError as exc:
            logger.warning("background launch failed: %s", exc)
            return CommandOutcome.error(f"Error: {exc}")
        raise TypeError(f"not a background effect: {effect!r}")

    def _run_command(self, spec: CommandSpec) -> CommandOutcome:
        result = self.runner.run_captured(spec)
        if not result.ok:
            return failure_outcome(result.returncode, result.output)
        return CommandOutcome.success(result.output.rstrip() or f"Done: {spec.describe()}")

    def _run_task(self, task: TaskKind) -> CommandOutcome:
        if task is TaskKind.DOCKER_CLEANUP:
            return maintenance.docker_cleanup(self.runner)
        if task is TaskKind.BREW_UPDATE:
            return maintenance.brew_update(self.runner)
        if task is TaskKind.CLEAR_ALL_CACHES:
            return maintenance.clear_all_caches(self.runner, self.config.projects_dir)
        if task is TaskKind.GIT_STATUS_ALL:
            return maintenance.git_status_all(self.runner, self.catalog)
        if task is TaskKind.GIT_PULL_ALL:
            return maintenance.git_pull_all(self.runner, self.catalog)
        if task is TaskKind.NPM_OUTDATED_ALL:
            return maintenance.npm_outdated_all(self.runner, self.catalog)
        if task is TaskKind.CHECK_PORTS:
            return maintenance.check_ports(self.runner, self.config.watched_ports)
        try:
            return CommandOutcome.success(self.port_authority.registered_ports_text())
        except PortAuthorityError as exc:
            return CommandOutcome.error(f"Error: {exc}")

    # immediate

    def run_immediate(self, effect: Effect) -> CommandOutcome | None:
        if isinstance(effect, Notice):
            return effect.outcome
        if isinstance(effect, Quit):
            return None
        if isinstance(effect, KillSession):
            return self.kill_session(effect.name)
        if isinstance(effect, RemoveDependencyCache):
            return self.remove_dependency_cache(effect.project.display_name, effect.project.path)
        if isinstance(effect, CreateProject):
            return self.create_project(effect.project.display_name, effect.project.path)
        if isinstance(effect, Launch):
            try:
                self.runner.spawn_detached(effect.command)
            except CommandLaunchError as exc:
                return CommandOutcome.error(f"Error: {exc}")
            return CommandOutcome.success(effect.message)
        raise TypeError(f"not an immediate effect: {effect!r}")

    def kill_session(self, name: str) -> CommandOutcome:
        try:
            result = self.runner.run_captured(self.tracker.kill_session(name))
        except CommandLaunchError as exc:
            return CommandOutcome.error(f"Error: {exc}")
        if not result.ok:
            return failure_outcome(result.returncode, result.output)
        return CommandOutcome.success(f"Killed tmux session '{name}'")

    def remove_dependency_cache(self, name: str, path: str) -> CommandOutcome:
        cache_dir = self.config.dependency_cache_dir
        target = Path(path) / cache_dir
        if not target.exists():
            return CommandOutcome.info(f"No {cache_dir} in {name}")
        try:
            shutil.rmtree(target)
        except OSError as exc:
            return CommandOutcome.error(f"Error removing {cache_dir} from {name}: {exc}")
        return CommandOutcome.success(f"Removed {cache_dir} from {name}")

    def create_project(self, name: str, path: str) -> CommandOutcome:
        target = Path(path)
        if target.exists():
            return CommandOutcome.error("Project already exists!")
        try:
            target.mkdir(parents=True)
        except OSError as exc:
            return CommandOutcome.error(f"Error creating directory: {exc}")
        try:
            result = self.runner.run_captured(CommandSpec.of("git", "init", cwd=str(target)))
        except CommandLaunchError as exc:
            return CommandOutcome.error(f"Error initializing git: {exc}")
        if not result.ok:
            return CommandOutcome.error(f"Error initializing git: {result.output.strip()}")
        return CommandOutcome.success(f"Project '{name}' created at {target}")
