"""Menu transitions.

``transition`` maps the current context and the selected item to the next
context plus an optional effect for the dispatcher. It never touches the
outside world; the event loop applies effects and feeds results back.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from commandy.config import AppConfig
from commandy.models import (
    ActionFamily,
    ActionKind,
    CommandOutcome,
    MenuContext,
    MenuItem,
    PendingAction,
    Project,
    State,
)
from commandy.process import CommandSpec
from commandy.sessions import sanitize_session_name

A = ActionKind


class UnmappedAction(Exception):
    def __init__(self, state: State, action: ActionKind) -> None:
        super().__init__(f"no transition for {action.value} in {state.value}")
        self.state = state
        self.action = action


class TaskKind(Enum):
    DOCKER_CLEANUP = "docker-cleanup"
    BREW_UPDATE = "brew-update"
    CLEAR_ALL_CACHES = "clear-all-caches"
    GIT_STATUS_ALL = "git-status-all"
    GIT_PULL_ALL = "git-pull-all"
    NPM_OUTDATED_ALL = "npm-outdated-all"
    CHECK_PORTS = "check-ports"
    FETCH_PORTS = "fetch-ports"


@dataclass(frozen=True)
class Quit:
    farewell: str = ""


@dataclass(frozen=True)
class Foreground:
    command: CommandSpec


@dataclass(frozen=True)
class OpenSession:
    name: str
    path: str
    command: Optional[str] = None


@dataclass(frozen=True)
class AttachSession:
    name: str


@dataclass(frozen=True)
class KillSession:
    name: str


@dataclass(frozen=True)
class RunCommand:
    command: CommandSpec


@dataclass(frozen=True)
class RunTask:
    task: TaskKind


@dataclass(frozen=True)
class Launch:
    command: CommandSpec
    message: str


@dataclass(frozen=True)
class RemoveDependencyCache:
    project: Project


@dataclass(frozen=True)
class CreateProject:
    project: Project


@dataclass(frozen=True)
class Notice:
    outcome: CommandOutcome


Effect = Union[
    Quit,
    Foreground,
    OpenSession,
    AttachSession,
    KillSession,
    RunCommand,
    RunTask,
    Launch,
    RemoveDependencyCache,
    CreateProject,
    Notice,
]


@dataclass(frozen=True)
class Transition:
    context: MenuContext
    effect: Optional[Effect] = None
    # state kept when the effect fails (None: the effect cannot move the menu)
    fallback: Optional[MenuContext] = None


PARENTS: dict[State, State] = {
    State.BROWSE_PROJECTS: State.ROOT,
    State.SETUP_PROJECT: State.ROOT,
    State.TOOLS: State.ROOT,
    State.SESSIONS: State.ROOT,
    State.PROJECT_ACTIONS: State.BROWSE_PROJECTS,
    State.SETUP_CONFIRM: State.SETUP_PROJECT,
    State.SESSION_ACTIONS: State.SESSIONS,
    State.QUICK_ACCESS: State.TOOLS,
    State.DEV_TOOLS: State.TOOLS,
    State.PORT_AUTHORITY: State.TOOLS,
    State.SYSTEM_MAINTENANCE: State.TOOLS,
    State.NPM_UTILITIES: State.TOOLS,
}

SELECT_PARENTS: dict[ActionFamily, State] = {
    ActionFamily.QUICK_ACCESS: State.QUICK_ACCESS,
    ActionFamily.MAINTENANCE: State.SYSTEM_MAINTENANCE,
    ActionFamily.NPM: State.NPM_UTILITIES,
}

_SUBMENUS = {
    A.BROWSE_PROJECTS: State.BROWSE_PROJECTS,
    A.SETUP_PROJECT: State.SETUP_PROJECT,
    A.TOOLS: State.TOOLS,
    A.SESSIONS: State.SESSIONS,
    A.QUICK_ACCESS: State.QUICK_ACCESS,
    A.DEV_TOOLS: State.DEV_TOOLS,
    A.PORT_AUTHORITY: State.PORT_AUTHORITY,
    A.SYSTEM_MAINTENANCE: State.SYSTEM_MAINTENANCE,
    A.NPM_UTILITIES: State.NPM_UTILITIES,
}

_PENDING = {
    A.PRISMA_STUDIO: PendingAction.PRISMA_STUDIO,
    A.REMOVE_DEPENDENCY_CACHE: PendingAction.REMOVE_DEPENDENCY_CACHE,
    A.NPM_AUDIT: PendingAction.NPM_AUDIT,
    A.NPM_OUTDATED: PendingAction.NPM_OUTDATED,
    A.NPM_UPDATE: PendingAction.NPM_UPDATE,
    A.NPM_DEDUPE: PendingAction.NPM_DEDUPE,
    A.NPM_INSTALL: PendingAction.NPM_INSTALL,
}

_TASKS = {
    A.CHECK_PORTS: TaskKind.CHECK_PORTS,
    A.GIT_STATUS_ALL: TaskKind.GIT_STATUS_ALL,
    A.GIT_PULL_ALL: TaskKind.GIT_PULL_ALL,
    A.VIEW_PORTS: TaskKind.FETCH_PORTS,
    A.DOCKER_CLEANUP: TaskKind.DOCKER_CLEANUP,
    A.BREW_UPDATE: TaskKind.BREW_UPDATE,
    A.CLEAR_ALL_CACHES: TaskKind.CLEAR_ALL_CACHES,
    A.NPM_OUTDATED_ALL: TaskKind.NPM_OUTDATED_ALL,
}

# actions offered in more than one menu; anything else must come from its own state
_ANY_STATE = frozenset({A.BACK, A.BACK_TO_MENU})

_ALLOWED: dict[State, frozenset[ActionKind]] = {
    State.ROOT: frozenset({A.CONNECT_REMOTE, A.BROWSE_PROJECTS, A.SETUP_PROJECT, A.TOOLS, A.SESSIONS, A.QUIT}),
    State.BROWSE_PROJECTS: frozenset({A.PICK_PROJECT}),
    State.SELECT_PROJECT: frozenset({A.PICK_PROJECT}),
    State.PROJECT_ACTIONS: frozenset({A.OPEN_SESSION, A.OPEN_WITH_COMMAND, A.KILL_SESSION}),
    State.SETUP_PROJECT: frozenset({A.CONFIRM_NAME}),
    State.SETUP_CONFIRM: frozenset({A.OPEN_SESSION, A.OPEN_WITH_COMMAND}),
    State.SESSIONS: frozenset({A.PICK_SESSION}),
    State.SESSION_ACTIONS: frozenset({A.RESUME_SESSION, A.KILL_SESSION}),
    State.TOOLS: frozenset({A.QUICK_ACCESS, A.DEV_TOOLS, A.PORT_AUTHORITY, A.SYSTEM_MAINTENANCE, A.NPM_UTILITIES}),
    State.QUICK_ACCESS: frozenset({A.SSH_LOGIN, A.OPEN_GITHUB, A.PRISMA_STUDIO, A.DATABASE_SHELL}),
    State.DEV_TOOLS: frozenset({A.KILL_PORT_HINT, A.CHECK_PORTS, A.START_NGROK, A.GIT_STATUS_ALL, A.GIT_PULL_ALL}),
    State.PORT_AUTHORITY: frozenset({A.PORT_AUTHORITY_NOTICE, A.VIEW_PORTS, A.OPEN_DASHBOARD}),
    State.SYSTEM_MAINTENANCE: frozenset(
        {A.DOCKER_CLEANUP, A.BREW_UPDATE, A.CLEAR_NPM_CACHE, A.REMOVE_DEPENDENCY_CACHE, A.CLEAR_ALL_CACHES}
    ),
    State.NPM_UTILITIES: frozenset(
        {A.NPM_AUDIT, A.NPM_OUTDATED, A.NPM_UPDATE, A.NPM_DEDUPE, A.NPM_INSTALL, A.NPM_OUTDATED_ALL}
    ),
    State.QUIT: frozenset(),
}


def parent_of(context: MenuContext) -> State:
    if context.state is State.SELECT_PROJECT:
        family = context.pending_action.family if context.pending_action else ActionFamily.NPM
        return SELECT_PARENTS[family]
    return PARENTS.get(context.state, State.ROOT)


def enter(context: MenuContext, state: State, **changes) -> MenuContext:
    return replace(context, state=state, cursor=0, **changes)


def go_back(context: MenuContext) -> MenuContext:
    if context.state is State.ROOT:
        return replace(context, cursor=0)
    return enter(context, parent_of(context), typed_text="")


def transition(context: MenuContext, item: MenuItem, config: AppConfig) -> Transition:
    state = context.state
    action = item.action
    if action not in _ANY_STATE and action not in _ALLOWED.get(state, frozenset()):
        raise UnmappedAction(state, action)

    if action is A.BACK:
        return Transition(go_back(context))
    if action is A.BACK_TO_MENU:
        return Transition(enter(context, State.ROOT, typed_text=""))
    if action in _SUBMENUS:
        return Transition(enter(context, _SUBMENUS[action], typed_text=""))
    if action in _PENDING:
        return Transition(enter(context, State.SELECT_PROJECT, pending_action=_PENDING[action]))
    if action in _TASKS:
        return Transition(context, RunTask(_TASKS[action]))

    if action is A.QUIT:
        return Transition(enter(context, State.QUIT), Quit("Have a great session!"))
    if action is A.CONNECT_REMOTE:
        return Transition(context, Foreground(CommandSpec.of("ssh", config.remote_login_target)))
    if action is A.PICK_PROJECT:
        return _pick_project(context, item)
    if action is A.PICK_SESSION:
        return Transition(enter(context, State.SESSION_ACTIONS, selected_session=item.session))
    if action in (A.OPEN_SESSION, A.OPEN_WITH_COMMAND):
        return _open_session(context, action, config)
    if action is A.RESUME_SESSION:
        return Transition(context, AttachSession(context.selected_session or ""))
    if action is A.KILL_SESSION:
        return _kill_session(context)
    if action is A.CONFIRM_NAME:
        return submit_project_name(context, context.typed_text, config)
    return _tool_action(context, action, config)


def _pick_project(context: MenuContext, item: MenuItem) -> Transition:
    project = item.project
    if project is None:
        return Transition(context)
    if context.state is State.BROWSE_PROJECTS:
        return Transition(enter(context, State.PROJECT_ACTIONS, selected_project=project))
    pending = context.pending_action
    if pending is PendingAction.PRISMA_STUDIO:
        return Transition(context, Foreground(CommandSpec.of("npx", "prisma", "studio", cwd=project.path)))
    if pending is PendingAction.REMOVE_DEPENDENCY_CACHE:
        return Transition(go_back(context), RemoveDependencyCache(project), fallback=context)
    verb = pending.npm_verb if pending else None
    if verb is None:
        return Transition(context)
    return Transition(context, RunCommand(CommandSpec.of("npm", verb, cwd=project.path)))


def _open_session(context: MenuContext, action: ActionKind, config: AppConfig) -> Transition:
    project = context.selected_project
    if project is None:
        return Transition(go_back(context))
    command = config.session_command if action is A.OPEN_WITH_COMMAND else None
    return Transition(context, OpenSession(sanitize_session_name(project.display_name), project.path, command))


def _kill_session(context: MenuContext) -> Transition:
    if context.state is State.SESSION_ACTIONS:
        return Transition(go_back(context), KillSession(context.selected_session or ""), fallback=context)
    project = context.selected_project
    if project is None:
        return Transition(go_back(context))
    return Transition(go_back(context), KillSession(sanitize_session_name(project.display_name)), fallback=context)


def _tool_action(context: MenuContext, action: ActionKind, config: AppConfig) -> Transition:
    if action is A.SSH_LOGIN:
        target = config.mac_login_target if config.hostname == config.mac_host else config.remote_login_target
        return Transition(context, Foreground(CommandSpec.of("ssh", target)))
    if action is A.OPEN_GITHUB:
        return Transition(context, Launch(CommandSpec.of(config.url_opener, config.github_url), "Opened GitHub in browser"))
    if action is A.DATABASE_SHELL:
        return Transition(context, Foreground(CommandSpec.of("psql", config.database_url)))
    if action is A.KILL_PORT_HINT:
        return Transition(context, Notice(CommandOutcome.info("Use: lsof -ti:PORT | xargs kill -9")))
    if action is A.START_NGROK:
        return Transition(context, Foreground(CommandSpec.of("ngrok", "http", str(config.ngrok_port))))
    if action is A.PORT_AUTHORITY_NOTICE:
        return Transition(context, Notice(CommandOutcome.info("Feature available via Port Authority dashboard")))
    if action is A.OPEN_DASHBOARD:
        return Transition(
            context,
            Launch(CommandSpec.of(config.url_opener, config.port_authority_dashboard), "Opened Port Authority dashboard"),
        )
    if action is A.CLEAR_NPM_CACHE:
        return Transition(context, RunCommand(CommandSpec.of("npm", "cache", "clean", "--force")))
    raise UnmappedAction(context.state, action)


def submit_project_name(context: MenuContext, text: str, config: AppConfig) -> Transition:
    name = text.strip()
    if not name:
        return Transition(context, Notice(CommandOutcome.error("Project name cannot be empty")))
    if "/" in name or name in {".", ".."}:
        return Transition(context, Notice(CommandOutcome.error(f"Invalid project name: {name}")))
    project = Project(name, os.path.join(config.projects_dir, name))
    return Transition(
        enter(context, State.SETUP_CONFIRM, selected_project=project, typed_text=""),
        CreateProject(project),
        fallback=context,
    )
