from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class State(Enum):
    ROOT = "root"
    BROWSE_PROJECTS = "browse-projects"
    PROJECT_ACTIONS = "project-actions"
    SETUP_PROJECT = "setup-project"
    SETUP_CONFIRM = "setup-confirm"
    TOOLS = "tools"
    QUICK_ACCESS = "quick-access"
    DEV_TOOLS = "dev-tools"
    PORT_AUTHORITY = "port-authority"
    SYSTEM_MAINTENANCE = "system-maintenance"
    NPM_UTILITIES = "npm-utilities"
    SESSIONS = "sessions"
    SESSION_ACTIONS = "session-actions"
    SELECT_PROJECT = "select-project"
    QUIT = "quit"


class ActionFamily(Enum):
    QUICK_ACCESS = "quick-access"
    MAINTENANCE = "maintenance"
    NPM = "npm"


class PendingAction(Enum):
    PRISMA_STUDIO = "prisma-studio"
    REMOVE_DEPENDENCY_CACHE = "remove-dependency-cache"
    NPM_AUDIT = "npm-audit"
    NPM_OUTDATED = "npm-outdated"
    NPM_UPDATE = "npm-update"
    NPM_DEDUPE = "npm-dedupe"
    NPM_INSTALL = "npm-install"

    @property
    def family(self) -> ActionFamily:
        if self is PendingAction.PRISMA_STUDIO:
            return ActionFamily.QUICK_ACCESS
        if self is PendingAction.REMOVE_DEPENDENCY_CACHE:
            return ActionFamily.MAINTENANCE
        return ActionFamily.NPM

    @property
    def npm_verb(self) -> str | None:
        if self.family is not ActionFamily.NPM:
            return None
        return self.value.split("-", 1)[1]


class OutcomeKind(Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class CommandOutcome:
    text: str
    kind: OutcomeKind = OutcomeKind.INFO

    @classmethod
    def success(cls, text: str) -> "CommandOutcome":
        return cls(text, OutcomeKind.SUCCESS)

    @classmethod
    def error(cls, text: str) -> "CommandOutcome":
        return cls(text, OutcomeKind.ERROR)

    @classmethod
    def info(cls, text: str) -> "CommandOutcome":
        return cls(text, OutcomeKind.INFO)


class ActionKind(Enum):
    # root
    CONNECT_REMOTE = "connect-remote"
    BROWSE_PROJECTS = "browse-projects"
    SETUP_PROJECT = "setup-project"
    TOOLS = "tools"
    SESSIONS = "sessions"
    QUIT = "quit"
    # list entries
    PICK_PROJECT = "pick-project"
    PICK_SESSION = "pick-session"
    # project / session actions
    OPEN_SESSION = "open-session"
    OPEN_WITH_COMMAND = "open-with-command"
    KILL_SESSION = "kill-session"
    RESUME_SESSION = "resume-session"
    CONFIRM_NAME = "confirm-name"
    # tools menu
    QUICK_ACCESS = "quick-access"
    DEV_TOOLS = "dev-tools"
    PORT_AUTHORITY = "port-authority"
    SYSTEM_MAINTENANCE = "system-maintenance"
    NPM_UTILITIES = "npm-utilities"
    # quick access
    SSH_LOGIN = "ssh-login"
    OPEN_GITHUB = "open-github"
    PRISMA_STUDIO = "prisma-studio"
    DATABASE_SHELL = "database-shell"
    # dev tools
    KILL_PORT_HINT = "kill-port-hint"
    CHECK_PORTS = "check-ports"
    START_NGROK = "start-ngrok"
    GIT_STATUS_ALL = "git-status-all"
    GIT_PULL_ALL = "git-pull-all"
    # port authority
    PORT_AUTHORITY_NOTICE = "port-authority-notice"
    VIEW_PORTS = "view-ports"
    OPEN_DASHBOARD = "open-dashboard"
    # maintenance
    DOCKER_CLEANUP = "docker-cleanup"
    BREW_UPDATE = "brew-update"
    CLEAR_NPM_CACHE = "clear-npm-cache"
    REMOVE_DEPENDENCY_CACHE = "remove-dependency-cache"
    CLEAR_ALL_CACHES = "clear-all-caches"
    # npm utilities
    NPM_AUDIT = "npm-audit"
    NPM_OUTDATED = "npm-outdated"
    NPM_UPDATE = "npm-update"
    NPM_DEDUPE = "npm-dedupe"
    NPM_INSTALL = "npm-install"
    NPM_OUTDATED_ALL = "npm-outdated-all"
    # navigation
    BACK = "back"
    BACK_TO_MENU = "back-to-menu"


@dataclass(frozen=True)
class Project:
    display_name: str
    path: str


@dataclass(frozen=True)
class MenuItem:
    label: str
    action: ActionKind
    project: Optional[Project] = None
    session: Optional[str] = None
    live: bool = False


@dataclass(frozen=True)
class NavigationContext:
    cursor: int = 0
    item_count: int = 0


@dataclass(frozen=True)
class MenuFacts:
    hostname: str
    canonical_host: str
    mac_host: str = "mac"
    sessions: frozenset[str] = frozenset()
    projects: tuple[Project, ...] = ()

    @property
    def on_canonical_host(self) -> bool:
        return self.hostname == self.canonical_host


@dataclass(frozen=True)
class MenuContext:
    state: State = State.ROOT
    cursor: int = 0
    selected_project: Optional[Project] = None
    selected_session: Optional[str] = None
    pending_action: Optional[PendingAction] = None
    typed_text: str = ""
