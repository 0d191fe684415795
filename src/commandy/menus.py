from __future__ import annotations

from commandy.models import ActionKind, MenuContext, MenuFacts, MenuItem, State
from commandy.sessions import sanitize_session_name

A = ActionKind

_STATIC_MENUS: dict[State, tuple[MenuItem, ...]] = {
    State.SESSION_ACTIONS: (
        MenuItem("Resume", A.RESUME_SESSION),
        MenuItem("Kill session", A.KILL_SESSION),
        MenuItem("Back", A.BACK),
    ),
    State.SETUP_CONFIRM: (
        MenuItem("Start working here", A.OPEN_SESSION),
        MenuItem("Launch claude-logged", A.OPEN_WITH_COMMAND),
        MenuItem("Back to menu", A.BACK_TO_MENU),
    ),
    State.TOOLS: (
        MenuItem("Quick Access", A.QUICK_ACCESS),
        MenuItem("Dev Tools", A.DEV_TOOLS),
        MenuItem("Port Authority", A.PORT_AUTHORITY),
        MenuItem("System Maintenance", A.SYSTEM_MAINTENANCE),
        MenuItem("NPM Utilities", A.NPM_UTILITIES),
        MenuItem("Back", A.BACK),
    ),
    State.DEV_TOOLS: (
        MenuItem("Kill process on port", A.KILL_PORT_HINT),
        MenuItem("Check port usage", A.CHECK_PORTS),
        MenuItem("Start ngrok", A.START_NGROK),
        MenuItem("Git status (all projects)", A.GIT_STATUS_ALL),
        MenuItem("Git pull (all projects)", A.GIT_PULL_ALL),
        MenuItem("Back", A.BACK),
    ),
    State.PORT_AUTHORITY: (
        MenuItem("Check project ports", A.PORT_AUTHORITY_NOTICE),
        MenuItem("Setup ports for project", A.PORT_AUTHORITY_NOTICE),
        MenuItem("Update project port", A.PORT_AUTHORITY_NOTICE),
        MenuItem("View all registered ports", A.VIEW_PORTS),
        MenuItem("Open dashboard", A.OPEN_DASHBOARD),
        MenuItem("Back", A.BACK),
    ),
    State.SYSTEM_MAINTENANCE: (
        MenuItem("Docker cleanup", A.DOCKER_CLEANUP),
        MenuItem("Homebrew update", A.BREW_UPDATE),
        MenuItem("Clear npm cache", A.CLEAR_NPM_CACHE),
        MenuItem("Remove node_modules (select project)", A.REMOVE_DEPENDENCY_CACHE),
        MenuItem("Clear all caches", A.CLEAR_ALL_CACHES),
        MenuItem("Back", A.BACK),
    ),
    State.NPM_UTILITIES: (
        MenuItem("npm audit", A.NPM_AUDIT),
        MenuItem("npm outdated", A.NPM_OUTDATED),
        MenuItem("npm update", A.NPM_UPDATE),
        MenuItem("npm dedupe", A.NPM_DEDUPE),
        MenuItem("npm install", A.NPM_INSTALL),
        MenuItem("Check outdated (all)", A.NPM_OUTDATED_ALL),
        MenuItem("Back", A.BACK),
    ),
    State.SETUP_PROJECT: (MenuItem("Confirm", A.CONFIRM_NAME),),
}


def items(context: MenuContext, facts: MenuFacts) -> list[MenuItem]:
    """Selectable entries for the current state, in shortcut order (1-9)."""
    state = context.state
    if state is State.ROOT:
        return _root_items(facts)
    if state is State.BROWSE_PROJECTS:
        return _project_items(facts, mark_live=True) + [MenuItem("Back to menu", A.BACK_TO_MENU)]
    if state is State.SELECT_PROJECT:
        return _project_items(facts, mark_live=False) + [MenuItem("Back", A.BACK)]
    if state is State.PROJECT_ACTIONS:
        return _project_action_items(context, facts)
    if state is State.SESSIONS:
        sessions = [MenuItem(name, A.PICK_SESSION, session=name) for name in sorted(facts.sessions)]
        return sessions + [MenuItem("Back", A.BACK)]
    if state is State.QUICK_ACCESS:
        return _quick_access_items(facts)
    if state is State.QUIT:
        return []
    return list(_STATIC_MENUS[state])


def _root_items(facts: MenuFacts) -> list[MenuItem]:
    entries: list[MenuItem] = []
    if not facts.on_canonical_host:
        entries.append(MenuItem("Connect to dev", A.CONNECT_REMOTE))
    entries.extend(
        [
            MenuItem("Browse Projects", A.BROWSE_PROJECTS),
            MenuItem("Setup New Project", A.SETUP_PROJECT),
            MenuItem("Tools", A.TOOLS),
        ]
    )
    if facts.on_canonical_host:
        entries.append(MenuItem("Sessions", A.SESSIONS))
    entries.append(MenuItem("Skip", A.QUIT))
    return entries


def _project_items(facts: MenuFacts, mark_live: bool) -> list[MenuItem]:
    return [
        MenuItem(
            project.display_name,
            A.PICK_PROJECT,
            project=project,
            live=mark_live and sanitize_session_name(project.display_name) in facts.sessions,
        )
        for project in facts.projects
    ]


def _project_action_items(context: MenuContext, facts: MenuFacts) -> list[MenuItem]:
    project = context.selected_project
    has_session = project is not None and sanitize_session_name(project.display_name) in facts.sessions
    entries = [
        MenuItem("Attach" if has_session else "Open", A.OPEN_SESSION, project=project, live=has_session),
        MenuItem("Claude-logged", A.OPEN_WITH_COMMAND, project=project),
    ]
    if has_session:
        entries.append(MenuItem("Kill session", A.KILL_SESSION, project=project))
    entries.append(MenuItem("Back", A.BACK))
    return entries


def _quick_access_items(facts: MenuFacts) -> list[MenuItem]:
    ssh_label = "SSH to MacBookPro" if facts.hostname == facts.mac_host else "SSH to dev"
    return [
        MenuItem(ssh_label, A.SSH_LOGIN),
        MenuItem("Open GitHub", A.OPEN_GITHUB),
        MenuItem("Prisma Studio (select project)", A.PRISMA_STUDIO),
        MenuItem("PostgreSQL shell", A.DATABASE_SHELL),
        MenuItem("Back", A.BACK),
    ]


def title(context: MenuContext) -> str:
    state = context.state
    if state is State.PROJECT_ACTIONS and context.selected_project:
        return f"Project: {context.selected_project.display_name}"
    if state is State.SESSION_ACTIONS and context.selected_session:
        return f"Session: {context.selected_session}"
    if state is State.SETUP_CONFIRM and context.selected_project:
        return f"Project '{context.selected_project.display_name}' created!"
    return _TITLES.get(state, "")


_TITLES = {
    State.ROOT: "What would you like to do?",
    State.BROWSE_PROJECTS: "Select a project",
    State.SESSIONS: "Tmux Sessions",
    State.SETUP_PROJECT: "Setup New Project",
    State.TOOLS: "Tools",
    State.QUICK_ACCESS: "Quick Access",
    State.DEV_TOOLS: "Dev Tools",
    State.PORT_AUTHORITY: "Port Authority",
    State.SYSTEM_MAINTENANCE: "System Maintenance",
    State.NPM_UTILITIES: "NPM Utilities",
    State.SELECT_PROJECT: "Select a project",
}
