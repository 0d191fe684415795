from __future__ import annotations

import os

import pytest

from commandy import menus
from commandy.config import AppConfig
from commandy.models import (
    ActionFamily,
    ActionKind,
    MenuContext,
    MenuFacts,
    MenuItem,
    OutcomeKind,
    PendingAction,
    Project,
    State,
)
from commandy.process import CommandSpec
from commandy.state_machine import (
    PARENTS,
    SELECT_PARENTS,
    AttachSession,
    CreateProject,
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
    UnmappedAction,
    go_back,
    parent_of,
    submit_project_name,
    transition,
)

CONFIG = AppConfig(hostname="laptop", projects_dir="/p")
API = Project("api.v2", "/p/api.v2")


def _facts() -> MenuFacts:
    return MenuFacts(
        hostname="laptop",
        canonical_host="dev.lan",
        sessions=frozenset({"api-v2"}),
        projects=(API,),
    )


def _pick(context: MenuContext, label: str, facts: MenuFacts | None = None):
    for item in menus.items(context, facts or _facts()):
        if item.label == label:
            return transition(context, item, CONFIG)
    raise AssertionError(f"{label} not in {context.state}")


def _contexts() -> list[MenuContext]:
    contexts = []
    for state in State:
        if state is State.SELECT_PROJECT:
            contexts.extend(MenuContext(state=state, pending_action=pending) for pending in PendingAction)
        else:
            contexts.append(MenuContext(state=state, selected_project=API, selected_session="api-v2"))
    return contexts


def test_back_reaches_root_within_four_steps() -> None:
    for context in _contexts():
        if context.state is State.QUIT:
            continue
        for _ in range(4):
            context = go_back(context)
        assert context.state is State.ROOT


def test_back_from_root_stays_at_root() -> None:
    assert go_back(MenuContext(cursor=3)) == MenuContext()


def test_select_project_parent_follows_pending_family() -> None:
    assert parent_of(MenuContext(state=State.SELECT_PROJECT, pending_action=PendingAction.PRISMA_STUDIO)) is (
        State.QUICK_ACCESS
    )
    assert parent_of(
        MenuContext(state=State.SELECT_PROJECT, pending_action=PendingAction.REMOVE_DEPENDENCY_CACHE)
    ) is State.SYSTEM_MAINTENANCE
    assert parent_of(MenuContext(state=State.SELECT_PROJECT, pending_action=PendingAction.NPM_AUDIT)) is (
        State.NPM_UTILITIES
    )


def test_parent_table_is_acyclic() -> None:
    for state in PARENTS:
        seen = {state}
        current = state
        while current is not State.ROOT:
            current = PARENTS[current]
            assert current not in seen
            seen.add(current)


def test_every_offered_item_has_a_transition() -> None:
    for context in _contexts():
        for item in menus.items(context, _facts()):
            result = transition(context, item, CONFIG)
            assert result.context is not None


def test_item_from_another_menu_is_rejected() -> None:
    with pytest.raises(UnmappedAction):
        transition(MenuContext(), MenuItem("npm audit", ActionKind.NPM_AUDIT), CONFIG)


def test_entering_a_submenu_resets_cursor() -> None:
    result = transition(MenuContext(cursor=3), MenuItem("Tools", ActionKind.TOOLS), CONFIG)
    assert result.context == MenuContext(state=State.TOOLS, cursor=0)
    assert result.effect is None


def test_skip_quits_with_farewell() -> None:
    result = _pick(MenuContext(), "Skip")
    assert result.context.state is State.QUIT
    assert result.effect == Quit("Have a great session!")


def test_connect_to_dev_hands_off_ssh() -> None:
    result = _pick(MenuContext(), "Connect to dev")
    assert result.effect == Foreground(CommandSpec.of("ssh", "dev"))


def test_browse_then_open_existing_session() -> None:
    browse = _pick(MenuContext(), "Browse Projects").context
    actions = _pick(browse, "api.v2").context
    assert actions.state is State.PROJECT_ACTIONS
    assert actions.selected_project == API

    result = _pick(actions, "Attach")
    assert result.effect == OpenSession("api-v2", "/p/api.v2")


def test_claude_logged_opens_with_command() -> None:
    actions = MenuContext(state=State.PROJECT_ACTIONS, selected_project=API)
    result = _pick(actions, "Claude-logged")
    assert result.effect == OpenSession("api-v2", "/p/api.v2", "claude-logged")


def test_kill_from_project_actions_returns_to_browse() -> None:
    actions = MenuContext(state=State.PROJECT_ACTIONS, selected_project=API, cursor=2)
    result = _pick(actions, "Kill session")
    assert result.effect == KillSession("api-v2")
    assert result.context.state is State.BROWSE_PROJECTS
    assert result.fallback == actions


def test_session_resume_and_kill() -> None:
    sessions = MenuContext(state=State.SESSIONS)
    facts = MenuFacts(hostname="dev.lan", canonical_host="dev.lan", sessions=frozenset({"work"}))
    picked = _pick(sessions, "work", facts).context
    assert picked.state is State.SESSION_ACTIONS
    assert picked.selected_session == "work"

    assert _pick(picked, "Resume").effect == AttachSession("work")
    killed = _pick(picked, "Kill session")
    assert killed.effect == KillSession("work")
    assert killed.context.state is State.SESSIONS


def test_npm_audit_runs_in_selected_project() -> None:
    npm = MenuContext(state=State.NPM_UTILITIES)
    select = _pick(npm, "npm audit").context
    assert select.state is State.SELECT_PROJECT
    assert select.pending_action is PendingAction.NPM_AUDIT

    result = _pick(select, "api.v2")
    assert result.effect == RunCommand(CommandSpec.of("npm", "audit", cwd="/p/api.v2"))
    assert result.context == select


def test_remove_dependency_cache_goes_back_to_maintenance() -> None:
    maintenance = MenuContext(state=State.SYSTEM_MAINTENANCE)
    select = _pick(maintenance, "Remove node_modules (select project)").context
    result = _pick(select, "api.v2")

    assert result.effect == RemoveDependencyCache(API)
    assert result.context.state is State.SYSTEM_MAINTENANCE
    assert result.fallback == select


def test_prisma_studio_hands_off_in_project() -> None:
    select = MenuContext(state=State.SELECT_PROJECT, pending_action=PendingAction.PRISMA_STUDIO)
    result = _pick(select, "api.v2")
    assert result.effect == Foreground(CommandSpec.of("npx", "prisma", "studio", cwd="/p/api.v2"))


def test_back_from_select_project_returns_to_origin_menu() -> None:
    select = MenuContext(state=State.SELECT_PROJECT, pending_action=PendingAction.PRISMA_STUDIO)
    assert _pick(select, "Back").context.state is State.QUICK_ACCESS


def test_tool_tasks_run_in_background() -> None:
    dev_tools = MenuContext(state=State.DEV_TOOLS)
    assert _pick(dev_tools, "Check port usage").effect == RunTask(TaskKind.CHECK_PORTS)
    assert _pick(dev_tools, "Git pull (all projects)").effect == RunTask(TaskKind.GIT_PULL_ALL)
    ports = MenuContext(state=State.PORT_AUTHORITY)
    assert _pick(ports, "View all registered ports").effect == RunTask(TaskKind.FETCH_PORTS)


def test_kill_port_hint_is_a_notice() -> None:
    result = _pick(MenuContext(state=State.DEV_TOOLS), "Kill process on port")
    assert isinstance(result.effect, Notice)
    assert result.effect.outcome.text == "Use: lsof -ti:PORT | xargs kill -9"


def test_ngrok_uses_configured_port() -> None:
    result = _pick(MenuContext(state=State.DEV_TOOLS), "Start ngrok")
    assert result.effect == Foreground(CommandSpec.of("ngrok", "http", "3012"))


def test_open_github_launches_detached() -> None:
    result = _pick(MenuContext(state=State.QUICK_ACCESS), "Open GitHub")
    assert result.effect == Launch(CommandSpec.of("open", "https://github.com"), "Opened GitHub in browser")


def test_ssh_target_from_mac_host() -> None:
    config = AppConfig(hostname="mac")
    context = MenuContext(state=State.QUICK_ACCESS)
    facts = MenuFacts(hostname="mac", canonical_host="dev.lan")
    item = menus.items(context, facts)[0]
    assert transition(context, item, config).effect == Foreground(CommandSpec.of("ssh", "MacBookPro.local"))


def test_empty_project_name_is_rejected() -> None:
    setup = MenuContext(state=State.SETUP_PROJECT, typed_text="   ")
    result = submit_project_name(setup, setup.typed_text, CONFIG)
    assert result.context == setup
    assert isinstance(result.effect, Notice)
    assert result.effect.outcome.kind is OutcomeKind.ERROR
    assert result.effect.outcome.text == "Project name cannot be empty"


def test_project_name_with_separator_is_rejected() -> None:
    setup = MenuContext(state=State.SETUP_PROJECT)
    result = submit_project_name(setup, "../etc", CONFIG)
    assert result.context == setup
    assert result.effect.outcome.kind is OutcomeKind.ERROR


def test_confirm_name_creates_project() -> None:
    setup = MenuContext(state=State.SETUP_PROJECT, typed_text="shop")
    result = _pick(setup, "Confirm")

    project = Project("shop", os.path.join("/p", "shop"))
    assert result.effect == CreateProject(project)
    assert result.context.state is State.SETUP_CONFIRM
    assert result.context.selected_project == project
    assert result.context.typed_text == ""
    assert result.fallback == setup


def test_setup_confirm_start_working_opens_session() -> None:
    confirm = MenuContext(state=State.SETUP_CONFIRM, selected_project=Project("shop", "/p/shop"))
    assert _pick(confirm, "Start working here").effect == OpenSession("shop", "/p/shop")
    assert _pick(confirm, "Back to menu").context.state is State.ROOT


def test_pending_actions_belong_to_a_family_with_a_parent() -> None:
    assert PendingAction.PRISMA_STUDIO.family is ActionFamily.QUICK_ACCESS
    assert PendingAction.REMOVE_DEPENDENCY_CACHE.family is ActionFamily.MAINTENANCE
    assert PendingAction.NPM_DEDUPE.family is ActionFamily.NPM
    assert PendingAction.NPM_DEDUPE.npm_verb == "dedupe"
    assert PendingAction.PRISMA_STUDIO.npm_verb is None
    assert set(SELECT_PARENTS) == set(ActionFamily)
