from __future__ import annotations

from commandy.process import CommandResult, CommandSpec
from commandy.sessions import SessionTracker, sanitize_session_name


def test_sanitize_replaces_dots_and_colons() -> None:
    assert sanitize_session_name("app.v2:beta") == "app-v2-beta"
    assert sanitize_session_name("plain") == "plain"


def test_sanitize_is_idempotent() -> None:
    for name in ("a.b", "x:y.z", "mono/api.v1", "clean"):
        once = sanitize_session_name(name)
        assert sanitize_session_name(once) == once
        assert "." not in once and ":" not in once


def test_list_sessions_parses_names(runner) -> None:
    runner.handler = lambda spec: CommandResult(0, "alpha\nbeta\n\n")
    tracker = SessionTracker(runner=runner)

    assert tracker.list_sessions() == frozenset({"alpha", "beta"})
    assert runner.captured[0].argv == ("tmux", "list-sessions", "-F", "#{session_name}")


def test_list_sessions_empty_when_no_server(runner) -> None:
    runner.handler = lambda spec: CommandResult(1, "no server running on /tmp/tmux-0/default")
    assert SessionTracker(runner=runner).list_sessions() == frozenset()


def test_list_sessions_empty_when_tmux_missing(runner) -> None:
    runner.missing.add("tmux")
    assert SessionTracker(runner=runner).list_sessions() == frozenset()


def test_session_exists_uses_has_session(runner) -> None:
    runner.handler = lambda spec: CommandResult(0 if spec.argv[-1] == "alpha" else 1)
    tracker = SessionTracker(runner=runner)

    assert tracker.session_exists("alpha") is True
    assert tracker.session_exists("beta") is False
    assert runner.captured[0].argv == ("tmux", "has-session", "-t", "alpha")


def test_attach_outside_tmux() -> None:
    tracker = SessionTracker(inside_tmux=False)
    assert tracker.attach_commands("api") == (CommandSpec.of("tmux", "attach", "-t", "api"),)


def test_attach_inside_tmux_switches_client() -> None:
    tracker = SessionTracker(inside_tmux=True)
    assert tracker.attach_commands("api") == (CommandSpec.of("tmux", "switch-client", "-t", "api"),)


def test_create_outside_tmux_starts_attached_session() -> None:
    tracker = SessionTracker(inside_tmux=False)
    assert tracker.create_commands("api", "/p/api", "claude-logged") == (
        CommandSpec.of("tmux", "new-session", "-s", "api", "-c", "/p/api", "claude-logged"),
    )


def test_create_inside_tmux_detaches_then_switches() -> None:
    tracker = SessionTracker(inside_tmux=True)
    assert tracker.create_commands("api", "/p/api") == (
        CommandSpec.of("tmux", "new-session", "-d", "-s", "api", "-c", "/p/api"),
        CommandSpec.of("tmux", "switch-client", "-t", "api"),
    )


def test_custom_tmux_binary_is_used() -> None:
    tracker = SessionTracker(tmux_binary="/opt/bin/tmux")
    assert tracker.kill_session("api").argv == ("/opt/bin/tmux", "kill-session", "-t", "api")
    assert tracker.new_window("api", "/p/api", "claude-logged").argv == (
        "/opt/bin/tmux",
        "new-window",
        "-t",
        "api",
        "-c",
        "/p/api",
        "claude-logged",
    )
