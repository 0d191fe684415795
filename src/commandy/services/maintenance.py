"""Multi-step jobs that walk the projects directory or chain several tool calls.

Each job runs on a worker thread and returns a single ``CommandOutcome``
whose text is shown under the menu once the job finishes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from commandy.catalog import ProjectCatalog
from commandy.models import CommandOutcome
from commandy.process import CommandLaunchError, CommandSpec, ProcessRunner

logger = logging.getLogger(__name__)

DOCKER_STEPS = (
    ("Removing stopped containers", ("docker", "container", "prune", "-f")),
    ("Removing unused images", ("docker", "image", "prune", "-f")),
    ("Removing unused volumes", ("docker", "volume", "prune", "-f")),
    ("Removing unused networks", ("docker", "network", "prune", "-f")),
)

BREW_STEPS = (
    ("Updating Homebrew", ("brew", "update")),
    ("Upgrading packages", ("brew", "upgrade")),
    ("Cleaning up", ("brew", "cleanup")),
)

SECTION_RULE = "━━━"


def _outcome(lines: list[str], failures: int) -> CommandOutcome:
    text = "\n".join(lines).strip("\n")
    if failures:
        return CommandOutcome.error(text)
    return CommandOutcome.success(text)


def docker_cleanup(runner: ProcessRunner) -> CommandOutcome:
    lines: list[str] = []
    failures = 0
    for title, argv in DOCKER_STEPS:
        lines.append(f"{title}...")
        try:
            runner.run_captured(CommandSpec(argv))
        except CommandLaunchError as exc:
            lines.append(f"  {exc}")
            failures += 1
    try:
        usage = runner.run_captured(CommandSpec.of("docker", "system", "df"))
        lines.append("")
        lines.append(usage.output.rstrip())
    except CommandLaunchError as exc:
        lines.append(f"  {exc}")
        failures += 1
    return _outcome(lines, failures)


def brew_update(runner: ProcessRunner) -> CommandOutcome:
    lines: list[str] = []
    failures = 0
    for title, argv in BREW_STEPS:
        lines.append(f"{title}...")
        try:
            result = runner.run_captured(CommandSpec(argv))
        except CommandLaunchError as exc:
            lines.append(f"  {exc}")
            failures += 1
            continue
        lines.append(result.output.rstrip())
    return _outcome(lines, failures)


def clear_all_caches(runner: ProcessRunner, projects_dir: str | Path) -> CommandOutcome:
    lines: list[str] = []
    failures = 0
    for title, argv in (
        ("Clearing npm cache...", ("npm", "cache", "clean", "--force")),
        ("Clearing Homebrew cache...", ("brew", "cleanup", "-s")),
    ):
        lines.append(title)
        try:
            runner.run_captured(CommandSpec(argv))
        except CommandLaunchError as exc:
            lines.append(f"  {exc}")
            failures += 1

    lines.append("Removing .DS_Store files...")
    removed = 0
    for marker in Path(projects_dir).rglob(".DS_Store"):
        try:
            marker.unlink()
            removed += 1
        except OSError as exc:
            logger.warning("cannot remove %s: %s", marker, exc)
    lines.append(f"  removed {removed}")
    lines.append("")
    lines.append("All caches cleared!" if not failures else "Some caches could not be cleared")
    return _outcome(lines, failures)


def git_status_all(runner: ProcessRunner, catalog: ProjectCatalog) -> CommandOutcome:
    repositories = catalog.git_repositories()
    if not repositories:
        return CommandOutcome.info(f"No git repositories in {catalog.root}")
    lines = []
    for repo in repositories:
        branch = runner.run_captured(CommandSpec.of("git", "branch", "--show-current", cwd=repo.path))
        status = runner.run_captured(CommandSpec.of("git", "status", "--porcelain", cwd=repo.path))
        if not status.ok:
            state = "status unavailable"
        elif status.output.strip():
            state = "has changes"
        else:
            state = "clean"
        branch_name = branch.output.strip() if branch.ok else "?"
        lines.append(f"{repo.display_name} ({branch_name}) - {state}")
    return CommandOutcome.success("\n".join(lines))


def git_pull_all(runner: ProcessRunner, catalog: ProjectCatalog) -> CommandOutcome:
    repositories = catalog.git_repositories()
    if not repositories:
        return CommandOutcome.info(f"No git repositories in {catalog.root}")
    lines = []
    failed = 0
    for repo in repositories:
        result = runner.run_captured(CommandSpec.of("git", "pull", "--quiet", cwd=repo.path))
        if result.ok:
            lines.append(f"{repo.display_name}: updated")
        else:
            failed += 1
            lines.append(f"{repo.display_name}: failed")
    return _outcome(lines, failed)


def npm_outdated_all(runner: ProcessRunner, catalog: ProjectCatalog) -> CommandOutcome:
    projects = catalog.list_projects(manifest_only=True)
    if not projects:
        return CommandOutcome.info(f"No {catalog.manifest_file} projects in {catalog.root}")
    lines: list[str] = []
    for project in projects:
        lines.append("")
        lines.append(f"{SECTION_RULE} {project.display_name} {SECTION_RULE}")
        # npm exits 1 when anything is outdated, so only the output matters here
        result = runner.run_captured(CommandSpec.of("npm", "outdated", cwd=project.path))
        lines.append(result.output.rstrip() or "No outdated packages")
    return CommandOutcome.success("\n".join(lines).strip("\n"))


def check_ports(runner: ProcessRunner, ports: tuple[int, ...]) -> CommandOutcome:
    lines = []
    for port in ports:
        result = runner.run_captured(CommandSpec.of("lsof", "-ti", f":{port}"))
        pids = " ".join(result.output.split()) if result.ok else ""
        lines.append(f"Port {port}: PID {pids}" if pids else f"Port {port}: available")
    return CommandOutcome.success("\n".join(lines))
