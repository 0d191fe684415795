import argparse
import os
import shutil
import subprocess
import sys
from pathlib import Path
from dotenv import load_dotenv
from commandy.catalog import ProjectCatalog
from commandy.config import AppConfig
from commandy.logs import configure_logging
from commandy.sessions import SessionTracker

DOCTOR_TOOLS = ("tmux", "git", "npm", "docker", "brew", "ssh", "psql", "lsof", "ngrok")


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="commandy terminal launcher")
    subparsers = parser.add_subparsers(dest="command")

    # Subcommands
    subparsers.add_parser("doctor", help="Check setup and environment")
    projects_parser = subparsers.add_parser("projects", help="List projects in the projects directory")
    projects_parser.add_argument(
        "--manifest-only", action="store_true", help="Only projects with a package manifest (monorepo aware)"
    )
    subparsers.add_parser("sessions", help="List active tmux sessions")
    subparsers.add_parser("dev", help="Run TUI dev mode with auto-restart")

    args = parser.parse_args()
    config = AppConfig.from_env()
    configure_logging(config)

    if args.command == "doctor":
        doctor(config)
    elif args.command == "projects":
        list_projects(config, args.manifest_only)
    elif args.command == "sessions":
        list_sessions(config)
    elif args.command == "dev":
        sys.exit(run_dev())
    else:
        # Default: run the TUI
        from commandy.app import run
        run(config)


def doctor(config: AppConfig):
    """Check that the configured directory and the external tools are available."""
    print("🩺 Running commandy doctor...")

    projects_dir = Path(config.projects_dir)
    print(f"[{'✓' if projects_dir.is_dir() else '✕'}] projects dir {projects_dir}")
    print(f"[{'✓' if Path('.env').exists() else '✕'}] .env file")
    print(f"[✓] host {config.hostname} (canonical: {config.canonical_host})")
    print(f"[{'✓' if config.inside_tmux else '·'}] inside tmux")

    for tool in DOCTOR_TOOLS:
        found = shutil.which(tool)
        print(f"[{'✓' if found else '✕'}] {tool}{f' ({found})' if found else ''}")

    print(f"\nConfig: {config.config_source}")
    print("Doctor check complete.")


def list_projects(config: AppConfig, manifest_only: bool = False):
    catalog = ProjectCatalog(config.projects_dir, config.manifest_file)
    projects = catalog.list_projects(manifest_only=manifest_only)
    if not projects:
        print(f"No projects found in {config.projects_dir}")
        return
    width = max(len(project.display_name) for project in projects)
    for project in projects:
        print(f"{project.display_name:<{width}}  {project.path}")


def list_sessions(config: AppConfig):
    tracker = SessionTracker(config.tmux_binary, config.inside_tmux)
    sessions = sorted(tracker.list_sessions())
    if not sessions:
        print("No active tmux sessions")
        return
    for name in sessions:
        print(name)


def run_dev() -> int:
    """Restart the TUI on source changes; bootstraps through uv when watchfiles is absent."""
    try:
        import watchfiles  # noqa: F401
    except ImportError:
        if os.getenv("COMMANDY_DEV_BOOTSTRAPPED") == "1":
            print("❌ watchfiles is missing. Run: uv sync --group dev (or pip install -e '.[dev]')")
            return 1
        try:
            env = dict(os.environ)
            env["COMMANDY_DEV_BOOTSTRAPPED"] = "1"
            return subprocess.call(["uv", "run", "commandy", "dev"], env=env)
        except FileNotFoundError:
            print("❌ 'uv' is required for dev bootstrap. Install uv or run from the project venv.")
            return 1

    from commandy.dev import main as dev_main

    return dev_main()

if __name__ == "__main__":
    main()
