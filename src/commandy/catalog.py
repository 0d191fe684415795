from __future__ import annotations

import logging
from pathlib import Path

from commandy.models import Project

logger = logging.getLogger(__name__)


def _subdirectories(path: Path) -> list[Path]:
    try:
        entries = sorted(path.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("cannot scan %s: %s", path, exc)
        return []
    return [entry for entry in entries if entry.is_dir()]


class ProjectCatalog:
    def __init__(self, root: str | Path, manifest_file: str = "package.json"):
        self.root = Path(root)
        self.manifest_file = manifest_file

    def list_projects(self, manifest_only: bool = False) -> tuple[Project, ...]:
        """Immediate subdirectories of the root, in name order.

        With ``manifest_only`` a directory qualifies only when it holds the
        manifest file, and each directory is also searched one level down so
        monorepo packages show up as ``parent/child``.
        """
        projects: list[Project] = []
        for entry in _subdirectories(self.root):
            if not manifest_only:
                projects.append(Project(entry.name, str(entry)))
                continue
            if self.has_manifest(entry):
                projects.append(Project(entry.name, str(entry)))
            for sub in _subdirectories(entry):
                if self.has_manifest(sub):
                    projects.append(Project(f"{entry.name}/{sub.name}", str(sub)))
        return tuple(projects)

    def git_repositories(self) -> tuple[Project, ...]:
        return tuple(
            Project(entry.name, str(entry))
            for entry in _subdirectories(self.root)
            if (entry / ".git").exists()
        )

    def has_manifest(self, path: str | Path) -> bool:
        return (Path(path) / self.manifest_file).is_file()
