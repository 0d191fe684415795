from pathlib import Path

from commandy.catalog import ProjectCatalog
from commandy.models import Project


def _make(root: Path, *names: str, manifest: bool = False) -> None:
    for name in names:
        path = root / name
        path.mkdir(parents=True, exist_ok=True)
        if manifest:
            (path / "package.json").write_text("{}", encoding="utf-8")


def test_list_projects_sorted_directories_only(tmp_path: Path) -> None:
    _make(tmp_path, "zeta", "alpha", "mid")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    projects = ProjectCatalog(tmp_path).list_projects()

    assert [p.display_name for p in projects] == ["alpha", "mid", "zeta"]
    assert projects[0] == Project("alpha", str(tmp_path / "alpha"))


def test_list_projects_missing_root_is_empty(tmp_path: Path) -> None:
    assert ProjectCatalog(tmp_path / "nope").list_projects() == ()


def test_manifest_only_includes_monorepo_children(tmp_path: Path) -> None:
    _make(tmp_path, "web", manifest=True)
    _make(tmp_path, "docs")
    _make(tmp_path, "mono")
    _make(tmp_path, "mono/api", "mono/ui", manifest=True)
    _make(tmp_path, "mono/scripts")

    projects = ProjectCatalog(tmp_path).list_projects(manifest_only=True)

    assert [p.display_name for p in projects] == ["mono/api", "mono/ui", "web"]
    assert projects[0].path == str(tmp_path / "mono" / "api")


def test_git_repositories(tmp_path: Path) -> None:
    _make(tmp_path, "repo/.git", "plain")
    repos = ProjectCatalog(tmp_path).git_repositories()
    assert [r.display_name for r in repos] == ["repo"]


def test_custom_manifest_file(tmp_path: Path) -> None:
    _make(tmp_path, "crate")
    (tmp_path / "crate" / "Cargo.toml").write_text("", encoding="utf-8")
    catalog = ProjectCatalog(tmp_path, manifest_file="Cargo.toml")
    assert catalog.has_manifest(tmp_path / "crate") is True
