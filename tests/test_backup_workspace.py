from backup.create import create_backup
from backup.index import get_backup_info
from backup.workspace import collect_workspace_files


def _touch(path, text: str = "{}") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_collect_workspace_files_lists_manifests(tmp_path) -> None:
    root = tmp_path / "mono"
    _touch(root / "package.json")
    _touch(root / "packages" / "web" / "package.json")
    _touch(root / "apps" / "api" / "package.json")
    _touch(root / "node_modules" / "react" / "package.json")
    _touch(root / "packages" / "web" / "node_modules" / "vue" / "package.json")
    _touch(root / ".git" / "package.json")

    files = collect_workspace_files(root)

    assert [path.relative_to(root).as_posix() for path in files] == [
        "pnpm-workspace.yaml",
        "package.json",
        "apps/api/package.json",
        "packages/web/package.json",
    ]


def test_collected_files_feed_create_backup(tmp_path) -> None:
    root = tmp_path / "mono"
    _touch(root / "pnpm-workspace.yaml", "packages:\n  - packages/*\n")
    _touch(root / "packages" / "web" / "package.json")

    backup_id = create_backup(root, collect_workspace_files(root), "workspace")

    info = get_backup_info(root, backup_id)
    assert info.manifest.relative_paths == ["pnpm-workspace.yaml", "packages/web/package.json"]
