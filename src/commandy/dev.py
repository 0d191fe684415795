from __future__ import annotations

import shlex
import sys
from pathlib import Path

from watchfiles import Change, DefaultFilter, run_process


class SourceFilter(DefaultFilter):
    """Only Python modules and Textual stylesheets trigger a restart."""

    suffixes = (".py", ".tcss")

    def __call__(self, change: Change, path: str) -> bool:
        return path.endswith(self.suffixes) and super().__call__(change, path)


def _source_dir() -> Path:
    return Path(__file__).resolve().parent


def _dev_command() -> str:
    return shlex.join([sys.executable, "-m", "commandy.app"])


def _report(changes: set[tuple[Change, str]]) -> None:
    names = sorted({Path(path).name for _, path in changes})
    print(f"↻ restarting commandy ({', '.join(names)})")


def main() -> int:
    print("Running commandy dev mode with auto-restart...")
    print("Press Ctrl+C to stop.")
    restarts = run_process(
        _source_dir(),
        target=_dev_command(),
        target_type="command",
        watch_filter=SourceFilter(),
        callback=_report,
    )
    print(f"Stopped after {restarts} restart(s).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
