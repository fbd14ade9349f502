from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pmv.naming import ProjectName, validate  # noqa: E402

Snapshot = Callable[[Path], dict[str, "bytes | None"]]


@pytest.fixture()
def project_name() -> ProjectName:
    return validate("hello-world")


@pytest.fixture()
def snapshot_tree() -> Snapshot:
    """Map every path below a root to its bytes (``None`` for directories)."""

    def _snapshot(root: Path) -> dict[str, bytes | None]:
        return {
            path.relative_to(root).as_posix(): None if path.is_dir() else path.read_bytes()
            for path in sorted(root.rglob("*"))
        }

    return _snapshot
