from __future__ import annotations

import shutil
from pathlib import Path

import pytest

TEST_FILES_DIR = Path(__file__).parent / "data" / "test-files"


@pytest.fixture
def test_files_dir() -> Path:
    """Directory holding ``bacon.json`` and ``usage.txt``."""
    return TEST_FILES_DIR


@pytest.fixture
def asset_tree(tmp_path: Path) -> Path:
    """Writable copy of the test files with a nested directory added."""
    root = tmp_path / "assets"
    shutil.copytree(TEST_FILES_DIR, root)
    nested = root / "static" / "css"
    nested.mkdir(parents=True)
    (nested / "site.css").write_text("body { color: #333; }\n", encoding="utf-8")
    (root / "static" / "logo.bin").write_bytes(bytes(range(256)))
    return root
