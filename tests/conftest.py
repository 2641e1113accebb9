# tests/conftest.py
import pytest

from repodigest.models import FileRecord


@pytest.fixture
def make_record():
    """Factory for FileRecords with only the fields a test cares about."""
    def _make(path="f.py", score=0.0, token_count=0, content=""):
        return FileRecord(path=path, content=content, token_count=token_count, score=score)
    return _make


@pytest.fixture
def sample_repo(tmp_path):
    """
    A small project covering the interesting scan cases:
    priority files, nested sources, pruned directories, skipped names,
    an oversized file, a binary file and a file without an extension.
    """
    root = tmp_path / "project"
    (root / "src" / "utils").mkdir(parents=True)
    (root / "node_modules" / "lib").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "assets").mkdir()
    (root / ".git").mkdir()

    (root / "README.md").write_text("# Project\n", encoding="utf-8")
    (root / "package.json").write_text('{"name": "project"}', encoding="utf-8")
    (root / "Makefile").write_text("all:\n\tnode src/app.js\n", encoding="utf-8")
    (root / "src" / "app.js").write_text("const x = require('./utils/helpers');\n", encoding="utf-8")
    (root / "src" / "utils" / "helpers.js").write_text("module.exports = {};\n", encoding="utf-8")
    (root / "src" / "big.js").write_text("x" * (60 * 1024), encoding="utf-8")
    (root / "src" / "blob.js").write_bytes(b"\x00\x01\x02binary")

    (root / "node_modules" / "lib" / "index.js").write_text("module.exports = 1;\n", encoding="utf-8")
    (root / ".git" / "config").write_text("[core]\n", encoding="utf-8")
    (root / "docs" / "notes.md").write_text("notes\n", encoding="utf-8")
    (root / "assets" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / ".env").write_text("SECRET=1\n", encoding="utf-8")
    (root / "yarn.lock").write_text("lock\n", encoding="utf-8")
    return root
