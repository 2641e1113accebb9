# tests/test_cli.py
import shutil
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

import tiktoken

from repodigest import acquire
from repodigest.cli import get_default_output_name, main
from repodigest.utils.tokenizer import Tokenizer


def _run(args):
    with patch.object(sys, "argv", ["repodigest", *args]):
        main()


def test_end_to_end_run(sample_repo, capsys):
    _run([str(sample_repo), "--output", "digest.txt"])

    output_file = sample_repo / "digest.txt"
    assert output_file.exists()
    content = output_file.read_text(encoding="utf-8")

    # Selected files are included, rendered per batch
    assert "# --- Batch 1/1" in content
    assert "// README.md\n# Project" in content
    assert "// src/app.js" in content
    assert "project/" in content

    # Pruned and skipped files are not
    assert "node_modules" not in content
    assert "// docs/notes.md" not in content
    assert "SECRET" not in content

    out = capsys.readouterr().out
    assert "Total files: 5" in out
    assert "JavaScript" in out
    assert "Batch 1: 5 files" in out
    assert "Success!" in out


def test_top_and_budget_options(sample_repo, capsys):
    _run([str(sample_repo), "-o", "digest.txt", "-k", "3", "--max-tokens", "10"])

    out = capsys.readouterr().out
    assert "Total files: 3" in out
    assert "Batch 1: 2 files, 8 tokens" in out
    assert "Batch 2: 1 files, 10 tokens" in out
    assert "// Makefile" not in (sample_repo / "digest.txt").read_text(encoding="utf-8")


def test_custom_rules_and_ignore_file(sample_repo, capsys):
    (sample_repo / ".digestignore").write_text("src/utils/\n", encoding="utf-8")
    (sample_repo / "docs" / "api.proto").write_text("syntax = \"proto3\";\n", encoding="utf-8")

    _run([str(sample_repo), "-o", "digest.txt", "--all", "--priority", "*.proto", "--skip", "Makefile"])

    content = (sample_repo / "digest.txt").read_text(encoding="utf-8")
    assert "// docs/api.proto" in content
    assert "// src/utils/helpers.js" not in content
    assert "// Makefile" not in content


def test_output_file_is_never_scanned(sample_repo):
    _run([str(sample_repo), "-o", "out.js"])
    _run([str(sample_repo), "-o", "out.js"])

    content = (sample_repo / "out.js").read_text(encoding="utf-8")
    assert "// out.js" not in content


def test_no_matching_files(tmp_path, capsys):
    _run([str(tmp_path)])
    assert "No matching files found." in capsys.readouterr().out


def test_invalid_directory_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        _run([str(tmp_path / "missing")])
    assert exc.value.code == 1
    assert "Invalid directory" in capsys.readouterr().err


@pytest.mark.parametrize("args", [["--max-tokens", "0"], ["-k", "-1"], ["--max-depth", "-2"]])
def test_invalid_configuration_exits(sample_repo, capsys, args):
    with pytest.raises(SystemExit) as exc:
        _run([str(sample_repo), *args])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err
    assert not (sample_repo / "project_digest.txt").exists()


def test_default_output_name():
    assert get_default_output_name(Path("/tmp/my repo")) == "my_repo_digest.txt"


def test_github_url_is_cloned_and_scanned(sample_repo, tmp_path, monkeypatch, capsys):
    clone_cmds = []

    def fake_run(cmd, **kwargs):
        clone_cmds.append(cmd)
        shutil.copytree(sample_repo, cmd[-1], dirs_exist_ok=True)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(acquire.subprocess, "run", fake_run)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    _run(["https://github.com/owner/widget.git", "--clone-dir", str(tmp_path / "clones")])

    assert clone_cmds[0][:4] == ["git", "clone", "--depth", "1"]
    assert Path(clone_cmds[0][-1]).parent == tmp_path / "clones"

    # Digest lands in the working directory, named after the repository
    content = (workdir / "widget_digest.txt").read_text(encoding="utf-8")
    assert "# --- Project Tree ---\nwidget/\n" in content
    assert "// src/app.js" in content
    assert "Cloning:  https://github.com/owner/widget.git" in capsys.readouterr().out


def test_failed_clone_exits(tmp_path, monkeypatch, capsys):
    def fake_run(cmd, **kwargs):
        raise subprocess.CalledProcessError(128, cmd, stderr="fatal: not found")

    monkeypatch.setattr(acquire.subprocess, "run", fake_run)
    with pytest.raises(SystemExit) as exc:
        _run(["https://github.com/owner/missing", "--clone-dir", str(tmp_path)])

    assert exc.value.code == 1
    assert "Failed to clone" in capsys.readouterr().err


def test_exact_tokens_without_encoding_still_writes_digest(sample_repo, monkeypatch, capsys):
    def no_encoding(name):
        raise OSError("offline")

    monkeypatch.setattr(tiktoken, "get_encoding", no_encoding)
    monkeypatch.setattr(Tokenizer, "_encoding", None)

    _run([str(sample_repo), "-o", "d.txt", "--exact-tokens"])

    assert (sample_repo / "d.txt").exists()
    # README.md is 3 tokens by estimate, shown twice when tiktoken is unavailable
    assert "3 (3)" in capsys.readouterr().out


def test_missing_explicit_ignore_file_exits(sample_repo, capsys):
    with pytest.raises(SystemExit) as exc:
        _run([str(sample_repo), "--ignore-file", str(sample_repo / "nope.ignore")])

    assert exc.value.code == 1
    assert "Ignore file not found" in capsys.readouterr().err
