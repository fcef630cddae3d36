"""
Unit tests for idempotent filesystem helpers.
"""

from pathlib import Path

import pytest

from devenvkit.core.exceptions import DevEnvKitError
from devenvkit.core.filesystem import (
    FilesystemError,
    atomic_write,
    ensure_directory,
    ensure_line,
    expand_home,
    file_has_line,
    write_if_changed,
)

HOOK = 'eval "$(direnv hook zsh)"'


class TestEnsureLine:
    """Tests for ensure_line() and file_has_line()."""

    def test_creates_missing_file_and_parents(self, tmp_path):
        target = tmp_path / ".config" / "nix" / "nix.conf"
        assert ensure_line(target, "experimental-features = nix-command flakes")
        assert target.read_text() == "experimental-features = nix-command flakes\n"

    def test_appends_exactly_once(self, tmp_path):
        """Test a second run leaves the file untouched."""
        rc = tmp_path / ".zshrc"
        rc.write_text("export EDITOR=vim\n")

        assert ensure_line(rc, HOOK) is True
        assert ensure_line(rc, HOOK) is False

        assert rc.read_text() == f"export EDITOR=vim\n{HOOK}\n"

    def test_adds_missing_trailing_newline(self, tmp_path):
        rc = tmp_path / ".bashrc"
        rc.write_text("alias ll='ls -l'")
        ensure_line(rc, HOOK)
        assert rc.read_text().splitlines() == ["alias ll='ls -l'", HOOK]

    def test_whitespace_around_existing_line_is_ignored(self, tmp_path):
        rc = tmp_path / ".zshrc"
        rc.write_text(f"  {HOOK}  \n")
        assert ensure_line(rc, HOOK) is False

    def test_pattern_counts_as_present(self, tmp_path):
        """Test an equivalent existing setting is not duplicated."""
        conf = tmp_path / "nix.conf"
        conf.write_text("experimental-features = flakes nix-command\n")
        changed = ensure_line(
            conf,
            "experimental-features = nix-command flakes",
            r"experimental-features.*flakes",
        )
        assert changed is False
        assert conf.read_text() == "experimental-features = flakes nix-command\n"

    def test_file_has_line_missing_file(self, tmp_path):
        assert file_has_line(tmp_path / "none", HOOK) is False

    def test_non_utf8_bytes_preserved(self, tmp_path):
        """Test a latin-1 rc file is appended to without losing its bytes."""
        rc = tmp_path / ".bashrc"
        rc.write_bytes(b"# caf\xe9\nexport A=1\n")

        assert ensure_line(rc, HOOK) is True
        assert ensure_line(rc, HOOK) is False

        assert rc.read_bytes() == b"# caf\xe9\nexport A=1\n" + HOOK.encode() + b"\n"

    def test_write_if_changed_over_non_utf8_file(self, tmp_path):
        target = tmp_path / ".envrc"
        target.write_bytes(b"# \xff\n")
        assert write_if_changed(target, "use flake\n") is True
        assert target.read_text() == "use flake\n"


class TestWrites:
    """Tests for atomic_write() and write_if_changed()."""

    def test_atomic_write_text(self, tmp_path):
        target = tmp_path / "sub" / "file.txt"
        atomic_write(target, "content")
        assert target.read_text() == "content"
        assert [p.name for p in target.parent.iterdir()] == ["file.txt"]

    def test_atomic_write_bytes(self, tmp_path):
        target = tmp_path / "file.bin"
        atomic_write(target, b"\x00\x01")
        assert target.read_bytes() == b"\x00\x01"

    def test_write_if_changed(self, tmp_path):
        target = tmp_path / ".envrc"
        assert write_if_changed(target, "use flake\n") is True
        assert write_if_changed(target, "use flake\n") is False
        assert write_if_changed(target, "use nix\n") is True
        assert target.read_text() == "use nix\n"


class TestDirectories:
    """Tests for ensure_directory() and expand_home()."""

    def test_ensure_directory_is_idempotent(self, tmp_path):
        target = tmp_path / "a" / "b"
        assert ensure_directory(target) == target
        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_ensure_directory_rejects_file(self, tmp_path):
        target = tmp_path / "file"
        target.write_text("x")
        with pytest.raises(FilesystemError):
            ensure_directory(target)

    def test_filesystem_error_is_devenvkit_error(self):
        assert issubclass(FilesystemError, DevEnvKitError)

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("~", "/home/ada"),
            ("~/work", "/home/ada/work"),
            ("  ~/work  ", "/home/ada/work"),
            ("/opt/projects", "/opt/projects"),
            ("~bob/work", "~bob/work"),
        ],
    )
    def test_expand_home(self, raw, expected):
        assert expand_home(raw, Path("/home/ada")) == Path(expected)
