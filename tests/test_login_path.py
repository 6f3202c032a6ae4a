"""Tests for backend.auth.login_path."""

from __future__ import annotations

import re

from backend.auth.login_path import LoginPathStore, generate_login_path, normalize_login_path

_PATH_RE = re.compile(r"^/[0-9a-f]{16}$")


def test_generated_path_format():
    assert _PATH_RE.match(generate_login_path())


def test_generated_paths_differ():
    assert len({generate_login_path() for _ in range(20)}) == 20


def test_normalize_adds_leading_slash():
    assert normalize_login_path("secret-door") == "/secret-door"
    assert normalize_login_path("  /secret-door \n") == "/secret-door"


class TestLoginPathStore:
    def test_first_boot_generates_and_persists(self, tmp_path):
        file = tmp_path / ".login-path"
        path = LoginPathStore(file).load_or_create()
        assert _PATH_RE.match(path)
        assert file.read_text() == path

    def test_loads_persisted_value_trimmed(self, tmp_path):
        file = tmp_path / ".login-path"
        file.write_text("/abcdef0123456789\n")
        assert LoginPathStore(file).load_or_create() == "/abcdef0123456789"

    def test_persisted_value_gets_leading_slash(self, tmp_path):
        file = tmp_path / ".login-path"
        file.write_text("secret-door\n")
        assert LoginPathStore(file).load_or_create() == "/secret-door"

    def test_second_boot_reuses_value(self, tmp_path):
        file = tmp_path / ".login-path"
        first = LoginPathStore(file).load_or_create()
        second = LoginPathStore(file).load_or_create()
        assert first == second

    def test_override_seeds_first_boot_only(self, tmp_path):
        file = tmp_path / ".login-path"
        assert LoginPathStore(file, override="/custom").load_or_create() == "/custom"
        file.write_text("/persisted")
        assert LoginPathStore(file, override="/custom").load_or_create() == "/persisted"

    def test_empty_file_is_regenerated(self, tmp_path):
        file = tmp_path / ".login-path"
        file.write_text("  \n")
        path = LoginPathStore(file).load_or_create()
        assert _PATH_RE.match(path)
        assert file.read_text() == path

    def test_creates_parent_directory(self, tmp_path):
        file = tmp_path / "state" / "nested" / ".login-path"
        path = LoginPathStore(file).load_or_create()
        assert file.read_text() == path

    def test_rotation_survives_restart(self, tmp_path):
        file = tmp_path / ".login-path"
        store = LoginPathStore(file)
        original = store.load_or_create()
        rotated = store.rotate()

        assert rotated != original
        assert _PATH_RE.match(rotated)
        assert LoginPathStore(file).load_or_create() == rotated
