# tests/core/test_loader.py
from __future__ import annotations

import os
from pathlib import Path

import pytest

from netswitch.core.loader import import_attr, load_yaml_files, substitute_env_vars


class TestImportAttr:
    def test_import_valid_path(self):
        assert import_attr("os.path:join") is os.path.join

    def test_import_host_factory(self):
        from netswitch.hosts.memory import load_memory_host

        assert import_attr("netswitch.hosts.memory:load_memory_host") is load_memory_host

    def test_missing_colon(self):
        with pytest.raises(ValueError, match="expected 'module:attr'"):
            import_attr("netswitch.hosts.memory.load_memory_host")

    def test_nonexistent_module(self):
        with pytest.raises(ImportError):
            import_attr("netswitch.nope:factory")

    def test_nonexistent_attr(self):
        with pytest.raises(AttributeError):
            import_attr("netswitch.hosts.memory:nope")


class TestSubstituteEnvVars:
    def test_env_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("WP_VERSION", "6.5")
        assert substitute_env_vars("${WP_VERSION:-6.8}") == "6.5"

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("WP_VERSION", raising=False)
        assert substitute_env_vars("${WP_VERSION:-6.8}") == "6.8"

    def test_missing_without_default_raises(self, monkeypatch):
        monkeypatch.delenv("NETWORK_DOMAIN", raising=False)
        with pytest.raises(ValueError, match="not set"):
            substitute_env_vars("${NETWORK_DOMAIN}")

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("NETWORK_DOMAIN", "a.example.com")
        result = substitute_env_vars(
            {"networks": [{"id": 1, "domain": "${NETWORK_DOMAIN}", "path": "/"}]}
        )
        assert result == {"networks": [{"id": 1, "domain": "a.example.com", "path": "/"}]}

    def test_non_strings_pass_through(self):
        assert substitute_env_vars(42) == 42
        assert substitute_env_vars(True) is True
        assert substitute_env_vars(None) is None


class TestLoadYamlFiles:
    def test_sorted_by_path(self, tmp_path: Path):
        (tmp_path / "02_override.yaml").write_text("order: 2\n", encoding="utf-8")
        (tmp_path / "01_base.yaml").write_text("order: 1\n", encoding="utf-8")

        result = load_yaml_files([str(tmp_path / "*.yaml")])
        assert result == [{"order": 1}, {"order": 2}]

    def test_empty_file_is_empty_mapping(self, tmp_path: Path):
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")
        assert load_yaml_files([str(tmp_path / "empty.yaml")]) == [{}]

    def test_no_matches(self, tmp_path: Path):
        assert load_yaml_files([str(tmp_path / "missing-*.yaml")]) == []

    def test_invalid_yaml_raises(self, tmp_path: Path):
        (tmp_path / "bad.yaml").write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(Exception):
            load_yaml_files([str(tmp_path / "bad.yaml")])
