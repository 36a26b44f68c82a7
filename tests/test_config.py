"""Tests for configuration loading."""

import os

import looops.config as config


class TestSuggestionCount:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("LOOOPS_SUGGESTION_COUNT", raising=False)
        monkeypatch.setattr(config, "DEFAULT_SUGGESTION_COUNT", 0)
        config._init_env_vars()
        assert config.DEFAULT_SUGGESTION_COUNT == 10

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LOOOPS_SUGGESTION_COUNT", "5")
        monkeypatch.setattr(config, "DEFAULT_SUGGESTION_COUNT", 10)
        config._init_env_vars()
        assert config.DEFAULT_SUGGESTION_COUNT == 5

    def test_invalid_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOOOPS_SUGGESTION_COUNT", "lots")
        monkeypatch.setattr(config, "DEFAULT_SUGGESTION_COUNT", 3)
        config._init_env_vars()
        assert config.DEFAULT_SUGGESTION_COUNT == 10


class TestDataDirs:
    def test_ensure_creates_data_dir(self, temp_data_dir, monkeypatch):
        target = temp_data_dir / "nested" / "data"
        monkeypatch.setattr(config, "DATA_DIR", target)
        config.ensure_data_dirs()
        assert target.is_dir()


class TestEnvFile:
    def test_env_file_does_not_override(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text(
            "# comment\nLOOOPS_TEST_A=from_file\nLOOOPS_TEST_B=from_file\nnot a pair\n"
        )
        monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
        monkeypatch.setenv("LOOOPS_TEST_A", "from_env")
        monkeypatch.setenv("LOOOPS_TEST_B", "")
        config._load_env()
        assert os.environ["LOOOPS_TEST_A"] == "from_env"
        assert os.environ["LOOOPS_TEST_B"] == "from_file"

    def test_quoted_values_unwrapped(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text('LOOOPS_TEST_C="quoted value"\n')
        monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
        monkeypatch.setenv("LOOOPS_TEST_C", "")
        config._load_env()
        assert os.environ["LOOOPS_TEST_C"] == "quoted value"


class TestDataDirResolution:
    def test_default_under_project(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
        monkeypatch.delenv("LOOOPS_DATA_DIR", raising=False)
        assert config._resolve_data_dir() == tmp_path / "data"

    def test_read_from_env_file(self, tmp_path, monkeypatch):
        target = tmp_path / "elsewhere"
        (tmp_path / ".env").write_text(f"LOOOPS_DATA_DIR={target}\n")
        monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
        monkeypatch.delenv("LOOOPS_DATA_DIR", raising=False)
        assert config._resolve_data_dir() == target
        assert "LOOOPS_DATA_DIR" not in os.environ

    def test_environment_beats_env_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text(f"LOOOPS_DATA_DIR={tmp_path / 'from_file'}\n")
        monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
        monkeypatch.setenv("LOOOPS_DATA_DIR", str(tmp_path / "from_env"))
        assert config._resolve_data_dir() == tmp_path / "from_env"
