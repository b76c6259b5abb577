"""Tests for settings loading and environment overrides."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from imagedrop.config import AppConfig, load_config


class TestDefaults:
    def test_defaults_without_file_or_env(self, tmp_path):
        cfg = load_config(settings_path=tmp_path / "missing.yaml", environ={})

        assert cfg.auth.api_key == "your-api-key"
        assert cfg.public_hostname == "http://localhost:3000"
        assert cfg.server.port == 3000
        assert cfg.server.cors_enabled is True
        assert cfg.storage.upload_dir == "./uploads"
        assert cfg.storage.sentinel_name == ".keep"
        assert cfg.storage.retention_seconds == 300
        assert cfg.storage.max_file_size_bytes == 20_971_520
        assert cfg.storage.allowed_mime_types == ["image/png", "image/jpeg", "image/gif"]

    def test_hostname_trailing_slash_stripped(self):
        assert AppConfig(public_hostname="http://example.com/").public_hostname == "http://example.com"


class TestEnvironment:
    def test_env_overrides(self, tmp_path):
        cfg = load_config(
            settings_path=tmp_path / "missing.yaml",
            environ={
                "API_KEY": "s3cret",
                "API_HOSTNAME": "https://img.example.com",
                "PORT": "8080",
                "UPLOAD_DIR": "/var/imagedrop",
                "LOG_LEVEL": "debug",
            },
        )

        assert cfg.auth.api_key == "s3cret"
        assert cfg.public_hostname == "https://img.example.com"
        assert cfg.server.port == 8080
        assert cfg.storage.upload_dir == "/var/imagedrop"
        assert cfg.server.log_level == "debug"

    def test_empty_env_values_are_ignored(self, tmp_path):
        cfg = load_config(settings_path=tmp_path / "missing.yaml", environ={"API_KEY": "", "PORT": ""})

        assert cfg.auth.api_key == "your-api-key"
        assert cfg.server.port == 3000

    def test_invalid_port_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            load_config(settings_path=tmp_path / "missing.yaml", environ={"PORT": "not-a-port"})


class TestSettingsFile:
    def test_yaml_values_loaded(self, tmp_path):
        settings_file = tmp_path / "imagedrop.settings.yaml"
        settings_file.write_text(
            "server:\n"
            "  port: 4000\n"
            "  cors_enabled: false\n"
            "storage:\n"
            "  retention_seconds: 60\n"
            "auth:\n"
            "  api_key: from-yaml\n",
            encoding="utf-8",
        )

        cfg = load_config(settings_path=settings_file, environ={})

        assert cfg.server.port == 4000
        assert cfg.server.cors_enabled is False
        assert cfg.storage.retention_seconds == 60
        assert cfg.auth.api_key == "from-yaml"

    def test_env_wins_over_yaml(self, tmp_path):
        settings_file = tmp_path / "imagedrop.settings.yaml"
        settings_file.write_text("auth:\n  api_key: from-yaml\n", encoding="utf-8")

        cfg = load_config(settings_path=settings_file, environ={"API_KEY": "from-env"})

        assert cfg.auth.api_key == "from-env"

    def test_relative_upload_dir_resolves_from_settings_dir(self, tmp_path):
        settings_file = tmp_path / "imagedrop.settings.yaml"
        settings_file.write_text("storage:\n  upload_dir: data/uploads\n", encoding="utf-8")

        cfg = load_config(settings_path=settings_file, environ={})

        assert Path(cfg.storage.upload_dir) == tmp_path / "data" / "uploads"

    def test_absolute_upload_dir_unchanged(self, tmp_path):
        absolute = tmp_path / "abs" / "uploads"
        settings_file = tmp_path / "imagedrop.settings.yaml"
        settings_file.write_text(f"storage:\n  upload_dir: {absolute}\n", encoding="utf-8")

        cfg = load_config(settings_path=settings_file, environ={})

        assert Path(cfg.storage.upload_dir) == absolute

    def test_empty_yaml_file(self, tmp_path):
        settings_file = tmp_path / "imagedrop.settings.yaml"
        settings_file.write_text("", encoding="utf-8")

        cfg = load_config(settings_path=settings_file, environ={})

        assert cfg.server.port == 3000
