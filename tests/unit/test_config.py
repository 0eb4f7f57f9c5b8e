"""Unit tests for the YAML config loader."""

from __future__ import annotations

from pathlib import Path

from src.config.loader import DEFAULT_CONFIG, load_config
from src.config.settings import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestLoadConfig:
    def test_missing_file_yields_defaults(self, tmp_path: Path) -> None:
        resolved = load_config(str(tmp_path / "absent.yaml"), settings=_settings())

        assert resolved["session"] == {**DEFAULT_CONFIG["session"], "secure_cookie": False}
        assert resolved["recovery"]["pin_min_length"] == 4
        assert resolved["access"]["role_paths"] == {"/instructor": "INSTRUCTOR", "/em": "EM"}

    def test_partial_yaml_is_merged_over_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("recovery:\n  code_ttl_minutes: 15\nsession:\n  ttl_hours: 8\n")

        resolved = load_config(str(path), settings=_settings())

        assert resolved["recovery"]["code_ttl_minutes"] == 15
        assert resolved["recovery"]["pin_max_length"] == 10
        assert resolved["session"]["ttl_hours"] == 8
        assert resolved["session"]["cookie_name"] == "auth-token"

    def test_empty_yaml_is_tolerated(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(str(path), settings=_settings())["app"]["version"] == "0.1.0"

    def test_environment_overrides(self, tmp_path: Path) -> None:
        s = _settings(app_env="production", app_port=9000, allow_email_only_pin_reset=False)

        resolved = load_config(str(tmp_path / "absent.yaml"), settings=s)

        assert resolved["app"]["env"] == "production"
        assert resolved["app"]["port"] == 9000
        assert resolved["session"]["secure_cookie"] is True
        assert resolved["recovery"]["allow_email_only_reset"] is False

    def test_defaults_are_not_mutated(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("session:\n  ttl_hours: 1\n")

        load_config(str(path), settings=_settings())

        assert DEFAULT_CONFIG["session"]["ttl_hours"] == 24
        assert "secure_cookie" not in DEFAULT_CONFIG["session"]

    def test_checked_in_config_matches_defaults(self) -> None:
        repo_config = Path(__file__).resolve().parents[2] / "config" / "config.yaml"

        resolved = load_config(str(repo_config), settings=_settings())

        for section in ("session", "recovery", "access"):
            for key, value in DEFAULT_CONFIG[section].items():
                assert resolved[section][key] == value, f"{section}.{key}"
