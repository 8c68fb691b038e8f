"""Tests for configuration loading."""

from pathlib import Path

import pytest

from gitboard.config import Config, default_config_path


class TestFromEnvAndArgs:
    """Tests for Config.from_env_and_args."""

    def test_defaults(self) -> None:
        config = Config.from_env_and_args()
        assert config.config_path == default_config_path()
        assert config.config_path.name == "config.toml"
        assert config.workers == 4
        assert config.fetch is True
        assert config.fetch_timeout == 30.0
        assert config.ssh_key is None
        assert config.log_file is None

    def test_env_values(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("GITBOARD_CONFIG", str(tmp_path / "env.toml"))
        monkeypatch.setenv("GITBOARD_WORKERS", "7")
        monkeypatch.setenv("GITBOARD_NO_FETCH", "yes")
        monkeypatch.setenv("GITBOARD_FETCH_TIMEOUT", "2.5")
        config = Config.from_env_and_args()
        assert config.config_path == tmp_path / "env.toml"
        assert config.workers == 7
        assert config.fetch is False
        assert config.fetch_timeout == 2.5

    def test_args_override_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("GITBOARD_CONFIG", str(tmp_path / "env.toml"))
        monkeypatch.setenv("GITBOARD_WORKERS", "7")
        config = Config.from_env_and_args(config_path=str(tmp_path / "cli.toml"), workers=2)
        assert config.config_path == tmp_path / "cli.toml"
        assert config.workers == 2

    def test_no_fetch_flag(self) -> None:
        assert Config.from_env_and_args(no_fetch=True).fetch is False

    @pytest.mark.parametrize("workers", [0, -3])
    def test_invalid_workers(self, workers: int) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            Config.from_env_and_args(workers=workers)

    def test_invalid_timeout(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            Config.from_env_and_args(fetch_timeout=0)

    def test_non_numeric_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITBOARD_WORKERS", "many")
        with pytest.raises(ValueError, match="GITBOARD_WORKERS"):
            Config.from_env_and_args()
