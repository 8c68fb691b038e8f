"""Tests for the repository registry."""

from pathlib import Path

import pytest

from gitboard.core.errors import RegistryError
from gitboard.core.registry import RepoRegistry


@pytest.fixture
def registry_path(tmp_path: Path) -> Path:
    return tmp_path / "conf" / "config.toml"


class TestLoad:
    """Tests for RepoRegistry.load."""

    def test_missing_file_is_empty(self, registry_path: Path) -> None:
        registry = RepoRegistry.load(registry_path)
        assert len(registry) == 0
        assert list(registry) == []

    def test_reads_repositories_table(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[repositories]\nzeta = "/src/zeta"\nalpha = "/src/alpha"\n')
        registry = RepoRegistry.load(path)
        assert list(registry) == [("alpha", "/src/alpha"), ("zeta", "/src/zeta")]

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[repositories\n")
        with pytest.raises(RegistryError, match="Invalid TOML"):
            RepoRegistry.load(path)

    def test_wrong_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('repositories = "nope"\n')
        with pytest.raises(RegistryError, match="must be a table"):
            RepoRegistry.load(path)

    def test_non_string_path(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[repositories]\nalpha = 3\n")
        with pytest.raises(RegistryError, match="must be a string"):
            RepoRegistry.load(path)


class TestMutations:
    """Tests for add, remove, rename and path lookup."""

    def test_add_derives_name_from_path(self, registry_path: Path, tmp_path: Path) -> None:
        registry = RepoRegistry(registry_path)
        name = registry.add(str(tmp_path / "projects" / "website") + "/")
        assert name == "website"
        assert registry.path_of("website") == str(tmp_path / "projects" / "website")

    def test_add_explicit_name(self, registry_path: Path) -> None:
        registry = RepoRegistry(registry_path)
        assert registry.add("/src/website", name="site") == "site"
        assert "site" in registry

    def test_add_duplicate_name(self, registry_path: Path) -> None:
        registry = RepoRegistry(registry_path)
        registry.add("/src/a/website")
        with pytest.raises(RegistryError, match="already exists"):
            registry.add("/src/b/website")

    def test_remove(self, registry_path: Path) -> None:
        registry = RepoRegistry(registry_path, {"a": "/src/a"})
        assert registry.remove("a") == "/src/a"
        assert "a" not in registry

    def test_remove_unknown(self, registry_path: Path) -> None:
        with pytest.raises(RegistryError, match="does not exist"):
            RepoRegistry(registry_path).remove("ghost")

    def test_rename(self, registry_path: Path) -> None:
        registry = RepoRegistry(registry_path, {"a": "/src/a"})
        registry.rename("a", "b")
        assert list(registry) == [("b", "/src/a")]

    def test_rename_unknown(self, registry_path: Path) -> None:
        with pytest.raises(RegistryError, match="does not exist"):
            RepoRegistry(registry_path).rename("ghost", "b")

    def test_rename_onto_existing(self, registry_path: Path) -> None:
        registry = RepoRegistry(registry_path, {"a": "/src/a", "b": "/src/b"})
        with pytest.raises(RegistryError, match="already exists"):
            registry.rename("a", "b")
        assert registry.path_of("a") == "/src/a"

    def test_path_of_unknown(self, registry_path: Path) -> None:
        with pytest.raises(RegistryError):
            RepoRegistry(registry_path).path_of("ghost")


class TestSave:
    """Tests for RepoRegistry.save."""

    def test_save_creates_parent_and_reloads(self, registry_path: Path) -> None:
        registry = RepoRegistry(registry_path, {"b": "/src/b", "a": "/src/a"})
        registry.save()
        assert registry_path.exists()
        assert list(RepoRegistry.load(registry_path)) == [("a", "/src/a"), ("b", "/src/b")]
        assert not list(registry_path.parent.glob("*.tmp"))
