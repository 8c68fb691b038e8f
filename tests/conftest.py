"""Pytest fixtures for gitboard tests."""

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(cwd: Path, *args: str) -> str:
    """Run a git command for test setup and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def commit(repo: Path, message: str, filename: str | None = None) -> None:
    """Create a commit that writes one file."""
    filename = filename or f"{message.replace(' ', '_')[:40]}.txt"
    (repo / filename).write_text(message + "\n")
    git(repo, "add", filename)
    git(repo, "commit", "-q", "-m", message)


def init_repo(path: Path, commits: int = 1) -> Path:
    """Create a non-bare repository on branch main with some commits."""
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    for i in range(commits):
        commit(path, f"commit {i}")
    return path


@pytest.fixture(autouse=True)
def isolated_git_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the user's git and gitboard configuration."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")
    for name in (
        "GITBOARD_CONFIG",
        "GITBOARD_WORKERS",
        "GITBOARD_NO_FETCH",
        "GITBOARD_FETCH_TIMEOUT",
        "GITBOARD_SSH_KEY",
        "GITBOARD_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[..., Path]:
    """Factory for standalone repositories under tmp_path."""

    def _make(name: str, commits: int = 1) -> Path:
        return init_repo(tmp_path / name, commits=commits)

    return _make


@pytest.fixture
def remote_setup(tmp_path: Path) -> Callable[[str], tuple[Path, Path]]:
    """Factory for (bare origin, working clone tracking origin/main)."""

    def _make(name: str) -> tuple[Path, Path]:
        seed = init_repo(tmp_path / f"{name}-seed", commits=1)
        origin = tmp_path / f"{name}-origin.git"
        git(tmp_path, "clone", "-q", "--bare", str(seed), str(origin))
        work = tmp_path / name
        git(tmp_path, "clone", "-q", str(origin), str(work))
        return origin, work

    return _make


def push_from_other_clone(origin: Path, count: int, prefix: str = "remote") -> None:
    """Push commits to origin from a throwaway clone."""
    other = origin.parent / f"{origin.stem}-other"
    if not other.exists():
        git(origin.parent, "clone", "-q", str(origin), str(other))
    else:
        git(other, "pull", "-q")
    for i in range(count):
        commit(other, f"{prefix} {i}")
    git(other, "push", "-q", "origin", "main")
