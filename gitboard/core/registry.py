"""Persistent registry of repository names and working copy paths."""

import os
import tempfile
import tomllib
import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

import tomli_w

from .errors import RegistryError

logger = logging.getLogger('gitboard')


class RepoRegistry:
    """Name to path mapping stored as a TOML file.

    The file holds a single table:

        [repositories]
        dotfiles = "/home/me/dotfiles"
        website = "/home/me/src/website"
    """

    def __init__(self, path: Path, repositories: Optional[Dict[str, str]] = None):
        self.path = Path(path)
        self._repositories: Dict[str, str] = dict(repositories or {})

    @classmethod
    def load(cls, path: Path) -> 'RepoRegistry':
        """Load the registry from disk.

        A missing file is an empty registry.

        Args:
            path: Location of the TOML file

        Returns:
            RepoRegistry instance

        Raises:
            RegistryError: If the file cannot be read or has the wrong shape
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"No registry at {path}, starting empty")
            return cls(path)

        try:
            with path.open('rb') as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise RegistryError(f"Invalid TOML in {path}: {e}") from e
        except OSError as e:
            raise RegistryError(f"Cannot read {path}: {e}") from e

        repositories = data.get('repositories', {})
        if not isinstance(repositories, dict):
            raise RegistryError(f"{path}: 'repositories' must be a table")
        for name, repo_path in repositories.items():
            if not isinstance(repo_path, str):
                raise RegistryError(f"{path}: path for '{name}' must be a string")

        logger.info(f"Loaded {len(repositories)} repositories from {path}")
        return cls(path, repositories)

    def save(self) -> None:
        """Write the registry to disk atomically.

        Raises:
            RegistryError: If the file cannot be written
        """
        content = tomli_w.dumps({'repositories': dict(sorted(self._repositories.items()))})
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write to temp file in same directory, then rename
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=self.path.parent,
                delete=False,
                suffix=".tmp",
                encoding="utf-8",
            ) as f:
                f.write(content)
                temp_path = Path(f.name)
            os.replace(temp_path, self.path)
        except OSError as e:
            raise RegistryError(f"Cannot write {self.path}: {e}") from e
        logger.info(f"Saved {len(self._repositories)} repositories to {self.path}")

    def add(self, path: str, name: Optional[str] = None) -> str:
        """Register a working copy.

        Args:
            path: Working copy path (stored absolute)
            name: Display name (default: last path component)

        Returns:
            The name the repository was registered under

        Raises:
            RegistryError: If the name cannot be derived or is already taken
        """
        abs_path = os.path.abspath(os.path.expanduser(path))
        if name is None:
            name = os.path.basename(abs_path.rstrip(os.sep))
        if not name:
            raise RegistryError(f"Cannot derive a name from path '{path}'")
        if name in self._repositories:
            raise RegistryError(f"name '{name}' already exists")
        self._repositories[name] = abs_path
        return name

    def remove(self, name: str) -> str:
        """Unregister a repository and return its path.

        Raises:
            RegistryError: If the name does not exist
        """
        try:
            return self._repositories.pop(name)
        except KeyError:
            raise RegistryError(f"name '{name}' does not exist") from None

    def rename(self, name: str, new_name: str) -> None:
        """Change a repository's name.

        Raises:
            RegistryError: If name does not exist or new_name is taken
        """
        if name not in self._repositories:
            raise RegistryError(f"name '{name}' does not exist")
        if new_name in self._repositories:
            raise RegistryError(f"name '{new_name}' already exists")
        self._repositories[new_name] = self._repositories.pop(name)

    def path_of(self, name: str) -> str:
        """Get the registered path for a name.

        Raises:
            RegistryError: If the name does not exist
        """
        try:
            return self._repositories[name]
        except KeyError:
            raise RegistryError(f"name '{name}' does not exist") from None

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        """Iterate (name, path) pairs sorted by name."""
        return iter(sorted(self._repositories.items()))

    def __len__(self) -> int:
        return len(self._repositories)

    def __contains__(self, name: object) -> bool:
        return name in self._repositories
