"""Configuration management for gitboard."""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

import platformdirs

from .core.repo_manager import DEFAULT_WORKERS
from .core.repository import DEFAULT_FETCH_TIMEOUT

TRUTHY = {'1', 'true', 'yes', 'on'}


def default_config_path() -> Path:
    """Location of the registry file when none is configured."""
    return platformdirs.user_config_path("gitboard") / "config.toml"


@dataclass
class Config:
    """Configuration for gitboard.

    Merges environment variables with CLI arguments.
    CLI arguments take precedence over environment variables.
    """

    config_path: Path
    workers: int = DEFAULT_WORKERS
    fetch: bool = True
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    ssh_key: Optional[str] = None
    log_file: Optional[str] = None

    @classmethod
    def from_env_and_args(
        cls,
        config_path: Optional[str] = None,
        workers: Optional[int] = None,
        no_fetch: bool = False,
        fetch_timeout: Optional[float] = None,
        ssh_key: Optional[str] = None,
        log_file: Optional[str] = None
    ) -> 'Config':
        """Create config from environment variables and CLI arguments.

        CLI arguments override environment variables.

        Args:
            config_path: Registry file (overrides GITBOARD_CONFIG)
            workers: Parallel workers (overrides GITBOARD_WORKERS)
            no_fetch: Skip fetching (or GITBOARD_NO_FETCH)
            fetch_timeout: Seconds per fetch (overrides GITBOARD_FETCH_TIMEOUT)
            ssh_key: Private key for fetches (overrides GITBOARD_SSH_KEY)
            log_file: Log file path (overrides GITBOARD_LOG_FILE)

        Returns:
            Config instance

        Raises:
            ValueError: If a value is malformed or out of range
        """
        final_path = config_path or os.getenv('GITBOARD_CONFIG')
        final_workers = workers if workers is not None else _env_number('GITBOARD_WORKERS', int)
        final_timeout = fetch_timeout if fetch_timeout is not None else _env_number('GITBOARD_FETCH_TIMEOUT', float)
        env_no_fetch = os.getenv('GITBOARD_NO_FETCH', '').strip().lower() in TRUTHY

        config = cls(
            config_path=Path(final_path).expanduser() if final_path else default_config_path(),
            workers=final_workers if final_workers is not None else DEFAULT_WORKERS,
            fetch=not (no_fetch or env_no_fetch),
            fetch_timeout=final_timeout if final_timeout is not None else DEFAULT_FETCH_TIMEOUT,
            ssh_key=ssh_key or os.getenv('GITBOARD_SSH_KEY') or None,
            log_file=log_file or os.getenv('GITBOARD_LOG_FILE') or None
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ValueError: If a value is out of range
        """
        if self.workers < 1:
            raise ValueError(f"Number of workers must be at least 1, got {self.workers}")
        if self.fetch_timeout <= 0:
            raise ValueError(f"Fetch timeout must be positive, got {self.fetch_timeout}")


def _env_number(name: str, kind: type):
    """Read a numeric environment variable, or None if unset."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'") from None
