"""Exceptions raised by gitboard."""


class GitboardError(Exception):
    """Base class for all gitboard errors."""


class OpenError(GitboardError):
    """A registered path is not a valid repository root."""

    def __init__(self, name: str, path: str, reason: str):
        self.name = name
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FetchError(GitboardError):
    """Fetching the upstream ref failed (network, credentials, missing remote)."""


class FetchTimeout(FetchError):
    """Fetching the upstream ref took longer than the configured timeout."""


class StatusComputeError(GitboardError):
    """Status or ahead/behind distance could not be computed."""


class RegistryError(GitboardError):
    """Invalid registry file or mutation (duplicate or unknown name)."""
