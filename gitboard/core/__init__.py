"""Core package for gitboard."""

from .types import (
    StatusFlags,
    Distance,
    JobState,
    RepoResult,
)

from .errors import (
    GitboardError,
    OpenError,
    FetchError,
    FetchTimeout,
    StatusComputeError,
    RegistryError,
)

from .repository import RepositoryHandle
from .status import compute_status, compute_distance
from .credentials import CredentialProvider, AmbientCredentials, SshKeyCredentials
from .repo_manager import RepoManager, open_repositories
from .aggregator import ResultAggregator
from .registry import RepoRegistry
from .logger import setup_logging

__all__ = [
    # Types
    'StatusFlags',
    'Distance',
    'JobState',
    'RepoResult',
    # Errors
    'GitboardError',
    'OpenError',
    'FetchError',
    'FetchTimeout',
    'StatusComputeError',
    'RegistryError',
    # Engine
    'RepositoryHandle',
    'compute_status',
    'compute_distance',
    'CredentialProvider',
    'AmbientCredentials',
    'SshKeyCredentials',
    'RepoManager',
    'open_repositories',
    'ResultAggregator',
    'RepoRegistry',
    'setup_logging',
]
