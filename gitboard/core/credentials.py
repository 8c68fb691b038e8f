"""Credential providers for fetching from remotes."""

import os
import shlex
from abc import ABC, abstractmethod
from typing import Dict, Optional


class CredentialProvider(ABC):
    """Supplies authentication settings to git fetch processes.

    Providers are selected once at startup and shared read-only by all
    workers.
    """

    name: str = "base"

    @abstractmethod
    def environment(self) -> Dict[str, str]:
        """Extra environment variables for a fetch subprocess."""
        pass


class AmbientCredentials(CredentialProvider):
    """Use whatever the user's ssh-agent and git configuration provide."""

    name = "ambient"

    def environment(self) -> Dict[str, str]:
        return {}


class SshKeyCredentials(CredentialProvider):
    """Authenticate over SSH with an explicit private key."""

    name = "ssh-key"

    def __init__(self, key_path: str):
        """Initialize SSH key credentials.

        Args:
            key_path: Path to the private key file

        Raises:
            ValueError: If the key file does not exist
        """
        key_path = os.path.expanduser(key_path)
        if not os.path.isfile(key_path):
            raise ValueError(f"SSH key not found: {key_path}")
        self.key_path = key_path

    def environment(self) -> Dict[str, str]:
        command = (
            f"ssh -i {shlex.quote(self.key_path)} "
            "-o IdentitiesOnly=yes -o BatchMode=yes"
        )
        return {'GIT_SSH_COMMAND': command}


def credentials_from_config(ssh_key: Optional[str]) -> CredentialProvider:
    """Pick a credential provider from configuration.

    Args:
        ssh_key: Optional private key path

    Returns:
        SshKeyCredentials if a key is configured, AmbientCredentials otherwise
    """
    if ssh_key:
        return SshKeyCredentials(ssh_key)
    return AmbientCredentials()
