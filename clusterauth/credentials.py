"""
Persisted session credentials.

The session credential is the only local state clusterauth keeps. Stores are
injected into the transport and the session manager, so nothing holds a
module-level file handle.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from clusterauth.exceptions import CredentialStoreError
from clusterauth.logging import log_credential_event
from clusterauth.types.credentials import Credential

DEFAULT_CONFIG_DIR = Path("~/.clusterauth")
DEFAULT_CONFIG_FILE = "config.json"


def default_config_path() -> Path:
    """Return the per-user config file location."""
    return (DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE).expanduser()


class CredentialStore(ABC):
    """Abstract base class for session credential storage."""

    @abstractmethod
    def read(self) -> Credential | None:
        """Return the stored credential, or None when logged out."""
        pass

    @abstractmethod
    def write(self, credential: Credential) -> None:
        """Persist ``credential``, replacing any prior one."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored credential. No-op if none is stored."""
        pass


class MemoryCredentialStore(CredentialStore):
    """Credential store that lives in process memory."""

    def __init__(self, credential: Credential | None = None) -> None:
        self._credential = credential

    def read(self) -> Credential | None:
        return self._credential

    def write(self, credential: Credential) -> None:
        self._credential = credential
        log_credential_event("write", credential.subject, credential.token)

    def clear(self) -> None:
        if self._credential is not None:
            log_credential_event("clear", self._credential.subject, self._credential.token)
        self._credential = None


class FileCredentialStore(CredentialStore):
    """
    Credential store backed by the user's JSON config file.

    The credential lives under the ``v1`` section next to other settings
    (such as ``cluster_address``), which writes leave untouched. Every write
    goes to a temporary file in the same directory that then replaces the
    config file, so a crash never leaves a truncated record.

    Example:
        ```python
        store = FileCredentialStore()  # ~/.clusterauth/config.json
        store.write(Credential(token="abc123", subject="alice"))
        store.read().subject  # "alice"
        store.clear()
        ```
    """

    SECTION = "v1"

    def __init__(self, path: str | Path | None = None) -> None:
        """
        Initialize the store.

        Args:
            path: Config file location (default: ~/.clusterauth/config.json)
        """
        self.path = Path(path).expanduser() if path is not None else default_config_path()

    def read(self) -> Credential | None:
        section = self._load().get(self.SECTION) or {}
        token = section.get("session_token")
        if not token:
            return None
        if not isinstance(token, str):
            raise CredentialStoreError(f"config {self.path} has a malformed session token")
        ttl = section.get("ttl_seconds")
        if ttl is not None and (isinstance(ttl, bool) or not isinstance(ttl, int)):
            raise CredentialStoreError(f"config {self.path} has a malformed ttl_seconds: {ttl!r}")
        return Credential(
            token=token,
            subject=section.get("subject"),
            ttl_seconds=ttl,
        )

    def write(self, credential: Credential) -> None:
        config = self._load()
        section = config.get(self.SECTION) or {}
        config[self.SECTION] = section
        section["session_token"] = credential.token
        section["subject"] = credential.subject
        section["ttl_seconds"] = credential.ttl_seconds
        self._save(config)
        log_credential_event("write", credential.subject, credential.token)

    def clear(self) -> None:
        config = self._load()
        section = config.get(self.SECTION)
        if not section or not section.get("session_token"):
            return
        subject = section.get("subject")
        token = section.get("session_token")
        for key in ("session_token", "subject", "ttl_seconds"):
            section.pop(key, None)
        self._save(config)
        log_credential_event("clear", subject, token)

    def read_cluster_address(self) -> str | None:
        """Return the cluster address saved in the config file, if any."""
        section = self._load().get(self.SECTION) or {}
        return section.get("cluster_address") or None

    def _load(self) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise CredentialStoreError(f"error reading config {self.path}: {e}") from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CredentialStoreError(f"config {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CredentialStoreError(f"config {self.path} must contain a JSON object")
        section = data.get(self.SECTION)
        if section is not None and not isinstance(section, dict):
            raise CredentialStoreError(
                f"config {self.path}: section {self.SECTION!r} must be a JSON object"
            )
        return data

    def _save(self, config: dict[str, Any]) -> None:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
        except OSError as e:
            raise CredentialStoreError(f"error writing config {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2, sort_keys=True)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise CredentialStoreError(f"error writing config {self.path}: {e}") from e


__all__ = [
    "CredentialStore",
    "MemoryCredentialStore",
    "FileCredentialStore",
    "default_config_path",
]
