"""
Credential provider for the model service API key.

The key is resolved from the environment or from a user-supplied value
persisted to a local file. Callers depend on `CredentialProvider`, never on
the environment directly, so an invalid key can be cleared and re-requested.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from threading import RLock
from typing import Optional, Sequence

from .logging import get_logger

logger = get_logger(__name__, component="credentials")

ENV_KEY_NAMES = ("GEMINI_API_KEY", "API_KEY")


class CredentialProvider(ABC):
    """Capability gate for the model-service credential."""

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the current credential or None."""

    @abstractmethod
    def set(self, value: str) -> None:
        """Store a user-supplied credential."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the credential (after the service rejected it)."""

    def has_credential(self) -> bool:
        return bool(self.get())

    def request_credential(self) -> bool:
        """Ask for a credential; returns whether one is now available.

        A headless provider cannot prompt, so the default just reports the
        current state and the HTTP layer asks the user to (re)enter the key.
        """
        available = self.has_credential()
        if not available:
            logger.info("Credential requested but none is configured")
        return available


class LocalCredentialStore(CredentialProvider):
    """Environment-first store with a file-persisted user override."""

    def __init__(self, path: Path, env_names: Sequence[str] = ENV_KEY_NAMES):
        self._path = Path(path)
        self._env_names = tuple(env_names)
        self._env_suppressed = False
        self._lock = RLock()

    def _read_file(self) -> Optional[str]:
        if not self._path.exists():
            return None
        value = self._path.read_text(encoding="utf-8").strip()
        return value or None

    def _read_env(self) -> Optional[str]:
        if self._env_suppressed:
            return None
        for name in self._env_names:
            value = (os.getenv(name) or "").strip()
            if value:
                return value
        return None

    def get(self) -> Optional[str]:
        with self._lock:
            return self._read_file() or self._read_env()

    def set(self, value: str) -> None:
        value = (value or "").strip()
        if not value:
            raise ValueError("Credential must not be empty")
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(value, encoding="utf-8")
            try:
                os.chmod(self._path, 0o600)
            except OSError:
                logger.warning("Could not restrict credential file permissions", extra={"path": str(self._path)})
            self._env_suppressed = False
        logger.info("Credential stored", extra={"path": str(self._path)})

    def clear(self) -> None:
        with self._lock:
            self._path.unlink(missing_ok=True)
            # An environment key the service rejected stays rejected until restart
            self._env_suppressed = True
        logger.warning("Credential cleared")


_credential_provider: Optional[CredentialProvider] = None


def get_credential_provider() -> CredentialProvider:
    """Get the shared credential provider (singleton pattern)."""
    global _credential_provider
    if _credential_provider is None:
        from ..config import CREDENTIAL_FILE

        _credential_provider = LocalCredentialStore(CREDENTIAL_FILE)
    return _credential_provider
