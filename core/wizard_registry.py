# core/wizard_registry.py

"""
In-memory registry of open wizard sessions.

A session lives from "start" until the user closes it, it completes, or it
sits idle for longer than WIZARD_SESSION_TTL_SECONDS. Sessions are scoped
to the user who started them.
"""

from datetime import datetime, timedelta
from threading import Lock
from typing import Optional

from core.config import settings
from core.errors import WizardNotFound
from core.logging_config import get_logger
from core.wizard import Wizard


logger = get_logger("wizard.registry")


class RegistryEntry:
    """A wizard plus its idle expiry."""

    def __init__(self, wizard: Wizard, ttl_seconds: int):
        self.wizard = wizard
        self.ttl_seconds = ttl_seconds
        self.touch()

    def touch(self):
        self.expires_at = datetime.now() + timedelta(seconds=self.ttl_seconds)

    def is_expired(self) -> bool:
        return datetime.now() >= self.expires_at


class WizardRegistry:
    """
    Thread-safe store of wizards keyed by wizard id.

    Lookups refresh the idle timer; expired entries are dropped lazily on
    access and by cleanup_expired().
    """

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds or settings.WIZARD_SESSION_TTL_SECONDS
        self._entries: dict[str, RegistryEntry] = {}
        self._lock = Lock()

    def add(self, wizard: Wizard) -> Wizard:
        with self._lock:
            self._entries[wizard.id] = RegistryEntry(wizard, self.ttl_seconds)
        logger.debug(f"Wizard {wizard.id} ({wizard.flow}) registered")
        return wizard

    def get(self, wizard_id: str, owner_id: Optional[str] = None) -> Wizard:
        """
        Fetch a wizard. Raises WizardNotFound when missing, expired, or
        owned by someone else (no distinction, to avoid leaking ids).
        """
        with self._lock:
            entry = self._entries.get(wizard_id)
            if entry is None:
                raise WizardNotFound(wizard_id)

            if entry.is_expired():
                del self._entries[wizard_id]
                raise WizardNotFound(wizard_id)

            if owner_id is not None and entry.wizard.owner_id != owner_id:
                raise WizardNotFound(wizard_id)

            entry.touch()
            return entry.wizard

    def discard(self, wizard_id: str):
        with self._lock:
            self._entries.pop(wizard_id, None)

    def close(self, wizard_id: str, owner_id: Optional[str] = None):
        """Close (cancel) a wizard and forget it."""
        wizard = self.get(wizard_id, owner_id)
        wizard.close()
        self.discard(wizard_id)
        logger.debug(f"Wizard {wizard_id} closed")

    def cleanup_expired(self) -> int:
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.is_expired()]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info(f"Dropped {len(expired)} idle wizard session(s)")
        return len(expired)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)


# Global registry instance
_registry = WizardRegistry()


def get_registry() -> WizardRegistry:
    """FastAPI dependency / accessor for the global registry."""
    return _registry
