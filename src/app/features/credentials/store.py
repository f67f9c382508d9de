"""Key-value store holding the reporting service credentials.

The store is a small hash-like interface (``get_all``, ``set``, ``delete``)
keyed by name. Routes receive it through ``get_credential_store`` so tests
can swap in ``InMemoryCredentialStore``."""
import abc
import logging
from typing import Dict, Mapping, Optional

from .models import KeyValueEntry

logger = logging.getLogger(__name__)


class CredentialStore(abc.ABC):
    @abc.abstractmethod
    async def get_all(self, key: str) -> Dict[str, str]:
        """Returns the mapping stored under ``key``, or an empty dict."""

    @abc.abstractmethod
    async def set(self, key: str, mapping: Mapping[str, str]) -> None:
        """Merges ``mapping`` into the mapping stored under ``key``."""

    @abc.abstractmethod
    async def delete(self, key: str) -> None:
        """Removes ``key``. Deleting a missing key is not an error."""


class TortoiseCredentialStore(CredentialStore):
    async def get_all(self, key: str) -> Dict[str, str]:
        entry = await KeyValueEntry.get_or_none(key=key)
        if entry is None:
            return {}
        return dict(entry.value or {})

    async def set(self, key: str, mapping: Mapping[str, str]) -> None:
        entry, created = await KeyValueEntry.get_or_create(key=key, defaults={"value": dict(mapping)})
        if not created:
            entry.value = {**(entry.value or {}), **mapping}
            await entry.save()
        logger.debug(f"Stored fields {sorted(mapping)} under '{key}'")

    async def delete(self, key: str) -> None:
        deleted = await KeyValueEntry.filter(key=key).delete()
        logger.debug(f"Deleted '{key}' ({deleted} row(s))")


class InMemoryCredentialStore(CredentialStore):
    def __init__(self, initial: Optional[Mapping[str, Mapping[str, str]]] = None):
        self._data: Dict[str, Dict[str, str]] = {k: dict(v) for k, v in (initial or {}).items()}

    async def get_all(self, key: str) -> Dict[str, str]:
        return dict(self._data.get(key, {}))

    async def set(self, key: str, mapping: Mapping[str, str]) -> None:
        self._data.setdefault(key, {}).update(mapping)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


def get_credential_store() -> CredentialStore:
    return TortoiseCredentialStore()
