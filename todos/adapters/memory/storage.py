from typing import Mapping, Optional

### COMMENTS
# ==========================================================
# Adapter pamięciowy storage (adapters/memory/storage.py).
# ==========================================================
# - Służy do testów i trybu `--backend memory` (brak trwałości między uruchomieniami).
# - Dane trzymane w słowniku `_data: dict[str, str]`.
# - `fail_writes=True` symuluje przepełniony storage (PersistenceError przy zapisie).

from todos.domain.errors import PersistenceError


class InMemoryStorage:
    """
        Storage klucz-wartość w pamięci.
        :param initial: Opcjonalne wartości startowe (seed).
    """
    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.writes = 0

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        """
            Zapisuje wartość pod kluczem.

            :raises PersistenceError: Gdy ustawiono `fail_writes` (symulacja quota exceeded).
        """
        if self.fail_writes:
            raise PersistenceError(key, "quota exceeded")
        self._data[key] = value
        self.writes += 1

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)
