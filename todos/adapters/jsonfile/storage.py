from todos.domain.errors import PersistenceError
from pathlib import Path
from typing import Optional
import os, json
import logging

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Storage klucz-wartość w jednym pliku JSON: {"klucz": "wartość", ...}.

    Każdy zapis przepisuje cały plik atomowo (plik tymczasowy + os.replace).
    """

    def __init__(self, path: Path) -> None:
        """Inicjalizuje storage. Tworzy katalog nadrzędny dla pliku, jeśli nie istnieje."""
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(str(self.path), str(e))

    def _load(self) -> dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise PersistenceError(str(self.path), str(e))

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            # uszkodzony plik = pusty storage; kolejny zapis go nadpisze
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: top level is not an object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _atomic_dump(self, data: dict[str, str]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".swap")
        try:
            with tmp.open("w", encoding="utf-8", newline="\n") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            try:
                if tmp.exists():
                    tmp.unlink()
            except OSError:
                logger.debug("Could not remove temporary file %s", tmp)
            raise PersistenceError(str(self.path), str(e))

    def get_item(self, key: str) -> Optional[str]:
        """Zwraca wartość pod kluczem albo None."""
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Zapisuje wartość; pozostałe klucze w pliku zostają nietknięte."""
        data = self._load()
        data[key] = value
        self._atomic_dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._atomic_dump(data)
