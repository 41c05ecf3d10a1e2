from typing import Protocol, Optional


### COMMENTS
# ==========================================================
# Kontrakt trwałego storage klucz-wartość (ports/storage.py).
# ==========================================================
# Odpowiednik localStorage przeglądarki: klucz -> string.
# - Niezależny od technologii (pamięć, plik JSON, baza SQL).
# - Adaptery mapują błędy technologiczne na PersistenceError.
# - Storage nie zna zadań; serializację robi TaskStore.


class KeyValueStorage(Protocol):
    """Interfejs trwałego storage klucz-wartość.

    Adaptery (implementacje) muszą:
    - zapewnić atomowość zapisu pojedynczego klucza,
    - mapować błędy technologiczne na `PersistenceError`,
    - zwracać `None` dla nieistniejącego klucza (to nie jest błąd).
    """

    def get_item(self, key: str) -> Optional[str]:
        """Zwraca wartość zapisaną pod `key` albo `None`, gdy klucz nie istnieje.

        Wyjątki domenowe:
            PersistenceError: Gdy odczyt się nie powiódł (np. błąd I/O).
        """

    def set_item(self, key: str, value: str) -> None:
        """Zapisuje (nadpisuje) wartość pod kluczem `key`.

        Wyjątki domenowe:
            PersistenceError: Gdy zapis się nie powiódł (np. brak miejsca).
        """

    def remove_item(self, key: str) -> None:
        """Usuwa klucz. Brak klucza to no-op."""
