

### COMMENTS
# ============================================
# Konwencja użycia błędów domenowych w projekcie
# ============================================
# - Adaptery storage:
#     * mapują błędy techniczne (OSError, SQLAlchemyError) na PersistenceError
#
# - Serwisy:
#     * walidują dane użytkownika i rzucają TaskValidationError
#     * update/toggle na nieistniejącym id -> TaskNotFoundError (delete to no-op)
#     * błąd zapisu NIE cofa zmiany w pamięci; wynik operacji trafia do `error.result`
#
# - UI (CLI):
#     * łapie DomainError (lub konkretne klasy) i wyświetla przyjazny komunikat


class DomainError(Exception):
    """Bazowa klasa dla błędów domenowych.
    Umożliwia odróżnienie błędów domeny (logika aplikacji) od błędów technicznych.
    Nie powinna być rzucana bezpośrednio, używaj klas pochodnych.
    """

class TaskValidationError(DomainError):
    """Rzucany, gdy dane wejściowe nie spełniają reguł dla zadania.
    Przykłady:
    - tytuł jest pusty albo składa się z samych spacji,
    - data `due_date` nie jest w formacie ISO (YYYY-MM-DD),
    - priorytet spoza zestawu high/normal/low,
    - nieznany filtr lub sortowanie widoku.
    Zgłaszany przed jakąkolwiek zmianą stanu.
    """
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(self.__str__())
    def __str__(self):
        return f"Invalid '{self.field}': {self.message}"


class TaskNotFoundError(DomainError):
    """Rzucany, gdy operacja wymaga istniejącego zadania (update, toggle, get)."""
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(self.__str__())
    def __str__(self):
        return f"Task {self.task_id} does not exist."


class PersistenceError(DomainError):
    """Rzucany, gdy zapis (lub odczyt) trwałego storage się nie powiódł.

    Stan w pamięci pozostaje źródłem prawdy dla bieżącej sesji. `result` przechowuje
    wynik operacji, która zdążyła się wykonać w pamięci (np. utworzony Task).
    """
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        self.result = None
        super().__init__(self.__str__())
    def __str__(self):
        return f"Storage error for key '{self.key}': {self.reason}"
