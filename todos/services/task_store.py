from __future__ import annotations
from todos.ports.storage import KeyValueStorage
from todos.ports.id_provider import IdProvider
from todos.ports.confirm import Confirm, always_confirm
from todos.domain.task import Task, TaskId
from todos.domain.enums import Priority
from todos.domain.errors import TaskValidationError, TaskNotFoundError, PersistenceError
from dataclasses import replace
from datetime import date, datetime
from typing import Any
import json
import logging

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"


### COMMENTS
# ==========================================================
# Magazyn zadań (services/task_store.py): przypadki użycia + trwałość.
# ==========================================================
# Rola:
# - Jedyny właściciel kolekcji zadań (lista w kolejności dodania).
# - Walidacja wejścia (tytuł, data, priorytet) PRZED jakąkolwiek zmianą.
# - Po każdej mutacji zapisuje CAŁĄ kolekcję pod jednym kluczem storage.
#
# Zasady:
# - Mutacje nigdy nie zmieniają kolejności; sortowanie robi tylko widok (view_projector).
# - Task jest niemutowalny (`frozen=True`), zmiana = nowa instancja na tej samej pozycji.
# - Błąd zapisu (PersistenceError) nie cofa zmiany w pamięci; wynik operacji jest w `error.result`.
# - Operacje destrukcyjne (delete, clear_completed) pytają o zgodę przez wstrzyknięty `Confirm`.


def _encode_task(task: Task) -> dict[str, Any]:
    return {
        "id": int(task.task_id),
        "title": task.title,
        "description": task.description,
        "dueDate": task.due_date.isoformat() if task.due_date else "",
        "priority": str(task.priority),  # enum -> str, nieznana wartość bez zmian
        "completed": task.completed,
    }


def _decode_task(row: dict[str, Any]) -> Task:
    raw_id = row["id"]
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float)):
        raise ValueError(f"id must be an integer, got {raw_id!r}")
    if isinstance(raw_id, float) and not raw_id.is_integer():
        raise ValueError(f"id must be an integer, got {raw_id!r}")

    raw_title = row["title"]
    if not isinstance(raw_title, str):
        raise ValueError(f"title must be a string, got {raw_title!r}")
    title = raw_title.strip()
    if not title:
        raise ValueError("empty title")

    raw_due = row.get("dueDate") or None
    try:
        due_date = _parse_due(raw_due)
    except ValueError:
        logger.warning("Task %s: dropping invalid dueDate %r", raw_id, raw_due)
        due_date = None

    raw_priority = row.get("priority") or Priority.NORMAL.value
    try:
        priority: Priority | str = Priority(raw_priority)
    except ValueError:
        priority = str(raw_priority)

    return Task(
        task_id=TaskId(int(raw_id)),
        title=title,
        description=str(row.get("description") or "").strip(),
        due_date=due_date,
        priority=priority,
        completed=bool(row.get("completed", False)),
    )


def _parse_due(value: date | str | None) -> date | None:
    """date / ISO 'YYYY-MM-DD' / None -> date | None. Pusty string = brak terminu."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    return date.fromisoformat(text)


def _clean_title(title: str | None) -> str:
    if not title or not title.strip():
        raise TaskValidationError("title", "Title is required.")
    return title.strip()


def _clean_due(due_date: date | str | None) -> date | None:
    try:
        return _parse_due(due_date)
    except ValueError:
        raise TaskValidationError("due_date", f"expected YYYY-MM-DD, got {due_date!r}")


def _clean_priority(priority: Priority | str | None) -> Priority:
    if priority is None:
        return Priority.NORMAL
    try:
        if isinstance(priority, Priority):
            return priority
        return Priority(str(priority).strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in Priority)
        raise TaskValidationError("priority", f"expected one of: {allowed}")


class TaskStore:
    """
    Autorytatywny, trwały magazyn zadań.

    Przy konstrukcji wczytuje kolekcję ze storage (brak klucza lub uszkodzona
    zawartość = pusta lista). Każda mutacja od razu zapisuje całą kolekcję.

    :param storage: Implementacja portu KeyValueStorage.
    :param ids: Źródło identyfikatorów (IdProvider).
    :param confirm: Domyślne potwierdzenie operacji destrukcyjnych (None = zawsze tak).
    :param key: Klucz storage, pod którym trzymana jest kolekcja.
    """
    def __init__(
        self,
        storage: KeyValueStorage,
        ids: IdProvider,
        confirm: Confirm | None = None,
        key: str = TASKS_KEY,
    ) -> None:
        self.storage = storage
        self.ids = ids
        self.confirm = confirm or always_confirm
        self.key = key
        self._tasks: list[Task] = self._load()
        self._issued: set[TaskId] = {t.task_id for t in self._tasks}
        logger.info("TaskStore ready key=%s total=%s", key, len(self._tasks))

    # ---- trwałość ----

    def _load(self) -> list[Task]:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Stored tasks are not valid JSON, starting empty: %s", e)
            return []
        if not isinstance(records, list):
            logger.warning("Stored tasks are not a list, starting empty")
            return []

        tasks: list[Task] = []
        seen: set[TaskId] = set()
        for position, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning("Skipping task record #%s: not an object", position)
                continue
            try:
                task = _decode_task(record)
            except (KeyError, ValueError, TypeError) as e:
                logger.warning("Skipping task record #%s: %s", position, e)
                continue
            if task.task_id in seen:
                logger.warning("Skipping task record #%s: duplicate id %s", position, task.task_id)
                continue
            seen.add(task.task_id)
            tasks.append(task)
        return tasks

    def _persist(self, result):
        payload = json.dumps([_encode_task(t) for t in self._tasks], ensure_ascii=False)
        try:
            self.storage.set_item(self.key, payload)
        except PersistenceError as e:
            logger.warning("Could not persist %s tasks (kept in memory): %s", len(self._tasks), e)
            e.result = result
            raise
        return result

    # ---- pomocnicze ----

    def _index(self, task_id: TaskId) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.task_id == task_id:
                return i
        return None

    def _require(self, task_id: TaskId) -> int:
        i = self._index(task_id)
        if i is None:
            raise TaskNotFoundError(task_id)
        return i

    def _new_id(self) -> TaskId:
        task_id = TaskId(self.ids.new_id())
        while task_id in self._issued:
            task_id = TaskId(self.ids.new_id())
        self._issued.add(task_id)
        return task_id

    # ---- przypadki użycia ----

    def create(
        self,
        title: str,
        description: str | None = "",
        due_date: date | str | None = None,
        priority: Priority | str | None = Priority.NORMAL,
    ) -> Task:
        """
            Tworzy nowe zadanie na końcu kolekcji i zapisuje kolekcję.

            - Walidacja: `title` nie może być pusty ani składać się wyłącznie z białych znaków.
            - `due_date`: date, 'YYYY-MM-DD' albo None/"" (brak terminu).
            - `priority`: domyślnie "normal".
            - Status startowy: completed = False.

            :raises TaskValidationError: Gdy dane wejściowe są niepoprawne (nic nie jest dodawane).
            :raises PersistenceError: Gdy zapis się nie powiódł (zadanie zostaje w pamięci).
            :return: Utworzony obiekt `Task`.
        """
        clean_title = _clean_title(title)
        clean_due = _clean_due(due_date)
        clean_priority = _clean_priority(priority)

        task = Task(
            task_id=self._new_id(),
            title=clean_title,
            description=(description or "").strip(),
            due_date=clean_due,
            priority=clean_priority,
        )
        self._tasks.append(task)
        logger.debug("Created task %s", task.task_id)
        return self._persist(task)

    def update(
        self,
        task_id: TaskId,
        title: str,
        description: str | None = "",
        due_date: date | str | None = None,
        priority: Priority | str | None = Priority.NORMAL,
    ) -> Task:
        """
            Pełna podmiana pól edytowalnych (title, description, due_date, priority).

            `task_id` i `completed` pozostają bez zmian, pozycja w kolekcji też.

            :raises TaskNotFoundError: Gdy nie ma zadania o tym id.
            :raises TaskValidationError: Gdy dane wejściowe są niepoprawne.
            :return: Zaktualizowany obiekt `Task`.
        """
        i = self._require(task_id)
        clean_title = _clean_title(title)
        clean_due = _clean_due(due_date)
        clean_priority = _clean_priority(priority)

        updated = replace(
            self._tasks[i],
            title=clean_title,
            description=(description or "").strip(),
            due_date=clean_due,
            priority=clean_priority,
        )
        self._tasks[i] = updated
        logger.debug("Updated task %s", task_id)
        return self._persist(updated)

    def toggle_completed(self, task_id: TaskId, completed: bool) -> Task:
        """
            Marks a task as completed (`completed=True`) or pending again (`completed=False`).

            :raises TaskNotFoundError: If no task with the given ID exists.
            :return: The updated `Task` instance.
        """
        i = self._require(task_id)
        updated = replace(self._tasks[i], completed=bool(completed))
        self._tasks[i] = updated
        logger.debug("Task %s completed=%s", task_id, updated.completed)
        return self._persist(updated)

    def delete(self, task_id: TaskId, confirm: Confirm | None = None) -> None:
        """
            Usuwa zadanie o podanym id.

            - Brak zadania to no-op (bez pytania i bez zapisu), więc operacja jest idempotentna.
            - Odmowa w `confirm` zostawia stan bez zmian.

            :param confirm: Nadpisuje domyślne potwierdzenie magazynu dla tego wywołania.
        """
        i = self._index(task_id)
        if i is None:
            logger.debug("Delete of missing task %s ignored", task_id)
            return None
        ask = confirm or self.confirm
        if not ask(f"Delete task '{self._tasks[i].title}'?"):
            logger.debug("Delete of task %s declined", task_id)
            return None
        del self._tasks[i]
        logger.debug("Deleted task %s", task_id)
        return self._persist(None)

    def clear_completed(self, confirm: Confirm | None = None) -> int:
        """
            Usuwa wszystkie zadania z completed = True.

            Pozostałe zadania zachowują kolejność. Gdy nie ma czego usuwać,
            nie pyta i nie zapisuje.

            :return: Liczba usuniętych zadań (0 także przy odmowie).
        """
        removed = sum(1 for t in self._tasks if t.completed)
        if removed == 0:
            return 0
        ask = confirm or self.confirm
        if not ask(f"This will remove {removed} completed task(s). Continue?"):
            logger.debug("Clear completed declined")
            return 0
        self._tasks = [t for t in self._tasks if not t.completed]
        logger.debug("Cleared %s completed tasks", removed)
        return self._persist(removed)

    def list(self) -> list[Task]:
        """Zwraca kopię kolekcji w kolejności dodania (zmiany w niej nie wpływają na magazyn)."""
        return list(self._tasks)

    def get(self, task_id: TaskId) -> Task:
        """
            Zwraca pojedyncze zadanie o wskazanym identyfikatorze.

            :raises TaskNotFoundError: Gdy nie znaleziono zadania.
        """
        return self._tasks[self._require(task_id)]

    def exists(self, task_id: TaskId) -> bool:
        return self._index(task_id) is not None

    def __len__(self) -> int:
        return len(self._tasks)
