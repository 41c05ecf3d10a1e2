"""Widok listy zadań: filtr statusu -> wyszukiwanie -> sortowanie.

Czyste funkcje bez stanu; magazyn (TaskStore) nic o nich nie wie.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from todos.domain.task import Task
from todos.domain.enums import Priority, StatusFilter, SortOption
from todos.domain.errors import TaskValidationError

PRIORITY_RANK = {Priority.HIGH: 1, Priority.NORMAL: 2, Priority.LOW: 3}
UNKNOWN_PRIORITY_RANK = 99


@dataclass(frozen=True)
class TaskCounts:
    total: int
    pending: int
    completed: int


@dataclass(frozen=True)
class Projection:
    tasks: list[Task] = field(default_factory=list)
    counts: TaskCounts = TaskCounts(0, 0, 0)

    @property
    def is_empty(self) -> bool:
        return not self.tasks


def priority_rank(priority: Priority | str) -> int:
    try:
        return PRIORITY_RANK[Priority(priority)]
    except ValueError:
        return UNKNOWN_PRIORITY_RANK


def count_tasks(tasks: Iterable[Task]) -> TaskCounts:
    """Liczniki zawsze dla całej kolekcji, niezależnie od aktywnego filtra."""
    total = 0
    completed = 0
    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
    return TaskCounts(total=total, pending=total - completed, completed=completed)


def _coerce(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise TaskValidationError(field_name, f"expected one of: {allowed}")


def filter_by_status(tasks: Iterable[Task], status_filter: StatusFilter) -> list[Task]:
    if status_filter is StatusFilter.PENDING:
        return [t for t in tasks if not t.completed]
    if status_filter is StatusFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def search(tasks: Iterable[Task], query: str | None) -> list[Task]:
    needle = (query or "").strip().casefold()
    if not needle:
        return list(tasks)
    return [
        t for t in tasks
        if needle in t.title.casefold()
        or (t.description and needle in t.description.casefold())
    ]


def _due_key(task: Task) -> tuple[bool, date]:
    # bez terminu -> na koniec
    return (task.due_date is None, task.due_date or date.min)


def sort_tasks(tasks: Iterable[Task], sort: SortOption) -> list[Task]:
    # sorted() jest stabilne: remisy zachowują kolejność wejściową
    if sort is SortOption.DUE_DATE:
        return sorted(tasks, key=_due_key)
    if sort is SortOption.PRIORITY:
        return sorted(tasks, key=lambda t: priority_rank(t.priority))
    return list(tasks)


def project(
    tasks: Iterable[Task],
    status_filter: StatusFilter | str = StatusFilter.ALL,
    query: str | None = "",
    sort: SortOption | str = SortOption.NONE,
) -> Projection:
    """
    Zwraca zadania do wyświetlenia oraz liczniki dla całej kolekcji.

    Kolejność etapów: filtr statusu -> wyszukiwanie (tytuł lub opis, bez wielkości liter)
    -> sortowanie (stabilne). Wejście nie jest modyfikowane.

    :raises TaskValidationError: Dla nieznanego filtra lub sortowania.
    """
    status_filter = _coerce(StatusFilter, status_filter, "filter")
    sort = _coerce(SortOption, sort, "sort")

    snapshot = list(tasks)
    visible = filter_by_status(snapshot, status_filter)
    visible = search(visible, query)
    visible = sort_tasks(visible, sort)
    return Projection(tasks=visible, counts=count_tasks(snapshot))
