from typing import NewType
from datetime import date
from dataclasses import dataclass

from todos.domain.enums import Priority

TaskId = NewType("TaskId", int)

@dataclass(frozen=True)
class Task():
    """
    Model domenowy pojedynczego zadania; niemutowalny.
    Zmiana pola = nowa instancja podstawiona w tym samym miejscu kolekcji (robi to TaskStore).
    """
    task_id: TaskId
    title: str
    description: str = ""
    due_date: date | None = None
    priority: Priority | str = Priority.NORMAL
    completed: bool = False


### COMMENTS
# ======================================
# Pola
# ======================================
# - task_id: liczba całkowita nadawana przy tworzeniu (IdProvider), nigdy nie zmieniana.
# - title: zawsze niepusty i przycięty (pilnuje tego serwis, nie model).
# - description: pusty string oznacza "brak opisu"; nie jest wtedy celem wyszukiwania.
# - due_date: data bez czasu albo None; brak walidacji przeszłość/przyszłość.
# - priority: zwykle Priority, ale rekord wczytany z pliku może mieć nieznaną wartość
#   (zostaje jako surowy string, żeby nie zgubić danych przy kolejnym zapisie).
# - completed: jedyne źródło prawdy dla podziału pending/completed.
