from todos.domain.errors import TaskNotFoundError, TaskValidationError, PersistenceError, DomainError
from todos.domain.task import Task, TaskId
from todos.domain.enums import Priority, StatusFilter, SortOption, Theme
from todos.services.task_store import TaskStore
from todos.services.view_projector import project, count_tasks, Projection, TaskCounts
from todos.services.theme_service import ThemeService
from todos.ports.storage import KeyValueStorage
from todos.ports.confirm import always_confirm
from todos.adapters.memory.storage import InMemoryStorage
from todos.adapters.jsonfile.storage import JsonFileStorage
from todos.adapters.sql.storage import SqlStorage
from todos.adapters.system.id_provider_clock import ClockIdProvider
from todos.config import Settings
from todos.logging_setup import setup_logging
from todos.api.colors import PRIORITY_COLOR, THEME_STYLES, TaskColor
from typer import Argument, Exit, Option, Typer, confirm
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape
from pathlib import Path
from typing import Optional
import logging
import os


### COMMENTS
# ==========================================================
# CLI (Typer + Rich): renderer i wejście użytkownika dla Todos.
# ==========================================================
# Rola:
# - Tłumaczy surowe wejście na typowane komendy TaskStore (create/update/toggle/delete).
# - Wyświetla projekcję (filtr/szukaj/sortuj) w tabeli + liczniki dla całej kolekcji.
# - Łapie DomainError i drukuje przyjazne komunikaty (kod wyjścia 1).
#
# Zasady:
# - Zero logiki biznesowej, deleguj do TaskStore i view_projector.
# - Jednorazowy bootstrap zależności (storage + store + motyw) w callbacku.
# - Potwierdzenia operacji destrukcyjnych przez typer.confirm (albo --yes).

logger = logging.getLogger(__name__)

app = Typer(help="Todos: personal task manager")
console = Console()

store: TaskStore | None = None  # ustawimy w callbacku
themes: ThemeService | None = None

EMPTY_PLACEHOLDER = "No tasks yet. Add your first task."


def build_storage(backend: str, file: Path) -> KeyValueStorage:
    """Tworzy storage na bazie wybranego adaptera.
    - memory -> InMemory (bez trwałości)
    - sql    -> SQLite przez SQLAlchemy
    - json   -> plik JSON (domyślnie)
    """
    if backend == "memory":
        return InMemoryStorage()
    if backend == "sql":
        return SqlStorage(Path(file))
    return JsonFileStorage(Path(file))


def ask_user(message: str) -> bool:
    return confirm(message, default=False)


@app.callback()
def main(
    file: Optional[Path] = Option(
        None,
        "--file",
        "-f",
        help="Storage file (default: $TODOS_FILE or ~/.todos/todos.json)",
    ),
    backend: Optional[str] = Option(
        None,
        "--backend",
        "-b",
        help="Storage backend: json, sql or memory (default: $TODOS_BACKEND or json)",
    ),
    log_dir: Optional[Path] = Option(None, "--log-dir", help="Directory for todos.log"),
    verbose: bool = Option(False, "--verbose", "-v", help="Show debug logs on stderr"),
) -> None:
    """Bootstrap zależności na starcie procesu CLI."""
    global store, themes
    env = dict(os.environ)
    if backend:
        env["TODOS_BACKEND"] = backend
    try:
        settings = Settings.from_env(env)
    except ValueError as e:
        print_error("Configuration error", str(e))
        raise Exit(2)

    setup_logging(
        log_dir=log_dir or settings.log_dir,
        console_level=logging.DEBUG if verbose else settings.log_level,
    )
    path = file or settings.storage_file
    logger.debug("Using backend=%s file=%s", settings.backend, path)

    try:
        storage = build_storage(settings.backend, path)
        store = TaskStore(storage, ClockIdProvider(), confirm=ask_user)
        themes = ThemeService(storage)
    except PersistenceError as e:
        print_error("Storage error", str(e))
        raise Exit(1)


def styles() -> dict[str, str]:
    theme = themes.get() if themes else Theme.LIGHT
    return THEME_STYLES[theme]


def print_error(title: str, message: str) -> None:
    console.print(Panel.fit(f"❌ {escape(message)}", title=title, border_style="red"))


def color_priority(priority: Priority | str) -> str:
    """Zwraca priorytet w Rich-markup z kolorem."""
    try:
        color = PRIORITY_COLOR[Priority(priority)]
    except ValueError:
        color = TaskColor.DIM
    label = str(priority)
    return f"{color}{escape(label.capitalize())}{TaskColor.RESET}"


def render_stats(counts: TaskCounts) -> None:
    console.print(
        f"[{styles()['muted']}]Total: {counts.total} • Pending: {counts.pending} "
        f"• Completed: {counts.completed}[/]"
    )


def render_list(projection: Projection) -> None:
    """Renderuje tabelę Rich z projekcją i stopką z licznikami całej kolekcji."""
    st = styles()
    if projection.is_empty:
        console.print(Panel.fit(f"[{st['muted']}]{EMPTY_PLACEHOLDER}[/]", border_style=st["border"]))
        render_stats(projection.counts)
        return

    table = Table(show_lines=True, header_style=st["header"])
    table.add_column("ID", no_wrap=True, style=st["id"])
    table.add_column("Done", no_wrap=True, justify="center")
    table.add_column("Title")
    table.add_column("Due", no_wrap=True)
    table.add_column("Priority", no_wrap=True)

    for t in projection.tasks:
        title = escape(t.title)
        if t.description:
            title += f"\n[{st['muted']}]{escape(t.description)}[/]"
        if t.completed:
            title = f"[strike]{title}[/strike]"
        table.add_row(
            str(t.task_id),
            "✅" if t.completed else "⬜",
            title,
            t.due_date.isoformat() if t.due_date else "No due date",
            color_priority(t.priority),
        )

    console.print(table)
    render_stats(projection.counts)


def render_task(task: Task, title: str, border_style: str = "green") -> None:
    lines = [
        f"ID: {task.task_id}",
        f"Title: {escape(task.title)}",
        f"Description: {escape(task.description) if task.description else '[dim]none[/]'}",
        f"Due: {task.due_date.isoformat() if task.due_date else 'No due date'}",
        f"Priority: {color_priority(task.priority)}",
        f"Status: {'Completed' if task.completed else 'Pending'}",
    ]
    console.print(Panel.fit("\n".join(lines), title=title, border_style=border_style))


def print_not_found(task_id: int, e: TaskNotFoundError) -> None:
    console.print(Panel.fit(
        f"❌ {e}\n"
        f"[dim]No task with ID: {task_id}[/]\n"
        f"[dim]Use 'todos list' to find a valid ID[/]",
        title="Not found",
        border_style="red",
    ))


def print_persistence_error(e: PersistenceError) -> None:
    console.print(Panel.fit(
        f"❌ {escape(str(e))}\n[dim]The change was applied but could not be saved.[/]",
        title="Storage error",
        border_style="red",
    ))


@app.command("add")
def add(
    title: str,
    desc: str = Option("", "--desc", "-d"),
    due: Optional[str] = Option(None, "--due", help="Due date, YYYY-MM-DD"),
    priority: Priority = Option(Priority.NORMAL, "--priority", "-p"),
) -> None:
    """
    Dodaje nowe zadanie.

    Flow:
    - Wywołaj: store.create(title, desc, due, priority)
    - Sukces: Panel „✅ Task added”.
    - Błąd walidacji: TaskValidationError → czerwony Panel z podpowiedzią.
    """
    try:
        task = store.create(title, description=desc, due_date=due, priority=priority)
        render_task(task, "✅ Task added")
    except TaskValidationError as e:
        console.print(Panel.fit(
            f"❌ {escape(str(e))}\n[dim]Example:[/] todos add 'Title' -d 'Description' --due 2025-01-31",
            title="Validation error",
            border_style="red",
        ))
        raise Exit(1)
    except PersistenceError as e:
        print_persistence_error(e)
        raise Exit(1)


@app.command("edit")
def edit(
    task_id: int,
    title: Optional[str] = Option(None, "--title", "-t"),
    desc: Optional[str] = Option(None, "--desc", "-d"),
    due: Optional[str] = Option(None, "--due", help="Due date, YYYY-MM-DD"),
    clear_due: bool = Option(False, "--clear-due", help="Remove the due date"),
    priority: Optional[Priority] = Option(None, "--priority", "-p"),
) -> None:
    """
    Edytuje zadanie. Pola nie podane w opcjach zostają takie, jak były.

    Flow:
    - current = store.get(id)
    - store.update(id, ...) z pełnym zestawem pól
    """
    try:
        current = store.get(TaskId(task_id))
        if clear_due:
            new_due = None
        elif due is not None:
            new_due = due
        else:
            new_due = current.due_date
        task = store.update(
            current.task_id,
            title=current.title if title is None else title,
            description=current.description if desc is None else desc,
            due_date=new_due,
            priority=current.priority if priority is None else priority,
        )
        render_task(task, "✏️ Task updated")
    except TaskNotFoundError as e:
        print_not_found(task_id, e)
        raise Exit(1)
    except TaskValidationError as e:
        print_error("Validation error", str(e))
        raise Exit(1)
    except PersistenceError as e:
        print_persistence_error(e)
        raise Exit(1)


def _set_completed(task_id: int, completed: bool) -> None:
    try:
        task = store.toggle_completed(TaskId(task_id), completed)
        label = "Completed" if task.completed else "Pending"
        console.print(Panel.fit(
            f"✅ {escape(task.title)}\nStatus: {label}",
            title="Updated",
            border_style="green",
        ))
    except TaskNotFoundError as e:
        print_not_found(task_id, e)
        raise Exit(1)
    except PersistenceError as e:
        print_persistence_error(e)
        raise Exit(1)


@app.command("done")
def done(task_id: int) -> None:
    """Oznacza zadanie jako wykonane."""
    _set_completed(task_id, True)


@app.command("undo")
def undo(task_id: int) -> None:
    """Przywraca zadanie do stanu 'pending'."""
    _set_completed(task_id, False)


@app.command("rm")
def rm(
    task_id: int,
    yes: bool = Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """
    Usuwa zadanie (po potwierdzeniu).

    Brak zadania nie jest błędem, komenda tylko informuje, że nie było czego usuwać.
    """
    if not store.exists(TaskId(task_id)):
        console.print(Panel.fit(
            f"🟡 Nothing to delete: task {task_id} does not exist",
            title="Not found",
            border_style="yellow",
        ))
        return
    try:
        store.delete(TaskId(task_id), confirm=always_confirm if yes else None)
    except PersistenceError as e:
        print_persistence_error(e)
        raise Exit(1)
    if store.exists(TaskId(task_id)):
        console.print("[dim]Cancelled, nothing was deleted.[/]")
        return
    console.print(Panel.fit(
        f"🟡 Task deleted\nID: {task_id}",
        title="Deleted",
        border_style="yellow",
    ))


@app.command("clear-completed")
def clear_completed(
    yes: bool = Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Usuwa wszystkie wykonane zadania (po potwierdzeniu)."""
    completed = count_tasks(store.list()).completed
    if completed == 0:
        console.print("[dim]No completed tasks to clear.[/]")
        return
    try:
        removed = store.clear_completed(confirm=always_confirm if yes else None)
    except PersistenceError as e:
        print_persistence_error(e)
        raise Exit(1)
    if removed == 0:
        console.print("[dim]Cancelled, nothing was removed.[/]")
        return
    console.print(Panel.fit(
        f"🗑️ Removed {removed} completed task(s)",
        title="Cleared",
        border_style="yellow",
    ))


@app.command("list")
def list_cmd(
    status: StatusFilter = Option(StatusFilter.ALL, "--filter", "-F"),
    query: str = Option("", "--search", "-s"),
    sort: SortOption = Option(SortOption.NONE, "--sort", "-o"),
) -> None:
    """
    Listuje zadania: filtr statusu → wyszukiwanie → sortowanie.

    Liczniki w stopce dotyczą całej kolekcji, nie bieżącego widoku.
    """
    try:
        projection = project(store.list(), status_filter=status, query=query, sort=sort)
    except TaskValidationError as e:
        print_error("Validation error", str(e))
        raise Exit(1)
    render_list(projection)


@app.command("stats")
def stats() -> None:
    """Pokazuje liczniki: wszystkie / do zrobienia / wykonane."""
    render_stats(count_tasks(store.list()))


@app.command("show")
def show(task_id: int) -> None:
    """Pokazuje szczegóły pojedynczego zadania."""
    try:
        task = store.get(TaskId(task_id))
        render_task(task, "Task details", border_style=styles()["border"])
    except TaskNotFoundError as e:
        print_not_found(task_id, e)
        raise Exit(1)


@app.command("theme")
def theme(value: Optional[Theme] = Argument(None, help="light or dark; omit to toggle")) -> None:
    """Ustawia albo przełącza motyw (light/dark)."""
    try:
        current = themes.set(value) if value is not None else themes.toggle()
    except DomainError as e:
        print_error("Storage error", str(e))
        raise Exit(1)
    icon = "☀️" if current is Theme.DARK else "🌙"
    console.print(Panel.fit(f"{icon} Theme: {current}", border_style=styles()["border"]))


@app.command("demo")
def demo() -> None:
    """
    Pokazowy przebieg działania aplikacji w jednym procesie (InMemory).
    Nie dotyka zapisanych zadań użytkownika.
    """
    demo_store = TaskStore(InMemoryStorage(), ClockIdProvider())

    console.print(Panel.fit("🚀 Demo start", border_style="cyan"))

    # 1️⃣ Tworzymy zadania
    t1 = demo_store.create("Buy milk", description="2% lactose-free", priority="low")
    t2 = demo_store.create("Call mom", description="Sunday afternoon", due_date="2025-01-05")
    t3 = demo_store.create("Read a book", description="DDD chapter 3", due_date="2025-01-03")
    demo_store.create("Pay rent", priority="high", due_date="2025-01-01")

    console.print("\n📋 After creating:")
    render_list(project(demo_store.list()))

    # 2️⃣ Jedno wykonane, jedno usunięte
    demo_store.toggle_completed(t2.task_id, True)
    demo_store.delete(t3.task_id)

    console.print("\n📋 Pending, sorted by priority:")
    render_list(project(demo_store.list(), status_filter="pending", sort="priority"))

    console.print(f"\n📋 Search 'milk' → {t1.title}:")
    render_list(project(demo_store.list(), query="milk"))

    removed = demo_store.clear_completed()
    console.print(Panel.fit(f"🗑️ Cleared {removed} completed task(s)", border_style="red"))

    console.print(Panel.fit("🏁 Demo finished", border_style="cyan"))


if __name__ == "__main__":
    app()
