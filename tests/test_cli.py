import json
import logging
import pytest
from typer.testing import CliRunner
from todos.api.cli import app

runner = CliRunner()


@pytest.fixture
def cli(tmp_path, monkeypatch):
    """Wywołuje CLI na pliku tymczasowym; logi też lądują w tmp_path."""
    monkeypatch.setenv("TODOS_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("TODOS_BACKEND", raising=False)
    monkeypatch.delenv("TODOS_FILE", raising=False)
    file = tmp_path / "todos.json"

    def invoke(*args: str, input: str | None = None):
        return runner.invoke(app, ["--file", str(file), *args], input=input)

    invoke.file = file
    yield invoke

    # setup_logging z CLI podpina handlery do roota; sprzątamy po teście
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()


def stored_tasks(file) -> list[dict]:
    data = json.loads(file.read_text(encoding="utf-8"))
    return json.loads(data["tasks"])


def test_add_and_list(cli):
    result = cli("add", "Buy milk", "-d", "lactose-free", "--due", "2025-01-31", "-p", "high")
    assert result.exit_code == 0, result.output
    assert "Task added" in result.output

    listed = cli("list")
    assert listed.exit_code == 0
    assert "Buy milk" in listed.output
    assert "2025-01-31" in listed.output
    assert "Total: 1" in listed.output

    tasks = stored_tasks(cli.file)
    assert tasks[0]["title"] == "Buy milk"
    assert tasks[0]["priority"] == "high"


def test_add_empty_title_fails(cli):
    result = cli("add", "   ")

    assert result.exit_code == 1
    assert "Validation error" in result.output
    assert not cli.file.exists()


def test_add_bad_due_date_fails(cli):
    result = cli("add", "A", "--due", "tomorrow")

    assert result.exit_code == 1
    assert "due_date" in result.output


def test_empty_list_shows_placeholder(cli):
    result = cli("list")

    assert result.exit_code == 0
    assert "No tasks yet" in result.output
    assert "Total: 0" in result.output


def test_done_and_filters(cli):
    cli("add", "Alpha")
    cli("add", "Beta")
    beta_id = stored_tasks(cli.file)[1]["id"]

    assert cli("done", str(beta_id)).exit_code == 0

    completed = cli("list", "--filter", "completed")
    pending = cli("list", "--filter", "pending")
    assert "Beta" in completed.output and "Alpha" not in completed.output
    assert "Alpha" in pending.output and "Beta" not in pending.output
    assert "Total: 2 • Pending: 1 • Completed: 1" in pending.output

    assert cli("undo", str(beta_id)).exit_code == 0
    assert stored_tasks(cli.file)[1]["completed"] is False


def test_done_unknown_id(cli):
    result = cli("done", "123")

    assert result.exit_code == 1
    assert "Not found" in result.output


def test_search_and_sort(cli):
    cli("add", "Later", "--due", "2025-05-01")
    cli("add", "Undated milk")
    cli("add", "Sooner", "--due", "2025-01-01", "-d", "get MILK")

    searched = cli("list", "--search", "milk")
    assert "Sooner" in searched.output
    assert "Undated" in searched.output
    assert "Later" not in searched.output

    by_due = cli("list", "--sort", "dueDate").output
    assert by_due.index("Sooner") < by_due.index("Later") < by_due.index("Undated")


def test_edit_keeps_unspecified_fields(cli):
    cli("add", "Old", "-p", "low", "--due", "2025-02-02")
    task_id = stored_tasks(cli.file)[0]["id"]

    result = cli("edit", str(task_id), "--title", "New")

    assert result.exit_code == 0, result.output
    task = stored_tasks(cli.file)[0]
    assert task["title"] == "New"
    assert task["priority"] == "low"
    assert task["dueDate"] == "2025-02-02"

    cli("edit", str(task_id), "--clear-due")
    assert stored_tasks(cli.file)[0]["dueDate"] == ""


def test_edit_empty_title_fails(cli):
    cli("add", "Keep")
    task_id = stored_tasks(cli.file)[0]["id"]

    result = cli("edit", str(task_id), "--title", " ")

    assert result.exit_code == 1
    assert stored_tasks(cli.file)[0]["title"] == "Keep"


def test_rm_asks_for_confirmation(cli):
    cli("add", "Doomed")
    task_id = stored_tasks(cli.file)[0]["id"]

    declined = cli("rm", str(task_id), input="n\n")
    assert declined.exit_code == 0
    assert "Cancelled" in declined.output
    assert len(stored_tasks(cli.file)) == 1

    accepted = cli("rm", str(task_id), input="y\n")
    assert accepted.exit_code == 0
    assert "Task deleted" in accepted.output
    assert stored_tasks(cli.file) == []


def test_rm_missing_is_not_an_error(cli):
    result = cli("rm", "42", "--yes")

    assert result.exit_code == 0
    assert "Nothing to delete" in result.output


def test_clear_completed(cli):
    cli("add", "A")
    cli("add", "B")
    a_id = stored_tasks(cli.file)[0]["id"]
    cli("done", str(a_id))

    result = cli("clear-completed", "--yes")

    assert result.exit_code == 0
    assert "Removed 1" in result.output
    assert [t["title"] for t in stored_tasks(cli.file)] == ["B"]

    again = cli("clear-completed")
    assert "No completed tasks" in again.output


def test_stats_and_show(cli):
    cli("add", "Only", "-d", "details here")
    task_id = stored_tasks(cli.file)[0]["id"]

    assert "Total: 1 • Pending: 1 • Completed: 0" in cli("stats").output
    shown = cli("show", str(task_id))
    assert shown.exit_code == 0
    assert "details here" in shown.output


def test_theme_toggle_and_set(cli):
    toggled = cli("theme")
    assert "Theme: dark" in toggled.output

    data = json.loads(cli.file.read_text(encoding="utf-8"))
    assert data["theme"] == "dark"

    assert "Theme: light" in cli("theme", "light").output


def test_memory_backend_writes_nothing(cli):
    result = cli("--backend", "memory", "add", "Ephemeral")

    assert result.exit_code == 0
    assert not cli.file.exists()


def test_sql_backend(cli, tmp_path):
    db = tmp_path / "todos.db"
    runner.invoke(app, ["--file", str(db), "--backend", "sql", "add", "In SQL"])

    result = runner.invoke(app, ["--file", str(db), "--backend", "sql", "list"])

    assert result.exit_code == 0
    assert "In SQL" in result.output


def test_unknown_backend(cli):
    result = cli("--backend", "redis", "list")

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_demo(cli):
    result = cli("demo")

    assert result.exit_code == 0
    assert "Demo finished" in result.output
    assert not cli.file.exists()
