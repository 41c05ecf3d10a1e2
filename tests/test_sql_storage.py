import pytest
from todos.adapters.sql.storage import SqlStorage
from todos.adapters.system.id_provider_clock import ClockIdProvider
from todos.services.task_store import TaskStore
from todos.services.theme_service import ThemeService
from todos.domain.enums import Theme
from todos.domain.errors import PersistenceError


@pytest.fixture
def tmp_storage(tmp_path):
    """Storage na świeżej tymczasowej bazie."""
    storage = SqlStorage(tmp_path / "todos.db")
    yield storage
    storage.close()


def test_missing_key_is_none(tmp_storage):
    assert tmp_storage.get_item("tasks") is None


def test_set_inserts_then_updates(tmp_storage):
    tmp_storage.set_item("tasks", "[]")
    tmp_storage.set_item("tasks", "[1]")

    assert tmp_storage.get_item("tasks") == "[1]"


def test_remove_item(tmp_storage):
    tmp_storage.set_item("theme", "dark")

    tmp_storage.remove_item("theme")
    tmp_storage.remove_item("theme")

    assert tmp_storage.get_item("theme") is None


def test_accepts_url(tmp_path):
    storage = SqlStorage(f"sqlite:///{tmp_path / 'url.db'}")
    storage.set_item("k", "v")

    assert storage.get_item("k") == "v"
    storage.close()


def test_store_and_theme_share_database(tmp_path):
    path = tmp_path / "todos.db"
    first = SqlStorage(path)
    store = TaskStore(first, ClockIdProvider())
    store.create("A")
    ThemeService(first).set(Theme.DARK)
    first.close()

    second = SqlStorage(path)
    assert [t.title for t in TaskStore(second, ClockIdProvider()).list()] == ["A"]
    assert ThemeService(second).get() is Theme.DARK
    second.close()


def test_unusable_directory_raises_persistence_error(tmp_path):
    # rodzic ścieżki bazy to zwykły plik -> mkdir się nie uda
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(PersistenceError):
        SqlStorage(blocker / "todos.db")
