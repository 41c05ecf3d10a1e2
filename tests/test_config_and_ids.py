import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from todos.config import Settings
from todos.adapters.system.id_provider_clock import ClockIdProvider


class FakeClock:
    def __init__(self, fixed: datetime | None = None):
        # jeśli nie podamy fixed, zwróci zawsze ten sam „teraz”
        self.fixed = fixed or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    def now(self) -> datetime:
        return self.fixed


def test_settings_defaults():
    settings = Settings.from_env({})

    assert settings.backend == "json"
    assert settings.storage_file == Path("~/.todos/todos.json").expanduser()
    assert settings.log_level == logging.WARNING


def test_settings_from_env(tmp_path):
    settings = Settings.from_env({
        "TODOS_BACKEND": "SQL",
        "TODOS_FILE": str(tmp_path / "t.db"),
        "TODOS_LOG_DIR": str(tmp_path / "logs"),
        "TODOS_LOG_LEVEL": "debug",
    })

    assert settings.backend == "sql"
    assert settings.storage_file == tmp_path / "t.db"
    assert settings.log_dir == tmp_path / "logs"
    assert settings.log_level == logging.DEBUG


def test_sql_backend_default_file():
    assert Settings.from_env({"TODOS_BACKEND": "sql"}).storage_file.name == "todos.db"


def test_unknown_backend_raises():
    with pytest.raises(ValueError):
        Settings.from_env({"TODOS_BACKEND": "redis"})


def test_clock_ids_are_epoch_millis():
    clock = FakeClock()
    ids = ClockIdProvider(clock)

    assert ids.new_id() == int(clock.fixed.timestamp() * 1000)


def test_clock_ids_strictly_increase_on_same_or_earlier_time():
    clock = FakeClock()
    ids = ClockIdProvider(clock)

    first = ids.new_id()
    second = ids.new_id()
    clock.fixed = clock.fixed - timedelta(seconds=5)
    third = ids.new_id()

    assert first < second < third
