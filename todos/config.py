"""Ustawienia aplikacji ładowane ze zmiennych środowiskowych (prefiks TODOS_).

Opcje CLI mają pierwszeństwo: `Settings.from_env()` daje wartości domyślne,
a callback CLI podmienia to, co użytkownik podał jawnie.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

ENV_PREFIX = "TODOS"
BACKENDS = ("json", "sql", "memory")
DEFAULT_HOME = Path("~/.todos")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env_path(env: Mapping[str, str], name: str, default: Path) -> Path:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default.expanduser()
    return Path(raw).expanduser()


def _env_level(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    raw = raw.strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


def parse_backend(value: str) -> str:
    backend = value.strip().lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend {value!r}; expected one of: {', '.join(BACKENDS)}")
    return backend


@dataclass(frozen=True)
class Settings:
    storage_file: Path
    backend: str = "json"
    log_dir: Path = DEFAULT_HOME / "logs"
    log_level: int = logging.WARNING

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        backend = parse_backend(env.get(_k("BACKEND")) or "json")
        default_file = DEFAULT_HOME / ("todos.db" if backend == "sql" else "todos.json")
        return cls(
            storage_file=_env_path(env, _k("FILE"), default_file),
            backend=backend,
            log_dir=_env_path(env, _k("LOG_DIR"), DEFAULT_HOME / "logs"),
            log_level=_env_level(env, _k("LOG_LEVEL"), logging.WARNING),
        )
