from __future__ import annotations
from typing import Optional
import sqlalchemy as db
from sqlalchemy.exc import SQLAlchemyError
from pathlib import Path
from todos.domain.errors import PersistenceError


class SqlStorage:
    """Storage klucz-wartość w tabeli SQL (domyślnie SQLite)."""

    def __init__(self, url: str | Path) -> None:
        """
        url: np. 'sqlite:///data/todos.db' lub Path do pliku (zostanie zrobiony URL)
        """
        if isinstance(url, Path):
            try:
                url.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PersistenceError(str(url), str(e))
            db_url = f"sqlite:///{url}"
        else:
            db_url = url

        self.engine = db.create_engine(db_url, future=True)
        self.meta = db.MetaData()

        self.items = db.Table(
            "storage",
            self.meta,
            db.Column("key", db.String, primary_key=True),
            db.Column("value", db.Text, nullable=False),
        )

        # utwórz tabelę jeśli nie istnieje
        try:
            self.meta.create_all(self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError(db_url, str(e))

    def get_item(self, key: str) -> Optional[str]:
        stmt = db.select(self.items.c.value).where(self.items.c.key == key)
        try:
            with self.engine.connect() as conn:
                return conn.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(key, str(e))

    def set_item(self, key: str, value: str) -> None:
        update = (
            db.update(self.items)
            .where(self.items.c.key == key)
            .values(value=value)
        )
        try:
            with self.engine.begin() as conn:
                result = conn.execute(update)
                if result.rowcount == 0:
                    conn.execute(db.insert(self.items).values(key=key, value=value))
        except SQLAlchemyError as e:
            raise PersistenceError(key, str(e))

    def remove_item(self, key: str) -> None:
        stmt = db.delete(self.items).where(self.items.c.key == key)
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(key, str(e))

    def close(self) -> None:
        self.engine.dispose()
