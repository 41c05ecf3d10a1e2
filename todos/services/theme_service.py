import logging

from todos.domain.enums import Theme
from todos.ports.storage import KeyValueStorage

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class ThemeService:
    """
    Preferencja jasny/ciemny motyw, zapisywana pod własnym kluczem storage.

    Nie ma żadnego związku z kolekcją zadań; współdzieli tylko mechanizm storage.
    """
    def __init__(self, storage: KeyValueStorage, key: str = THEME_KEY) -> None:
        self.storage = storage
        self.key = key

    def get(self) -> Theme:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return Theme.LIGHT
        try:
            return Theme(raw)
        except ValueError:
            logger.warning("Unknown stored theme %r, using light", raw)
            return Theme.LIGHT

    def set(self, theme: Theme | str) -> Theme:
        theme = Theme(theme)
        self.storage.set_item(self.key, theme.value)
        return theme

    def toggle(self) -> Theme:
        current = self.get()
        return self.set(Theme.LIGHT if current is Theme.DARK else Theme.DARK)
