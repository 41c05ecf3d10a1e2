from enum import Enum

from todos.domain.enums import Priority, Theme

class TaskColor(Enum):
    RED = "[red]"
    YELLOW = "[yellow]"
    BLUE = "[blue]"
    GREEN = "[green]"
    DIM = "[dim]"
    RESET = "[/]"

    def __str__(self):
        return self.value


PRIORITY_COLOR = {
    Priority.HIGH: TaskColor.RED,
    Priority.NORMAL: TaskColor.BLUE,
    Priority.LOW: TaskColor.GREEN,
}

# style Rich dla tabeli/paneli zależnie od motywu
THEME_STYLES = {
    Theme.LIGHT: {"header": "bold", "id": "cyan", "border": "cyan", "muted": "dim"},
    Theme.DARK: {"header": "bold bright_white", "id": "bright_magenta", "border": "bright_black", "muted": "grey50"},
}
