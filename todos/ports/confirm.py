from typing import Callable

# Pyta użytkownika o zgodę na operację destrukcyjną; True = kontynuuj.
Confirm = Callable[[str], bool]


def always_confirm(message: str) -> bool:
    return True
