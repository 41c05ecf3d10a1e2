from todos.ports.clock import Clock
from todos.ports.id_provider import IdProvider
from todos.adapters.system.clock_system import SystemClock


class ClockIdProvider(IdProvider):
    """Identyfikatory z zegara: milisekundy od epoki.

    Dwa wywołania w tej samej milisekundzie (albo zegar cofnięty) nie dają duplikatu:
    każde kolejne id jest ściśle większe od poprzedniego.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or SystemClock()
        self._last = 0

    def new_id(self) -> int:
        candidate = int(self.clock.now().timestamp() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate
