import time


class Debouncer:
    """Holds back a changing value until it has been stable for ``delay`` seconds.

    Streamlit reruns on every keystroke-commit, so the page feeds the latest
    input into ``update`` and reads ``settled`` to decide which search term to
    query with. Only the last value typed within the window is ever released.
    """

    def __init__(self, delay: float = 0.5, clock=time.monotonic, initial=""):
        self.delay = delay
        self.clock = clock
        self._pending = initial
        self._changed_at = None
        self._settled = initial

    def update(self, value):
        if value != self._pending:
            self._pending = value
            self._changed_at = self.clock()
        return self.settled()

    def settled(self):
        if self._changed_at is not None and self.clock() - self._changed_at >= self.delay:
            self._settled = self._pending
            self._changed_at = None
        return self._settled

    @property
    def waiting(self) -> bool:
        return self._changed_at is not None

    def remaining(self) -> float:
        if self._changed_at is None:
            return 0.0
        return max(0.0, self.delay - (self.clock() - self._changed_at))
