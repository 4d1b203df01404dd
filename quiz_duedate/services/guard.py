import logging
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class ReentrancyGuard:
    """
    Tracks which notification handlers are in flight for one request.

    Applying a penalty writes a grade, and writing a grade fires the
    notification that triggered the handler. Passing the same guard down the
    chain turns that self-triggered call into a no-op. Separate requests get
    separate guards, so independent invocations never block each other.
    """

    def __init__(self) -> None:
        self._active: set[str] = set()

    def is_active(self, handler: str) -> bool:
        return handler in self._active

    @contextmanager
    def claim(self, handler: str) -> Iterator[bool]:
        if handler in self._active:
            logger.debug("skipping re-entrant call to %s", handler)
            yield False
            return

        self._active.add(handler)
        try:
            yield True
        finally:
            self._active.discard(handler)
