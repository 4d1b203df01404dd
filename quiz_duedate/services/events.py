import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from quiz_duedate.services.guard import ReentrancyGuard

logger = logging.getLogger(__name__)

ATTEMPT_SUBMITTED = "attempt_submitted"
USER_GRADED = "user_graded"
QUIZ_SAVED = "quiz_saved"


class EventBus:
    """In-process dispatch of host notifications to their handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable]] = defaultdict(list)

    def subscribe(self, name: str, handler: Callable) -> None:
        self._handlers[name].append(handler)

    def publish(self, name: str, ctx: "EventContext", **payload) -> None:
        handlers = list(self._handlers.get(name, ()))
        logger.debug("publishing %s to %d handler(s): %s", name, len(handlers), payload)
        for handler in handlers:
            handler(ctx, **payload)


@dataclass
class EventContext:
    """Everything one notification chain shares: session, guard and bus."""

    db: Session
    bus: EventBus
    guard: ReentrancyGuard = field(default_factory=ReentrancyGuard)

    def publish(self, name: str, **payload) -> None:
        self.bus.publish(name, self, **payload)
