"""
Signin and signup events dispatched after a successful Auth0 login.

Other parts of the application subscribe to react to logins (welcome mail,
audit trail, profile enrichment).
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List

from auth0_login.core.logging import get_logger
from auth0_login.models.user import User
from auth0_login.schemas.claims import Claims

logger = get_logger(__name__)


@dataclass(frozen=True)
class Auth0UserSigninEvent:
    """A returning Auth0 identity logged in."""

    NAME = "auth0.signin"

    user: User
    claims: Claims


@dataclass(frozen=True)
class Auth0UserSignupEvent:
    """An Auth0 identity logged in for the first time and was linked."""

    NAME = "auth0.signup"

    user: User
    claims: Claims


Listener = Callable[[object], None]


class EventDispatcher:
    """Synchronous publish/subscribe by event name."""

    def __init__(self):
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: Listener) -> None:
        self._listeners[event_name].append(listener)

    def unsubscribe(self, event_name: str, listener: Listener) -> None:
        if listener in self._listeners[event_name]:
            self._listeners[event_name].remove(listener)

    def dispatch(self, event_name: str, event: object) -> None:
        """Call every listener in subscription order. Listener errors propagate."""
        listeners = list(self._listeners.get(event_name, []))
        logger.debug(
            "Dispatching event",
            extra={"event": event_name, "listener_count": len(listeners)},
        )
        for listener in listeners:
            listener(event)


event_dispatcher = EventDispatcher()


def get_event_dispatcher() -> EventDispatcher:
    """FastAPI dependency returning the application's dispatcher."""
    return event_dispatcher
