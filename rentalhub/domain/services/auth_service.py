# rentalhub/domain/services/auth_service.py
from __future__ import annotations
import logging
from typing import Callable, List, Optional, Protocol

from rentalhub.domain.models.session import UserHandle

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[UserHandle]], None]
Unsubscribe = Callable[[], None]


class AuthService(Protocol):
    """Boundary to the authentication provider: a stream of current-user changes."""

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        ...


class LocalAuthService:
    """
    In-process authentication state, observable like the hosted provider's SDK:
      - the initial state is unresolved until `restore()` runs;
      - once resolved, a new subscriber is told the current user right away;
      - `sign_in()` / `sign_out()` notify every subscriber.
    Credentials are verified by the provider before a handle gets here.
    """

    def __init__(self) -> None:
        self._listeners: List[AuthListener] = []
        self._user: Optional[UserHandle] = None
        self._resolved = False

    @property
    def resolved(self) -> bool:
        return self._resolved

    @property
    def current_user(self) -> Optional[UserHandle]:
        return self._user

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        self._listeners.append(listener)
        logger.debug("auth subscribe listeners=%s resolved=%s", len(self._listeners), self._resolved)
        if self._resolved:
            self._deliver(listener, self._user)

        def unsubscribe() -> None:
            # idempotent: a second call is a no-op
            if listener in self._listeners:
                self._listeners.remove(listener)
                logger.debug("auth unsubscribe listeners=%s", len(self._listeners))

        return unsubscribe

    def restore(self, user: Optional[UserHandle] = None) -> None:
        """Resolve the initial session (e.g. from a persisted token); None means signed out."""
        self._set(user)

    def sign_in(self, user: UserHandle) -> None:
        logger.info("auth sign_in uid=%s", user.uid)
        self._set(user)

    def sign_out(self) -> None:
        logger.info("auth sign_out uid=%s", self._user.uid if self._user else None)
        self._set(None)

    def _set(self, user: Optional[UserHandle]) -> None:
        self._user = user
        self._resolved = True
        for listener in list(self._listeners):
            self._deliver(listener, user)

    @staticmethod
    def _deliver(listener: AuthListener, user: Optional[UserHandle]) -> None:
        try:
            listener(user)
        except Exception:
            # one broken listener must not starve the others
            logger.exception("auth listener failed")
