# rentalhub/domain/services/session_gate.py
from __future__ import annotations
import logging
from enum import Enum
from typing import Optional

from rentalhub.domain.models.session import UserHandle
from rentalhub.domain.services.auth_service import AuthService, Unsubscribe

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    CHECKING = "checking"   # no auth notification yet: only the loading placeholder renders
    READY = "ready"         # terminal for the process lifetime


class SessionGate:
    """
    Tracks whether the visitor is authenticated.

    Owned by the application root: `init()` subscribes to the auth service,
    `dispose()` unsubscribes. The first notification (user or None) flips
    `auth_checked` to True for good; every notification replaces `current_user`.
    Nothing but the gate writes this state.
    """

    def __init__(self, auth: AuthService):
        self._auth = auth
        self._unsubscribe: Optional[Unsubscribe] = None
        self._auth_checked = False
        self._current_user: Optional[UserHandle] = None

    @property
    def auth_checked(self) -> bool:
        return self._auth_checked

    @property
    def current_user(self) -> Optional[UserHandle]:
        return self._current_user

    @property
    def state(self) -> GateState:
        return GateState.READY if self._auth_checked else GateState.CHECKING

    @property
    def is_authenticated(self) -> bool:
        return self._current_user is not None

    def init(self) -> "SessionGate":
        if self._unsubscribe is not None:
            return self
        logger.info("session gate init")
        self._unsubscribe = self._auth.subscribe(self._on_auth_change)
        return self

    def dispose(self) -> None:
        if self._unsubscribe is None:
            return
        try:
            self._unsubscribe()
        finally:
            self._unsubscribe = None
            logger.info("session gate disposed")

    def __enter__(self) -> "SessionGate":
        return self.init()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def _on_auth_change(self, user: Optional[UserHandle]) -> None:
        self._current_user = user
        if not self._auth_checked:
            self._auth_checked = True
            logger.info("session gate ready authenticated=%s", user is not None)
        else:
            logger.debug("session gate update authenticated=%s", user is not None)
