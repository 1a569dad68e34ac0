"""
Authenticated session context.

Part of HQ-9: Auth session context

Replaces ambient global auth state with an object created at start-up and
handed to whatever needs it (API client, use cases, CLI commands). Its
lifecycle is explicit:

    start()    load persisted credentials (once)
    sign_in()  store new tokens
    set_user() store the loaded profile
    sign_out() user-initiated logout: clear and notify logout listeners
    expire()   backend answered 401: clear and notify unauthorized listeners

Persistence goes through the TokenStore port; every change is saved.
"""

import logging
from typing import Callable, List, Optional

from application.ports.token_store import TokenStore
from domain.models.account import AuthTokens, StoredCredentials, User

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class SessionContext:
    """Holds the current credentials and signed-in user."""

    def __init__(self, token_store: TokenStore) -> None:
        self._token_store = token_store
        self._tokens: Optional[AuthTokens] = None
        self._user: Optional[User] = None
        self._started = False
        self._on_logout: List[Listener] = []
        self._on_unauthorized: List[Listener] = []

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> "SessionContext":
        """Load persisted credentials. Calling start() twice is a no-op."""
        if self._started:
            return self
        stored = self._token_store.load()
        if stored is not None:
            self._tokens = stored.tokens
            self._user = stored.user
            logger.debug("Restored stored credentials")
        self._started = True
        return self

    def sign_in(self, tokens: AuthTokens) -> None:
        self._tokens = tokens
        self._user = None
        self._persist()

    def set_user(self, user: User) -> None:
        if self._tokens is None:
            raise RuntimeError("Cannot set a user on a signed-out session")
        self._user = user
        self._persist()

    def sign_out(self) -> None:
        self._clear()
        for listener in list(self._on_logout):
            listener()

    def expire(self) -> None:
        """Drop credentials the backend no longer accepts."""
        if self._tokens is None:
            return
        logger.warning("Session expired; clearing stored credentials")
        self._clear()
        for listener in list(self._on_unauthorized):
            listener()

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def on_logout(self, listener: Listener) -> None:
        self._on_logout.append(listener)

    def on_unauthorized(self, listener: Listener) -> None:
        """Register a callback for expired sessions (e.g. go to the login view)."""
        self._on_unauthorized.append(listener)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def access_token(self) -> Optional[str]:
        return self._tokens.access_token if self._tokens else None

    @property
    def tokens(self) -> Optional[AuthTokens]:
        return self._tokens

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._tokens is not None

    def _persist(self) -> None:
        if self._tokens is None:
            return
        self._token_store.save(StoredCredentials(tokens=self._tokens, user=self._user))

    def _clear(self) -> None:
        self._tokens = None
        self._user = None
        self._token_store.clear()
