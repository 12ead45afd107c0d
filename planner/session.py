from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol

from planner.constants import GUEST_NICKNAME
from planner.errors import AuthenticationError
from planner.models import User

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"
AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class IdentitySession:
    user_id: str
    profile: Dict[str, Any] = field(default_factory=dict)


class IdentityProvider(Protocol):
    def get_session(self) -> Optional[IdentitySession]: ...

    def subscribe(self, callback: Callable[[Optional[IdentitySession]], None]) -> Callable[[], None]: ...

    def sign_in(self) -> None: ...

    def sign_out(self) -> None: ...


def _first_text(profile, *keys):
    for key in keys:
        value = profile.get(key)
        if value:
            return str(value).strip()
    return ""


def user_from_session(session: IdentitySession) -> User:
    profile = session.profile or {}
    return User(
        id=session.user_id,
        nickname=_first_text(profile, "full_name", "name", "nickname") or GUEST_NICKNAME,
        profile_image=_first_text(profile, "avatar_url", "picture"),
    )


class SessionManager:
    """Tracks who is signed in and points the controller at the matching store.

    Anonymous sessions read and write local storage; an authenticated user's
    data lives in the remote store under their id.
    """

    def __init__(self, provider, controller, local_target_factory, remote_target_factory):
        self.provider = provider
        self.controller = controller
        self.local_target_factory = local_target_factory
        self.remote_target_factory = remote_target_factory
        self.user: Optional[User] = None
        self._lock = threading.RLock()
        self._unsubscribe = None
        self._started = False

    @property
    def state(self):
        return AUTHENTICATED if self.user is not None else ANONYMOUS

    @property
    def is_authenticated(self):
        return self.user is not None

    def start(self):
        if self._started:
            return
        self._started = True
        self._become_anonymous(force=True)
        self._unsubscribe = self.provider.subscribe(self.handle_change)
        try:
            existing = self.provider.get_session()
        except Exception:
            logger.exception("Identity provider failed during startup; staying anonymous")
            return
        if existing is not None:
            self.handle_change(existing)

    def close(self):
        if self._unsubscribe is not None:
            try:
                self._unsubscribe()
            finally:
                self._unsubscribe = None
        self._started = False

    def handle_change(self, session: Optional[IdentitySession]):
        if session is None or not session.user_id:
            self._become_anonymous()
        else:
            self._become_authenticated(user_from_session(session))

    def _become_anonymous(self, force=False):
        with self._lock:
            if self.user is None and not force:
                return
            previous = self.user
            self.user = None
            self.controller.reset_to_defaults()
            self.controller.use_target(self.local_target_factory())
        if previous is not None:
            logger.info("Signed out %s; using local storage", previous.id)
        self.controller.load_all()

    def _become_authenticated(self, user: User):
        with self._lock:
            if self.user is not None and self.user.id == user.id:
                self.user = user
                return
            self.user = user
            self.controller.clear_todos()
            self.controller.use_target(self.remote_target_factory(user))
        logger.info("Signed in %s; using remote storage", user.id)
        self.controller.load_all()

    def login(self):
        try:
            self.provider.sign_in()
        except AuthenticationError:
            raise
        except Exception as exc:
            logger.exception("Login could not be started")
            raise AuthenticationError(
                "Login could not be started.",
                remediation="Check the [auth] settings in .streamlit/secrets.toml and try again.",
            ) from exc

    def logout(self):
        try:
            self.provider.sign_out()
        except Exception:
            logger.exception("Logout failed")
