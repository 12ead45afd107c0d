import logging

import streamlit as st

from planner.constants import DEFAULT_AUTH_PROVIDER
from planner.errors import AuthenticationError
from planner.session import IdentitySession

logger = logging.getLogger(__name__)


class StreamlitIdentityProvider:
    """OIDC login through st.login, surfaced as change notifications.

    Streamlit has no push callback for auth, so ``poll()`` runs on every
    script rerun and notifies subscribers when the signed-in id changes.
    """

    def __init__(self, provider_name=None, configured=True, setup_hint=""):
        self.provider_name = provider_name or DEFAULT_AUTH_PROVIDER
        self.configured = configured
        self.setup_hint = setup_hint
        self._subscribers = []
        self._last_user_id = None

    def get_session(self):
        if not self.configured:
            return None
        if not st.user.is_logged_in:
            return None
        profile = st.user.to_dict()
        user_id = str(profile.get("sub") or profile.get("id") or profile.get("email") or "").strip()
        if not user_id:
            logger.warning("Signed-in profile carries no stable id; treating as anonymous")
            return None
        return IdentitySession(user_id=user_id, profile=profile)

    def subscribe(self, callback):
        self._subscribers.append(callback)

        def _unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def poll(self):
        try:
            session = self.get_session()
        except Exception:
            logger.exception("Could not read the current identity")
            return
        user_id = session.user_id if session else None
        if user_id == self._last_user_id:
            return
        self._last_user_id = user_id
        for callback in list(self._subscribers):
            callback(session)

    def sign_in(self):
        if not self.configured:
            raise AuthenticationError(
                f"{self.provider_name.title()} login is not configured.",
                remediation="Add the [auth] block to .streamlit/secrets.toml:\n" + self.setup_hint,
            )
        st.login(self.provider_name)

    def sign_out(self):
        if self.configured:
            st.logout()
