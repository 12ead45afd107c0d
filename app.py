import streamlit as st

from planner import config
from planner.context import PlannerContext
from planner.controller import PlannerController
from planner.data import api_client
from planner.data.local_store import LocalStorage, LocalTarget
from planner.data.remote_store import RemoteTarget
from planner.data.sync import SyncIndicator, WriteQueue
from planner.header import render_header
from planner.identity import StreamlitIdentityProvider
from planner.logging_config import configure_logging
from planner.router import render_router
from planner.session import SessionManager
from planner.suggestions import SuggestionClient
from planner.theme import inject_theme_css

st.set_page_config(page_title="KST Calendar", layout="centered")

config.load_local_env()
configure_logging()
api_client.configure(config.get_secret)

SESSION_KEY = "planner.context"


@st.cache_resource
def get_local_storage(database_url):
    return LocalStorage.from_url(database_url)


def build_context():
    storage = get_local_storage(config.local_database_url())
    controller = PlannerController(
        queue=WriteQueue(serialize=config.serialize_writes()),
        tz_name=config.calendar_timezone(),
    )
    indicator = SyncIndicator()
    remote_enabled = api_client.is_enabled()
    auth_ready = remote_enabled and config.auth_configured()
    provider = StreamlitIdentityProvider(
        provider_name=config.auth_provider(),
        configured=auth_ready,
        setup_hint=config.auth_setup_hint(),
    )
    manager = SessionManager(
        provider,
        controller,
        local_target_factory=lambda: LocalTarget(storage),
        remote_target_factory=lambda user: RemoteTarget(user.id, indicator=indicator),
    )
    manager.start()
    return PlannerContext(
        controller=controller,
        session=manager,
        storage=storage,
        suggestions=SuggestionClient(api_key=config.gemini_api_key(), model=config.gemini_model()),
        remote_enabled=remote_enabled,
        auth_configured=auth_ready,
        auth_hint=config.auth_setup_hint(),
    )


if SESSION_KEY not in st.session_state:
    st.session_state[SESSION_KEY] = build_context()
context = st.session_state[SESSION_KEY]
context.session.provider.poll()

inject_theme_css()
render_header(context)
render_router(context)
