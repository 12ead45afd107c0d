import html

import streamlit as st

from planner.errors import AuthenticationError

LOGIN_ERROR_KEY = "ui.login_error"
SEEN_VERSION_KEY = "ui.seen_version"


def _handle_login(ctx):
    try:
        ctx.session.login()
    except AuthenticationError as exc:
        st.session_state[LOGIN_ERROR_KEY] = exc


def mark_rendered(ctx):
    st.session_state[SEEN_VERSION_KEY] = ctx.controller.version


def state_changed_since_render(ctx):
    seen = st.session_state.get(SEEN_VERSION_KEY)
    return seen is not None and seen != ctx.controller.version


def render_header(ctx):
    mark_rendered(ctx)
    left, right = st.columns([3, 2], vertical_alignment="center")
    with left:
        st.markdown("<div class='month-title'>KST Calendar</div>", unsafe_allow_html=True)
    with right:
        user = ctx.user
        if user is not None:
            avatar = ""
            if user.profile_image:
                avatar = f"<img src='{html.escape(user.profile_image)}' alt=''/>"
            st.markdown(
                f"<div class='profile-row'>{avatar}<span>{html.escape(user.nickname)}</span></div>",
                unsafe_allow_html=True,
            )
            st.button("Logout", key="header.logout", on_click=ctx.session.logout)
        elif ctx.remote_enabled:
            st.button("카카오 로그인", key="header.login", on_click=_handle_login, args=(ctx,))

    error = st.session_state.pop(LOGIN_ERROR_KEY, None)
    if error is not None:
        st.error(str(error))

    if not ctx.remote_enabled:
        st.markdown(
            "<div class='offline-banner'>Offline mode: your planner is saved on this device only.</div>",
            unsafe_allow_html=True,
        )
    _render_sync_badge(ctx)


@st.fragment(run_every=1.0)
def _render_sync_badge(ctx):
    if ctx.is_syncing:
        st.markdown("<div class='sync-badge'>☁️ Syncing…</div>", unsafe_allow_html=True)
    if state_changed_since_render(ctx):
        mark_rendered(ctx)
        st.rerun()
