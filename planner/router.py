import streamlit as st

from planner.constants import VIEW_CALENDAR, VIEW_DAY
from planner.tabs.calendar_tab import render_calendar_tab
from planner.tabs.day_tab import render_day_tab


def render_router(ctx):
    if ctx.controller.state.view_mode == VIEW_DAY:
        return _render_day(ctx)
    return _render_calendar(ctx)


@st.fragment
def _render_calendar(ctx):
    # Widget callbacks inside a fragment only rerun the fragment; switching
    # views needs the whole script.
    if ctx.controller.state.view_mode != VIEW_CALENDAR:
        st.rerun()
    render_calendar_tab(ctx)


@st.fragment
def _render_day(ctx):
    if ctx.controller.state.view_mode != VIEW_DAY:
        st.rerun()
    render_day_tab(ctx)
