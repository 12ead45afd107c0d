import streamlit as st

from planner.constants import DAY_NAMES, SEEN_CALENDAR_TUTORIAL_KEY
from planner.dateutils import month_title
from planner.theme import chip_html


def _render_coach_mark(ctx):
    if ctx.storage.get_item(SEEN_CALENDAR_TUTORIAL_KEY):
        return
    st.markdown(
        "<div class='coach-mark'>날짜를 눌러 그날의 할 일을 추가해 보세요.</div>",
        unsafe_allow_html=True,
    )
    if st.button("알겠어요", key="calendar.coach.dismiss"):
        ctx.storage.set_item(SEEN_CALENDAR_TUTORIAL_KEY, "true")
        st.rerun()


def _render_month_nav(controller):
    state = controller.state
    cols = st.columns([1, 4, 1, 1], vertical_alignment="center")
    with cols[0]:
        st.button("◀", key="calendar.prev", on_click=controller.prev_month)
    with cols[1]:
        st.markdown(
            f"<div class='month-title'>{month_title(state.current_year, state.current_month)}</div>",
            unsafe_allow_html=True,
        )
    with cols[2]:
        st.button("▶", key="calendar.next", on_click=controller.next_month)
    with cols[3]:
        st.button("Today", key="calendar.today", on_click=controller.go_to_today)


def _render_weekday_row():
    cols = st.columns(7)
    for idx, label in enumerate(DAY_NAMES):
        extra = " weekday-sun" if idx == 0 else (" weekday-sat" if idx == 6 else "")
        with cols[idx]:
            st.markdown(f"<div class='weekday-label{extra}'>{label}</div>", unsafe_allow_html=True)


def _render_cell(controller, cell):
    if cell.day is None:
        st.markdown("<div class='cell-chips'></div>", unsafe_allow_html=True)
        return
    label = f"**{cell.day}**" if cell.is_today else str(cell.day)
    st.button(
        label,
        key=f"calendar.day.{cell.day_key}",
        on_click=controller.on_date_click,
        args=(cell.day_key,),
        type="primary" if cell.is_selected else "secondary",
        use_container_width=True,
    )
    chips = "".join(
        chip_html(f"{summary.name} {summary.completed}/{summary.total}", summary.color, summary.all_done)
        for summary in cell.summaries
    )
    st.markdown(f"<div class='cell-chips'>{chips}</div>", unsafe_allow_html=True)


def render_calendar_tab(ctx):
    controller = ctx.controller
    _render_coach_mark(ctx)
    _render_month_nav(controller)
    _render_weekday_row()
    for week in controller.month_view():
        cols = st.columns(7)
        for idx, cell in enumerate(week):
            with cols[idx]:
                _render_cell(controller, cell)
