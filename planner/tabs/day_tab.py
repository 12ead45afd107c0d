import html

import streamlit as st

from planner.constants import DEFAULT_CATEGORY_ID, PASTEL_COLORS, SEEN_TODO_TUTORIAL_KEY
from planner.dateutils import format_long_date
from planner.models import UNCATEGORIZED
from planner.state import session_slices
from planner.theme import dot_html


def _render_coach_mark(ctx):
    if ctx.storage.get_item(SEEN_TODO_TUTORIAL_KEY):
        return
    st.markdown(
        "<div class='coach-mark'>태그를 고르고 할 일을 입력하세요. ▲▼ 로 순서를 바꿀 수 있어요.</div>",
        unsafe_allow_html=True,
    )
    if st.button("알겠어요", key="day.coach.dismiss"):
        ctx.storage.set_item(SEEN_TODO_TUTORIAL_KEY, "true")
        st.rerun()


def _category_options(controller):
    return [UNCATEGORIZED] + [item for item in controller.categories if item.id != DEFAULT_CATEGORY_ID]


def _on_widget_change(callback, widget_key, *args):
    callback(*args, st.session_state[widget_key])


def _render_add_form(ctx, day_key, slice_name):
    controller = ctx.controller
    options = _category_options(controller)
    option_ids = [item.id for item in options]
    selected = session_slices.get_value(slice_name, "category", DEFAULT_CATEGORY_ID)
    if selected not in option_ids:
        selected = DEFAULT_CATEGORY_ID
    selected = st.segmented_control(
        "Tag",
        option_ids,
        format_func=lambda category_id: controller.resolve_category(category_id).name,
        default=selected,
        key=f"day.category.{day_key}",
    ) or DEFAULT_CATEGORY_ID
    session_slices.set_value(slice_name, "category", selected)

    with st.form(key=f"day.add.{day_key}", clear_on_submit=True, border=False):
        cols = st.columns([5, 1], vertical_alignment="bottom")
        with cols[0]:
            text = st.text_input("New to-do", key=f"day.add.text.{day_key}", placeholder="할 일을 입력하세요")
        with cols[1]:
            submitted = st.form_submit_button("Add", use_container_width=True)
    if submitted:
        controller.add_todo(day_key, text, selected)
    return selected


def _render_suggestions(ctx, day_key, slice_name, category_id):
    controller = ctx.controller
    client = ctx.suggestions
    if client is None or not client.enabled:
        return
    if st.button("✨ AI 추천", key=f"day.suggest.{day_key}"):
        with st.spinner("추천을 불러오는 중…"):
            suggestions = client.suggest(
                format_long_date(controller.state.selected_date),
                controller.resolve_category(category_id).name,
                [todo.text for todo in controller.todos_for(day_key)],
            )
        session_slices.set_value(slice_name, "suggestions", suggestions)
        if not suggestions:
            st.caption("추천을 가져오지 못했어요.")
    pending = list(session_slices.get_value(slice_name, "suggestions", []) or [])
    for idx, suggestion in enumerate(pending):
        if st.button(f"+ {suggestion}", key=f"day.suggestion.{day_key}.{idx}"):
            controller.add_todo(day_key, suggestion, category_id)
            pending.remove(suggestion)
            session_slices.set_value(slice_name, "suggestions", pending)
            st.rerun()


def _render_todo_row(controller, day_key, todo, options, position, total):
    category = controller.resolve_category(todo.category_id)
    cols = st.columns([0.6, 5, 2.4, 0.6, 0.6, 0.6], vertical_alignment="center")
    with cols[0]:
        st.checkbox(
            "done",
            value=todo.completed,
            key=f"day.todo.done.{todo.id}",
            label_visibility="collapsed",
            on_change=controller.toggle_todo,
            args=(day_key, todo.id),
        )
    with cols[1]:
        text_class = "todo-done" if todo.completed else ""
        st.markdown(
            f"{dot_html(category.color)}<span class='{text_class}'>{html.escape(todo.text)}</span>",
            unsafe_allow_html=True,
        )
    with cols[2]:
        option_ids = [item.id for item in options]
        current = category.id if category.id in option_ids else DEFAULT_CATEGORY_ID
        widget_key = f"day.todo.category.{todo.id}"
        st.selectbox(
            "Tag",
            option_ids,
            index=option_ids.index(current),
            format_func=lambda category_id: controller.resolve_category(category_id).name,
            key=widget_key,
            label_visibility="collapsed",
            on_change=_on_widget_change,
            args=(controller.move_todo_to_category, widget_key, day_key, todo.id),
        )
    with cols[3]:
        st.button("▲", key=f"day.todo.up.{todo.id}", disabled=position == 0,
                  on_click=controller.move_todo, args=(day_key, todo.id, -1))
    with cols[4]:
        st.button("▼", key=f"day.todo.down.{todo.id}", disabled=position == total - 1,
                  on_click=controller.move_todo, args=(day_key, todo.id, 1))
    with cols[5]:
        st.button("🗑", key=f"day.todo.delete.{todo.id}", on_click=controller.delete_todo, args=(day_key, todo.id))


def _render_category_manager(controller):
    with st.expander("태그 관리"):
        for category in controller.categories:
            if category.id == DEFAULT_CATEGORY_ID:
                continue
            cols = st.columns([4, 2, 1], vertical_alignment="bottom")
            name_key = f"day.tag.name.{category.id}"
            color_key = f"day.tag.color.{category.id}"
            with cols[0]:
                st.text_input(
                    "Name",
                    value=category.name,
                    key=name_key,
                    on_change=_on_widget_change,
                    args=(controller.rename_category, name_key, category.id),
                )
            with cols[1]:
                palette_index = PASTEL_COLORS.index(category.color) if category.color in PASTEL_COLORS else 0
                st.selectbox(
                    "Color",
                    PASTEL_COLORS,
                    index=palette_index,
                    key=color_key,
                    on_change=_on_widget_change,
                    args=(controller.recolor_category, color_key, category.id),
                )
            with cols[2]:
                st.button("Delete", key=f"day.tag.delete.{category.id}",
                          on_click=controller.remove_category, args=(category.id,))

        with st.form(key="day.tag.add", clear_on_submit=True, border=False):
            cols = st.columns([5, 1], vertical_alignment="bottom")
            with cols[0]:
                name = st.text_input("New tag", key="day.tag.add.name")
            with cols[1]:
                submitted = st.form_submit_button("Add", use_container_width=True)
        if submitted:
            controller.add_category(name)
            st.rerun()


def render_day_tab(ctx):
    controller = ctx.controller
    selected = controller.state.selected_date
    if selected is None:
        controller.back_to_calendar()
        st.rerun()
    day_key = selected.isoformat()
    slice_name = session_slices.day_slice(day_key)

    cols = st.columns([1, 6], vertical_alignment="center")
    with cols[0]:
        st.button("←", key="day.back", on_click=controller.back_to_calendar)
    with cols[1]:
        st.markdown(f"<div class='month-title'>{format_long_date(selected)}</div>", unsafe_allow_html=True)

    _render_coach_mark(ctx)
    category_id = _render_add_form(ctx, day_key, slice_name)
    _render_suggestions(ctx, day_key, slice_name, category_id)

    todos = controller.todos_for(day_key)
    if not todos:
        st.caption("아직 할 일이 없어요.")
    options = _category_options(controller)
    for position, todo in enumerate(todos):
        _render_todo_row(controller, day_key, todo, options, position, len(todos))

    _render_category_manager(controller)
