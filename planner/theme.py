import html

import streamlit as st

from planner.constants import DEFAULT_APPLE_RED

THEME = {
    "bg_main": "#ffffff",
    "bg_card": "#f7f7f8",
    "border": "#ececef",
    "text_main": "#1c1c1e",
    "text_soft": "#8e8e93",
    "accent": DEFAULT_APPLE_RED,
    "sunday": DEFAULT_APPLE_RED,
    "saturday": "#007AFF",
    "today_bg": "rgba(255, 59, 48, 0.08)",
    "coach_bg": "#1c1c1e",
    "coach_text": "#ffffff",
}


def inject_theme_css():
    theme = THEME
    css = f"""
<style>
:root {{
    --bg-main: {theme['bg_main']};
    --bg-card: {theme['bg_card']};
    --border: {theme['border']};
    --text-main: {theme['text_main']};
    --text-soft: {theme['text_soft']};
    --accent: {theme['accent']};
}}
.stApp {{ background: var(--bg-main); color: var(--text-main); }}
.month-title {{ font-size: 1.6rem; font-weight: 800; letter-spacing: -0.02em; }}
.weekday-label {{ text-align: center; font-size: 0.75rem; font-weight: 600; color: var(--text-soft); }}
.weekday-sun {{ color: {theme['sunday']}; }}
.weekday-sat {{ color: {theme['saturday']}; }}
.cell-chips {{ display: flex; flex-direction: column; gap: 2px; min-height: 2.6rem; }}
.cat-chip {{
    display: block; border-radius: 6px; padding: 1px 6px;
    font-size: 0.68rem; font-weight: 600; color: #1c1c1e;
    white-space: nowrap; overflow: hidden; text-overflow: ellipsis;
}}
.cat-chip.done {{ opacity: 0.4; text-decoration: line-through; }}
.cell-today button {{ background: {theme['today_bg']} !important; border-color: var(--accent) !important; }}
.todo-done {{ color: var(--text-soft); text-decoration: line-through; }}
.cat-dot {{ display: inline-block; width: 0.7rem; height: 0.7rem; border-radius: 50%; margin-right: 0.35rem; }}
.offline-banner {{
    background: #fff4e5; border: 1px solid #ffd6a5; border-radius: 10px;
    padding: 0.45rem 0.8rem; font-size: 0.82rem; margin-bottom: 0.6rem;
}}
.sync-badge {{ font-size: 0.75rem; color: var(--text-soft); }}
.coach-mark {{
    background: {theme['coach_bg']}; color: {theme['coach_text']};
    border-radius: 12px; padding: 0.7rem 0.9rem; font-size: 0.85rem; margin: 0.4rem 0 0.8rem 0;
}}
.profile-row {{ display: flex; align-items: center; gap: 0.5rem; font-size: 0.85rem; }}
.profile-row img {{ width: 28px; height: 28px; border-radius: 50%; object-fit: cover; }}
</style>
"""
    st.markdown(css, unsafe_allow_html=True)
    return theme


def chip_html(label, color, done=False):
    classes = "cat-chip done" if done else "cat-chip"
    return f"<span class='{classes}' style='background:{html.escape(color)}'>{html.escape(label)}</span>"


def dot_html(color):
    return f"<span class='cat-dot' style='background:{html.escape(color)}'></span>"
