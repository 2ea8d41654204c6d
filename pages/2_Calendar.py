import html
from datetime import date

import streamlit as st

from taskflow.calendar_grid import calendar_grid, calendar_weeks, month_label, shift_month
from taskflow.models import enum_value
from taskflow.projections import DAY_LABELS, is_overdue
from taskflow.theme import STATUS_COLORS
from taskflow.ui import page_setup, require_workspace

config = page_setup("Calendar", "📅")
workspace = require_workspace(config)
today = date.today()

if "calendar_month" not in st.session_state:
    st.session_state["calendar_month"] = (today.year, today.month)
year, month = st.session_state["calendar_month"]

nav_prev, nav_title, nav_today, nav_next = st.columns([1, 4, 1, 1])
if nav_prev.button("◀ Prev"):
    st.session_state["calendar_month"] = shift_month(year, month, -1)
    st.rerun()
if nav_today.button("Today"):
    st.session_state["calendar_month"] = (today.year, today.month)
    st.rerun()
if nav_next.button("Next ▶"):
    st.session_state["calendar_month"] = shift_month(year, month, 1)
    st.rerun()
nav_title.markdown(f"## {month_label(year, month)}")

cells = calendar_grid(
    workspace.store.get_all(),
    year,
    month,
    max_per_cell=config.calendar_max_per_cell,
    today=today,
)

for col, label in zip(st.columns(7), DAY_LABELS):
    col.markdown(f"**{label}**")

for week in calendar_weeks(cells):
    for col, cell in zip(st.columns(7), week):
        classes = ["tf-cal-cell"]
        if not cell.in_month:
            classes.append("tf-cal-out")
        if cell.is_today:
            classes.append("tf-cal-today")
        lines = [f"<b>{cell.day.day}</b>"]
        for task in cell.tasks:
            color = "#d63031" if is_overdue(task, today) else STATUS_COLORS.get(str(enum_value(task.status)), "#636e72")
            lines.append(f'<div style="border-left:3px solid {color};padding-left:4px">{html.escape(task.title)}</div>')
        if cell.overflow:
            lines.append(f"<i>+{cell.overflow} more</i>")
        col.markdown(f'<div class="{" ".join(classes)}">{"".join(lines)}</div>', unsafe_allow_html=True)
