from __future__ import annotations

import streamlit as st
from streamlit.errors import StreamlitAPIException


STATUS_COLORS = {
    "TODO": "#74b9ff",
    "IN_PROGRESS": "#fdcb6e",
    "REVIEW": "#a29bfe",
    "DONE": "#00b894",
}
PRIORITY_COLORS = {
    "LOW": "#00b894",
    "MEDIUM": "#0984e3",
    "HIGH": "#e17055",
}

_CSS = """
<style>
.tf-card { background:#fff; border:1px solid #dce6f1; border-radius:12px; padding:.7rem .8rem; margin-bottom:.6rem;
           box-shadow:0 2px 8px -2px rgba(11,99,214,0.15); }
.tf-card-title { font-weight:600; color:#0b2140; margin-bottom:.2rem; }
.tf-meta { color:#6b7b8f; font-size:.85rem; }
.tf-badge { display:inline-block; font-size:.68rem; font-weight:700; border-radius:20px; padding:.15rem .55rem;
            color:#fff; letter-spacing:.5px; margin-right:.3rem; }
.tf-overdue { border-color:#d63031 !important; }
.tf-col-header { font-weight:700; text-align:center; border-radius:8px; padding:.3rem 0; margin-bottom:.6rem; color:#fff; }
.tf-cal-cell { min-height:84px; border:1px solid #e6edf5; border-radius:8px; padding:.25rem .35rem; font-size:.75rem; }
.tf-cal-out { opacity:.4; }
.tf-cal-today { border:2px solid #0b63d6; }
</style>
"""


def set_theme(
    page_title: str = "TaskFlow",
    page_icon: str = "✅",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
) -> None:
    """Configure the Streamlit page and inject the shared card styles.

    Safe to call at the top of every page. Streamlit only accepts one
    set_page_config per run; later calls are ignored.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        pass
    st.markdown(_CSS, unsafe_allow_html=True)


def badge(text: str, color: str) -> str:
    return f'<span class="tf-badge" style="background:{color}">{text}</span>'


def status_badge(status: str, label: str) -> str:
    return badge(label, STATUS_COLORS.get(status, "#636e72"))


def priority_badge(priority: str) -> str:
    return badge(priority.title(), PRIORITY_COLORS.get(priority, "#636e72"))
