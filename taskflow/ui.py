"""Streamlit helpers shared by the pages."""
from __future__ import annotations

import html
from datetime import date
from typing import Any, Callable, MutableMapping, Optional, Tuple

import streamlit as st

from . import auth
from .categories import CategoryIndex
from .config import TaskflowConfig, configure_logging
from .models import PRIORITY_ORDER, STATUS_ORDER, STATUS_LABELS, Task, enum_value
from .projections import is_overdue
from .protocol import TaskEditor, TaskForm
from .results import OperationResult
from .theme import priority_badge, set_theme, status_badge
from .workspace import Workspace, get_workspace


def page_setup(title: str, icon: str = "✅") -> TaskflowConfig:
    config = TaskflowConfig.from_env()
    configure_logging(config.log_level)
    set_theme(page_title=title, page_icon=icon)
    return config


def require_workspace(config: TaskflowConfig) -> Workspace:
    """Stop the page unless signed in; otherwise return the loaded workspace."""
    if not auth.is_logged_in(st.session_state) and not config.api_token:
        st.warning("Please sign in on the Home page first.")
        st.stop()
    workspace = get_workspace(st.session_state, config)
    if not workspace.store.loaded and workspace.store.error is None:
        with st.spinner("Loading tasks..."):
            workspace.refresh()
    render_flash()
    render_store_status(workspace)
    return workspace


def render_store_status(workspace: Workspace) -> None:
    if workspace.store.error:
        st.error(workspace.store.error)
        if st.button("Retry", key="tf_retry_load"):
            workspace.refresh()
            st.rerun()
    if workspace.categories_error:
        st.caption(f"Categories unavailable: {workspace.categories_error}")


def show_result(result: OperationResult, success_message: str) -> bool:
    if result.ok:
        st.toast(success_message)
        return True
    for message in result.field_errors.values():
        st.error(message)
    if not result.field_errors and result.error:
        st.error(result.error)
    return False


# -------------------- results that outlive st.rerun() --------------------
FLASH_KEY = "tf_flash"


def record_result(session_state: MutableMapping[str, Any], result: OperationResult, success_message: str) -> bool:
    """Queue the outcome of an action for the next render."""
    if result.ok:
        session_state[FLASH_KEY] = ("success", success_message)
        return True
    messages = list(result.field_errors.values()) or [result.error or "Something went wrong."]
    session_state[FLASH_KEY] = ("error", " ".join(messages))
    return False


def pop_flash(session_state: MutableMapping[str, Any]) -> Optional[Tuple[str, str]]:
    return session_state.pop(FLASH_KEY, None)


def flash_result(result: OperationResult, success_message: str) -> bool:
    return record_result(st.session_state, result, success_message)


def render_flash() -> None:
    flash = pop_flash(st.session_state)
    if flash is None:
        return
    kind, message = flash
    if kind == "success":
        st.toast(message)
    else:
        st.error(message)


# -------------------- property widgets --------------------
def sync_widget(session_state: MutableMapping[str, Any], key: str, store_value: Any) -> None:
    """Point a keyed widget at the store value whenever the store value moves.

    A value the user has just picked is left alone until the store changes.
    """
    seen_key = f"{key}__store"
    if key not in session_state or session_state.get(seen_key) != store_value:
        session_state[key] = store_value
    session_state[seen_key] = store_value


def apply_property_change(
    session_state: MutableMapping[str, Any],
    editor: TaskEditor,
    task_id: str,
    key: str,
    changes: dict,
    store_value: Any,
    success_message: str,
) -> OperationResult:
    """Send one property edit. On failure the widget snaps back to the store value."""
    result = editor.update(task_id, changes)
    if not result.ok:
        session_state[key] = store_value
    record_result(session_state, result, success_message)
    return result


def property_callback(
    editor: TaskEditor,
    task_id: str,
    key: str,
    field: str,
    store_value: Any,
    success_message: str,
    convert: Optional[Callable[[Any], Any]] = None,
) -> Callable[[], None]:
    """``on_change`` handler: fires once per user change, never on rerun."""

    def _on_change() -> None:
        value = st.session_state[key]
        if convert is not None:
            value = convert(value)
        apply_property_change(st.session_state, editor, task_id, key, {field: value}, store_value, success_message)

    return _on_change


def task_card_html(task: Task, categories: Optional[CategoryIndex] = None, today: Optional[date] = None) -> str:
    overdue = is_overdue(task, today)
    due = task.due_date.isoformat() if task.due_date else "No due date"
    category = ""
    if categories is not None and task.category_id:
        category = f" · {html.escape(categories.name_for(task.category_id))}"
    classes = "tf-card tf-overdue" if overdue else "tf-card"
    return (
        f'<div class="{classes}">'
        f'<div class="tf-card-title">{html.escape(task.title)}</div>'
        f"{status_badge(str(enum_value(task.status)), task.status_label)}"
        f"{priority_badge(str(enum_value(task.priority)))}"
        f'<div class="tf-meta">Due {due}{" (overdue)" if overdue else ""}{category}</div>'
        "</div>"
    )


def task_form_fields(prefix: str, form: TaskForm, categories: CategoryIndex) -> TaskForm:
    """Render form inputs inside an ``st.form`` and return the edited values."""
    title = st.text_input("Title", value=form.title, key=f"{prefix}_title")
    description = st.text_area("Description", value=form.description, key=f"{prefix}_desc")
    c1, c2, c3 = st.columns(3)
    with c1:
        due = st.date_input("Due date", value=form.due_date, key=f"{prefix}_due")
    with c2:
        priorities = [p.value for p in PRIORITY_ORDER]
        current_priority = str(enum_value(form.priority))
        priority = st.selectbox(
            "Priority",
            priorities,
            index=priorities.index(current_priority) if current_priority in priorities else 1,
            key=f"{prefix}_priority",
        )
    with c3:
        statuses = [s.value for s in STATUS_ORDER]
        current_status = str(enum_value(form.status))
        status = st.selectbox(
            "Status",
            statuses,
            index=statuses.index(current_status) if current_status in statuses else 0,
            format_func=lambda s: STATUS_LABELS.get(s, s),
            key=f"{prefix}_status",
        )
    options = [None] + [c.id for c in categories.options()]
    category_id = st.selectbox(
        "Category",
        options,
        index=options.index(form.category_id) if form.category_id in options else 0,
        format_func=lambda cid: "None" if cid is None else categories.name_for(cid),
        key=f"{prefix}_category",
    )
    return TaskForm(
        title=title,
        description=description,
        due_date=due if isinstance(due, date) else None,
        priority=priority,
        status=status,
        category_id=category_id,
        story_points=form.story_points,
        labels=list(form.labels),
    )
