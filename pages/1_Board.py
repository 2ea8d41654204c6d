from datetime import date

import streamlit as st

from taskflow.models import STATUS_LABELS, STATUS_ORDER, PRIORITY_ORDER, TaskStatus, enum_value
from taskflow.projections import board_columns, filter_by_category, filter_by_priority, search_tasks
from taskflow.protocol import TaskForm
from taskflow.theme import STATUS_COLORS
from taskflow.ui import flash_result, page_setup, require_workspace, show_result, task_card_html, task_form_fields

config = page_setup("Board", "📋")
workspace = require_workspace(config)
editor = workspace.editor
today = date.today()

st.title("Board")

# ----- Filters -----
f1, f2, f3, f4 = st.columns([3, 2, 2, 1])
with f1:
    query = st.text_input("Search", placeholder="Title, description or label")
with f2:
    priorities = st.multiselect("Priority", [p.value for p in PRIORITY_ORDER])
with f3:
    category_options = [None] + [c.id for c in workspace.categories.options()]
    category_id = st.selectbox(
        "Category",
        category_options,
        format_func=lambda cid: "All" if cid is None else workspace.categories.name_for(cid),
    )
with f4:
    merge_review = st.toggle("3 columns", value=False)

visible = search_tasks(workspace.store.get_all(), query)
visible = filter_by_priority(visible, priorities)
visible = filter_by_category(visible, category_id)

# ----- Create -----
with st.expander("➕ New task"):
    with st.form("create_task", clear_on_submit=True):
        form = task_form_fields("new", TaskForm(), workspace.categories)
        submitted = st.form_submit_button("Create task", disabled=editor.is_pending())
    if submitted:
        show_result(editor.create(form), "Task created")

# ----- Columns -----
columns = board_columns(visible, merge_review=merge_review, include_unknown=True)
if not columns.get("UNKNOWN"):
    columns.pop("UNKNOWN", None)
workflow = [s.value for s in STATUS_ORDER if s.value in columns]

for col, (status, tasks) in zip(st.columns(len(columns)), columns.items()):
    with col:
        color = STATUS_COLORS.get(status, "#636e72")
        label = STATUS_LABELS.get(status, "Other")
        if merge_review and status == TaskStatus.IN_PROGRESS.value:
            label = "In Progress / Review"
        st.markdown(
            f'<div class="tf-col-header" style="background:{color}">{label} ({len(tasks)})</div>',
            unsafe_allow_html=True,
        )
        for task in tasks:
            st.markdown(task_card_html(task, workspace.categories, today), unsafe_allow_html=True)
            current = str(enum_value(task.status))
            position = workflow.index(current) if current in workflow else -1
            b1, b2, b3 = st.columns(3)
            busy = editor.is_pending(task.id)
            if position > 0 and b1.button("◀", key=f"prev_{task.id}", disabled=busy):
                flash_result(editor.set_status(task.id, workflow[position - 1]), "Task moved")
                st.rerun()
            if 0 <= position < len(workflow) - 1 and b2.button("▶", key=f"next_{task.id}", disabled=busy):
                flash_result(editor.set_status(task.id, workflow[position + 1]), "Task moved")
                st.rerun()
            if b3.button("🗑", key=f"del_{task.id}", disabled=busy):
                st.session_state["confirm_delete"] = task.id

# ----- Delete confirmation -----
pending_delete = st.session_state.get("confirm_delete")
if pending_delete is not None:
    target = workspace.store.get(pending_delete)
    if target is None:
        st.session_state.pop("confirm_delete", None)
    else:
        st.warning(f'Delete "{target.title}"? This cannot be undone.')
        yes, no = st.columns(2)
        if yes.button("Delete", type="primary"):
            st.session_state.pop("confirm_delete", None)
            flash_result(editor.delete(pending_delete), "Task deleted")
            st.rerun()
        if no.button("Cancel"):
            st.session_state.pop("confirm_delete", None)
            st.rerun()
