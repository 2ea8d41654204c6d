from datetime import date

import plotly.express as px
import streamlit as st

from taskflow.frames import tasks_frame, timeline_frame
from taskflow.models import STATUS_LABELS, STATUS_ORDER, STORY_POINT_CHOICES, PRIORITY_ORDER, enum_value
from taskflow.projections import explorer_groups, timeline_rows, timeline_window
from taskflow.protocol import TaskForm
from taskflow.theme import STATUS_COLORS
from taskflow.ui import (
    flash_result,
    page_setup,
    property_callback,
    require_workspace,
    sync_widget,
    task_form_fields,
)

config = page_setup("Workspace", "🗂️")
workspace = require_workspace(config)
store, tabs, editor, explorer = workspace.store, workspace.tabs, workspace.editor, workspace.explorer
today = date.today()

st.title("Workspace")

explorer_col, main_col, props_col = st.columns([2, 5, 2])

# ----- Explorer -----
with explorer_col:
    st.subheader("Explorer")
    for group in explorer_groups(store.get_all()):
        arrow = "▾" if explorer.is_expanded(group.key) else "▸"
        if st.button(f"{arrow} {group.title} ({len(group.tasks)})", key=f"grp_{group.key}"):
            explorer.toggle(group.key)
            st.rerun()
        if explorer.is_expanded(group.key):
            for task in group.tasks:
                if st.button(task.title, key=f"open_{group.key}_{task.id}"):
                    tabs.open(task.id)
                    st.rerun()

# ----- Tabs and editor -----
with main_col:
    open_tasks = tabs.open_tasks()
    if not open_tasks:
        st.info("Open a task from the explorer to edit it.")
    else:
        tab_cols = st.columns(len(open_tasks))
        for col, task in zip(tab_cols, open_tasks):
            marker = "● " if task.id == tabs.active_id else ""
            with col:
                if st.button(f"{marker}{task.title[:18]}", key=f"tab_{task.id}"):
                    tabs.activate(task.id)
                    st.rerun()
                if st.button("✕", key=f"close_{task.id}"):
                    tabs.close(task.id)
                    st.rerun()

        active = tabs.active_task()
        if active is not None:
            with st.form(f"edit_{active.id}"):
                form = task_form_fields(f"edit_{active.id}", TaskForm.from_task(active), workspace.categories)
                save = st.form_submit_button("Save", disabled=editor.is_pending(active.id))
            if save:
                flash_result(editor.update(active.id, form), "Task saved")
                st.rerun()
            r1, r2 = st.columns(2)
            if r1.button("Reload from server", key=f"reload_{active.id}"):
                flash_result(editor.refresh(active.id), "Task reloaded")
                st.rerun()
            if r2.button("Delete task", key=f"delete_{active.id}"):
                flash_result(editor.delete(active.id), "Task deleted")
                st.rerun()
            if active.acceptance_criteria:
                st.markdown("**Acceptance criteria**")
                for item in active.acceptance_criteria:
                    st.markdown(f"- {item}")
            if active.activity:
                st.markdown("**Activity**")
                for entry in active.activity:
                    when = entry.date.strftime("%Y-%m-%d %H:%M") if entry.date else ""
                    st.caption(f"{entry.user} · {when}: {entry.comment}")

    st.subheader("Timeline")
    frame = timeline_frame(timeline_rows(store.get_all(), today))
    if frame.empty:
        st.caption("Nothing scheduled.")
    else:
        window = timeline_window(today)
        fig = px.timeline(frame, x_start="Start", x_end="Finish", y="Task", color="Status", color_discrete_map=STATUS_COLORS, hover_data=["Progress"])
        fig.update_yaxes(autorange="reversed")
        fig.update_xaxes(range=[window[0], window[-1]])
        fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)

    with st.expander("All tasks"):
        st.dataframe(tasks_frame(store.get_all(), workspace.categories, today), use_container_width=True, hide_index=True)

# ----- Properties -----
# Each widget edits through on_change, so a failed save is sent once and the
# widget snaps back to the stored value instead of resending on every rerun.
with props_col:
    st.subheader("Properties")
    active = tabs.active_task()
    if active is None:
        st.caption("No task selected.")
    else:
        busy = editor.is_pending(active.id)

        current_status = str(enum_value(active.status))
        statuses = [s.value for s in STATUS_ORDER]
        if current_status not in statuses:
            statuses.append(current_status)
        status_key = f"prop_status_{active.id}"
        sync_widget(st.session_state, status_key, current_status)
        st.selectbox(
            "Status",
            statuses,
            format_func=lambda s: STATUS_LABELS.get(s, s),
            key=status_key,
            disabled=busy,
            on_change=property_callback(editor, active.id, status_key, "status", current_status, "Status updated"),
        )

        current_priority = str(enum_value(active.priority))
        priorities = [p.value for p in PRIORITY_ORDER]
        if current_priority not in priorities:
            priorities.append(current_priority)
        priority_key = f"prop_priority_{active.id}"
        sync_widget(st.session_state, priority_key, current_priority)
        st.selectbox(
            "Priority",
            priorities,
            key=priority_key,
            disabled=busy,
            on_change=property_callback(editor, active.id, priority_key, "priority", current_priority, "Priority updated"),
        )

        points_options = [None] + STORY_POINT_CHOICES
        if active.story_points not in points_options:
            points_options.append(active.story_points)
        points_key = f"prop_points_{active.id}"
        sync_widget(st.session_state, points_key, active.story_points)
        st.selectbox(
            "Story points",
            points_options,
            format_func=lambda p: "-" if p is None else str(p),
            key=points_key,
            disabled=busy,
            on_change=property_callback(
                editor, active.id, points_key, "story_points", active.story_points, "Story points updated"
            ),
        )

        assignee_key = f"prop_assignee_{active.id}"
        sync_widget(st.session_state, assignee_key, active.assignee or "")
        st.text_input(
            "Assignee",
            key=assignee_key,
            disabled=busy,
            on_change=property_callback(
                editor,
                active.id,
                assignee_key,
                "assignee",
                active.assignee or "",
                "Assignee updated",
                convert=lambda value: value.strip() or None,
            ),
        )

        done_key = f"prop_done_{active.id}"
        sync_widget(st.session_state, done_key, active.completed)
        st.checkbox(
            "Completed",
            key=done_key,
            disabled=busy,
            on_change=property_callback(editor, active.id, done_key, "completed", active.completed, "Task updated"),
        )

        st.markdown("**Labels**")
        for label in active.labels:
            l1, l2 = st.columns([4, 1])
            l1.markdown(f"`{label}`")
            if l2.button("✕", key=f"rm_label_{active.id}_{label}"):
                flash_result(editor.update(active.id, {"labels": [x for x in active.labels if x != label]}), "Label removed")
                st.rerun()
        new_label = st.text_input("Add label", key=f"add_label_{active.id}")
        if st.button("Add", key=f"add_label_btn_{active.id}") and new_label.strip():
            if new_label.strip() not in active.labels:
                flash_result(editor.update(active.id, {"labels": active.labels + [new_label.strip()]}), "Label added")
            st.rerun()

        st.markdown("**Dependencies**")
        for dep_id in active.dependencies:
            dep = store.get(dep_id)
            d1, d2 = st.columns([4, 1])
            d1.caption(dep.title if dep else f"#{dep_id}")
            if d2.button("✕", key=f"rm_dep_{active.id}_{dep_id}"):
                remaining = [d for d in active.dependencies if d != dep_id]
                flash_result(editor.update(active.id, {"dependencies": remaining}), "Dependency removed")
                st.rerun()
        candidates = [t for t in store.get_all() if t.id != active.id and t.id not in active.dependencies]
        if candidates:
            dep_choice = st.selectbox(
                "Add dependency",
                [None] + [t.id for t in candidates],
                format_func=lambda tid: "-" if tid is None else store.get(tid).title,
                key=f"add_dep_{active.id}",
            )
            if dep_choice is not None and st.button("Link", key=f"add_dep_btn_{active.id}"):
                flash_result(editor.update(active.id, {"dependencies": active.dependencies + [dep_choice]}), "Dependency added")
                st.rerun()
