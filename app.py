from datetime import date

import plotly.express as px
import streamlit as st

from taskflow import auth
from taskflow.calendar_grid import calendar_grid, calendar_weeks, month_label
from taskflow.frames import weekly_frame
from taskflow.projections import activity_summary, completion_stats, recent_tasks, weekly_activity
from taskflow.ui import page_setup, render_store_status, task_card_html
from taskflow.workspace import get_workspace, reset_workspace

config = page_setup("TaskFlow")


def render_login() -> None:
    st.title("TaskFlow")
    st.caption("Sign in to manage your tasks.")
    workspace = get_workspace(st.session_state, config)
    sign_in, sign_up = st.tabs(["Sign in", "Register"])
    with sign_in:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in")
        if submitted:
            result = auth.login(workspace.gateway, email, password)
            if result.ok:
                auth.set_login_state(st.session_state, True, token=result.token, user=result.user)
                workspace.refresh()
                st.rerun()
            else:
                st.error(result.error)
    with sign_up:
        with st.form("register_form"):
            first = st.text_input("First name")
            last = st.text_input("Last name")
            reg_email = st.text_input("Email", key="reg_email")
            reg_password = st.text_input("Password", type="password", key="reg_password")
            registered = st.form_submit_button("Create account")
        if registered:
            result = auth.register(workspace.gateway, first, last, reg_email, reg_password)
            if result.ok and result.token:
                auth.set_login_state(st.session_state, True, token=result.token, user=result.user)
                workspace.refresh()
                st.rerun()
            elif result.ok:
                st.success("Account created. You can sign in now.")
            else:
                st.error(result.error)


def render_dashboard() -> None:
    workspace = get_workspace(st.session_state, config)
    workspace.ensure_loaded()
    user = auth.current_user(st.session_state)

    with st.sidebar:
        st.markdown(f"Signed in as **{auth.display_name(user)}**")
        if st.button("Refresh"):
            workspace.refresh()
        if st.button("Sign out"):
            auth.logout(st.session_state, workspace.gateway)
            reset_workspace(st.session_state)
            st.rerun()

    st.title(f"Welcome back, {auth.display_name(user)}")
    render_store_status(workspace)

    today = date.today()
    tasks = workspace.store.get_all()
    stats = completion_stats(tasks, today)
    c1, c2, c3 = st.columns(3)
    c1.metric("Upcoming", stats.upcoming)
    c2.metric("In Progress", stats.in_progress)
    c3.metric("Completed", stats.completed)

    left, right = st.columns([3, 2])
    with left:
        st.subheader("Recent tasks")
        recent = recent_tasks(tasks, config.recent_count)
        if not recent:
            st.info("No tasks yet. Create one on the Board page.")
        for task in recent:
            st.markdown(task_card_html(task, workspace.categories, today), unsafe_allow_html=True)

        st.subheader("This week")
        fig = px.bar(weekly_frame(weekly_activity(tasks, today)), x="Day", y="Tasks")
        fig.update_layout(height=260, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
        summary = activity_summary(tasks)
        s1, s2, s3 = st.columns(3)
        s1.metric("Done", summary.completed)
        s2.metric("Open", summary.incomplete)
        s3.metric("Time tracked", summary.time_spent_label)

    with right:
        st.subheader(month_label(today.year, today.month))
        cells = calendar_grid(tasks, today.year, today.month, max_per_cell=config.calendar_max_per_cell, today=today)
        header = st.columns(7)
        for col, label in zip(header, ["S", "M", "T", "W", "T", "F", "S"]):
            col.caption(label)
        for week in calendar_weeks(cells):
            cols = st.columns(7)
            for col, cell in zip(cols, week):
                if not cell.in_month:
                    col.write("")
                    continue
                text = f"**{cell.day.day}**" if cell.is_today else str(cell.day.day)
                if cell.tasks or cell.overflow:
                    text += " •"
                col.markdown(text)


if auth.is_logged_in(st.session_state) or config.api_token:
    render_dashboard()
else:
    render_login()
