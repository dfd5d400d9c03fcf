"""
Dashboard page.

Lists the admin's records with their view counts and status.
"""

import streamlit as st

from infomed.auth import require_auth
from infomed.core.config import get_settings
from infomed.formatters import format_date, format_datetime, format_status
from infomed.records import delete_record, load_records, toggle_record
from infomed.routes import CREATE, DASHBOARD, VIEW
from infomed.state import apply_pending_redirect, get_api_client, get_admin_name, init_session_state

st.set_page_config(page_title="Dashboard - InfoMed", page_icon="📋", layout="wide")

init_session_state()

if not require_auth(DASHBOARD):
    st.stop()

api = get_api_client()
page_size = get_settings().RECORDS_PAGE_SIZE

if "dashboard_page" not in st.session_state:
    st.session_state.dashboard_page = 1


@st.dialog("Delete record")
def confirm_delete(record_id: str, name: str):
    """Ask before deleting; deletion cannot be undone."""
    st.write(f"Are you sure you want to delete **{name}**? This action cannot be undone.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Delete", type="primary", use_container_width=True):
            success, message = delete_record(api, record_id)
            if success:
                st.session_state.dashboard_flash = message
            else:
                st.session_state.dashboard_error = message
            st.rerun()
    with col2:
        if st.button("Cancel", use_container_width=True):
            st.rerun()


col_title, col_action = st.columns([4, 1])
with col_title:
    st.title("📋 Dashboard")
    st.caption(f"Welcome back, {get_admin_name()}! Manage your QR codes and track their usage.")
with col_action:
    st.page_link(CREATE.page, label="Create New QR", icon="➕", use_container_width=True)

with st.spinner("Loading records..."):
    records, pagination, error = load_records(api, st.session_state.dashboard_page, page_size)
apply_pending_redirect(DASHBOARD)

flash = st.session_state.pop("dashboard_flash", None)
if flash:
    st.success(flash)
error = st.session_state.pop("dashboard_error", None) or error
if error:
    st.error(error)

col1, col2, col3 = st.columns(3)
col1.metric("Total QR codes", pagination.total)
col2.metric("Active on this page", sum(1 for r in records if r.is_active))
col3.metric("Views on this page", sum(r.view_count for r in records))

st.divider()

if not records and not error:
    st.info("No QR codes yet. Create your first one to get started.")

for record in records:
    label, color = format_status(record.is_active)
    with st.container(border=True):
        col_info, col_stats, col_actions = st.columns([3, 2, 2])

        with col_info:
            st.markdown(f"**{record.medicine_name}** :{color}[{label}]")
            st.caption(record.usage)

        with col_stats:
            st.caption(f"Created: {format_date(record.created_at)}")
            st.caption(f"Views: {record.view_count}")
            if record.last_viewed:
                st.caption(f"Last viewed: {format_datetime(record.last_viewed)}")
            st.caption(f"Expires: {format_date(record.exp)}")

        with col_actions:
            if record.unique_id and st.button("View", key=f"view_{record.id}", use_container_width=True):
                st.session_state.view_id = record.unique_id
                st.switch_page(VIEW.page)

            toggle_label = "Deactivate" if record.is_active else "Activate"
            if st.button(toggle_label, key=f"toggle_{record.id}", use_container_width=True):
                success, message = toggle_record(api, record.id)
                if not success:
                    st.session_state.dashboard_error = message
                st.rerun()

            if st.button("Delete", key=f"delete_{record.id}", use_container_width=True):
                confirm_delete(record.id, record.medicine_name)

if pagination.pages > 1:
    col_prev, col_page, col_next = st.columns([1, 2, 1])
    with col_prev:
        if st.button("← Previous", disabled=pagination.current <= 1, use_container_width=True):
            st.session_state.dashboard_page = pagination.current - 1
            st.rerun()
    with col_page:
        st.caption(f"Page {pagination.current} of {pagination.pages}")
    with col_next:
        if st.button("Next →", disabled=pagination.current >= pagination.pages, use_container_width=True):
            st.session_state.dashboard_page = pagination.current + 1
            st.rerun()
