"""
Create QR page.

Collects the medicine details and shows the generated QR code.
"""

import streamlit as st

from infomed.auth import require_auth
from infomed.formatters import decode_data_url, format_datetime, qr_filename
from infomed.records import create_record
from infomed.routes import CREATE, DASHBOARD
from infomed.state import get_api_client, init_session_state
from infomed.validation import clear_field_error, validate_info_record

st.set_page_config(page_title="Create QR - InfoMed", page_icon="➕", layout="wide")

init_session_state()

if not require_auth(CREATE):
    st.stop()

api = get_api_client()

# field -> (label, placeholder, multiline)
FORM_FIELDS = {
    "medicineName": ("Medicine name", "e.g. Paracetamol 500mg", False),
    "usage": ("Usage / Purpose", "What the medicine is used for", True),
    "dosage": ("Dosage", "e.g. 1 tablet every 6 hours", True),
    "exp": ("Expiry date", "YYYY-MM-DD", False),
    "man": ("Manufacturing date", "YYYY-MM-DD", False),
    "price": ("Price", "e.g. 12.50", False),
    "btno": ("Batch number", "e.g. BT-2024-001", False),
    "compName": ("Company name", "Manufacturer", False),
    "instr": ("Storage instructions", "e.g. Store below 25°C", True),
    "drugs": ("Drug composition", "Active ingredients", True),
}

if "create_errors" not in st.session_state:
    st.session_state.create_errors = {}


def _clear(field: str) -> None:
    st.session_state.create_errors = clear_field_error(st.session_state.create_errors, field)
    st.session_state.pop("create_error", None)


def _reset_form() -> None:
    for field in FORM_FIELDS:
        st.session_state[f"create_{field}"] = ""
    st.session_state.pop("qr_result", None)
    st.session_state.create_errors = {}


result = st.session_state.get("qr_result")

if result is not None:
    st.title("✅ QR code generated successfully!")
    record = result.record

    col_qr, col_details = st.columns([1, 2])
    with col_qr:
        image = decode_data_url(result.qr_image)
        if image:
            st.image(image, width=280)
            st.download_button(
                "Download QR Code",
                data=image,
                file_name=qr_filename(record.medicine_name),
                mime="image/png",
                use_container_width=True,
            )
        if result.qr_url:
            st.caption("Public link")
            st.code(result.qr_url, language="text")

    with col_details:
        for field, (label, _, _) in FORM_FIELDS.items():
            value = record.model_dump(by_alias=True).get(field, "")
            st.markdown(f"**{label}:** {value}")
        st.caption(f"Created: {format_datetime(record.created_at)}")

    col1, col2 = st.columns(2)
    with col1:
        st.button("Create another", on_click=_reset_form, use_container_width=True)
    with col2:
        st.page_link(DASHBOARD.page, label="Go to Dashboard", icon="📋", use_container_width=True)
    st.stop()

st.title("➕ Create QR Code")
st.caption("Fill in the medicine details. Every field is required.")

if st.session_state.get("create_error"):
    st.error(st.session_state.create_error)

errors = st.session_state.create_errors
if errors:
    st.warning(f"Please fix {len(errors)} field(s) below.")

values = {}
col_left, col_right = st.columns(2)
for index, (field, (label, placeholder, multiline)) in enumerate(FORM_FIELDS.items()):
    column = col_left if index % 2 == 0 else col_right
    with column:
        widget = st.text_area if multiline else st.text_input
        values[field] = widget(
            label,
            placeholder=placeholder,
            key=f"create_{field}",
            on_change=_clear,
            args=(field,),
        )
        if errors.get(field):
            st.caption(f":red[{errors[field]}]")

if st.button("Generate QR Code", type="primary", use_container_width=True):
    st.session_state.create_errors = validate_info_record(values)
    if not st.session_state.create_errors:
        with st.spinner("Generating QR code..."):
            success, message, created = create_record(api, values)
        if success:
            st.session_state.qr_result = created
        else:
            st.session_state.create_error = message
    st.rerun()
