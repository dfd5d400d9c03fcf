"""
Public view page.

Shows a record reached through its QR code (``?id=<uniqueId>``) and
translates it on demand.
"""

import streamlit as st

from infomed.core.config import get_settings
from infomed.formatters import decode_data_url, format_date, format_price, qr_filename
from infomed.records import load_public_record
from infomed.routes import HOME, VIEW
from infomed.state import apply_pending_redirect, get_api_client, init_session_state
from infomed.translation import (
    ORIGINAL_LANGUAGE,
    TranslationError,
    language_name,
    language_options,
    load_languages,
    translate_record,
)

st.set_page_config(page_title="Medicine Information - InfoMed", page_icon="💊", layout="centered")

init_session_state()
apply_pending_redirect(VIEW)

api = get_api_client()

unique_id = st.query_params.get("id") or st.session_state.get("view_id")
if unique_id:
    st.session_state.view_id = unique_id
    st.query_params["id"] = unique_id

record_key = f"record_{unique_id}"
if record_key in st.session_state:
    result, error = st.session_state[record_key], None
else:
    with st.spinner("Loading information..."):
        result, error = load_public_record(api, unique_id or "")
    if result is not None:
        st.session_state[record_key] = result

if result is None:
    st.title("404")
    st.error(error or "Record not found")
    st.page_link(HOME.page, label="Go back home", icon="🏠")
    st.stop()

record = result.record

if "languages" not in st.session_state:
    st.session_state.languages = load_languages(api)
languages = st.session_state.languages

state_key = f"translation_{record.unique_id}"
if state_key not in st.session_state:
    st.session_state[state_key] = {"lang": get_settings().DEFAULT_LANGUAGE, "record": None}
translation = st.session_state[state_key]

options = language_options(languages)
codes = [code for code, _ in options]
labels = dict(options)
current = translation["lang"] if translation["lang"] in codes else ORIGINAL_LANGUAGE

selected = st.selectbox(
    "Choose language",
    options=codes,
    index=codes.index(current),
    format_func=lambda code: labels[code],
)

if selected != translation["lang"]:
    translation["lang"] = selected
    translation["record"] = None
    if selected != ORIGINAL_LANGUAGE:
        with st.spinner("Translating..."):
            try:
                translation["record"] = translate_record(api, record, selected)
            except TranslationError:
                st.session_state.translation_error = (
                    f"Translation to {language_name(languages, selected)} failed. "
                    "Showing original content."
                )
                translation["lang"] = ORIGINAL_LANGUAGE
    st.rerun()

if st.session_state.get("translation_error"):
    st.warning(st.session_state.pop("translation_error"))

shown = translation["record"] or record

if translation["record"] is not None:
    st.caption(
        f"Medicine information translated to **{language_name(languages, translation['lang'])}**"
    )
else:
    st.caption(f"Content is currently displayed in **{language_name(languages, ORIGINAL_LANGUAGE)}**")

st.title(f"💊 {shown.medicine_name}")

if not record.is_active:
    st.warning("This record has been deactivated by its publisher.")

st.subheader("Usage")
st.write(shown.usage)

st.subheader("Dosage")
st.write(shown.dosage)

col1, col2, col3 = st.columns(3)
col1.metric("Expiry date", format_date(shown.exp))
col2.metric("Manufactured", format_date(shown.man))
col3.metric("Price", format_price(shown.price))

st.markdown(f"**Batch number:** {shown.btno}")
st.markdown(f"**Manufacturer:** {shown.comp_name}")

st.subheader("Drug composition")
st.write(shown.drugs)

st.subheader("Storage instructions")
st.write(shown.instr)

image = decode_data_url(result.qr_image)
if image:
    with st.expander("QR code"):
        st.image(image, width=220)
        st.download_button(
            "Download QR Code",
            data=image,
            file_name=qr_filename(record.medicine_name),
            mime="image/png",
        )

if translation["record"] is not None:
    st.info(
        f"This content has been automatically translated to "
        f"{language_name(languages, translation['lang'])}. "
        "Please consult a healthcare professional for accurate information."
    )
