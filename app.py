# app.py
"""
CSV Splitter - Frontend (Streamlit)
-----------------------------------
Upload a CSV, split it into one file per company/restaurant/operator and
download the pieces one by one or as a single ZIP. Business logic lives in
backend/, configuration in configurations/.
"""
# --- Path bootstrap: ensure project root on sys.path ---
import os, sys
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from concurrent.futures import ThreadPoolExecutor, wait

import streamlit as st

from configurations.config import load_settings, configure_logging
from backend.errors import InputValidationError, ArchiveBusyError
from backend.split_service import SplitSession


# ------------------------------------------------------------
# App config
# ------------------------------------------------------------
st.set_page_config(
    page_title="CSV Splitter",
    page_icon="🗂️",
    layout="centered"
)

# ------------------------------------------------------------
# Settings / session
# ------------------------------------------------------------
@st.cache_resource
def get_settings():
    try:
        settings = load_settings()
        configure_logging(settings)
        return settings
    except Exception as e:
        st.error(f"Configuration failed: {e}")
        st.stop()

settings = get_settings()

@st.cache_resource
def get_executor():
    # one pool for every browser session of this server process
    return ThreadPoolExecutor(max_workers=4, thread_name_prefix="splitter")

def init_state():
    # Streamlit preserves st.session_state keys across script reruns
    defaults = {
        "uploader_key": 0,
        "uploaded_sig": None,
        "zip_bytes": None,
    }
    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v
    if "split_session" not in st.session_state:
        st.session_state["split_session"] = SplitSession(settings, get_executor())

init_state()
session: SplitSession = st.session_state["split_session"]

# ------------------------------------------------------------
# Actions
# ------------------------------------------------------------
def on_file_uploaded(uploaded) -> bool:
    """Hand a new upload to the session. Returns True when it was accepted."""
    sig = (uploaded.name, uploaded.size)
    if st.session_state["uploaded_sig"] == sig:
        return False
    st.session_state["uploaded_sig"] = sig
    st.session_state["zip_bytes"] = None
    try:
        session.select_file(uploaded.name, getattr(uploaded, "type", None), uploaded.getvalue())
    except InputValidationError:
        # message is kept on the session and rendered below
        return False
    return True

def clear_file():
    session.clear()
    st.session_state["uploaded_sig"] = None
    st.session_state["zip_bytes"] = None
    st.session_state["uploader_key"] += 1  # resets the uploader widget

def split_file():
    st.session_state["zip_bytes"] = None
    try:
        future = session.start_processing()
    except InputValidationError:
        return
    with st.spinner("Processing..."):
        wait([future])

def prepare_zip():
    try:
        future = session.start_archive()
    except ArchiveBusyError as e:
        st.warning(str(e))
        return
    if future is None:
        return
    with st.spinner("Zipping..."):
        wait([future])
    if future.exception() is None:
        st.session_state["zip_bytes"] = future.result()

# ------------------------------------------------------------
# Page
# ------------------------------------------------------------
def upload_section():
    if not session.has_file:
        uploaded = st.file_uploader(
            "Click to upload or drag and drop (CSV file only)",
            type=["csv"],
            key=f"uploader_{st.session_state['uploader_key']}",
        )
        if uploaded is not None and on_file_uploaded(uploaded):
            st.rerun()
    else:
        cols = st.columns([0.85, 0.15])
        with cols[0]:
            st.markdown(f"📄 **{session.source_name}**")
        with cols[1]:
            st.button("✕", help="Remove file", on_click=clear_file)

def results_section():
    files = session.generated_files
    if not files:
        return
    st.divider()

    cols = st.columns([0.6, 0.4])
    with cols[0]:
        st.subheader(f"Generated Files ({len(files)})")
        st.caption(
            f"Grouped by **{session.result.grouping_column}** "
            f"({session.result.encoding}); {session.result.dropped_rows} row(s) without a value skipped."
        )
        if session.result.encoding == settings.fallback_encoding:
            st.caption(
                f"⚠️ The file was not valid UTF-8 and was read as {settings.fallback_encoding}. "
                "Check accented characters in the generated files."
            )
    with cols[1]:
        if st.session_state["zip_bytes"] is None:
            st.button(
                "🗜️ Download All (.zip)",
                type="primary",
                disabled=session.is_zipping,
                on_click=prepare_zip,
                use_container_width=True,
            )
        else:
            st.download_button(
                "⬇️ Save ZIP",
                data=st.session_state["zip_bytes"],
                file_name=settings.archive_name,
                mime="application/zip",
                type="primary",
                use_container_width=True,
            )

    grid = st.columns(3)
    for i, f in enumerate(files):
        with grid[i % 3]:
            st.download_button(
                f.filename,
                data=f.content.encode("utf-8"),
                file_name=f.filename,
                mime="text/csv;charset=utf-8",
                key=f"download_{i}_{f.filename}",
                help=f"{f.row_count} row(s)",
                use_container_width=True,
            )

def main():
    st.title("CSV :blue[Splitter]")
    st.write("Upload a CSV file to split it into individual files based on columns like company or restaurant name.")

    upload_section()

    if session.error:
        st.error(session.error)

    st.button(
        "Processing..." if session.is_loading else "Split File",
        type="primary",
        disabled=not session.has_file or session.is_loading,
        on_click=split_file,
    )

    results_section()


if __name__ == "__main__":
    main()
