"""Streamlit page for the medicines conflicts finder.

Pick or drag-and-drop a photo of medicines, optionally compress it, and send
it to the analysis endpoint. The model's Markdown answer is rendered below.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.client import AnalysisClient
from core.messages import get_message
from core.models import UploaderState
from core.preprocess import JPEG_QUALITY, MAX_HEIGHT, MAX_WIDTH, image_resolution
from core.settings import Settings
from core.uploader import Uploader

load_dotenv()
logging.basicConfig(level=logging.INFO)

settings = Settings.from_env()
locale = settings.locale

st.set_page_config(page_title="Medicines Conflicts Finder", layout="centered")

# ============================================================================
# Sidebar: endpoint and compression
# ============================================================================

with st.sidebar:
    st.markdown("### Configuration")

    api_url = st.text_input(
        "Analysis endpoint",
        value=settings.api_url,
        help="Defaults to ANALYSIS_API_URL from your environment/.env.",
    )

    st.divider()
    st.markdown("##### Compression")
    compress = st.toggle("Compress before upload", value=True)
    col_w, col_h = st.columns(2)
    with col_w:
        max_width = st.number_input("Max width", 64, 8192, MAX_WIDTH, step=64)
    with col_h:
        max_height = st.number_input("Max height", 64, 8192, MAX_HEIGHT, step=64)
    quality = st.slider("JPEG quality", 0.1, 1.0, JPEG_QUALITY, 0.05)


# The uploader owns all per-session state; rebuild it only if settings change.
config_key = (api_url, compress, int(max_width), int(max_height), quality)
if st.session_state.get("uploader_config") != config_key:
    st.session_state["uploader"] = Uploader(
        AnalysisClient(api_url, locale=locale),
        compress=compress,
        max_width=int(max_width),
        max_height=int(max_height),
        quality=quality,
        max_upload_bytes=settings.max_upload_bytes,
        locale=locale,
    )
    st.session_state["uploader_config"] = config_key

uploader: Uploader = st.session_state["uploader"]

# ============================================================================
# Main area
# ============================================================================

st.title("Medicines Conflicts Finder")

uploaded = st.file_uploader(
    "Upload or drop a photo of your medicines",
    type=["png", "jpg", "jpeg", "webp", "gif", "bmp"],
)

if uploaded is None:
    if uploader.state != UploaderState.IDLE:
        uploader.remove_image()
else:
    uploader.select_upload(uploaded.file_id, uploaded.name, uploaded.getvalue(), uploaded.type or "")

# Preview
if uploader.selected is not None:
    st.subheader("Preview")
    st.image(uploader.selected.data, use_container_width=True)
    resolution = image_resolution(uploader.selected.data)
    info = f"{uploader.selected.size / 1024:.1f} KB"
    if resolution:
        info += f" | {resolution[0]}x{resolution[1]}"
    if uploader.original is not None and uploader.original is not uploader.selected:
        info += f" | original {uploader.original.size / 1024:.1f} KB"
    st.caption(info)

    if st.button(
        get_message("analyze", locale),
        type="primary",
        disabled=not uploader.can_analyze,
        use_container_width=True,
    ):
        with st.spinner(get_message("analyzing", locale)):
            uploader.analyze()

# Results
if uploader.state == UploaderState.RESULT and uploader.result is not None:
    st.divider()
    st.markdown(f"**{get_message('result_heading', locale)}**")
    st.markdown(uploader.result.content)
elif uploader.state == UploaderState.ERROR and uploader.error is not None:
    st.divider()
    st.error(f"**{get_message('error_heading', locale)}** {uploader.error.message}")
elif uploader.selected is None:
    st.info("Upload a photo to begin.")
