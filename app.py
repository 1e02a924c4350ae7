import asyncio
import logging
import threading

import streamlit as st

from pixelmagic.config.settings import GeminiSettings
from pixelmagic.handlers.error_handler import ConfigurationError, ImageIntakeError
from pixelmagic.services.edit_service.main import ImageEditing
from pixelmagic.services.session_service.controller import EditSessionController
from pixelmagic.ui.presenter import (
    DOWNLOAD_FILENAME,
    EXAMPLE_PROMPTS,
    ResultView,
    can_submit,
    download_payload,
    error_banner_text,
    is_busy,
    refresh_interval,
    submit_label,
)
from pixelmagic.utility.logger import AppLogger

# =========================================================
# Setup
# =========================================================
AppLogger.init(level=logging.INFO, log_to_file=True, filename="pixelmagic_ui.log")
logger = AppLogger.get_logger(__name__)

st.set_page_config(page_title="PixelMagic AI", page_icon="✨", layout="wide")


class BackgroundLoop:
    """
    One event loop per process so the Gemini async client is never shared
    across loops. Every controller call goes through this loop, so session
    state is only ever touched from one thread.
    """

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        threading.Thread(target=self.loop.run_forever, daemon=True).start()

    def run(self, coro):
        """Run to completion and return the result."""
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result()

    def call(self, fn, *args):
        async def invoke():
            return fn(*args)

        return self.run(invoke())

    def schedule(self, coro):
        """Start without waiting; returns once the task has reached its first await."""
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        self.run(asyncio.sleep(0))
        return future


@st.cache_resource
def get_runtime():
    settings = GeminiSettings.from_env()
    logger.info(f"Streamlit app running in {settings.run_mode} mode")
    return ImageEditing.get_editor(settings), BackgroundLoop()


try:
    editor, runner = get_runtime()
except ConfigurationError as e:
    st.error(f"{e.message} Set it in your environment or .env file.", icon="⚠️")
    st.stop()

st.session_state.setdefault("controller", EditSessionController(editor))
st.session_state.setdefault("uploader_key", 0)
st.session_state.setdefault("error_dismissed", False)
st.session_state.setdefault("prompt_input", "")
st.session_state.setdefault("edit_future", None)
controller: EditSessionController = st.session_state.controller


def log_edit_failure(future):
    if not future.cancelled() and future.exception() is not None:
        logger.error(f"Edit task failed: {future.exception()}")


def start_over():
    runner.call(controller.reset)
    st.session_state.edit_future = None
    st.session_state.uploader_key += 1
    st.session_state.prompt_input = ""
    st.session_state.error_dismissed = False


def start_edit(prompt):
    if not can_submit(controller.session, prompt):
        return
    st.session_state.error_dismissed = False
    future = runner.schedule(controller.submit(prompt))
    future.add_done_callback(log_edit_failure)
    st.session_state.edit_future = future


def dismiss_error():
    st.session_state.error_dismissed = True


# =========================================================
# Header
# =========================================================
head_left, head_right = st.columns([4, 1])
with head_left:
    st.title("✨ PixelMagic AI")
with head_right:
    if controller.session.original_image is not None:
        st.button("🔄 New Image", on_click=start_over, width="stretch")

# =========================================================
# Upload zone
# =========================================================
if controller.session.original_image is None:
    st.subheader("Reimagine your images with Gemini")
    st.caption(
        "Upload an image and describe how you want to change it. Remove objects, "
        "change backgrounds, or apply artistic styles using natural language."
    )
    uploaded = st.file_uploader(
        "Upload an image",
        type=["png", "jpg", "jpeg", "webp"],
        help="Drag and drop your image here, or click to browse.",
        key=f"uploader_{st.session_state.uploader_key}",
    )
    for col, example in zip(st.columns(len(EXAMPLE_PROMPTS)), EXAMPLE_PROMPTS):
        col.info(f'"{example}"')

    if uploaded is not None:
        try:
            runner.run(
                controller.load_image(uploaded.getvalue(), uploaded.type, uploaded.name)
            )
            st.session_state.error_dismissed = False
            st.rerun()
        except ImageIntakeError as e:
            st.warning(e.message, icon="⚠️")
    st.stop()

# =========================================================
# Prompt form
# =========================================================
session = controller.session
with st.form("prompt_form", border=True):
    prompt_col, button_col = st.columns([5, 1], vertical_alignment="bottom")
    with prompt_col:
        st.text_input(
            "Describe your edit",
            key="prompt_input",
            placeholder="e.g. 'Remove the red circle', 'Add sunglasses'",
            disabled=is_busy(session),
        )
    with button_col:
        submitted = st.form_submit_button(
            submit_label(session),
            icon="🪄",
            type="primary",
            disabled=is_busy(session),
            width="stretch",
        )

if submitted:
    start_edit(st.session_state.prompt_input)
    if st.session_state.edit_future is not None:
        st.rerun()


# =========================================================
# Result viewer + error banner (redrawn while an edit runs)
# =========================================================
def render_results():
    future = st.session_state.edit_future
    if future is not None and future.done():
        # the form above still shows the busy label; redraw the whole page
        st.session_state.edit_future = None
        st.rerun()

    session = controller.session
    view = ResultView.from_session(session)
    if view is None:
        return

    left, right = st.columns(2)
    with left:
        st.markdown("**ORIGINAL**")
        st.markdown(
            f'<img src="{view.original_src}" alt="Original" style="width:100%">',
            unsafe_allow_html=True,
        )
    with right:
        st.markdown("**RESULT**")
        if view.is_processing:
            st.status("Consulting the AI models...", state="running")
        elif view.generated_src:
            st.markdown(
                f'<img src="{view.generated_src}" alt="Generated" style="width:100%">',
                unsafe_allow_html=True,
            )
        else:
            st.caption("Your edited image will appear here")
        if view.can_download:
            payload = download_payload(session)
            if payload is None:
                st.warning("The edited image could not be prepared for download.", icon="⚠️")
            else:
                st.download_button(
                    "⬇️ Download",
                    data=payload,
                    file_name=DOWNLOAD_FILENAME,
                    mime="image/png",
                )

    banner = error_banner_text(session, st.session_state.error_dismissed)
    if banner:
        msg_col, close_col = st.columns([12, 1])
        msg_col.error(f"**Generation Failed**  \n{banner}", icon="🚨")
        close_col.button("✖", on_click=dismiss_error, help="Dismiss")


st.fragment(run_every=refresh_interval(session))(render_results)()

st.divider()
st.caption("Powered by Google Gemini 2.5 Flash Image Model")
