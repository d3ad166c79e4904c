import streamlit as st
from dataclasses import replace

from core.env_loader import (
    load_env, get_key_info, validate_key_format, set_runtime_key, clear_runtime_key,
    write_dotenv_key, reset_caches_and_rerun,
)

def render_sidebar(settings):
    st.sidebar.title("⚙️ Settings")

    # ============ 🔐 API Key Manager ============
    with st.sidebar.expander("🔐 API Key (GEMINI_API_KEY)", expanded=not load_env()):
        current_key = load_env()
        st.caption(f"Current: {get_key_info(current_key)}")

        new_key = st.text_input(
            "New key (not stored until you press a button below)",
            type="password",
            placeholder="paste GEMINI_API_KEY here…",
            key="api_key_entry_sidebar",
        )

        colK1, colK2 = st.columns(2)
        with colK1:
            if st.button("⚡ Use for this session"):
                if not validate_key_format(new_key):
                    st.warning("Key is empty or invalid.")
                else:
                    set_runtime_key(new_key)
                    st.success("Runtime key overridden for this session.")
                    reset_caches_and_rerun()
        with colK2:
            if st.button("💾 Write to .env"):
                if not validate_key_format(new_key):
                    st.warning("Key is empty or invalid.")
                elif write_dotenv_key(new_key):
                    st.success("Key written to .env and applied.")
                    reset_caches_and_rerun()
                else:
                    st.error("Could not write .env. Check file permissions.")

        colR1, colR2 = st.columns(2)
        with colR1:
            if st.button("🔄 Reload .env"):
                reset_caches_and_rerun()
        with colR2:
            if st.button("🧽 Clear override"):
                # xoá override runtime, vòng render sau sẽ đọc lại .env
                clear_runtime_key()
                st.info("Override cleared. The key will be reloaded from .env.")
                reset_caches_and_rerun()
    # ============ /API Key Manager ============

    options = ["gemini-2.5-flash", "gemini-2.5-pro"]
    known = settings.text_model in options
    text_model = st.sidebar.selectbox("Script model", options,
                                      index=options.index(settings.text_model) if known else 0)
    custom_model = st.sidebar.text_input("Custom script model", value="" if known else settings.text_model,
                                         help="e.g. gemini-2.5-flash")
    image_model = st.sidebar.text_input("Image model", value=settings.image_model)
    workers = st.sidebar.number_input("Parallel image requests", min_value=1, max_value=8,
                                      value=int(settings.preview_workers), step=1)

    if not load_env():
        st.sidebar.error("No GEMINI_API_KEY found in .env.")

    return replace(
        settings,
        text_model=custom_model or text_model,
        image_model=image_model or settings.image_model,
        preview_workers=int(workers),
    )
