# -*- coding: utf-8 -*-
import streamlit as st

from core.data_models import Project
from core.editor import DEFAULT_CHARACTERS_JSON, import_characters, remove_character
from core.errors import AniScriptError, NotFound, ParseError, SchemaError
from core.project_store import ProjectStore


def current_project(store: ProjectStore):
    pid = st.session_state.get("current_project_id")
    try:
        return store.get(pid)
    except NotFound:
        st.session_state.current_project_id = None
        st.session_state.view = "dashboard"
        return None


def _save(store: ProjectStore, proj: Project, **changes) -> Project:
    updated = proj.model_copy(update=changes)
    if updated != proj:
        store.update(updated)
    return updated


def _render_story_block(store: ProjectStore, director, proj: Project) -> Project:
    st.subheader("📝 Story Plot")
    story = st.text_area("Describe your story here...", value=proj.story_idea, height=160,
                         key=f"story_{proj.id}")
    proj = _save(store, proj, story_idea=story)

    busy_key = f"generating_{proj.id}"
    label = "🔁 Regenerate Scenes" if proj.scenes else "🎞️ Generate Scenes"
    disabled = director is None or not proj.story_idea.strip() or st.session_state.get(busy_key, False)
    if st.button(label, disabled=disabled, type="primary", key=f"gen_scenes_{proj.id}"):
        st.session_state[busy_key] = True
        try:
            with st.spinner("Writing script & visual prompts..."):
                scenes = director.generate_story_scenes(proj.story_idea, proj.characters, proj.style, proj.type)
            # áp vào bản mới nhất trong store, không dùng bản đã đọc trước khi gọi Gemini
            latest = store.get(proj.id)
            proj = _save(store, latest, scenes=scenes)
            st.success(f"Generated {len(scenes)} scenes.")
        except AniScriptError as e:
            st.error(f"Error generating script: {e}")
        finally:
            st.session_state[busy_key] = False
    return proj


def _render_character_manager(store: ProjectStore, proj: Project) -> Project:
    st.subheader("👥 Characters")
    tab_visual, tab_json = st.tabs(["Visual List", "JSON Import"])

    with tab_visual:
        if not proj.characters:
            st.caption("No characters added yet. Import JSON to get started.")
        for c in proj.characters:
            with st.expander(c.name):
                st.markdown(f"**Desc:** {c.description}")
                st.markdown(f"**Features:** {c.features}")
                if c.personality:
                    st.markdown(f"**Personality:** {c.personality}")
                if st.button("🗑️ Remove", key=f"rm_char_{proj.id}_{c.id}"):
                    proj = _save(store, proj, characters=remove_character(proj.characters, c.id))
                    st.rerun()

    with tab_json:
        json_text = st.text_area("Paste JSON Schema", value=DEFAULT_CHARACTERS_JSON, height=260,
                                 key=f"char_json_{proj.id}")
        if st.button("📥 Import Characters", key=f"import_chars_{proj.id}"):
            try:
                chars = import_characters(proj.characters, json_text, store.ids)
            except ParseError:
                st.error("Invalid JSON syntax.")
            except SchemaError as e:
                st.error(str(e))
            else:
                added = len(chars) - len(proj.characters)
                proj = _save(store, proj, characters=chars)
                st.success(f"Successfully imported {added} characters.")
    return proj


def render_section_2(store: ProjectStore, director):
    proj = current_project(store)
    if proj is None:
        st.rerun()
        return

    colB, colT = st.columns([1, 6])
    with colB:
        if st.button("←", help="Back to Dashboard"):
            st.session_state.view = "dashboard"
            st.rerun()
    with colT:
        st.header(proj.name)
        st.caption(f"{proj.type.short_label} • {proj.style.value} • auto-saved")

    proj = _render_story_block(store, director, proj)
    _render_character_manager(store, proj)
