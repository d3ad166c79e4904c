# -*- coding: utf-8 -*-
import streamlit as st

from core.data_models import Project, Scene
from core.editor import edit_scene_prompt, set_scene_image, set_scene_pending
from core.errors import AniScriptError, DecodeError, NotFound
from core.project_io import decode_data_uri, export_zip, ordered_scenes
from core.project_store import ProjectStore


def _apply_to_scene(store: ProjectStore, project_id: str, edit) -> Project:
    """
    Đọc lại project theo id rồi mới sửa scene theo id: kết quả luôn rơi vào đúng
    project sở hữu scene, scene đã bị xoá thì edit là no-op.
    """
    latest = store.get(project_id)
    scenes = edit(latest.scenes)
    if scenes == latest.scenes:
        return latest
    return store.update(latest.model_copy(update={"scenes": scenes}))


def _error_key(scene_id: str) -> str:
    return f"img_error_{scene_id}"


def generate_scene_image(store: ProjectStore, director, project_id: str, sc: Scene, state) -> bool:
    """
    Sinh ảnh cho một scene. Lỗi được ghi vào state (session_state) để còn hiện
    sau st.rerun(); trả về True nếu thành công.
    """
    state.pop(_error_key(sc.id), None)
    _apply_to_scene(store, project_id, lambda s: set_scene_pending(s, sc.id, True))
    try:
        data_uri = director.generate_scene_preview(sc.visual_prompt)
        _apply_to_scene(store, project_id, lambda s: set_scene_image(s, sc.id, data_uri))
        return True
    except AniScriptError as e:
        state[_error_key(sc.id)] = f"Failed to generate image for scene {sc.scene_number}: {e}"
        return False
    finally:
        try:
            _apply_to_scene(store, project_id, lambda s: set_scene_pending(s, sc.id, False))
        except NotFound:
            pass  # project bị xoá trong lúc chờ


def _generate_missing(store: ProjectStore, director, proj: Project, workers: int):
    todo = [sc for sc in proj.scenes if not sc.generated_image_url and not sc.is_generating_image]
    if not todo:
        st.info("Every scene already has a preview.")
        return
    with st.spinner(f"Rendering {len(todo)} previews ({workers} at a time)..."):
        batch = director.generate_scene_previews(todo, max_workers=workers)

    def _merge(scenes):
        for scene_id, uri in batch.images.items():
            scenes = set_scene_image(scenes, scene_id, uri)
        return scenes

    _apply_to_scene(store, proj.id, _merge)
    if batch.images:
        st.success(f"Generated {len(batch.images)} preview(s).")
    for scene_id, err in batch.errors.items():
        num = next((s.scene_number for s in todo if s.id == scene_id), "?")
        st.error(f"Scene {num}: {err}")


def _render_scene(store: ProjectStore, director, proj: Project, sc: Scene):
    with st.container(border=True):
        colL, colR = st.columns([3, 2])
        with colL:
            st.markdown(f"**Scene {sc.scene_number}** · ⏱ {sc.duration}")
            st.markdown(f"> {sc.script}")

            edit_key = f"editing_{sc.id}"
            if st.session_state.get(edit_key):
                new_prompt = st.text_area("Visual Prompt", value=sc.visual_prompt, key=f"prompt_{sc.id}", height=160)
                if st.button("💾 Save", key=f"save_prompt_{sc.id}"):
                    _apply_to_scene(store, proj.id, lambda s: edit_scene_prompt(s, sc.id, new_prompt))
                    st.session_state[edit_key] = False
                    st.rerun()
            else:
                st.code(sc.visual_prompt, language=None, wrap_lines=True)
                if st.button("✏️ Edit prompt", key=f"edit_prompt_{sc.id}"):
                    st.session_state[edit_key] = True
                    st.rerun()

        with colR:
            if sc.generated_image_url:
                try:
                    st.image(decode_data_uri(sc), caption=f"Scene {sc.scene_number}")
                except DecodeError as e:
                    st.warning(str(e))
            err = st.session_state.get(_error_key(sc.id))
            if err:
                st.error(err)
            label = "🔄 Regenerate image" if sc.generated_image_url else "🖼️ Generate image"
            if st.button(label, key=f"gen_img_{sc.id}", disabled=director is None or sc.is_generating_image):
                with st.spinner(f"Rendering scene {sc.scene_number}..."):
                    generate_scene_image(store, director, proj.id, sc, st.session_state)
                st.rerun()


def render_section_3(store: ProjectStore, director, settings):
    pid = st.session_state.get("current_project_id")
    try:
        proj = store.get(pid)
    except NotFound:
        return

    st.markdown("---")
    if not proj.scenes:
        st.info('Storyboard empty. Enter your story idea and click "Generate Scenes" to let AI create your script and visual prompts.')
        return

    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        st.header(f"🪄 Storyboard & Prompts ({len(proj.scenes)} scenes)")
    with col2:
        if st.button("🖼️ Render missing previews", disabled=director is None):
            _generate_missing(store, director, proj, settings.preview_workers)
            proj = store.get(pid)
    with col3:
        try:
            bundle = export_zip(proj)
        except AniScriptError as e:
            st.error(f"Failed to export assets: {e}")
        else:
            st.download_button("📦 Download Assets", data=bundle.data, file_name=bundle.filename,
                               mime="application/zip")

    for sc in ordered_scenes(proj.scenes):
        _render_scene(store, director, proj, sc)
