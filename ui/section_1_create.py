import streamlit as st

from core.data_models import AnimationStyle, ProjectDraft, VideoType
from core.editor import default_characters
from core.errors import AniScriptError
from core.project_store import ProjectStore


def _apply_idea(idea):
    """Đổ gợi ý AI vào form tạo project (các widget đọc lại qua session_state key)."""
    st.session_state.new_name = idea.name
    st.session_state.new_type = idea.type
    st.session_state.new_style = idea.style
    st.session_state.new_idea = idea.story_idea
    st.session_state.custom_characters = list(idea.characters)


def _reset_form():
    for k in ("new_name", "new_type", "new_style", "new_idea", "custom_characters", "brainstorm_topic"):
        st.session_state.pop(k, None)
    st.session_state.recommended_idea = None


def render_section_1(store: ProjectStore, director):
    if st.button("← Back to Dashboard"):
        st.session_state.view = "dashboard"
        st.rerun()

    st.header("1) Create New Project")

    # ---- AI Brainstorm & Recommendation
    with st.container(border=True):
        st.subheader("🧠 AI Brainstorm & Recommendation")
        st.caption("Stuck? Enter a topic (or leave blank) and let AI suggest a full project plan including characters and style.")
        topic = st.text_input("Topic", key="brainstorm_topic",
                              placeholder="e.g. 'Cyberpunk Cats', 'Mystery', or leave empty for trends")
        if st.button("✨ Recommend Idea", disabled=director is None):
            st.session_state.recommended_idea = None
            with st.spinner("Brainstorming..."):
                try:
                    st.session_state.recommended_idea = director.generate_project_idea(topic)
                except AniScriptError as e:
                    st.error(f"Failed to brainstorm ideas: {e}")

        idea = st.session_state.get("recommended_idea")
        if idea:
            st.markdown(f"**{idea.name}**")
            st.caption(f"{idea.type.short_label} · {idea.style.value} · {len(idea.characters)} chars")
            st.info(idea.story_idea)
            st.button("✅ Use This", on_click=_apply_idea, args=(idea,))

    # ---- Manual form
    name = st.text_input("Project Name", key="new_name", placeholder="e.g., The Lost Puppy")
    col1, col2 = st.columns(2)
    with col1:
        vtype = st.selectbox("Video Format", list(VideoType), key="new_type", format_func=lambda v: v.value)
    with col2:
        style = st.selectbox("Art Style", list(AnimationStyle), key="new_style", format_func=lambda s: s.value)
    story = st.text_area("Initial Story Idea (Optional)", key="new_idea", height=100,
                         placeholder="A brief summary of what happens...")

    custom = st.session_state.get("custom_characters")
    if custom:
        st.success(f"Character Set Loaded: {len(custom)} characters ready from recommendation.")

    if st.button("Start Creating", type="primary", disabled=not name):
        draft = ProjectDraft(
            name=name or "Untitled Project",
            type=vtype,
            style=style,
            characters=custom or default_characters(store.ids),
            scenes=[],
            story_idea=story or "",
        )
        project = store.create(draft)
        _reset_form()
        st.session_state.current_project_id = project.id
        st.session_state.view = "workspace"
        st.rerun()
