from datetime import datetime

import streamlit as st

from core.project_store import ProjectStore


def _open(project_id: str):
    st.session_state.current_project_id = project_id
    st.session_state.view = "workspace"


def render_dashboard(store: ProjectStore):
    col1, col2 = st.columns([4, 1])
    with col1:
        st.header("Projects")
    with col2:
        if st.button("➕ New Project", type="primary"):
            st.session_state.recommended_idea = None
            st.session_state.view = "create"
            st.rerun()

    projects = store.list()
    if not projects:
        st.info("No projects yet. Create your first animation storyboard.")
        return

    cols = st.columns(3)
    for i, p in enumerate(projects):
        with cols[i % 3].container(border=True):
            st.subheader(p.name)
            created = datetime.fromtimestamp(p.created_at / 1000).strftime("%Y-%m-%d %H:%M") if p.created_at else "-"
            st.caption(f"{p.type.short_label} · {p.style.value} · {created}")
            st.write(p.story_idea or "_No story idea yet._")
            st.caption(f"{len(p.characters)} characters · {len(p.scenes)} scenes")
            cA, cB = st.columns(2)
            with cA:
                st.button("Open", key=f"open_{p.id}", on_click=_open, args=(p.id,))
            with cB:
                confirm = st.checkbox("Confirm", key=f"confirm_del_{p.id}")
                if st.button("🗑️ Delete", key=f"del_{p.id}", disabled=not confirm):
                    store.delete(p.id)
                    if st.session_state.current_project_id == p.id:
                        st.session_state.current_project_id = None
                    st.rerun()
