import streamlit as st

from core.env_loader import load_env, load_settings, init_client, quiet_logs, setup_logging
from core.errors import MissingCredential
from core.id_issuer import UuidIssuer
from core.project_store import JsonFileStorage, ProjectStore
from core.story_director import StoryDirector

from ui.sidebar import render_sidebar
from ui.dashboard import render_dashboard
from ui.section_1_create import render_section_1
from ui.section_2_workspace import render_section_2
from ui.section_3_storyboard import render_section_3

quiet_logs()
st.set_page_config(page_title="AniScript Studio", page_icon="🎬", layout="wide")


@st.cache_resource(show_spinner=False)
def get_store(storage_path: str) -> ProjectStore:
    return ProjectStore(JsonFileStorage(storage_path), UuidIssuer())


# Session init
if "view" not in st.session_state:
    st.session_state.view = "dashboard"          # dashboard | create | workspace
if "current_project_id" not in st.session_state:
    st.session_state.current_project_id = None
if "recommended_idea" not in st.session_state:
    st.session_state.recommended_idea = None

# Load .env, settings and Gemini client
api_key = load_env()
settings = load_settings()
setup_logging(settings.log_level)
settings = render_sidebar(settings)   # API key manager + model overrides

store = get_store(str(settings.storage_path))
director = None
if api_key:
    try:
        director = StoryDirector(init_client(api_key), UuidIssuer(),
                                 text_model=settings.text_model, image_model=settings.image_model)
    except MissingCredential as e:
        st.sidebar.error(str(e))

st.title("🎬 AniScript Studio")
st.caption("AI-Powered Storyboarding & Prompt Engineering")

view = st.session_state.view
if view == "create":
    render_section_1(store, director)
elif view == "workspace" and st.session_state.current_project_id:
    render_section_2(store, director)
    render_section_3(store, director, settings)
else:
    render_dashboard(store)
