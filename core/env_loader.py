import os
import logging
from dataclasses import dataclass
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv, set_key, find_dotenv

from core.errors import MissingCredential
from core.project_store import DEFAULT_STORAGE_PATH

logger = logging.getLogger(__name__)

KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")
# key nhập tay trong phiên, phải thắng giá trị .env khi reload
RUNTIME_KEY_VAR = "ANISCRIPT_RUNTIME_KEY"

def quiet_logs():
    os.environ.setdefault("GRPC_VERBOSITY", "ERROR")
    os.environ.setdefault("GRPC_CPP_ENABLE_STACKTRACE", "0")
    os.environ.setdefault("GRPC_ALTS_ENABLED", "0")
    for noisy in ("httpx", "httpcore", "google_genai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    try:
        import absl.logging as absl_logging
    except ImportError:
        return
    absl_logging.set_verbosity(absl_logging.ERROR)

def setup_logging(level: str = "INFO"):
    root = logging.getLogger()
    if not any(getattr(h, "_aniscript", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        handler._aniscript = True
        root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

def load_env() -> str:
    # Luôn reload .env để chắc chắn đọc key mới trên đĩa
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=True)
    runtime = os.getenv(RUNTIME_KEY_VAR, "")
    if runtime:
        set_runtime_key(runtime)
        return runtime
    # Ưu tiên GEMINI_API_KEY, sau đó GOOGLE_API_KEY, cuối cùng API_KEY (tên cũ của bản web)
    for var in KEY_VARS:
        val = os.getenv(var, "")
        if val:
            return val
    return ""

@dataclass
class Settings:
    text_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    storage_path: Path = DEFAULT_STORAGE_PATH
    preview_workers: int = 3
    log_level: str = "INFO"

def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning("%s=%r is not an integer; using %d", name, raw, default)
        return default

def load_settings() -> Settings:
    """Đọc cấu hình từ ENV (sau khi load_env đã nạp .env)."""
    return Settings(
        text_model=os.getenv("ANISCRIPT_TEXT_MODEL") or Settings.text_model,
        image_model=os.getenv("ANISCRIPT_IMAGE_MODEL") or Settings.image_model,
        storage_path=Path(os.getenv("ANISCRIPT_STORAGE_PATH") or DEFAULT_STORAGE_PATH),
        preview_workers=_int_env("ANISCRIPT_PREVIEW_WORKERS", Settings.preview_workers),
        log_level=os.getenv("ANISCRIPT_LOG_LEVEL") or Settings.log_level,
    )

def get_key_info(key: str) -> str:
    if not key:
        return "no key"
    return f"key_len={len(key)} | key_hash={abs(hash(key)) % 100000}"

def validate_key_format(k: str) -> bool:
    # Không bắt buộc regex gắt, chỉ đảm bảo không rỗng và không có khoảng trắng
    return bool(k and k.strip() and " " not in k)

def set_runtime_key(new_key: str):
    """
    Ghi đè key trong ENV của process hiện tại (không đụng file .env).
    Dùng khi muốn thay ngay lập tức trong phiên đang chạy.
    """
    os.environ["GEMINI_API_KEY"] = new_key
    os.environ["GOOGLE_API_KEY"] = new_key  # phòng TH SDK đọc GOOGLE_API_KEY
    os.environ[RUNTIME_KEY_VAR] = new_key

def clear_runtime_key():
    for var in (*KEY_VARS, RUNTIME_KEY_VAR):
        os.environ.pop(var, None)

def write_dotenv_key(new_key: str) -> bool:
    """
    Ghi key mới vào file .env. Trả về True nếu thành công.
    """
    env_path = find_dotenv(usecwd=True)
    if not env_path:
        # nếu chưa có .env, tạo file mới trong cwd
        env_path = os.path.join(os.getcwd(), ".env")
    try:
        open(env_path, "a", encoding="utf-8").close()
        set_key(env_path, "GEMINI_API_KEY", new_key)
    except OSError as e:
        logger.error("Cannot write %s: %s", env_path, e)
        return False
    # Đồng bộ runtime ngay sau khi ghi file; .env giờ là nguồn chính nên bỏ override
    os.environ.pop(RUNTIME_KEY_VAR, None)
    os.environ["GEMINI_API_KEY"] = new_key
    os.environ["GOOGLE_API_KEY"] = new_key
    return True

def reset_caches_and_rerun():
    st.cache_resource.clear()
    st.cache_data.clear()
    st.rerun()


@st.cache_resource(show_spinner=False)
def init_client(api_key: str):
    if not api_key:
        raise MissingCredential("API Key not found in environment variables")
    from google import genai
    return genai.Client(api_key=api_key)
