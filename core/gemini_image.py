# core/gemini_image.py
# -*- coding: utf-8 -*-
import base64
import binascii
import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError
from google.genai import types as genai_types

from core.errors import MalformedResponse, NoImageError
from core.gemini_helpers import generate

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = "data:image/png;base64,"


def _first_image_from_parts(parts) -> Optional[Tuple[str, bytes]]:
    """Lấy (mime_type, bytes) của ảnh đầu tiên trong candidates[0].content.parts (inline_data)."""
    if not parts:
        return None
    for p in parts:
        inline = getattr(p, "inline_data", None)
        if inline and getattr(inline, "data", None):
            return getattr(inline, "mime_type", None) or "image/png", inline.data
    return None


def _response_parts(resp):
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return getattr(content, "parts", None) or []


def to_png_bytes(raw: bytes) -> bytes:
    """Chuẩn hoá về PNG để file scene_XXX.png trong zip đúng định dạng."""
    if isinstance(raw, str):
        # một số phiên bản SDK trả base64 string thay vì bytes
        try:
            raw = base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedResponse(f"Image payload is not valid base64: {e}") from e
    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise MalformedResponse(f"Image payload is not a readable image: {e}") from e
    if img.format == "PNG":
        return raw
    if img.mode not in ("RGB", "RGBA", "L", "LA", "P"):
        img = img.convert("RGBA")
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


def png_data_uri(png: bytes) -> str:
    return DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")


def gemini25_image_generate(client, prompt: str, model_name: str = "gemini-2.5-flash-image",
                            aspect_ratio: str = "16:9") -> str:
    """
    Sinh ảnh preview bằng Gemini 2.5 Flash Image (Nano Banana) qua SDK google-genai.
    Trả về data URI PNG. Không có ảnh trong response -> NoImageError.
    """
    config = genai_types.GenerateContentConfig(
        image_config=genai_types.ImageConfig(aspect_ratio=aspect_ratio),
    )
    resp = generate(client, model_name, prompt, config)
    found = _first_image_from_parts(_response_parts(resp))
    if found is None:
        raise NoImageError(
            "No image data in response. Check model name is 'gemini-2.5-flash-image' "
            "and your API key has image-generation access."
        )
    mime, raw = found
    logger.debug("Gemini returned %s (%d bytes)", mime, len(raw))
    return png_data_uri(to_png_bytes(raw))
