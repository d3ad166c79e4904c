import re, json
import logging
from typing import Any, Dict, Optional

from google.genai import types as genai_types

from core.errors import MalformedResponse, MissingCredential, UpstreamError

logger = logging.getLogger(__name__)


def parse_json_text(txt: str) -> Any:
    """JSON thuần -> khối ```json``` -> đoạn {...}/[...] hợp lệ dài nhất; hết cách thì MalformedResponse."""
    txt = (txt or "").strip()
    if not txt:
        raise MalformedResponse("Empty response text from Gemini")
    try:
        return json.loads(txt)
    except ValueError:
        pass
    m = re.search(r"```json\s*(\{.*?\}|\[.*?\])\s*```", txt, flags=re.S|re.I)
    if m:
        try: return json.loads(m.group(1))
        except ValueError: pass
    # chữ lẫn ngoặc (vd "[note] {...}"): thử từng vị trí { hoặc [, lấy đoạn JSON dài nhất
    decoder = json.JSONDecoder()
    best, best_len = None, 0
    for m2 in re.finditer(r"[\{\[]", txt):
        try:
            value, end = decoder.raw_decode(txt, m2.start())
        except ValueError:
            continue
        if end - m2.start() > best_len:
            best, best_len = value, end - m2.start()
    if best_len:
        return best
    raise MalformedResponse(f"Gemini response is not valid JSON: {txt[:120]!r}")


def generate(client, model: str, contents, config: genai_types.GenerateContentConfig):
    """Một lần gọi generate_content; mọi lỗi phía remote -> UpstreamError."""
    if client is None:
        raise MissingCredential("Gemini client chưa được khởi tạo (thiếu GEMINI_API_KEY)")
    try:
        return client.models.generate_content(model=model, contents=contents, config=config)
    except Exception as e:
        logger.error("Gemini call to %s failed: %s", model, e)
        raise UpstreamError(f"Gemini request failed: {e}") from e


def gemini_json(client, model: str, prompt: str, system_instruction: Optional[str] = None,
                response_schema: Optional[Dict] = None) -> Any:
    config = genai_types.GenerateContentConfig(
        system_instruction=system_instruction,
        response_mime_type="application/json",
        response_schema=response_schema,
    )
    resp = generate(client, model, prompt, config)
    return parse_json_text(getattr(resp, "text", None) or "")
