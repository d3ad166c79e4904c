import re, unicodedata
from typing import List

def _fold(s: str) -> str:
    s = ''.join(c for c in unicodedata.normalize('NFD', s or "") if unicodedata.category(c) != 'Mn')
    return s.lower().strip()

def safe_token(s: str) -> str:
    """
    Tên file an toàn: bỏ dấu, mọi ký tự ngoài [a-z0-9] -> '_', viết thường.
    'Café Noir!' -> 'cafe_noir_'
    """
    return re.sub(r"[^a-z0-9]", "_", _fold(s))

def mentions(name: str, text: str) -> bool:
    """Tên nhân vật có xuất hiện (nguyên từ, không phân biệt hoa thường/dấu) trong text?"""
    n = _fold(name)
    if not n:
        return False
    return re.search(rf"(?<!\w){re.escape(n)}(?!\w)", _fold(text)) is not None

def feature_phrases(features: str) -> List[str]:
    # "Long purple braid, perfect makeup." -> ["long purple braid", "perfect makeup"]
    parts = re.split(r"[,.;\n]+", _fold(features))
    return [p.strip() for p in parts if p.strip()]
