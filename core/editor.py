# -*- coding: utf-8 -*-
"""
Pure edit operations on a project's character and scene lists.

Nothing here mutates its inputs: each function returns a new list (with
copied records where a record changed), so the UI can compare old and new
values to decide whether to persist.
"""
import json
import logging
from typing import List

from pydantic import ValidationError

from core.data_models import Character, Scene
from core.errors import ParseError, SchemaError

logger = logging.getLogger(__name__)

DEFAULT_CHARACTERS_JSON = """{
  "characters": [
    {
      "id": "char_bella",
      "name": "Bella",
      "description": "The glamorous older sister. Adult female, tall.",
      "features": "Long purple braid, perfect makeup, sparkling outfits."
    },
    {
      "id": "char_mia",
      "name": "Mia",
      "description": "The cute toddler sister. Small, huge eyes, mischievous.",
      "features": "High red ponytail, cute casual clothes."
    }
  ]
}"""


def _parse_character_payload(json_text: str) -> List[dict]:
    try:
        data = json.loads(json_text)
    except ValueError as e:
        raise ParseError(f"Invalid JSON syntax: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("characters"), list):
        raise SchemaError("Invalid JSON format: missing 'characters' array.")
    items = data["characters"]
    for i, item in enumerate(items, 1):
        if not isinstance(item, dict):
            raise SchemaError(f"Character #{i} is not an object.")
        missing = [k for k in ("name", "description", "features") if not isinstance(item.get(k), str)]
        if missing:
            raise SchemaError(f"Character #{i} is missing {', '.join(missing)}.")
    return items


def import_characters(existing: List[Character], json_text: str, ids) -> List[Character]:
    """
    Append characters parsed from ``{"characters": [...]}`` text.

    Ids that are missing, or that collide with an existing character or an
    earlier entry of the same import, are replaced by fresh ones from ``ids``.
    """
    items = _parse_character_payload(json_text)
    taken = {c.id for c in existing}
    added: List[Character] = []
    for item in items:
        cid = item.get("id")
        if not isinstance(cid, str) or not cid:
            if cid is not None:
                logger.info("Character id %r is not a valid id; issuing a new one", cid)
            cid = ids.new_id()
        elif cid in taken:
            logger.info("Character id %r already in use; issuing a new one", cid)
            cid = ids.new_id()
        taken.add(cid)
        try:
            added.append(Character.model_validate({**item, "id": cid}))
        except ValidationError as e:
            raise SchemaError(f"Invalid character {item.get('name')!r}: {e.errors()[0]['msg']}") from e
    return [*existing, *added]


def default_characters(ids) -> List[Character]:
    return import_characters([], DEFAULT_CHARACTERS_JSON, ids)


def remove_character(existing: List[Character], char_id: str) -> List[Character]:
    return [c for c in existing if c.id != char_id]


def _replace_scene(scenes: List[Scene], scene_id: str, **changes) -> List[Scene]:
    return [s.model_copy(update=changes) if s.id == scene_id else s for s in scenes]


def edit_scene_prompt(scenes: List[Scene], scene_id: str, new_text: str) -> List[Scene]:
    return _replace_scene(scenes, scene_id, visual_prompt=new_text)


def set_scene_image(scenes: List[Scene], scene_id: str, image_data: str) -> List[Scene]:
    return _replace_scene(scenes, scene_id, generated_image_url=image_data, is_generating_image=False)


def set_scene_pending(scenes: List[Scene], scene_id: str, pending: bool) -> List[Scene]:
    return _replace_scene(scenes, scene_id, is_generating_image=pending)
