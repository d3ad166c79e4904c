import json
import logging

import pytest

from core.editor import (
    DEFAULT_CHARACTERS_JSON,
    default_characters,
    edit_scene_prompt,
    import_characters,
    remove_character,
    set_scene_image,
    set_scene_pending,
)
from core.errors import ParseError, SchemaError

from conftest import make_scene


def _payload(*chars):
    return json.dumps({"characters": list(chars)})


def test_import_appends_in_order(bella, mia, ids):
    existing = [bella]
    text = _payload(
        {"id": "char_rex", "name": "Rex", "description": "A dog", "features": "Floppy ears"},
        {"id": "char_zed", "name": "Zed", "description": "A robot", "features": "Chrome body", "personality": "Dry"},
    )
    result = import_characters(existing, text, ids)

    assert len(result) == len(existing) + 2
    assert result[0] is bella
    assert [c.id for c in result[1:]] == ["char_rex", "char_zed"]
    assert result[2].personality == "Dry"
    assert existing == [bella]


def test_import_generates_missing_ids(ids):
    result = import_characters([], _payload({"name": "Rex", "description": "d", "features": "f"}), ids)
    assert result[0].id == "t-1"


def test_import_regenerates_colliding_ids(bella, ids):
    text = _payload(
        {"id": "char_bella", "name": "Bella 2", "description": "d", "features": "f"},
        {"id": "dup", "name": "A", "description": "d", "features": "f"},
        {"id": "dup", "name": "B", "description": "d", "features": "f"},
    )
    result = import_characters([bella], text, ids)
    assert [c.id for c in result] == ["char_bella", "t-1", "dup", "t-2"]
    assert len({c.id for c in result}) == len(result)


def test_import_logs_why_an_id_was_replaced(bella, ids, caplog):
    text = _payload(
        {"id": 42, "name": "Rex", "description": "d", "features": "f"},
        {"id": "char_bella", "name": "Bella 2", "description": "d", "features": "f"},
    )
    with caplog.at_level(logging.INFO, logger="core.editor"):
        result = import_characters([bella], text, ids)

    assert [c.id for c in result] == ["char_bella", "t-1", "t-2"]
    messages = [r.getMessage() for r in caplog.records]
    assert "Character id 42 is not a valid id; issuing a new one" in messages
    assert "Character id 'char_bella' already in use; issuing a new one" in messages
    assert not any("42" in m and "already in use" in m for m in messages)


def test_import_unparseable_text_is_parse_error(bella, ids):
    existing = [bella]
    with pytest.raises(ParseError):
        import_characters(existing, "{characters: [", ids)
    assert existing == [bella]


@pytest.mark.parametrize("text", [
    "[]",
    '{"people": []}',
    '{"characters": {"name": "x"}}',
    '{"characters": ["Bella"]}',
    '{"characters": [{"name": "Bella", "description": "d"}]}',
])
def test_import_wrong_shape_is_schema_error(text, ids):
    with pytest.raises(SchemaError):
        import_characters([], text, ids)


def test_default_characters_match_starter_json(ids):
    chars = default_characters(ids)
    expected = json.loads(DEFAULT_CHARACTERS_JSON)["characters"]
    assert [(c.id, c.name) for c in chars] == [(e["id"], e["name"]) for e in expected]


def test_remove_character(bella, mia):
    assert remove_character([bella, mia], "char_bella") == [mia]


def test_remove_character_absent_is_noop(bella, mia):
    chars = [bella, mia]
    assert remove_character(chars, "nobody") == chars


def test_edit_scene_prompt_returns_new_list():
    scenes = [make_scene(1), make_scene(2)]
    result = edit_scene_prompt(scenes, "scene-2", "A new prompt")
    assert result[1].visual_prompt == "A new prompt"
    assert result[0] is scenes[0]
    assert scenes[1].visual_prompt == "Prompt 2, Disney/Pixar 3D Style"


def test_scene_edits_are_noops_for_unknown_ids():
    scenes = [make_scene(1), make_scene(2)]
    assert edit_scene_prompt(scenes, "ghost", "x") == scenes
    assert set_scene_image(scenes, "ghost", "data:image/png;base64,AAAA") == scenes
    assert set_scene_pending(scenes, "ghost", True) == scenes


def test_set_scene_image_clears_pending_flag():
    scenes = set_scene_pending([make_scene(1)], "scene-1", True)
    assert scenes[0].is_generating_image is True
    result = set_scene_image(scenes, "scene-1", "data:image/png;base64,AAAA")
    assert result[0].generated_image_url == "data:image/png;base64,AAAA"
    assert result[0].is_generating_image is False
