from core.data_models import AnimationStyle, Character, VideoType
from core.presets import PRESETS, preset_block
from core.prompt_builders import (
    IDEA_RESPONSE_SCHEMA,
    SCENES_RESPONSE_SCHEMA,
    build_character_context,
    build_idea_user_prompt,
    build_scene_directive,
    character_line,
)
from core.text_utils import feature_phrases, mentions, safe_token


def test_character_line_without_personality(bella):
    assert character_line(bella) == (
        "- Bella: The glamorous older sister. Adult female, tall.. "
        "Visual features: Long purple braid, perfect makeup, sparkling outfits.."
    )


def test_character_context_one_line_each(bella, mia):
    lines = build_character_context([bella, mia]).splitlines()
    assert len(lines) == 2
    assert lines[1].endswith("Personality: Giggly troublemaker")


def test_scene_directive_restates_style_rule(bella):
    directive = build_scene_directive([bella], AnimationStyle.ANIME_SHINKAI, VideoType.SHORT)
    assert "Video Type: YouTube Shorts (Vertical 9:16)" in directive
    assert "Include the art style (Anime Makoto Shinkai Style) in every visual prompt." in directive
    assert "[STYLE PROFILE: Anime Makoto Shinkai Style]" in directive
    assert "Output MUST be a JSON array of objects." in directive


def test_scene_directive_without_characters():
    directive = build_scene_directive([], AnimationStyle.CLAYMATION, VideoType.LONG)
    assert "no fixed characters" in directive


def test_every_style_has_a_preset():
    assert set(PRESETS) == set(AnimationStyle)
    for style in AnimationStyle:
        assert preset_block(style).startswith(f"[STYLE PROFILE: {style.value}]")


def test_idea_user_prompt_topic_is_stripped():
    assert build_idea_user_prompt("  space pigs ") == 'Generate a project idea based on this topic: "space pigs".'
    assert build_idea_user_prompt("   ").startswith("Generate a trending")


def test_response_schemas_require_fields():
    assert SCENES_RESPONSE_SCHEMA["items"]["required"] == ["sceneNumber", "script", "visualPrompt", "duration"]
    assert IDEA_RESPONSE_SCHEMA["properties"]["style"]["enum"] == [s.value for s in AnimationStyle]
    assert IDEA_RESPONSE_SCHEMA["properties"]["type"]["enum"] == [t.value for t in VideoType]


def test_video_type_helpers():
    assert VideoType.SHORT.aspect_ratio == "9:16"
    assert VideoType.LONG.aspect_ratio == "16:9"
    assert VideoType.SHORT.short_label == "Shorts"
    assert VideoType.LONG.short_label == "Long"


def test_text_helpers():
    assert safe_token("Ông Già Noël 2") == "ong_gia_noel_2"
    assert mentions("Bella", "BELLA, a tall woman")
    assert not mentions("Mia", "Miami at night")
    assert feature_phrases("Long purple braid, perfect makeup.") == ["long purple braid", "perfect makeup"]


def test_character_model_accepts_missing_personality():
    c = Character(id="x", name="n", description="d", features="f")
    assert c.personality is None
