# -*- coding: utf-8 -*-
from typing import Dict, List, Optional

from core.data_models import AnimationStyle, Character, VideoType
from core.presets import preset_block


def character_line(c: Character) -> str:
    line = f"- {c.name}: {c.description}. Visual features: {c.features}."
    if c.personality:
        line += f" Personality: {c.personality}"
    return line


def build_character_context(characters: List[Character]) -> str:
    return "\n".join(character_line(c) for c in characters)


def build_scene_directive(characters: List[Character], style: AnimationStyle, video_type: VideoType) -> str:
    """
    System instruction cho bước chia cảnh.
    Yêu cầu Gemini nhắc lại đặc điểm ngoại hình + style trong MỌI visual prompt.
    """
    style = AnimationStyle(style)
    video_type = VideoType(video_type)
    character_context = build_character_context(characters) or "- (no fixed characters; invent minor extras only if needed)"
    return f"""
You are an expert animation director and screenwriter for YouTube.
Your task is to take a story idea and break it down into scenes.

Format Constraints:
- Video Type: {video_type.value}
- Animation Style: {style.value}

Characters Available:
{character_context}

{preset_block(style)}

Instructions:
1. Create a compelling script suitable for the video type (fast-paced for Shorts, well-paced for Long).
2. For 'visualPrompt', write a highly detailed image generation prompt.
   - IMPORTANT: You MUST inject the specific visual features of the characters (e.g., "Bella, a tall woman with long purple braid") into the prompt every time the character appears so the image generator knows how to draw them.
   - Include the art style ({style.value}) in every visual prompt.
   - Describe lighting, camera angle, and background.
3. Number scenes from 1 in story order. 'duration' is a short label such as "3s".

Output MUST be a JSON array of objects.
""".strip()


def build_story_user_prompt(idea: str) -> str:
    return f"Story Idea: {idea}"


def build_idea_directive() -> str:
    valid_styles = ", ".join(s.value for s in AnimationStyle)
    valid_types = ", ".join(t.value for t in VideoType)
    return f"""
You are a YouTube creative strategist and trend analyst.
Your goal is to brainstorm a high-potential, viral animation project idea.

Constraints:
- Allowed Styles: {valid_styles}
- Allowed Types: {valid_types}

Instructions:
1. Analyze current trends or use the provided topic to create a concept.
2. Create a catchy 'name' for the project.
3. Write a brief 'storyIdea' (plot summary).
4. Select the best 'type' and 'style' from the allowed lists (copy the value exactly).
5. Create a set of unique 'characters' (2-4 characters) with detailed visual descriptions suitable for AI image generation.
""".strip()


def build_idea_user_prompt(topic: Optional[str] = None) -> str:
    topic = (topic or "").strip()
    if topic:
        return f'Generate a project idea based on this topic: "{topic}".'
    return "Generate a trending, viral animation project idea (e.g., horror, comedy, parody, cute animals, or sci-fi)."


# ---------- Response schemas (OpenAPI subset accepted by google-genai) ----------

SCENES_RESPONSE_SCHEMA: Dict = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "sceneNumber": {"type": "INTEGER"},
            "script": {"type": "STRING", "description": "The dialogue or voiceover text"},
            "visualPrompt": {"type": "STRING", "description": "Detailed prompt for video generation AI"},
            "duration": {"type": "STRING", "description": "Estimated duration e.g. '3s'"},
        },
        "required": ["sceneNumber", "script", "visualPrompt", "duration"],
    },
}

IDEA_RESPONSE_SCHEMA: Dict = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "storyIdea": {"type": "STRING"},
        "type": {"type": "STRING", "enum": [t.value for t in VideoType]},
        "style": {"type": "STRING", "enum": [s.value for s in AnimationStyle]},
        "characters": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "features": {"type": "STRING"},
                    "personality": {"type": "STRING"},
                },
                "required": ["name", "description", "features"],
            },
        },
    },
    "required": ["name", "storyIdea", "type", "style", "characters"],
}
