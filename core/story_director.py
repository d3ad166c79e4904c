# -*- coding: utf-8 -*-
"""
AI orchestration: builds directives, calls Gemini, validates the JSON that
comes back and turns it into Scene / ProjectIdea records with fresh ids.

Each public call is exactly one request/response exchange. Nothing is
retried; callers surface the error and let the user try again.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.data_models import AnimationStyle, Character, ProjectIdea, Scene, VideoType
from core.errors import AniScriptError, GenerationError, MalformedResponse, MissingCredential, NoContent
from core.gemini_helpers import gemini_json
from core.gemini_image import gemini25_image_generate
from core.prompt_builders import (
    IDEA_RESPONSE_SCHEMA,
    SCENES_RESPONSE_SCHEMA,
    build_idea_directive,
    build_idea_user_prompt,
    build_scene_directive,
    build_story_user_prompt,
)
from core.text_utils import _fold, feature_phrases, mentions

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
PREVIEW_ASPECT_RATIO = "16:9"


# ---------- Response shapes ----------

class _SceneOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True, strict=True)
    scene_number: int = Field(alias="sceneNumber")
    script: str
    visual_prompt: str = Field(alias="visualPrompt")
    duration: str


class _CharacterOut(BaseModel):
    name: str
    description: str
    features: str
    personality: Optional[str] = None


class _IdeaOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    name: str
    story_idea: str = Field(alias="storyIdea")
    type: VideoType
    style: AnimationStyle
    characters: List[_CharacterOut] = Field(min_length=1)


# ---------- Prompt audit ----------

@dataclass
class PromptIssue:
    scene_id: str
    scene_number: int
    problem: str


def audit_visual_prompts(scenes: List[Scene], characters: List[Character], style) -> List[PromptIssue]:
    """
    Kiểm tra yêu cầu đã gửi cho Gemini: mỗi visual prompt phải nhắc style,
    và nhân vật nào được gọi tên thì phải kèm ít nhất một đặc điểm ngoại hình.
    Chỉ báo cáo, không sửa prompt.
    """
    style_label = _fold(AnimationStyle(style).value)
    issues: List[PromptIssue] = []
    for sc in scenes:
        prompt = _fold(sc.visual_prompt)
        if style_label not in prompt:
            issues.append(PromptIssue(sc.id, sc.scene_number, "art style not restated"))
        for c in characters:
            if not mentions(c.name, sc.visual_prompt):
                continue
            phrases = feature_phrases(c.features)
            if phrases and not any(p in prompt for p in phrases):
                issues.append(PromptIssue(sc.id, sc.scene_number, f"{c.name} appears without visual features"))
    return issues


@dataclass
class PreviewBatch:
    images: Dict[str, str] = field(default_factory=dict)
    errors: Dict[str, AniScriptError] = field(default_factory=dict)


class StoryDirector:
    def __init__(self, client, ids, text_model: str = DEFAULT_TEXT_MODEL,
                 image_model: str = DEFAULT_IMAGE_MODEL):
        if client is None:
            raise MissingCredential("API key not found in environment variables (GEMINI_API_KEY)")
        self.client = client
        self.ids = ids
        self.text_model = text_model
        self.image_model = image_model

    # ----- scenes -----

    def generate_story_scenes(self, idea: str, characters: List[Character],
                              style: AnimationStyle, video_type: VideoType) -> List[Scene]:
        directive = build_scene_directive(characters, style, video_type)
        logger.info("Generating scenes with %s (%d characters)", self.text_model, len(characters))
        try:
            data = gemini_json(self.client, self.text_model, build_story_user_prompt(idea),
                               system_instruction=directive, response_schema=SCENES_RESPONSE_SCHEMA)
        except MalformedResponse as e:
            raise GenerationError(str(e)) from e

        if not isinstance(data, list):
            raise GenerationError(f"Expected a JSON array of scenes, got {type(data).__name__}")
        if not data:
            raise NoContent("Gemini returned no scenes")

        scenes: List[Scene] = []
        for i, item in enumerate(data, 1):
            try:
                out = _SceneOut.model_validate(item)
            except ValidationError as e:
                raise GenerationError(f"Scene record #{i} is invalid: {e.errors()[0]['msg']}") from e
            scenes.append(Scene(id=self.ids.new_id(), **out.model_dump()))

        for issue in audit_visual_prompts(scenes, characters, style):
            logger.warning("Scene %d: %s", issue.scene_number, issue.problem)
        logger.info("Generated %d scenes", len(scenes))
        return scenes

    # ----- previews -----

    def generate_scene_preview(self, visual_prompt: str, aspect_ratio: str = PREVIEW_ASPECT_RATIO) -> str:
        # aspect_ratio mặc định 16:9 kể cả với project Shorts (9:16)
        logger.info("Rendering preview with %s (%s)", self.image_model, aspect_ratio)
        return gemini25_image_generate(self.client, visual_prompt, model_name=self.image_model,
                                       aspect_ratio=aspect_ratio)

    def generate_scene_previews(self, scenes: List[Scene], max_workers: int = 3,
                                aspect_ratio: str = PREVIEW_ASPECT_RATIO) -> PreviewBatch:
        """Render several scenes with at most ``max_workers`` requests in flight."""
        batch = PreviewBatch()
        if not scenes:
            return batch
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
            futures = {
                sc.id: pool.submit(self.generate_scene_preview, sc.visual_prompt, aspect_ratio)
                for sc in scenes
            }
            for scene_id, fut in futures.items():
                try:
                    batch.images[scene_id] = fut.result()
                except AniScriptError as e:
                    batch.errors[scene_id] = e
        logger.info("Preview batch: %d ok, %d failed", len(batch.images), len(batch.errors))
        return batch

    # ----- ideas -----

    def generate_project_idea(self, topic: Optional[str] = None) -> ProjectIdea:
        logger.info("Brainstorming project idea (topic=%r)", topic or None)
        data = gemini_json(self.client, self.text_model, build_idea_user_prompt(topic),
                           system_instruction=build_idea_directive(), response_schema=IDEA_RESPONSE_SCHEMA)
        if not isinstance(data, dict):
            raise MalformedResponse(f"Expected a JSON object, got {type(data).__name__}")
        try:
            out = _IdeaOut.model_validate(data)
        except ValidationError as e:
            err = e.errors()[0]
            loc = ".".join(str(x) for x in err["loc"])
            raise MalformedResponse(f"Project idea field '{loc}' is invalid: {err['msg']}") from e

        # luôn cấp id mới, không tin id do model trả về
        characters = [Character(id=self.ids.new_id(), **c.model_dump()) for c in out.characters]
        return ProjectIdea(
            name=out.name,
            story_idea=out.story_idea,
            type=out.type,
            style=out.style,
            characters=characters,
        )
