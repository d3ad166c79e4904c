from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VideoType(str, Enum):
    SHORT = "YouTube Shorts (Vertical 9:16)"
    LONG = "YouTube Long (Horizontal 16:9)"

    @property
    def aspect_ratio(self) -> str:
        return "9:16" if self is VideoType.SHORT else "16:9"

    @property
    def short_label(self) -> str:
        # "YouTube Shorts (Vertical 9:16)" -> "Shorts"
        return self.value.split(" (")[0].split()[-1]


class AnimationStyle(str, Enum):
    DISNEY_PIXAR = "Disney/Pixar 3D Style"
    ANIME_SHINKAI = "Anime Makoto Shinkai Style"
    CINEMATIC_REALISTIC = "Cinematic Realistic"
    HAND_DRAWN_SKETCHY = "Hand-drawn Sketchy"
    CLAYMATION = "Claymation / Stop Motion"
    CYBERPUNK = "Cyberpunk / Sci-Fi 3D"


class _Record(BaseModel):
    # snake_case in Python, camelCase keys in storage / Gemini JSON
    model_config = ConfigDict(populate_by_name=True)


class Character(_Record):
    id: str
    name: str
    description: str
    features: str
    personality: Optional[str] = None


class Scene(_Record):
    id: str
    scene_number: int = Field(alias="sceneNumber")
    script: str
    visual_prompt: str = Field(alias="visualPrompt")
    duration: str
    generated_image_url: Optional[str] = Field(default=None, alias="generatedImageUrl")
    is_generating_image: bool = Field(default=False, alias="isGeneratingImage")


class ProjectDraft(_Record):
    name: str = "Untitled Project"
    type: VideoType = VideoType.SHORT
    style: AnimationStyle = AnimationStyle.DISNEY_PIXAR
    characters: List[Character] = []
    scenes: List[Scene] = []
    story_idea: str = Field(default="", alias="storyIdea")


class Project(ProjectDraft):
    id: str
    created_at: int = Field(alias="createdAt")

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProjectIdea(_Record):
    """AI suggestion; never persisted, only used to seed a ProjectDraft."""
    name: str
    story_idea: str = Field(alias="storyIdea")
    type: VideoType
    style: AnimationStyle
    characters: List[Character] = []

    def to_draft(self) -> ProjectDraft:
        return ProjectDraft(
            name=self.name,
            type=self.type,
            style=self.style,
            characters=list(self.characters),
            story_idea=self.story_idea,
        )
