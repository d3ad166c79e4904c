from __future__ import annotations

import io
import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, List

import pytest
from PIL import Image


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.data_models import AnimationStyle, Character, Project, Scene, VideoType  # noqa: E402
from core.id_issuer import SequentialIds  # noqa: E402
from core.project_store import MemoryStorage, ProjectStore  # noqa: E402


class FakeModels:
    """Stands in for ``genai.Client().models``; replays queued responses in order."""

    def __init__(self) -> None:
        self.calls: List[dict] = []
        self.queue: List[Any] = []

    def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if not self.queue:
            raise AssertionError("FakeGenaiClient has no queued response")
        item = self.queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class FakeGenaiClient:
    def __init__(self) -> None:
        self.models = FakeModels()

    def queue_text(self, payload: Any) -> None:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        self.models.queue.append(SimpleNamespace(text=text, candidates=[]))

    def queue_image(self, data: bytes, mime_type: str = "image/png") -> None:
        part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)
        self._queue_parts([part])

    def queue_parts(self, parts: list) -> None:
        self._queue_parts(parts)

    def _queue_parts(self, parts: list) -> None:
        content = SimpleNamespace(parts=parts)
        self.models.queue.append(SimpleNamespace(text=None, candidates=[SimpleNamespace(content=content)]))

    def queue_error(self, exc: BaseException) -> None:
        self.models.queue.append(exc)


def make_png(color=(200, 40, 90), size=(8, 6), fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds("t")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage, ids: SequentialIds) -> ProjectStore:
    ticks = iter(range(1_700_000_000_000, 1_800_000_000_000, 1000))
    return ProjectStore(storage, ids, clock=lambda: next(ticks))


@pytest.fixture
def fake_client() -> FakeGenaiClient:
    return FakeGenaiClient()


@pytest.fixture
def bella() -> Character:
    return Character(
        id="char_bella",
        name="Bella",
        description="The glamorous older sister. Adult female, tall.",
        features="Long purple braid, perfect makeup, sparkling outfits.",
    )


@pytest.fixture
def mia() -> Character:
    return Character(
        id="char_mia",
        name="Mia",
        description="The cute toddler sister. Small, huge eyes, mischievous.",
        features="High red ponytail, cute casual clothes.",
        personality="Giggly troublemaker",
    )


def make_scene(number: int, image: str | None = None, sid: str | None = None) -> Scene:
    return Scene(
        id=sid or f"scene-{number}",
        scene_number=number,
        script=f"Line {number}",
        visual_prompt=f"Prompt {number}, Disney/Pixar 3D Style",
        duration="3s",
        generated_image_url=image,
    )


def make_project(scenes: list, name: str = "Test") -> Project:
    return Project(
        id="p-1",
        name=name,
        type=VideoType.SHORT,
        style=AnimationStyle.DISNEY_PIXAR,
        created_at=1,
        characters=[],
        scenes=scenes,
        story_idea="Two sisters bake a cake.",
    )
