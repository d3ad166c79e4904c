# -*- coding: utf-8 -*-
import base64
import binascii
import io
import logging
import zipfile
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List

from core.data_models import Project, Scene
from core.errors import DecodeError, ExportError
from core.text_utils import safe_token

logger = logging.getLogger(__name__)

MANIFEST_NAME = "script_and_prompts.txt"
NOT_GENERATED = "[Not Generated Yet]"
HEADER_RULE = "=" * 48
SCENE_RULE = "-" * 48


@dataclass
class ExportBundle:
    filename: str
    data: bytes


def image_filename(scene_number: int) -> str:
    # 3 chữ số; từ 1000 trở lên tự nới rộng (scene_1000.png) nên vẫn không trùng
    return f"scene_{scene_number:03d}.png"


def export_filename(project_name: str) -> str:
    return f"{safe_token(project_name)}_assets.zip"


def ordered_scenes(scenes: List[Scene]) -> List[Scene]:
    return sorted(scenes, key=lambda s: s.scene_number)


def decode_data_uri(scene: Scene) -> bytes:
    uri = scene.generated_image_url or ""
    head, sep, payload = uri.partition(",")
    if not sep or not payload:
        raise DecodeError(scene.scene_number, "missing base64 payload")
    if not head.startswith("data:") or not head.endswith(";base64"):
        raise DecodeError(scene.scene_number, f"unsupported data URI header {head[:40]!r}")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(scene.scene_number, str(e)) from e


def build_manifest(project: Project) -> str:
    lines = [
        f"Project: {project.name}",
        f"Style: {project.style.value}",
        f"Type: {project.type.value}",
        f"Story Idea: {project.story_idea}",
        "",
        HEADER_RULE,
        "",
    ]
    for sc in ordered_scenes(project.scenes):
        image = image_filename(sc.scene_number) if sc.generated_image_url else NOT_GENERATED
        lines += [
            f"SCENE {sc.scene_number}",
            f"Duration: {sc.duration}",
            f'Script: "{sc.script}"',
            f"Visual Prompt: {sc.visual_prompt}",
            f"Generated Image File: {image}",
            SCENE_RULE,
            "",
        ]
    return "\n".join(lines) + "\n"


def _collect_images(project: Project) -> Dict[str, bytes]:
    with_images = [sc for sc in ordered_scenes(project.scenes) if sc.generated_image_url]
    dupes = [n for n, k in Counter(sc.scene_number for sc in with_images).items() if k > 1]
    if dupes:
        raise ExportError(f"Several scenes with images share scene number(s) {sorted(dupes)}")
    # decode hết trước khi mở zip: lỗi ở cảnh nào thì cả export dừng, không ra file dở
    return {image_filename(sc.scene_number): decode_data_uri(sc) for sc in with_images}


def export_zip(project: Project) -> ExportBundle:
    if not project.scenes:
        raise ExportError("Project has no scenes to export")
    images = _collect_images(project)
    mem = io.BytesIO()
    try:
        with zipfile.ZipFile(mem, "w", zipfile.ZIP_DEFLATED) as z:
            for name, data in images.items():
                z.writestr(name, data)
            z.writestr(MANIFEST_NAME, build_manifest(project))
    except (OSError, zipfile.LargeZipFile, ValueError) as e:
        raise ExportError(f"Failed to build archive: {e}") from e
    logger.info("Exported %s: %d scene(s), %d image(s)", project.id, len(project.scenes), len(images))
    return ExportBundle(filename=export_filename(project.name), data=mem.getvalue())
