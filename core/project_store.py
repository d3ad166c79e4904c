# -*- coding: utf-8 -*-
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from core.data_models import Project, ProjectDraft
from core.errors import NotFound, ParseError, SchemaError

logger = logging.getLogger(__name__)

APP_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = APP_DIR / "projects"
STORAGE_KEY = "aniscript_projects"
DEFAULT_STORAGE_PATH = DATA_DIR / f"{STORAGE_KEY}.json"


def _decode_snapshot(text: Optional[str], where: str) -> List[Dict[str, Any]]:
    if text is None or not text.strip():
        return []
    try:
        raw = json.loads(text)
    except ValueError as e:
        raise ParseError(f"Stored projects in {where} are not valid JSON: {e}") from e
    if isinstance(raw, dict):
        raw = raw.get(STORAGE_KEY)
    if not isinstance(raw, list) or not all(isinstance(p, dict) for p in raw):
        raise SchemaError(f"Stored projects in {where} must be a list of project objects")
    return raw


def _encode_snapshot(items: List[Dict[str, Any]]) -> str:
    return json.dumps({STORAGE_KEY: items}, ensure_ascii=False, indent=2)


class JsonFileStorage:
    """Một 'slot' duy nhất: file JSON chứa toàn bộ danh sách project."""

    def __init__(self, path=DEFAULT_STORAGE_PATH):
        self.path = Path(path)

    def load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        return _decode_snapshot(self.path.read_text(encoding="utf-8"), str(self.path))

    def save(self, items: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # ghi file tạm rồi replace để không bao giờ để lại snapshot dở dang
        fd, tmp = tempfile.mkstemp(prefix=".aniscript_", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                fp.write(_encode_snapshot(items))
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class MemoryStorage:
    """In-memory slot; keeps the serialized text so tests go through the same JSON round trip."""

    def __init__(self, text: Optional[str] = None):
        self.text = text
        self.writes = 0

    def load(self) -> List[Dict[str, Any]]:
        return _decode_snapshot(self.text, "memory")

    def save(self, items: List[Dict[str, Any]]) -> None:
        self.text = _encode_snapshot(items)
        self.writes += 1


def _migrate_project_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(data or {})
    data.setdefault("characters", [])
    data.setdefault("scenes", [])
    data.setdefault("storyIdea", "")
    data.setdefault("createdAt", 0)

    scenes = []
    for si, s in enumerate(data.get("scenes") or [], start=1):
        if isinstance(s, dict):
            s = dict(s)
            s.setdefault("sceneNumber", si)
            # không có request nào còn chạy sau khi mở lại app
            s["isGeneratingImage"] = False
        scenes.append(s)
    data["scenes"] = scenes
    return data


def _now_ms() -> int:
    return int(time.time() * 1000)


class ProjectStore:
    """
    Danh sách project trong bộ nhớ, ghi đè toàn bộ snapshot sau mỗi thay đổi.
    storage: object có load() / save(list[dict]); ids: object có new_id().
    """

    def __init__(self, storage, ids, clock: Callable[[], int] = _now_ms):
        self.storage = storage
        self.ids = ids
        self.clock = clock
        self._projects: List[Project] = []
        for i, raw in enumerate(storage.load()):
            try:
                self._projects.append(Project.model_validate(_migrate_project_dict(raw)))
            except ValidationError as e:
                raise SchemaError(f"Stored project #{i + 1} is invalid: {e}") from e
        logger.info("Loaded %d project(s)", len(self._projects))

    def _persist(self) -> None:
        self.storage.save([p.to_storage() for p in self._projects])

    def list(self) -> List[Project]:
        return list(self._projects)

    def get(self, project_id: str) -> Project:
        for p in self._projects:
            if p.id == project_id:
                return p
        raise NotFound(f"Project {project_id!r} not found")

    def create(self, draft: ProjectDraft) -> Project:
        project = Project(
            id=self.ids.new_id(),
            created_at=self.clock(),
            **draft.model_dump(),
        )
        self._projects.insert(0, project)
        self._persist()
        logger.info("Created project %s (%s)", project.id, project.name)
        return project

    def update(self, project: Project) -> Project:
        for i, p in enumerate(self._projects):
            if p.id == project.id:
                self._projects[i] = project
                self._persist()
                logger.info("Updated project %s", project.id)
                return project
        raise NotFound(f"Project {project.id!r} not found")

    def delete(self, project_id: str) -> bool:
        kept = [p for p in self._projects if p.id != project_id]
        if len(kept) == len(self._projects):
            return False
        self._projects = kept
        self._persist()
        logger.info("Deleted project %s", project_id)
        return True
