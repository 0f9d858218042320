# Directive parser — structured JSON blocks embedded in LLM output.
# Created: 2026-02-14
# Updated: 2026-02-27: Added shot-list and entity-suggestion blocks for
#   storyboard mode. Shot fields accept both snake_case and camelCase keys.
#
# The orchestrator LLM signals actions by emitting a fenced block tagged with
# a directive name and containing a single JSON object:
#
#   ```generate
#   {"model": "flux-2-pro", "prompt": "a cat", "params": {"aspect_ratio": "1:1"}}
#   ```
#
# Only complete blocks (opening and closing fence both present) are parsed, so
# the parser can be re-run on a growing stream buffer. Malformed JSON or a
# payload missing required fields yields None, never an exception.

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

GENERATE_TAG = "generate"
CREATE_SKILL_TAG = "create-skill"
SHOT_LIST_TAG = "shot-list"
ENTITY_SUGGESTION_TAG = "entity-suggestion"

DIRECTIVE_TAGS = (GENERATE_TAG, CREATE_SKILL_TAG, SHOT_LIST_TAG, ENTITY_SUGGESTION_TAG)

SKILL_CATEGORIES = ("style", "technique", "tool", "workflow", "custom")
ENTITY_TYPES = ("character", "world", "object", "style")

_BLOCK_PATTERNS: dict[str, re.Pattern[str]] = {
    tag: re.compile(r"```" + re.escape(tag) + r"(?![\w-])\s*(.*?)```", re.DOTALL)
    for tag in DIRECTIVE_TAGS
}


def _block_pattern(tag: str) -> re.Pattern[str]:
    pattern = _BLOCK_PATTERNS.get(tag)
    if pattern is None:
        pattern = re.compile(r"```" + re.escape(tag) + r"(?![\w-])\s*(.*?)```", re.DOTALL)
    return pattern


def find_block(text: str, tag: str) -> str | None:
    """Return the body of the first complete ```tag fenced block, or None."""
    if not text:
        return None
    match = _block_pattern(tag).search(text)
    if match is None:
        return None
    return match.group(1).strip()


def _load_block(text: str, tag: str) -> dict[str, Any] | None:
    body = find_block(text, tag)
    if body is None:
        return None
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Failed to parse %s block: %s", tag, body[:200])
        return None
    if not isinstance(data, dict):
        logger.warning("%s block is not a JSON object", tag)
        return None
    return data


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _str_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if v is not None)


def _first(data: dict[str, Any], *keys: str) -> Any:
    """First truthy value among *keys*."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


# ============================================================================
# Directive types
# ============================================================================


@dataclass(frozen=True)
class GenerationDirective:
    """A request to run one generation job."""

    model: str
    prompt: str
    params: dict[str, Any] = field(default_factory=dict)
    duration: float | None = None
    resolution: str | None = None
    sequential_image_generation: str | None = None
    max_images: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GenerationDirective | None:
        model = data.get("model")
        prompt = data.get("prompt")
        if not isinstance(model, str) or not model.strip():
            return None
        if not isinstance(prompt, str) or not prompt.strip():
            return None

        params = data.get("params")
        if not isinstance(params, dict):
            params = {}

        duration = data.get("duration")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            duration = None

        max_images = data.get("maxImages", data.get("max_images"))
        if isinstance(max_images, bool) or not isinstance(max_images, int):
            max_images = None

        return cls(
            model=model.strip(),
            prompt=prompt,
            params=params,
            duration=duration,
            resolution=_str_or_none(data.get("resolution")),
            sequential_image_generation=_str_or_none(
                data.get("sequentialImageGeneration", data.get("sequential_image_generation"))
            ),
            max_images=max_images,
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire representation (camelCase, unset optionals omitted)."""
        out: dict[str, Any] = {"model": self.model, "prompt": self.prompt, "params": dict(self.params)}
        if self.duration is not None:
            out["duration"] = self.duration
        if self.resolution is not None:
            out["resolution"] = self.resolution
        if self.sequential_image_generation is not None:
            out["sequentialImageGeneration"] = self.sequential_image_generation
        if self.max_images is not None:
            out["maxImages"] = self.max_images
        return out


@dataclass(frozen=True)
class SkillCreationDirective:
    """A request to save a new reusable skill."""

    name: str
    shortcut: str
    content: str
    description: str = ""
    category: str = "custom"
    icon: str | None = None
    tags: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SkillCreationDirective | None:
        name = _str_or_none(data.get("name"))
        shortcut = _str_or_none(data.get("shortcut"))
        content = data.get("content")
        if not name or not shortcut or not isinstance(content, str) or not content.strip():
            return None

        category = data.get("category") or "custom"
        if category not in SKILL_CATEGORIES:
            category = "custom"

        return cls(
            name=name,
            shortcut=shortcut.lstrip("@"),
            content=content,
            description=str(data.get("description") or ""),
            category=category,
            icon=_str_or_none(data.get("icon")),
            tags=_str_list(data.get("tags")),
            examples=_str_list(data.get("examples")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "shortcut": self.shortcut,
            "description": self.description,
            "category": self.category,
            "content": self.content,
            "tags": list(self.tags),
            "examples": list(self.examples),
        }
        if self.icon is not None:
            out["icon"] = self.icon
        return out


@dataclass(frozen=True)
class ShotItem:
    """One planned shot in a storyboard."""

    title: str = ""
    description: str = ""
    camera_angle: str | None = None
    camera_movement: str | None = None
    duration_seconds: float = 5
    media_type: str = "image"
    suggested_prompt: str | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShotItem:
        duration = _first(data, "duration_seconds", "durationSeconds")
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            duration = 5
        return cls(
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            camera_angle=_str_or_none(_first(data, "camera_angle", "cameraAngle")),
            camera_movement=_str_or_none(_first(data, "camera_movement", "cameraMovement")),
            duration_seconds=duration,
            media_type=str(_first(data, "media_type", "mediaType") or "image"),
            suggested_prompt=_str_or_none(
                _first(data, "suggested_prompt", "suggestedPrompt", "aiSuggestedPrompt")
            ),
            notes=_str_or_none(_first(data, "notes", "aiNotes")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "cameraAngle": self.camera_angle,
            "cameraMovement": self.camera_movement,
            "durationSeconds": self.duration_seconds,
            "mediaType": self.media_type,
            "aiSuggestedPrompt": self.suggested_prompt,
            "aiNotes": self.notes,
        }


@dataclass(frozen=True)
class ShotListDirective:
    shots: tuple[ShotItem, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShotListDirective | None:
        shots = data.get("shots")
        if not isinstance(shots, list):
            return None
        return cls(shots=tuple(ShotItem.from_dict(s) for s in shots if isinstance(s, dict)))

    def to_dict(self) -> dict[str, Any]:
        return {"shots": [s.to_dict() for s in self.shots]}


@dataclass(frozen=True)
class EntitySuggestion:
    name: str
    type: str = "object"
    description: str = ""


@dataclass(frozen=True)
class EntitySuggestionDirective:
    entities: tuple[EntitySuggestion, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntitySuggestionDirective | None:
        entities = data.get("entities")
        if not isinstance(entities, list):
            return None
        parsed: list[EntitySuggestion] = []
        for item in entities:
            if not isinstance(item, dict):
                continue
            name = _str_or_none(item.get("name"))
            if not name:
                continue
            entity_type = item.get("type")
            if entity_type not in ENTITY_TYPES:
                entity_type = "object"
            parsed.append(
                EntitySuggestion(
                    name=name,
                    type=entity_type,
                    description=str(item.get("description") or ""),
                )
            )
        return cls(entities=tuple(parsed))

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": [
                {"name": e.name, "type": e.type, "description": e.description}
                for e in self.entities
            ]
        }


# ============================================================================
# Parsers
# ============================================================================


def parse_generation_directive(text: str) -> GenerationDirective | None:
    data = _load_block(text, GENERATE_TAG)
    if data is None:
        return None
    return GenerationDirective.from_dict(data)


def parse_skill_creation_directive(text: str) -> SkillCreationDirective | None:
    data = _load_block(text, CREATE_SKILL_TAG)
    if data is None:
        return None
    return SkillCreationDirective.from_dict(data)


def parse_shot_list_directive(text: str) -> ShotListDirective | None:
    data = _load_block(text, SHOT_LIST_TAG)
    if data is None:
        return None
    return ShotListDirective.from_dict(data)


def parse_entity_suggestion_directive(text: str) -> EntitySuggestionDirective | None:
    data = _load_block(text, ENTITY_SUGGESTION_TAG)
    if data is None:
        return None
    return EntitySuggestionDirective.from_dict(data)


def strip_directive_blocks(text: str, tags: tuple[str, ...] = DIRECTIVE_TAGS) -> str:
    """Remove complete directive blocks so only the prose is displayed."""
    for tag in tags:
        text = _block_pattern(tag).sub("", text)
    return text.strip()
