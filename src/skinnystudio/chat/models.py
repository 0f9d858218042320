# Chat wire models — messages in, generation status events out.
# Created: 2026-02-14
# Updated: 2026-03-02: Attachments carry a user-chosen purpose that is
#   forwarded to the generation endpoint unmodified.

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from skinnystudio.orchestrator.skills import SkillData

ImagePurpose = Literal["reference", "starting_frame", "edit_target", "last_frame"]
GenerationState = Literal["planning", "generating", "complete", "error"]

IMAGE_PURPOSES: tuple[str, ...] = ("reference", "starting_frame", "edit_target", "last_frame")


class _Wire(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", protected_namespaces=())


class ChatAttachment(_Wire):
    type: Literal["image", "reference"] = "image"
    url: str = ""
    name: str = ""
    base64: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
    purpose: ImagePurpose | None = None

    @property
    def usable(self) -> bool:
        return bool(self.url or self.base64)


class ChatMessage(_Wire):
    role: Literal["user", "assistant", "system"]
    content: str = ""
    attachments: list[ChatAttachment] = Field(default_factory=list)


class ImageWithPurpose(_Wire):
    """An attachment bound to a generation parameter slot."""

    url: str = ""
    base64: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
    purpose: ImagePurpose = "reference"


class GenerationResult(_Wire):
    image_url: str = Field(alias="imageUrl")
    output_urls: list[str] = Field(default_factory=list, alias="outputUrls")
    prompt: str = ""


class GenerationStatus(_Wire):
    """One step of the planning → generating → complete/error sequence."""

    status: GenerationState
    model: str
    params: dict[str, Any] = Field(default_factory=dict)
    result: GenerationResult | None = None
    error: str | None = None
    code: str | None = None
    required: float | None = None
    available: float | None = None
    generation_id: str | None = Field(default=None, alias="generationId")

    def to_event(self) -> dict[str, Any]:
        return {"generation": self.model_dump(by_alias=True, exclude_none=True)}


class TokenUsage(_Wire):
    prompt_tokens: int = Field(default=0, alias="promptTokens")
    response_tokens: int = Field(default=0, alias="responseTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")

    @property
    def is_empty(self) -> bool:
        return not (self.prompt_tokens or self.response_tokens or self.total_tokens)


class ChatRequest(_Wire):
    """Body of ``POST /api/v1/chat``."""

    messages: list[ChatMessage] = Field(min_length=1)
    api_key: str | None = Field(default=None, alias="apiKey")
    model_id: str | None = Field(default=None, alias="modelId")
    skills_context: str | None = Field(default=None, alias="skillsContext")
    active_skills: list[SkillData] = Field(default_factory=list, alias="activeSkills")
    referenced_skills: list[SkillData] = Field(default_factory=list, alias="referencedSkills")
    selected_generation_model_id: str | None = Field(
        default=None, alias="selectedGenerationModelId"
    )
