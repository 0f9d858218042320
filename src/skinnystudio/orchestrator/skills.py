# Skills — reusable prompt fragments injected into the system prompt.
# Created: 2026-02-15
#
# Users activate skills in the UI and reference them inline with @shortcut.
# The client sends either a pre-rendered ``skillsContext`` string or the
# referenced skills themselves; both end up as labeled prompt sections.

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

DEFAULT_SKILL_ICON = "📌"


class SkillData(BaseModel):
    """A skill as sent by the client (or taken from the built-in table)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    shortcut: str
    content: str
    icon: str | None = None
    description: str = ""
    category: str = "custom"


BUILTIN_SKILLS: tuple[SkillData, ...] = (
    SkillData(
        name="FLUX 2 Pro/Dev Mastery",
        shortcut="flux2",
        icon="⚡",
        category="technique",
        description="Prompting guide for FLUX 2 models",
        content=(
            "## FLUX 2 Prompting Guide\n\n"
            "Structure by importance: Subject → Action → Style → Context. FLUX weighs "
            "earlier information more heavily.\n\n"
            "- Skip quality tags like \"masterpiece, 8k\"; natural language works better\n"
            "- Medium prompts (30-80 words) work best\n"
            "- Specify exact colors with hex codes tied to objects\n"
            "- Camera and lens signatures (\"Shot on Fujifilm X-T5, 35mm f/1.4\") add realism\n"
            "- With reference images keep prompts simple and refer to images by number\n"
            "- No negative prompts: describe what you want"
        ),
    ),
    SkillData(
        name="Seedream 4.5 Sequential",
        shortcut="seedream",
        icon="🌱",
        category="technique",
        description="Multi-image consistency with Seedream 4.5",
        content=(
            "## Seedream 4.5 Guide\n\n"
            "Natural language: Subject + Action + Environment + [Style/Lighting/Composition].\n\n"
            "- For a consistent series set sequentialImageGeneration to \"auto\" and maxImages\n"
            "- Describe the shared character once, then list what changes per image\n"
            "- Up to 14 reference images; 4K output for print work"
        ),
    ),
    SkillData(
        name="Veo Video Direction",
        shortcut="veo",
        icon="🎬",
        category="technique",
        description="Directing short clips with Veo",
        content=(
            "## Veo Guide\n\n"
            "Describe shot type, subject, action, setting and sound in that order.\n\n"
            "- Provide a starting frame for precise composition\n"
            "- A last frame makes Veo interpolate between two images\n"
            "- Mention dialogue in quotes and ambient sound explicitly"
        ),
    ),
    SkillData(
        name="Cinematic Camera",
        shortcut="camera",
        icon="🎥",
        category="style",
        description="Camera angles and movement vocabulary",
        content=(
            "## Camera Vocabulary\n\n"
            "Angles: wide, medium, close-up, extreme close-up, over-the-shoulder, low angle, "
            "high angle, bird's-eye.\n"
            "Movement: static, pan, tilt, dolly in/out, tracking, crane, handheld, orbit."
        ),
    ),
    SkillData(
        name="Product Photography",
        shortcut="product",
        icon="📦",
        category="style",
        description="E-commerce and lifestyle product shots",
        content=(
            "## Product Photography\n\n"
            "- Name the surface, backdrop and light source (softbox, window light, rim light)\n"
            "- State the product's material and finish\n"
            "- Use 1:1 for marketplaces, 4:5 for social feeds"
        ),
    ),
)

_BUILTIN_BY_SHORTCUT = {skill.shortcut: skill for skill in BUILTIN_SKILLS}


def get_builtin_skill(shortcut: str) -> SkillData | None:
    return _BUILTIN_BY_SHORTCUT.get(shortcut.lstrip("@"))


def _render_skill(skill: SkillData) -> str:
    return f"### {skill.icon or DEFAULT_SKILL_ICON} {skill.name} (@{skill.shortcut})\n{skill.content}\n\n"


def format_active_skills(skills: Iterable[SkillData]) -> str:
    """Render the "Active Skills & Guides" section. Empty string when no skills."""
    skills = list(skills)
    if not skills:
        return ""
    out = "\n\n## Active Skills & Guides\n"
    out += (
        "The user has the following skills/guides available. "
        "When they reference @shortcut, apply that skill's guidance:\n\n"
    )
    out += "".join(_render_skill(s) for s in skills)
    return out


def format_referenced_skills(skills: Iterable[SkillData]) -> str:
    """Render the "Currently Referenced Skills" section. Empty string when no skills."""
    skills = list(skills)
    if not skills:
        return ""
    out = "\n\n## Currently Referenced Skills\n"
    out += "The user has referenced the following skills in their message. Apply these guidelines:\n\n"
    out += "".join(_render_skill(s) for s in skills)
    return out
