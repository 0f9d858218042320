# Prompt composer — builds the orchestrator's system instruction.
# Created: 2026-02-14
# Updated: 2026-02-27: Storyboard mode appendix (shot-list / entity-suggestion).
# Updated: 2026-03-02: Attached-image purpose annotations.
#
# Composition is plain string concatenation: identical inputs always produce a
# byte-identical prompt. Skill content is passed through verbatim.

from __future__ import annotations

from collections.abc import Iterable, Sequence

from skinnystudio.orchestrator.model_specs import model_specs_for_prompt
from skinnystudio.orchestrator.skills import SkillData, format_referenced_skills

CONSULTANT_MODEL_ID = "creative-consultant"
STORYBOARD_MODEL_ID = "storyboard-mode"

MODE_GENERATION = "generation"
MODE_CONSULTANT = "consultant"
MODE_STORYBOARD = "storyboard"

IMAGE_PURPOSE_LABELS = {
    "reference": "Reference (style/subject guidance)",
    "starting_frame": "Starting frame (first frame of a video)",
    "edit_target": "Edit target (the image to modify)",
    "last_frame": "Last frame (final frame of a video)",
}

BASE_PROMPT = """You are a Creative Director AI assistant for Skinny Studio, a professional AI-powered creative workspace.

## Your Role

You are an expert creative director who helps users create AI-generated images and videos through conversation. The chat IS the interface - all generation happens inline within the conversation.

## Communication Style

- Be concise and professional but friendly
- Use your creative expertise to offer suggestions and improvements
- When the user's idea is vague, ask clarifying questions
- Share relevant tips about what works well with each model

## Parameter Collection Flow

### Step 1: Model Selection
If the user doesn't specify a model, recommend one based on their description and explain why.

### Step 2: Prompt Crafting
Help refine their idea into an effective prompt and confirm the final prompt before proceeding.

### Step 3: Parameter Questions
Ask about each relevant parameter ONE AT A TIME (aspect ratio, style, reference images). Only ask about parameters the selected model supports.

### Step 4: Confirmation Before Generation
Always show a summary (model, prompt, parameters) and ask "Shall I proceed?" before generating. If the user provides everything upfront, skip straight to confirmation.

## Error Handling

If something goes wrong, explain it in plain language and offer alternatives.

## Important Guidelines

- Never generate harmful, explicit, or offensive content
- If a request is unclear, ask for clarification before generating
- Keep responses focused and actionable
"""

GENERATION_APPENDIX = """

## Triggering a Generation

Once the user has confirmed, say "Generating now with [Model]..." and emit exactly ONE block in this format:

```generate
{"model": "<model id>", "prompt": "<final prompt>", "params": {"aspect_ratio": "16:9"}}
```

- `model` must be one of the model ids listed above
- For video models you may add top-level "duration" (seconds) and "resolution"
- For Seedream sequential sets add "sequentialImageGeneration": "auto" and "maxImages"
- Images the user attached are sent automatically; do not put image URLs in the block
- Never emit a generate block before the user has confirmed
"""

SKILL_CREATION_APPENDIX = """

## Saving Skills

When the user asks to save a technique or style as a reusable skill, emit one block:

```create-skill
{"name": "Skill Name", "shortcut": "short-name", "description": "One line", "category": "style", "icon": "🎨", "content": "The guide text", "tags": ["tag"], "examples": ["example usage"]}
```

Categories: style, technique, tool, workflow, custom.
"""

CONSULTANT_APPENDIX = """

## Creative Consultant Mode

You are in consultant mode. Help the user brainstorm and build excellent prompts they can copy into any tool. Do NOT emit ```generate blocks and do not offer to generate images yourself; present finished prompts in plain code blocks instead.
"""

STORYBOARD_APPENDIX = """

## Storyboard Mode

You are helping plan shots for a storyboard project. Do NOT emit ```generate blocks.

To propose shots, emit one block:

```shot-list
{"shots": [{"title": "Shot title", "description": "Visual description", "cameraAngle": "wide", "cameraMovement": "static", "durationSeconds": 5, "mediaType": "image", "suggestedPrompt": "Detailed generation prompt"}]}
```

To propose recurring characters, worlds, objects or styles, emit one block:

```entity-suggestion
{"entities": [{"name": "Mara", "type": "character", "description": "Visual description"}]}
```

Entity types: character, world, object, style.
"""


def resolve_mode(selected_generation_model_id: str | None) -> str:
    if selected_generation_model_id == CONSULTANT_MODEL_ID:
        return MODE_CONSULTANT
    if selected_generation_model_id == STORYBOARD_MODEL_ID:
        return MODE_STORYBOARD
    return MODE_GENERATION


def selected_model_appendix(model_id: str) -> str:
    return (
        "\n\n## User's Selected Generation Model\n"
        f'CRITICAL: The user has pre-selected "{model_id}" in the UI.\n'
        "This means they know exactly which model they want - DO NOT:\n"
        "- Ask them to confirm the model choice\n"
        "- Recommend a different model\n"
        "- Ask what type of content they want to create (they chose the model already)\n\n"
        f'Instead, skip directly to Step 2 (Prompt Crafting) and use "{model_id}" for generation.\n'
        "Only offer model alternatives if they explicitly ask or if their request is "
        "impossible with this model.\n"
    )


def image_purpose_section(image_purposes: Sequence[tuple[str, str]]) -> str:
    """List attached images and the role the user assigned to each."""
    if not image_purposes:
        return ""
    lines = ["\n\n## Attached Images", "The user attached these images with the following roles:"]
    for name, purpose in image_purposes:
        label = IMAGE_PURPOSE_LABELS.get(purpose, purpose)
        lines.append(f"- {name or 'image'}: {label}")
    lines.append(
        "Images are forwarded to the generation model according to their role. "
        "Write the prompt with these roles in mind."
    )
    return "\n".join(lines) + "\n"


def compose_system_prompt(
    *,
    skills_context: str | None = None,
    referenced_skills: Iterable[SkillData] = (),
    selected_generation_model_id: str | None = None,
    image_purposes: Sequence[tuple[str, str]] = (),
) -> str:
    """Assemble the full system instruction for one chat turn."""
    mode = resolve_mode(selected_generation_model_id)

    prompt = BASE_PROMPT
    prompt += "\n## Available AI Models\n\n" + model_specs_for_prompt()

    if mode == MODE_GENERATION:
        prompt += GENERATION_APPENDIX
    prompt += SKILL_CREATION_APPENDIX

    if skills_context:
        prompt += skills_context
    prompt += format_referenced_skills(referenced_skills)

    if mode == MODE_CONSULTANT:
        prompt += CONSULTANT_APPENDIX
    elif mode == MODE_STORYBOARD:
        prompt += STORYBOARD_APPENDIX
    elif selected_generation_model_id:
        prompt += selected_model_appendix(selected_generation_model_id)

    prompt += image_purpose_section(image_purposes)
    return prompt
