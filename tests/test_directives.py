# Tests for fenced directive parsing.
# Created: 2026-02-14

import json
import logging

import pytest

from skinnystudio.orchestrator.directives import (
    GenerationDirective,
    ShotItem,
    find_block,
    parse_entity_suggestion_directive,
    parse_generation_directive,
    parse_shot_list_directive,
    parse_skill_creation_directive,
    strip_directive_blocks,
)

FENCE = "```"


def block(tag: str, payload) -> str:
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return f"{FENCE}{tag}\n{body}\n{FENCE}"


class TestFindBlock:
    def test_complete_block(self):
        """A fenced block's body is returned stripped."""
        text = "Sure!\n" + block("generate", {"model": "flux-2-pro", "prompt": "a cat"})
        assert json.loads(find_block(text, "generate"))["model"] == "flux-2-pro"

    def test_missing_closing_fence(self):
        """An unterminated block is not found."""
        text = f'{FENCE}generate\n{{"model": "flux-2-pro", "prompt": "a cat"}}'
        assert find_block(text, "generate") is None

    def test_tag_must_match_exactly(self):
        """A longer tag does not match a shorter one."""
        text = block("generate-video", {"model": "veo-3.1", "prompt": "waves"})
        assert find_block(text, "generate") is None

    def test_first_block_wins(self):
        """Only the first complete block is used."""
        text = (
            block("generate", {"model": "flux-dev", "prompt": "one"})
            + "\n\n"
            + block("generate", {"model": "flux-schnell", "prompt": "two"})
        )
        assert parse_generation_directive(text).model == "flux-dev"

    def test_empty_text(self):
        """Empty text has no block."""
        assert find_block("", "generate") is None


class TestGenerationDirective:
    def test_parse_basic(self):
        """Model, prompt and params are read from the block."""
        text = "Generating now with FLUX 2 Pro...\n" + block(
            "generate",
            {"model": "flux-2-pro", "prompt": "a cat", "params": {"aspect_ratio": "16:9"}},
        )
        directive = parse_generation_directive(text)
        assert directive == GenerationDirective(
            model="flux-2-pro", prompt="a cat", params={"aspect_ratio": "16:9"}
        )

    def test_params_default_to_empty(self):
        """Missing params become an empty dict."""
        directive = parse_generation_directive(block("generate", {"model": "m", "prompt": "p"}))
        assert directive.params == {}

    def test_non_object_params_replaced(self):
        """Non-object params become an empty dict."""
        text = block("generate", {"model": "m", "prompt": "p", "params": ["x"]})
        assert parse_generation_directive(text).params == {}

    @pytest.mark.parametrize(
        "payload",
        [
            {"prompt": "a cat"},
            {"model": "flux-2-pro"},
            {"model": "", "prompt": "a cat"},
            {"model": "flux-2-pro", "prompt": "   "},
            {"model": 3, "prompt": "a cat"},
        ],
    )
    def test_missing_required_fields(self, payload):
        """A block without model or prompt is void."""
        assert parse_generation_directive(block("generate", payload)) is None

    def test_invalid_json_logs_and_returns_none(self, caplog):
        """Invalid JSON logs a warning and yields no directive."""
        with caplog.at_level(logging.WARNING, logger="skinnystudio.orchestrator.directives"):
            result = parse_generation_directive(block("generate", '{"model": "flux-2-pro",'))
        assert result is None
        assert any("generate" in r.getMessage() for r in caplog.records)

    def test_json_array_is_void(self):
        """A JSON array is not a directive."""
        assert parse_generation_directive(block("generate", "[1, 2]")) is None

    def test_video_fields(self):
        """Duration and resolution are parsed for video requests."""
        text = block(
            "generate",
            {
                "model": "veo-3.1",
                "prompt": "waves at dusk",
                "duration": 8,
                "resolution": "1080p",
            },
        )
        directive = parse_generation_directive(text)
        assert directive.duration == 8
        assert directive.resolution == "1080p"

    def test_to_dict_uses_wire_keys_and_omits_unset(self):
        """Wire form uses camelCase and drops unset fields."""
        directive = GenerationDirective(
            model="seedream-4.5",
            prompt="a set of portraits",
            sequential_image_generation="auto",
            max_images=4,
        )
        assert directive.to_dict() == {
            "model": "seedream-4.5",
            "prompt": "a set of portraits",
            "params": {},
            "sequentialImageGeneration": "auto",
            "maxImages": 4,
        }

    def test_sequential_fields_accept_camel_case(self):
        """Sequential generation fields accept camelCase keys."""
        text = block(
            "generate",
            {"model": "seedream-4.5", "prompt": "p", "sequentialImageGeneration": "auto", "maxImages": 3},
        )
        directive = parse_generation_directive(text)
        assert directive.sequential_image_generation == "auto"
        assert directive.max_images == 3

    def test_monotonic_over_growing_buffer(self):
        """Once found, a directive stays found as text is appended."""
        full = "Sure! " + block("generate", {"model": "flux-2-pro", "prompt": "a cat"}) + " Enjoy."
        seen = None
        for i in range(len(full) + 1):
            result = parse_generation_directive(full[:i])
            if seen is not None:
                assert result == seen
            elif result is not None:
                seen = result
        assert seen is not None
        assert seen.prompt == "a cat"

    def test_idempotent(self):
        """Parsing the same text twice gives equal results."""
        text = block("generate", {"model": "flux-2-pro", "prompt": "a cat"})
        assert parse_generation_directive(text) == parse_generation_directive(text)


class TestSkillCreationDirective:
    def test_parse(self):
        """A create-skill block is parsed into a skill."""
        text = "Saved!\n" + block(
            "create-skill",
            {
                "name": "Neon Noir",
                "shortcut": "@neon",
                "description": "Moody neon look",
                "category": "style",
                "icon": "🌃",
                "content": "Use deep blues and magenta rim light.",
                "tags": ["noir", "neon"],
            },
        )
        skill = parse_skill_creation_directive(text)
        assert skill.name == "Neon Noir"
        assert skill.shortcut == "neon"
        assert skill.category == "style"
        assert skill.tags == ("noir", "neon")
        assert skill.examples == ()

    def test_unknown_category_falls_back(self):
        """Unknown categories fall back to custom."""
        text = block("create-skill", {"name": "X", "shortcut": "x", "content": "c", "category": "misc"})
        assert parse_skill_creation_directive(text).category == "custom"

    def test_requires_content(self):
        """A skill without content is void."""
        text = block("create-skill", {"name": "X", "shortcut": "x"})
        assert parse_skill_creation_directive(text) is None

    def test_to_dict_omits_missing_icon(self):
        """The icon key is omitted when not given."""
        text = block("create-skill", {"name": "X", "shortcut": "x", "content": "c"})
        data = parse_skill_creation_directive(text).to_dict()
        assert "icon" not in data
        assert data["category"] == "custom"
        assert data["tags"] == []


class TestStoryboardDirectives:
    def test_shot_list_accepts_both_key_styles(self):
        """Shots accept both camelCase and snake_case keys."""
        text = block(
            "shot-list",
            {
                "shots": [
                    {"title": "Opening", "cameraAngle": "wide", "aiSuggestedPrompt": "city at dawn"},
                    {"title": "Close", "camera_angle": "close-up", "duration_seconds": 3, "notes": "slow"},
                    "not a shot",
                ]
            },
        )
        directive = parse_shot_list_directive(text)
        assert len(directive.shots) == 2
        first, second = directive.shots
        assert first.camera_angle == "wide"
        assert first.suggested_prompt == "city at dawn"
        assert first.duration_seconds == 5
        assert first.media_type == "image"
        assert second.camera_angle == "close-up"
        assert second.duration_seconds == 3
        assert second.notes == "slow"

    def test_shot_list_requires_shots_array(self):
        """A shot list without a shots array is void."""
        assert parse_shot_list_directive(block("shot-list", {"shots": "none"})) is None

    def test_shot_to_dict(self):
        """Shots serialise with the client's key names."""
        data = ShotItem(title="A", suggested_prompt="p").to_dict()
        assert data["title"] == "A"
        assert data["aiSuggestedPrompt"] == "p"
        assert data["durationSeconds"] == 5

    def test_entity_suggestions(self):
        """Nameless entities are dropped and type defaults to object."""
        text = block(
            "entity-suggestion",
            {
                "entities": [
                    {"name": "Mara", "type": "character", "description": "red coat"},
                    {"name": "Lantern", "type": "prop"},
                    {"type": "world"},
                ]
            },
        )
        directive = parse_entity_suggestion_directive(text)
        assert [e.name for e in directive.entities] == ["Mara", "Lantern"]
        assert directive.entities[1].type == "object"
        assert directive.to_dict()["entities"][0] == {
            "name": "Mara",
            "type": "character",
            "description": "red coat",
        }


class TestStripDirectiveBlocks:
    def test_removes_complete_blocks(self):
        """Complete blocks are removed from display text."""
        text = "Here you go.\n" + block("generate", {"model": "m", "prompt": "p"}) + "\nDone."
        assert strip_directive_blocks(text) == "Here you go.\n\nDone."

    def test_leaves_incomplete_block(self):
        """An unterminated block is left in place."""
        text = "Working on it\n```generate\n{"
        assert strip_directive_blocks(text) == text

    def test_only_selected_tags(self):
        """Only the requested tags are stripped."""
        text = block("create-skill", {"name": "n"}) + "\n" + block("generate", {"model": "m"})
        stripped = strip_directive_blocks(text, tags=("generate",))
        assert "create-skill" in stripped
        assert "```generate" not in stripped
