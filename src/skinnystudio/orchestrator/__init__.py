"""Orchestrator building blocks: directives, model catalog, skills, system prompt."""

from skinnystudio.orchestrator.directives import (
    EntitySuggestionDirective,
    GenerationDirective,
    ShotListDirective,
    SkillCreationDirective,
    parse_entity_suggestion_directive,
    parse_generation_directive,
    parse_shot_list_directive,
    parse_skill_creation_directive,
    strip_directive_blocks,
)
from skinnystudio.orchestrator.system_prompt import compose_system_prompt

__all__ = [
    "EntitySuggestionDirective",
    "GenerationDirective",
    "ShotListDirective",
    "SkillCreationDirective",
    "compose_system_prompt",
    "parse_entity_suggestion_directive",
    "parse_generation_directive",
    "parse_shot_list_directive",
    "parse_skill_creation_directive",
    "strip_directive_blocks",
]
