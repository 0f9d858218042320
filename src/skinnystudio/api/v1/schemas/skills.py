# Skills schemas.
# Created: 2026-02-22

from __future__ import annotations

from pydantic import BaseModel

from skinnystudio.orchestrator.skills import SkillData


class SkillListResponse(BaseModel):
    skills: list[SkillData]
    count: int
