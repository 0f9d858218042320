# Skills router — built-in prompt skills.
# Created: 2026-02-22
# Updated: 2026-03-12: Single-skill lookup by @shortcut.

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from skinnystudio.api.v1.schemas.common import ErrorResponse
from skinnystudio.api.v1.schemas.skills import SkillListResponse
from skinnystudio.orchestrator.skills import BUILTIN_SKILLS, SkillData, get_builtin_skill

router = APIRouter(tags=["Skills"])


@router.get("/skills/builtin", response_model=SkillListResponse)
async def list_builtin_skills():
    """Skills that ship with the studio and can be referenced with @shortcut."""
    return SkillListResponse(skills=list(BUILTIN_SKILLS), count=len(BUILTIN_SKILLS))


@router.get("/skills/builtin/{shortcut}", response_model=SkillData)
async def get_builtin_skill_by_shortcut(shortcut: str):
    """One built-in skill; the leading ``@`` is optional."""
    skill = get_builtin_skill(shortcut)
    if skill is None:
        body = ErrorResponse(error=f"Unknown skill: {shortcut}", code="SKILL_NOT_FOUND")
        return JSONResponse(status_code=404, content=body.model_dump())
    return skill
