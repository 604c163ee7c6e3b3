from __future__ import annotations

import asyncio
from typing import Any

from domain.models import CandidateProfile, Skill, ToolCall, UserContext
from domain.ports import CandidateDataRepositoryPort, LoggerPort
from domain.services.agent_tools import ToolRegistry


class DataRetriever:
    """
    Lazy, session-cached view of one user's stored data.

    Profile, skills and resume are loaded concurrently on first use and at
    most once each. A sub-load that fails degrades to an empty value so the
    remaining tools keep working.
    """

    def __init__(
        self,
        *,
        user_id: str,
        repository: CandidateDataRepositoryPort,
        registry: ToolRegistry,
        logger: LoggerPort,
    ) -> None:
        self._user_id = user_id
        self._repository = repository
        self._registry = registry
        self._logger = logger
        self._load_lock = asyncio.Lock()
        self._reset()

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def execute_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        context = await self.get_context()
        return self._registry.execute(ToolCall(name=name, arguments=arguments), context)

    async def get_context(self) -> UserContext:
        await self.ensure_context_loaded()
        return UserContext(
            user_id=self._user_id,
            profile=self._profile or CandidateProfile(),
            skills=self._skills or (),
            resume_text=self._resume_text or "",
        )

    async def ensure_context_loaded(self) -> None:
        async with self._load_lock:
            pending = []
            if not self._loaded["profile"]:
                pending.append(self._load_profile())
            if not self._loaded["skills"]:
                pending.append(self._load_skills())
            if not self._loaded["resume"]:
                pending.append(self._load_resume_text())
            if pending:
                await asyncio.gather(*pending)

    def clear_cache(self) -> None:
        self._reset()

    async def _load_profile(self) -> None:
        try:
            profile = await asyncio.to_thread(self._repository.get_profile, self._user_id)
            self._profile = profile or CandidateProfile()
            self._logger.info("user_profile_loaded", user_id=self._user_id, found=profile is not None)
        except Exception as exc:
            self._logger.error("user_profile_load_failed", user_id=self._user_id, error=str(exc))
            self._profile = CandidateProfile()
        self._loaded["profile"] = True

    async def _load_skills(self) -> None:
        try:
            skills = await asyncio.to_thread(self._repository.list_skills, self._user_id)
            self._skills = tuple(skills)
            self._logger.info("skills_loaded", user_id=self._user_id, count=len(self._skills))
        except Exception as exc:
            self._logger.error("skills_load_failed", user_id=self._user_id, error=str(exc))
            self._skills = ()
        self._loaded["skills"] = True

    async def _load_resume_text(self) -> None:
        try:
            text = await asyncio.to_thread(self._repository.get_resume_text, self._user_id)
            self._resume_text = text or ""
            self._logger.info("resume_loaded", user_id=self._user_id, chars=len(self._resume_text))
        except Exception as exc:
            self._logger.error("resume_load_failed", user_id=self._user_id, error=str(exc))
            self._resume_text = ""
        self._loaded["resume"] = True

    def _reset(self) -> None:
        self._profile: CandidateProfile | None = None
        self._skills: tuple[Skill, ...] | None = None
        self._resume_text: str | None = None
        self._loaded = {"profile": False, "skills": False, "resume": False}
