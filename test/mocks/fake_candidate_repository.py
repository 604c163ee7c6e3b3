from __future__ import annotations

from typing import Sequence

from domain.models import CandidateProfile, Skill
from domain.ports import CandidateDataRepositoryPort


class InMemoryCandidateRepository:
    """In-memory test double for CandidateDataRepositoryPort.

    Each read can be switched to raise via ``fail_profile``, ``fail_skills``
    or ``fail_resume``. ``calls`` counts reads per method.
    """

    def __init__(
        self,
        *,
        profiles: dict[str, CandidateProfile] | None = None,
        skills: dict[str, Sequence[Skill]] | None = None,
        resumes: dict[str, str] | None = None,
    ) -> None:
        self._profiles = dict(profiles or {})
        self._skills = {k: list(v) for k, v in (skills or {}).items()}
        self._resumes = dict(resumes or {})
        self.fail_profile = False
        self.fail_skills = False
        self.fail_resume = False
        self.calls = {"get_profile": 0, "list_skills": 0, "get_resume_text": 0}

    def get_profile(self, user_id: str) -> CandidateProfile | None:
        self.calls["get_profile"] += 1
        if self.fail_profile:
            raise RuntimeError("profile store unavailable")
        return self._profiles.get(user_id)

    def list_skills(self, user_id: str) -> Sequence[Skill]:
        self.calls["list_skills"] += 1
        if self.fail_skills:
            raise RuntimeError("skills store unavailable")
        return list(self._skills.get(user_id, []))

    def get_resume_text(self, user_id: str) -> str | None:
        self.calls["get_resume_text"] += 1
        if self.fail_resume:
            raise RuntimeError("resume store unavailable")
        return self._resumes.get(user_id)


_repo_check: CandidateDataRepositoryPort = InMemoryCandidateRepository()
