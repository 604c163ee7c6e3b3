from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Any, Protocol, Sequence, runtime_checkable

from domain.models import AppConfig, CandidateProfile, ProfileSeed, Skill


@runtime_checkable
class CandidateDataRepositoryPort(Protocol):
    """Read-only access to a user's stored profile, skills and resume.

    The answer engine never writes through this port.
    """

    @abstractmethod
    def get_profile(self, user_id: str) -> CandidateProfile | None:
        ...

    @abstractmethod
    def list_skills(self, user_id: str) -> Sequence[Skill]:
        ...

    @abstractmethod
    def get_resume_text(self, user_id: str) -> str | None:
        ...


@runtime_checkable
class ConfigProviderPort(Protocol):
    """Source of engine configuration."""

    def get_config(self) -> AppConfig:
        ...

    def validate(self) -> list[str]:
        ...

    def get_profile_seed(self) -> ProfileSeed | None:
        ...


@runtime_checkable
class LLMClientPort(Protocol):
    """Thin abstraction over an LLM text completion API."""

    async def complete(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        ...


@runtime_checkable
class ClockPort(Protocol):
    """Time source for deterministic and easily testable code."""

    def now(self) -> datetime:
        ...


@runtime_checkable
class LoggerPort(Protocol):
    """Structured, testable logging abstraction."""

    def info(self, message: str, **fields: Any) -> None:
        ...

    def warning(self, message: str, **fields: Any) -> None:
        ...

    def error(self, message: str, **fields: Any) -> None:
        ...


__all__ = [
    "CandidateDataRepositoryPort",
    "ConfigProviderPort",
    "LLMClientPort",
    "ClockPort",
    "LoggerPort",
]
