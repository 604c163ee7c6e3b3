"""
Domain layer package.

This package contains the answer-engine models, ports and services. It is
independent of any specific LLM vendor, data store or transport.
"""

from .models import (  # noqa: F401
    AnswerResult,
    CandidateProfile,
    CheckboxOption,
    OptionSelection,
    QuestionCategory,
    QuestionType,
    SelectionConfidence,
    Skill,
    UserContext,
)
from .ports import (  # noqa: F401
    CandidateDataRepositoryPort,
    ClockPort,
    ConfigProviderPort,
    LLMClientPort,
    LoggerPort,
)

__all__ = [
    # Models
    "CandidateProfile",
    "Skill",
    "UserContext",
    "QuestionCategory",
    "QuestionType",
    "SelectionConfidence",
    "AnswerResult",
    "CheckboxOption",
    "OptionSelection",
    # Ports
    "CandidateDataRepositoryPort",
    "ConfigProviderPort",
    "LLMClientPort",
    "ClockPort",
    "LoggerPort",
]
