from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Sequence


@dataclass(frozen=True)
class CandidateProfile:
    """Profile fields the engine may use to answer application questions.

    ``email`` is the job-portal email when one is configured, otherwise the
    account email. Phone numbers are intentionally excluded: the engine
    never hands them out.
    """

    name: str | None = None
    email: str | None = None
    target_role: str | None = None
    location: str | None = None
    current_ctc: str | None = None
    expected_ctc: str | None = None
    notice_period: str | None = None
    years_of_experience: str | None = None
    availability: str | None = None
    dob: str | None = None

    def is_empty(self) -> bool:
        return all(value in (None, "") for value in self.__dict__.values())


@dataclass(frozen=True)
class Skill:
    """One row of the user's skill table. Names are not unique."""

    skill_name: str
    display_name: str | None = None
    rating: int | None = None
    out_of: int | None = None
    experience: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.skill_name


@dataclass(frozen=True)
class UserContext:
    """Everything the tools can see about one user, loaded once per session."""

    user_id: str
    profile: CandidateProfile = field(default_factory=CandidateProfile)
    skills: Sequence[Skill] = field(default_factory=tuple)
    resume_text: str = ""


class QuestionCategory(str, Enum):
    PERSONAL = "personal"
    SKILL = "skill"
    EXPERIENCE = "experience"
    SALARY = "salary"
    AVAILABILITY = "availability"
    COMPLEX = "complex"


class QuestionType(str, Enum):
    """Kind of form control the question was read from."""

    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"


class SelectionConfidence(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class ToolDefinition:
    """Schema for a data tool the reasoning stage can request."""

    name: str
    description: str
    parameters: dict[str, Any]


@dataclass(frozen=True)
class ToolCall:
    """A single tool invocation planned by the LLM."""

    name: str
    arguments: dict[str, Any]


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool call during the act stage."""

    tool_name: str
    arguments: dict[str, Any]
    result: Any = None
    error: str | None = None


@dataclass(frozen=True)
class ReasoningTrace:
    """Structured plan parsed from the reasoning stage."""

    thought: str = ""
    category: QuestionCategory = QuestionCategory.COMPLEX
    actions: Sequence[ToolCall] = field(default_factory=tuple)
    answer_format: str = ""
    steps: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class CheckResult:
    """Verdict of one validation stage."""

    valid: bool
    issue: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    answer: str
    confidence: int
    issues: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class AnswerResult:
    """What a caller receives for one free-text question.

    A confidence of 50 means the answer is usable but failed validation;
    0 means no answer could be produced and ``error`` says why.
    """

    answer: str
    confidence: int
    reasoning: Sequence[str] = field(default_factory=tuple)
    tools_used: Sequence[str] = field(default_factory=tuple)
    latency_ms: int = 0
    from_cache: bool = False
    error: str | None = None


@dataclass(frozen=True)
class CachedAnswer:
    answer: str
    confidence: int
    from_cache: bool = True


@dataclass(frozen=True)
class CacheEntry:
    key: str
    answer: str
    confidence: int
    stored_at: datetime
    ttl_ms: int


@dataclass(frozen=True)
class CheckboxOption:
    label: str


@dataclass(frozen=True)
class OptionSelection:
    """Choice made for a checkbox or radio group (0-based index)."""

    selected_index: int
    reasoning: str
    confidence: SelectionConfidence
    error: str | None = None


@dataclass(frozen=True)
class ReasoningLogEntry:
    """One observability record per answered question or option decision."""

    question: str
    question_type: QuestionType
    timestamp: datetime
    result: AnswerResult | None = None
    trace: ReasoningTrace | None = None
    options: Sequence[str] = field(default_factory=tuple)
    selection: OptionSelection | None = None


@dataclass(frozen=True)
class CacheEntryPreview:
    answer: str
    age_ms: int
    confidence: int


@dataclass(frozen=True)
class CacheStats:
    size: int
    entries: Sequence[CacheEntryPreview] = field(default_factory=tuple)


@dataclass(frozen=True)
class RateLimiterStats:
    requests_in_window: int
    max_requests: int
    available_requests: int
    window_ms: int
    utilization_percent: float


@dataclass(frozen=True)
class ServiceStats:
    user_id: str
    cache: CacheStats
    rate_limiter: RateLimiterStats
    reasoning_log_size: int
    latest_reasoning: ReasoningLogEntry | None = None


@dataclass(frozen=True)
class AppConfig:
    """Engine configuration loaded from config.json.

    An empty ``openai_key`` switches the engine to its offline, rule-based
    answer path.
    """

    openai_key: str
    openai_base_url: str
    model: str = "gpt-4o-mini"
    rate_limit_max_requests: int = 40
    rate_limit_window_ms: int = 60_000
    cache_ttl_ms: int = 300_000
    answer_timeout_seconds: float = 60.0
    llm_timeout_seconds: int = 30

    @property
    def llm_enabled(self) -> bool:
        return bool(self.openai_key)


@dataclass(frozen=True)
class ProfileSeed:
    """Profile, skills and resume text read from profile.json for import."""

    first_name: str
    last_name: str
    email: str
    settings: dict[str, Any] = field(default_factory=dict)
    skills: Sequence[Skill] = field(default_factory=tuple)
    resume_text: str = ""


__all__ = [
    "AppConfig",
    "CandidateProfile",
    "Skill",
    "UserContext",
    "QuestionCategory",
    "QuestionType",
    "SelectionConfidence",
    "ToolDefinition",
    "ToolCall",
    "ToolResult",
    "ReasoningTrace",
    "CheckResult",
    "ValidationResult",
    "AnswerResult",
    "CachedAnswer",
    "CacheEntry",
    "CheckboxOption",
    "OptionSelection",
    "ReasoningLogEntry",
    "CacheEntryPreview",
    "CacheStats",
    "RateLimiterStats",
    "ServiceStats",
    "ProfileSeed",
]
