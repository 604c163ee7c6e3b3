from datetime import datetime, timezone

from domain import (
    CandidateDataRepositoryPort,
    CandidateProfile,
    ClockPort,
    ConfigProviderPort,
    LLMClientPort,
    LoggerPort,
    QuestionType,
    SelectionConfidence,
    Skill,
    UserContext,
)
from domain.models import AnswerResult, AppConfig, ReasoningTrace, QuestionCategory
from test.mocks import (
    FixedClock,
    InMemoryCandidateRepository,
    InMemoryConfigProvider,
    InMemoryLogger,
    ScriptedLLMClient,
)


def test_candidate_profile_is_empty() -> None:
    assert CandidateProfile().is_empty()
    assert CandidateProfile(name="", location=None).is_empty()
    assert not CandidateProfile(location="Pune").is_empty()


def test_skill_label_prefers_display_name() -> None:
    assert Skill(skill_name="js", display_name="JavaScript").label == "JavaScript"
    assert Skill(skill_name="go").label == "go"


def test_user_context_defaults() -> None:
    ctx = UserContext(user_id="u1")
    assert ctx.profile.is_empty()
    assert tuple(ctx.skills) == ()
    assert ctx.resume_text == ""


def test_reasoning_trace_defaults_to_complex() -> None:
    trace = ReasoningTrace()
    assert trace.category is QuestionCategory.COMPLEX
    assert tuple(trace.actions) == ()


def test_answer_result_defaults() -> None:
    result = AnswerResult(answer="Yes", confidence=95)
    assert result.from_cache is False
    assert result.error is None
    assert result.latency_ms == 0


def test_enums_roundtrip_from_strings() -> None:
    assert QuestionType("radio") is QuestionType.RADIO
    assert SelectionConfidence("HIGH") is SelectionConfidence.HIGH


def test_app_config_llm_enabled_follows_key() -> None:
    assert AppConfig(openai_key="sk-123", openai_base_url="https://x").llm_enabled
    assert not AppConfig(openai_key="", openai_base_url="https://x").llm_enabled


def test_fakes_satisfy_ports() -> None:
    assert isinstance(FixedClock(datetime(2025, 1, 1, tzinfo=timezone.utc)), ClockPort)
    assert isinstance(InMemoryLogger(), LoggerPort)
    assert isinstance(InMemoryCandidateRepository(), CandidateDataRepositoryPort)
    assert isinstance(InMemoryConfigProvider(), ConfigProviderPort)
    assert isinstance(ScriptedLLMClient(), LLMClientPort)
