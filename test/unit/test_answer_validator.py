from __future__ import annotations

import asyncio

from domain.models import UserContext
from domain.services import AnswerValidator, RateLimiter
from domain.services.answer_validator import FLAGGED_CONFIDENCE, VALID_CONFIDENCE, clean_model_answer
from test.fixtures import sample_context
from test.mocks import InMemoryLogger, ManualClock, ScriptedLLMClient


def _validator(llm: ScriptedLLMClient | None = None, *, max_corrections: int = 2) -> AnswerValidator:
    clock = ManualClock()
    logger = InMemoryLogger()
    return AnswerValidator(
        rate_limiter=RateLimiter(clock=clock, logger=logger, sleep=clock.sleep),
        logger=logger,
        llm=llm,
        max_corrections=max_corrections,
    )


def _validate(validator: AnswerValidator, answer: str, question: str) -> object:
    return asyncio.run(validator.validate(answer, question, sample_context()))


class TestStaticChecks:
    def test_salary_answer_needs_a_number(self) -> None:
        check = AnswerValidator.validate_format("Competitive", "What is your current CTC?")
        assert check.valid is False
        assert "CTC/salary" in (check.issue or "")
        assert AnswerValidator.validate_format("18 LPA", "What is your current CTC?").valid

    def test_date_of_birth_needs_a_date(self) -> None:
        check = AnswerValidator.validate_format("14 March 1995", "What is your date of birth?")
        assert check.valid is False
        assert "DD/MM/YYYY" in (check.issue or "")
        assert AnswerValidator.validate_format("14/03/1995", "What is your DOB?").valid

    def test_dob_inside_a_word_is_not_a_date_question(self) -> None:
        assert AnswerValidator.validate_format("Yes", "Do you know Adobe Photoshop?").valid

    def test_yes_no_question_needs_yes_no_or_maybe(self) -> None:
        check = AnswerValidator.validate_format("Sure", "Are you willing to relocate?")
        assert check.valid is False
        assert "Yes/No" in (check.issue or "")
        assert AnswerValidator.validate_format(" YES ", "Do you have a passport?").valid

    def test_twenty_words_is_too_long(self) -> None:
        answer = " ".join(["word"] * 20)
        check = AnswerValidator.validate_length(answer)
        assert check.valid is False
        assert "too long" in (check.issue or "")

    def test_long_character_count_is_too_long(self) -> None:
        check = AnswerValidator.validate_length("x" * 151)
        assert check.valid is False
        assert "characters" in (check.issue or "")

    def test_empty_and_vague_answers_are_incomplete(self) -> None:
        assert "empty" in (AnswerValidator.validate_completeness("   ").issue or "")
        assert "vague" in (AnswerValidator.validate_completeness("TBD").issue or "")
        assert AnswerValidator.validate_completeness("30 days").valid


class TestValidate:
    def test_clean_answer_without_llm_is_valid(self) -> None:
        result = _validate(_validator(), "30 days", "What is your notice period?")

        assert result.valid is True
        assert result.answer == "30 days"
        assert result.confidence == VALID_CONFIDENCE
        assert list(result.issues) == []

    def test_failing_answer_without_llm_is_flagged(self) -> None:
        result = _validate(_validator(), "Competitive", "What is your current CTC?")

        assert result.valid is False
        assert result.answer == "Competitive"
        assert result.confidence == FLAGGED_CONFIDENCE
        assert any("CTC/salary" in issue for issue in result.issues)

    def test_relevance_check_uses_llm(self) -> None:
        llm = ScriptedLLMClient(["YES"])

        result = _validate(_validator(llm), "30 days", "What is your notice period?")

        assert result.valid is True
        assert llm.call_count == 1
        assert llm.calls[0][1] == {"max_tokens": 10, "temperature": 0}

    def test_self_correction_fixes_answer(self) -> None:
        llm = ScriptedLLMClient(['"18 LPA"', "YES"])

        result = _validate(_validator(llm), "Competitive", "What is your current CTC?")

        assert result.valid is True
        assert result.answer == "18 LPA"
        assert result.confidence == VALID_CONFIDENCE
        correction_prompt, kwargs = llm.calls[0]
        assert "CTC/salary" in correction_prompt
        assert '"current_ctc": "18"' in correction_prompt
        assert kwargs == {"max_tokens": 100, "temperature": 0.3}

    def test_irrelevant_answer_is_corrected(self) -> None:
        llm = ScriptedLLMClient(["NO", "Bangalore", "YES"])

        result = _validate(_validator(llm), "Java", "What is your current location?")

        assert result.valid is True
        assert result.answer == "Bangalore"
        assert llm.call_count == 3

    def test_corrections_stop_after_limit(self) -> None:
        llm = ScriptedLLMClient(["Competitive package", "Negotiable", "Open"])

        result = _validate(_validator(llm), "Competitive", "What is your current CTC?")

        assert result.valid is False
        assert result.answer == "Negotiable"
        assert result.confidence == FLAGGED_CONFIDENCE
        assert llm.call_count == 2

    def test_unchanged_correction_stops_early(self) -> None:
        llm = ScriptedLLMClient(["Competitive"])

        result = _validate(_validator(llm), "Competitive", "What is your current CTC?")

        assert result.valid is False
        assert llm.call_count == 1

    def test_relevance_error_counts_as_relevant(self) -> None:
        llm = ScriptedLLMClient([RuntimeError("model down")])

        result = _validate(_validator(llm), "30 days", "What is your notice period?")

        assert result.valid is True

    def test_correction_error_keeps_original_answer(self) -> None:
        llm = ScriptedLLMClient([RuntimeError("model down")])

        result = _validate(_validator(llm), "Competitive", "What is your current CTC?")

        assert result.valid is False
        assert result.answer == "Competitive"

    def test_correction_prompt_without_profile_says_no_context(self) -> None:
        llm = ScriptedLLMClient(["Competitive"])
        validator = _validator(llm)

        asyncio.run(validator.validate("Competitive", "What is your current CTC?", UserContext(user_id="u")))

        assert "No context available" in llm.prompts[0]


def test_clean_model_answer_strips_wrapping_quotes() -> None:
    assert clean_model_answer('  "30 days" ') == "30 days"
    assert clean_model_answer("'Yes'") == "Yes"
    assert clean_model_answer('5 "years"') == '5 "years"'
