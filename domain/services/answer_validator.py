"""Multi-stage answer validation with bounded self-correction.

Stages run in order: format, length, completeness, then an LLM relevance
check that only runs when the first three pass. A failing answer is sent
back to the model together with its issues at most ``max_corrections``
times, so every call ends after a bounded number of LLM round-trips.
"""

from __future__ import annotations

import re

from domain.models import CheckResult, UserContext, ValidationResult
from domain.ports import LLMClientPort, LoggerPort
from domain.prompts import build_correction_prompt, build_relevance_prompt
from domain.services.rate_limiter import RateLimiter

VALID_CONFIDENCE = 95
FLAGGED_CONFIDENCE = 50
MAX_WORDS = 15
MAX_CHARS = 150

VAGUE_ANSWERS = frozenset({
    "not sure",
    "maybe",
    "i don't know",
    "unclear",
    "not specified",
    "to be confirmed",
    "tbd",
})

_DIGIT_RE = re.compile(r"\d+")
_DATE_RE = re.compile(r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}")
_DOB_RE = re.compile(r"\bdob\b|date of birth|birthday")


def clean_model_answer(text: str) -> str:
    """Strip whitespace and one pair of wrapping quotes from model output."""
    answer = text.strip()
    if len(answer) >= 2 and answer[0] == answer[-1] and answer[0] in "\"'":
        answer = answer[1:-1].strip()
    return answer


class AnswerValidator:
    def __init__(
        self,
        *,
        rate_limiter: RateLimiter,
        logger: LoggerPort,
        llm: LLMClientPort | None = None,
        max_corrections: int = 2,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._logger = logger
        self._llm = llm
        self._max_corrections = max_corrections

    async def validate(
        self,
        answer: str,
        question: str,
        context: UserContext,
        iteration: int = 0,
    ) -> ValidationResult:
        while True:
            issues = await self._collect_issues(answer, question)
            if not issues:
                return ValidationResult(
                    valid=True,
                    answer=answer,
                    confidence=VALID_CONFIDENCE,
                    issues=(),
                )

            if iteration >= self._max_corrections or self._llm is None:
                break

            self._logger.info(
                "answer_validation_issues",
                iteration=iteration + 1,
                answer=answer,
                issues=issues,
            )
            corrected = await self.self_correct(answer, question, issues, context)
            if not corrected or corrected == answer:
                break

            self._logger.info("answer_self_corrected", before=answer, after=corrected)
            answer = corrected
            iteration += 1

        return ValidationResult(
            valid=False,
            answer=answer,
            confidence=FLAGGED_CONFIDENCE,
            issues=tuple(issues),
        )

    @staticmethod
    def validate_format(answer: str, question: str) -> CheckResult:
        lower_q = question.lower()

        if any(word in lower_q for word in ("ctc", "salary", "package")):
            if not _DIGIT_RE.search(answer):
                return CheckResult(False, "CTC/salary answer must contain a number")

        if _DOB_RE.search(lower_q):
            if not _DATE_RE.search(answer):
                return CheckResult(False, "Date answer should be in DD/MM/YYYY format")

        if any(phrase in lower_q for phrase in ("are you", "do you", "willing")):
            if answer.lower().strip() not in ("yes", "no", "maybe"):
                return CheckResult(False, "Yes/No question should have yes, no, or maybe answer")

        return CheckResult(True)

    @staticmethod
    def validate_length(answer: str) -> CheckResult:
        words = len(answer.split())
        if words > MAX_WORDS:
            return CheckResult(False, f"Answer is too long ({words} words, should be <= {MAX_WORDS})")
        if len(answer) > MAX_CHARS:
            return CheckResult(
                False,
                f"Answer is too long ({len(answer)} characters, should be <= {MAX_CHARS})",
            )
        return CheckResult(True)

    @staticmethod
    def validate_completeness(answer: str) -> CheckResult:
        if not answer or not answer.strip():
            return CheckResult(False, "Answer is empty")
        if answer.lower().strip() in VAGUE_ANSWERS:
            return CheckResult(False, "Answer is too vague")
        return CheckResult(True)

    async def validate_relevance(self, answer: str, question: str) -> CheckResult:
        if self._llm is None:
            return CheckResult(True)
        try:
            await self._rate_limiter.acquire()
            verdict = await self._llm.complete(
                build_relevance_prompt(question=question, answer=answer),
                max_tokens=10,
                temperature=0,
            )
        except Exception as exc:
            self._logger.error("relevance_check_failed", question=question, error=str(exc))
            return CheckResult(True)

        if verdict.strip().upper().rstrip(".") == "NO":
            return CheckResult(False, "Answer does not address the question")
        return CheckResult(True)

    async def self_correct(
        self,
        answer: str,
        question: str,
        issues: list[str],
        context: UserContext,
    ) -> str:
        if self._llm is None:
            return answer
        try:
            await self._rate_limiter.acquire()
            corrected = await self._llm.complete(
                build_correction_prompt(
                    question=question,
                    answer=answer,
                    issues=issues,
                    profile=context.profile,
                ),
                max_tokens=100,
                temperature=0.3,
            )
        except Exception as exc:
            self._logger.error("self_correction_failed", question=question, error=str(exc))
            return answer
        return clean_model_answer(corrected) or answer

    async def _collect_issues(self, answer: str, question: str) -> list[str]:
        issues = [
            check.issue
            for check in (
                self.validate_format(answer, question),
                self.validate_length(answer),
                self.validate_completeness(answer),
            )
            if not check.valid and check.issue
        ]
        if not issues:
            relevance = await self.validate_relevance(answer, question)
            if not relevance.valid and relevance.issue:
                issues.append(relevance.issue)
        return issues
