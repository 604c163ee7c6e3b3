from __future__ import annotations

import asyncio
from typing import Sequence

from domain.models import (
    AnswerResult,
    AppConfig,
    CheckboxOption,
    OptionSelection,
    QuestionType,
    ReasoningLogEntry,
    SelectionConfidence,
    ServiceStats,
)
from domain.ports import CandidateDataRepositoryPort, ClockPort, LLMClientPort, LoggerPort
from domain.services import (
    AnswerAgent,
    AnswerCache,
    AnswerValidator,
    CheckboxAnalyzer,
    DataRetriever,
    RateLimiter,
    RuleBasedAnswerer,
    ToolRegistry,
)
from domain.services.rate_limiter import SleepFn


class AgenticAnswerService:
    """
    Caller-facing facade for one user's form-filling session.

    Owns the cache, rate limiter, data retriever, agents and the reasoning
    log. Call ``close()`` (or use ``async with``) when the session ends.
    """

    def __init__(
        self,
        *,
        user_id: str,
        repository: CandidateDataRepositoryPort,
        clock: ClockPort,
        logger: LoggerPort,
        llm: LLMClientPort | None = None,
        max_requests: int = 40,
        window_ms: int = 60_000,
        cache_ttl_ms: int = 300_000,
        answer_timeout_seconds: float | None = 60.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._user_id = user_id
        self._clock = clock
        self._logger = logger
        self._answer_timeout = answer_timeout_seconds
        self._closed = False

        self._cache = AnswerCache(clock=clock, default_ttl_ms=cache_ttl_ms)
        self._rate_limiter = RateLimiter(
            clock=clock,
            logger=logger,
            max_requests=max_requests,
            window_ms=window_ms,
            sleep=sleep,
        )
        self._data = DataRetriever(
            user_id=user_id,
            repository=repository,
            registry=ToolRegistry(logger=logger),
            logger=logger,
        )
        self._validator = AnswerValidator(rate_limiter=self._rate_limiter, logger=logger, llm=llm)
        self._agent = AnswerAgent(
            data_retriever=self._data,
            validator=self._validator,
            rate_limiter=self._rate_limiter,
            rule_answerer=RuleBasedAnswerer(clock=clock),
            logger=logger,
            llm=llm,
        )
        self._checkbox = CheckboxAnalyzer(
            data_retriever=self._data,
            rate_limiter=self._rate_limiter,
            logger=logger,
            llm=llm,
        )
        self._reasoning_log: list[ReasoningLogEntry] = []

        self._logger.info("answer_service_started", user_id=user_id, llm_enabled=llm is not None)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        user_id: str,
        repository: CandidateDataRepositoryPort,
        clock: ClockPort,
        logger: LoggerPort,
        llm: LLMClientPort | None = None,
    ) -> "AgenticAnswerService":
        return cls(
            user_id=user_id,
            repository=repository,
            clock=clock,
            logger=logger,
            llm=llm if config.llm_enabled else None,
            max_requests=config.rate_limit_max_requests,
            window_ms=config.rate_limit_window_ms,
            cache_ttl_ms=config.cache_ttl_ms,
            answer_timeout_seconds=config.answer_timeout_seconds,
        )

    async def __aenter__(self) -> "AgenticAnswerService":
        return self

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    @property
    def user_id(self) -> str:
        return self._user_id

    async def get_answer(
        self,
        question: str,
        question_type: QuestionType | str = QuestionType.TEXT,
    ) -> AnswerResult:
        self._ensure_open()
        question_type = QuestionType(question_type)

        cached = self._cache.get(question)
        if cached is not None:
            self._logger.info("answer_cache_hit", question=question)
            return AnswerResult(
                answer=cached.answer,
                confidence=cached.confidence,
                from_cache=True,
            )

        try:
            run = await asyncio.wait_for(self._agent.run(question), timeout=self._answer_timeout)
            result, trace = run.result, run.trace
        except asyncio.TimeoutError:
            self._logger.error(
                "answer_timed_out",
                question=question,
                timeout_seconds=self._answer_timeout,
            )
            result = AnswerResult(
                answer="",
                confidence=0,
                reasoning=("Error occurred",),
                error=f"timed out after {self._answer_timeout}s",
            )
            trace = None

        self._reasoning_log.append(
            ReasoningLogEntry(
                question=question,
                question_type=question_type,
                timestamp=self._clock.now(),
                result=result,
                trace=trace,
            ),
        )
        if result.error is None:
            self._cache.set(question, result.answer, result.confidence)

        self._logger.info(
            "question_answered",
            question=question,
            question_type=question_type.value,
            answer=result.answer,
            confidence=result.confidence,
            latency_ms=result.latency_ms,
        )
        return result

    async def analyze_checkbox_options(
        self,
        options: Sequence[CheckboxOption],
        question: str,
    ) -> OptionSelection:
        self._ensure_open()
        self._logger.info("analyzing_options", question=question, option_count=len(options))
        try:
            selection = await self._checkbox.select_best_option(options, question)
        except Exception as exc:
            self._logger.error("analyze_options_failed", question=question, error=str(exc))
            selection = OptionSelection(
                selected_index=0,
                reasoning="Error occurred, selected first option",
                confidence=SelectionConfidence.LOW,
                error=str(exc),
            )

        labels = tuple(opt.label for opt in options)
        self._reasoning_log.append(
            ReasoningLogEntry(
                question=question,
                question_type=QuestionType.CHECKBOX,
                timestamp=self._clock.now(),
                options=labels,
                selection=selection,
            ),
        )
        selected_label = (
            labels[selection.selected_index]
            if 0 <= selection.selected_index < len(labels)
            else None
        )
        self._logger.info(
            "option_selected",
            question=question,
            selected_index=selection.selected_index,
            selected_label=selected_label,
            confidence=selection.confidence.value,
        )
        return selection

    def get_reasoning_log(self) -> list[ReasoningLogEntry]:
        return list(self._reasoning_log)

    def get_latest_reasoning(self) -> ReasoningLogEntry | None:
        return self._reasoning_log[-1] if self._reasoning_log else None

    def get_stats(self) -> ServiceStats:
        return ServiceStats(
            user_id=self._user_id,
            cache=self._cache.get_stats(),
            rate_limiter=self._rate_limiter.get_stats(),
            reasoning_log_size=len(self._reasoning_log),
            latest_reasoning=self.get_latest_reasoning(),
        )

    def clear_cache(self) -> None:
        self._cache.clear()
        self._logger.info("answer_cache_cleared", user_id=self._user_id)

    def clear_reasoning_log(self) -> None:
        self._reasoning_log = []
        self._logger.info("reasoning_log_cleared", user_id=self._user_id)

    async def preload_data(self) -> None:
        """Warm the user context so the first question skips the store round-trip."""
        self._ensure_open()
        try:
            await self._data.get_context()
            self._logger.info("user_data_preloaded", user_id=self._user_id)
        except Exception as exc:
            self._logger.error("user_data_preload_failed", user_id=self._user_id, error=str(exc))

    def close(self) -> None:
        if self._closed:
            return
        self._cache.clear()
        self._reasoning_log = []
        self._data.clear_cache()
        self._rate_limiter.reset()
        self._closed = True
        self._logger.info("answer_service_closed", user_id=self._user_id)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"answer service for user {self._user_id} is closed")
