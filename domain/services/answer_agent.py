"""ReAct loop that answers one free-text application question.

The agent runs four stages in order:
1. Reason: ask the LLM to classify the question and plan tool calls.
2. Act: run the planned tools against the user's data.
3. Generate: ask the LLM for a short answer grounded in the tool results.
4. Validate: hand the draft to ``AnswerValidator`` (which may correct it).

Without an LLM the agent answers from ``RuleBasedAnswerer`` and still
validates the draft.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Sequence

from domain.models import AnswerResult, ReasoningTrace, ToolCall, ToolResult
from domain.ports import LLMClientPort, LoggerPort
from domain.prompts import build_generation_prompt, build_reasoning_prompt
from domain.services.answer_validator import AnswerValidator, clean_model_answer
from domain.services.data_retriever import DataRetriever
from domain.services.rate_limiter import RateLimiter
from domain.services.reasoning_parser import parse_reasoning
from domain.services.rule_based_answerer import RuleBasedAnswerer

ERROR_REASONING = "Error occurred during processing"
OFFLINE_REASONING = "Answered from stored profile data (no LLM configured)"


@dataclass(frozen=True)
class AgentRun:
    """Answer plus the trace and tool results that produced it."""

    result: AnswerResult
    trace: ReasoningTrace | None = None
    tool_results: Sequence[ToolResult] = field(default_factory=tuple)


class AnswerAgent:
    def __init__(
        self,
        *,
        data_retriever: DataRetriever,
        validator: AnswerValidator,
        rate_limiter: RateLimiter,
        rule_answerer: RuleBasedAnswerer,
        logger: LoggerPort,
        llm: LLMClientPort | None = None,
    ) -> None:
        self._data = data_retriever
        self._validator = validator
        self._rate_limiter = rate_limiter
        self._rules = rule_answerer
        self._logger = logger
        self._llm = llm

    async def process_question(self, question: str) -> AnswerResult:
        return (await self.run(question)).result

    async def run(self, question: str) -> AgentRun:
        started = time.perf_counter()
        try:
            if self._llm is None:
                return await self._run_offline(question, started)

            trace = await self.reason(question)
            self._logger.info(
                "question_reasoned",
                question=question,
                category=trace.category.value,
                actions=[a.name for a in trace.actions],
                answer_format=trace.answer_format,
            )

            tool_results = await self.execute_tools(trace.actions)
            draft = await self.generate_answer(question, trace, tool_results)

            context = await self._data.get_context()
            validated = await self._validator.validate(draft, question, context)

            result = AnswerResult(
                answer=validated.answer,
                confidence=validated.confidence,
                reasoning=tuple(trace.steps),
                tools_used=tuple(a.name for a in trace.actions),
                latency_ms=_elapsed_ms(started),
            )
            self._logger.info(
                "answer_generated",
                question=question,
                answer=result.answer,
                confidence=result.confidence,
                issues=list(validated.issues),
                latency_ms=result.latency_ms,
            )
            return AgentRun(result=result, trace=trace, tool_results=tuple(tool_results))
        except Exception as exc:
            self._logger.error(
                "answer_agent_failed",
                question=question,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return AgentRun(
                result=AnswerResult(
                    answer="",
                    confidence=0,
                    reasoning=(ERROR_REASONING,),
                    error=str(exc),
                    latency_ms=_elapsed_ms(started),
                ),
            )

    async def reason(self, question: str) -> ReasoningTrace:
        llm = self._require_llm()
        await self._rate_limiter.acquire()
        text = await llm.complete(
            build_reasoning_prompt(
                question=question,
                tool_descriptions=self._data.registry.describe(),
            ),
            max_tokens=300,
            temperature=0.3,
        )
        return parse_reasoning(text, self._data.registry)

    async def execute_tools(self, actions: Sequence[ToolCall]) -> list[ToolResult]:
        results: list[ToolResult] = []
        for action in actions:
            try:
                value = await self._data.execute_tool(action.name, action.arguments)
                results.append(ToolResult(tool_name=action.name, arguments=action.arguments, result=value))
            except Exception as exc:
                self._logger.error("agent_tool_failed", tool=action.name, error=str(exc))
                results.append(
                    ToolResult(
                        tool_name=action.name,
                        arguments=action.arguments,
                        error=str(exc),
                    ),
                )
        return results

    async def generate_answer(
        self,
        question: str,
        trace: ReasoningTrace,
        tool_results: Sequence[ToolResult],
    ) -> str:
        llm = self._require_llm()
        await self._rate_limiter.acquire()
        text = await llm.complete(
            build_generation_prompt(question=question, trace=trace, tool_results=tool_results),
            max_tokens=50,
            temperature=0.3,
        )
        return clean_model_answer(text)

    def _require_llm(self) -> LLMClientPort:
        if self._llm is None:
            raise RuntimeError("no LLM client configured")
        return self._llm

    async def _run_offline(self, question: str, started: float) -> AgentRun:
        context = await self._data.get_context()
        draft = self._rules.answer(question, context)
        validated = await self._validator.validate(draft, question, context)
        result = AnswerResult(
            answer=validated.answer,
            confidence=validated.confidence,
            reasoning=(OFFLINE_REASONING,),
            latency_ms=_elapsed_ms(started),
        )
        self._logger.info(
            "answer_generated_offline",
            question=question,
            answer=result.answer,
            confidence=result.confidence,
            issues=list(validated.issues),
        )
        return AgentRun(result=result)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
