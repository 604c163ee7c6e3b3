"""Step definitions for free-text answer BDD scenarios."""
from __future__ import annotations

import asyncio

from pytest_bdd import given, when, then, scenarios, parsers

from test.mocks import ScriptedLLMClient

from .conftest import AnswerCtx

scenarios("../features/answer_questions.feature")


# -- Given ------------------------------------------------------------------


@given(parsers.parse("a language model that plans the tool call '{call}' and answers \"{answer}\""))
def given_planning_llm(actx: AnswerCtx, call: str, answer: str) -> None:
    reasoning = (
        "THOUGHT: Look up the stored value\n"
        "CATEGORY: salary\n"
        "ACTIONS:\n"
        f"  - {call}\n"
        "ANSWER_FORMAT: Amount in LPA\n"
    )
    actx.llm = ScriptedLLMClient([reasoning, answer, "YES"])


# -- When -------------------------------------------------------------------


@when(parsers.parse('the question "{question}" is asked'))
def when_question_asked(actx: AnswerCtx, question: str) -> None:
    actx.results.append(asyncio.run(actx.get_service().get_answer(question)))


# -- Then -------------------------------------------------------------------


@then(parsers.parse('the answer is "{answer}"'))
def then_answer_is(actx: AnswerCtx, answer: str) -> None:
    assert actx.results[-1].answer == answer


@then(parsers.parse("the confidence is {confidence:d}"))
def then_confidence_is(actx: AnswerCtx, confidence: int) -> None:
    assert actx.results[-1].confidence == confidence


@then("the answer came from the cache")
def then_from_cache(actx: AnswerCtx) -> None:
    assert actx.results[-1].from_cache is True


@then(parsers.parse("the reasoning log has {count:d} entry"))
def then_log_size(actx: AnswerCtx, count: int) -> None:
    assert len(actx.get_service().get_reasoning_log()) == count


@then(parsers.parse('the tools used were "{tools}"'))
def then_tools_used(actx: AnswerCtx, tools: str) -> None:
    assert ", ".join(actx.results[-1].tools_used) == tools


@then(parsers.parse("{count:d} model requests were counted by the rate limiter"))
def then_requests_counted(actx: AnswerCtx, count: int) -> None:
    assert actx.get_service().get_stats().rate_limiter.requests_in_window == count


@then(parsers.parse('the error is "{error}"'))
def then_error_is(actx: AnswerCtx, error: str) -> None:
    assert actx.results[-1].error == error


@then("the cache is empty")
def then_cache_empty(actx: AnswerCtx) -> None:
    assert actx.get_service().get_stats().cache.size == 0
