"""Shared fixtures and steps for BDD step definitions."""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers

from app import AgenticAnswerService
from domain.models import AnswerResult, CandidateProfile, OptionSelection
from test.mocks import InMemoryCandidateRepository, InMemoryLogger, ManualClock, ScriptedLLMClient

USER_ID = "bdd-user"


@dataclass
class AnswerCtx:
    """Holds mutable state shared across BDD steps."""

    repository: InMemoryCandidateRepository = field(default_factory=InMemoryCandidateRepository)
    clock: ManualClock = field(default_factory=ManualClock)
    logger: InMemoryLogger = field(default_factory=InMemoryLogger)
    llm: ScriptedLLMClient | None = None
    service: AgenticAnswerService | None = None
    results: list[AnswerResult] = field(default_factory=list)
    selection: OptionSelection | None = None

    def get_service(self) -> AgenticAnswerService:
        if self.service is None:
            self.service = AgenticAnswerService(
                user_id=USER_ID,
                repository=self.repository,
                clock=self.clock,
                logger=self.logger,
                llm=self.llm,
                sleep=self.clock.sleep,
            )
        return self.service


@pytest.fixture()
def actx() -> AnswerCtx:
    return AnswerCtx()


# -- shared Given steps -----------------------------------------------------


@given(
    parsers.parse(
        'a candidate in "{location}" with notice period "{notice}" and current CTC "{ctc}"',
    ),
)
def given_candidate(actx: AnswerCtx, location: str, notice: str, ctc: str) -> None:
    actx.repository = InMemoryCandidateRepository(
        profiles={
            USER_ID: CandidateProfile(
                name="Jane Doe",
                location=location,
                notice_period=notice,
                current_ctc=ctc,
            ),
        },
    )


@given("no language model is configured")
def given_no_llm(actx: AnswerCtx) -> None:
    actx.llm = None


@given(parsers.parse('a language model that fails with "{message}"'))
def given_failing_llm(actx: AnswerCtx, message: str) -> None:
    actx.llm = ScriptedLLMClient([RuntimeError(message)])
