from __future__ import annotations

import pytest

from test.fixtures import USER_ID, SAMPLE_RESUME, sample_profile, sample_skills
from test.mocks import InMemoryCandidateRepository, InMemoryLogger, ManualClock


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def logger() -> InMemoryLogger:
    return InMemoryLogger()


@pytest.fixture()
def repository() -> InMemoryCandidateRepository:
    return InMemoryCandidateRepository(
        profiles={USER_ID: sample_profile()},
        skills={USER_ID: sample_skills()},
        resumes={USER_ID: SAMPLE_RESUME},
    )
