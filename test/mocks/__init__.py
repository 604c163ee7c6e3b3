"""
Reusable fakes and in-memory implementations for tests.
"""

from .fake_candidate_repository import InMemoryCandidateRepository
from .fake_config_provider import InMemoryConfigProvider
from .fake_runtime import FixedClock, InMemoryLogger, ManualClock
from .scripted_llm_client import ScriptedLLMClient

__all__ = [
    "InMemoryCandidateRepository",
    "InMemoryConfigProvider",
    "FixedClock",
    "ManualClock",
    "InMemoryLogger",
    "ScriptedLLMClient",
]
