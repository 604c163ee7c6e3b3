"""Infrastructure adapters – concrete implementations of domain ports."""

from .config import FileSystemConfigProvider
from .llm import OpenAIChatClient
from .persistence import SQLiteCandidateRepository
from .runtime import StructuredLogger, SystemClock

__all__ = [
    "FileSystemConfigProvider",
    "OpenAIChatClient",
    "SQLiteCandidateRepository",
    "SystemClock",
    "StructuredLogger",
]
