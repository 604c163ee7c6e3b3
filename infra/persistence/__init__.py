"""SQLite-backed persistence adapter for the candidate data port."""

from .sqlite_candidate_repository import SQLiteCandidateRepository

__all__ = ["SQLiteCandidateRepository"]
