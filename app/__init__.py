"""Caller-facing layer package."""

from .facade import AgenticAnswerService

__all__ = ["AgenticAnswerService"]
