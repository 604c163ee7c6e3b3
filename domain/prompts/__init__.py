"""Prompt templates for the answer engine."""

from .answer_prompts import (  # noqa: F401
    build_correction_prompt,
    build_generation_prompt,
    build_reasoning_prompt,
    build_relevance_prompt,
)
from .checkbox_prompts import build_checkbox_prompt, build_profile_summary  # noqa: F401

__all__ = [
    "build_reasoning_prompt",
    "build_generation_prompt",
    "build_relevance_prompt",
    "build_correction_prompt",
    "build_checkbox_prompt",
    "build_profile_summary",
]
