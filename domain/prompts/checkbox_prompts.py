"""Prompt builders for closed-option (checkbox/radio) questions."""

from __future__ import annotations

from typing import Sequence

from domain.models import CheckboxOption, UserContext

MAX_SUMMARY_SKILLS = 10


def build_profile_summary(context: UserContext) -> str:
    profile = context.profile
    parts: list[str] = []
    if profile.target_role:
        parts.append(f"- Target Role: {profile.target_role}")
    if profile.location:
        parts.append(f"- Location: {profile.location}")
    if profile.years_of_experience:
        parts.append(f"- Experience: {profile.years_of_experience} years")
    if profile.current_ctc:
        parts.append(f"- Current CTC: {profile.current_ctc} LPA")
    if profile.notice_period:
        parts.append(f"- Notice Period: {profile.notice_period}")
    if profile.availability:
        parts.append(f"- Availability: {profile.availability}")
    if context.skills:
        names = ", ".join(skill.label for skill in list(context.skills)[:MAX_SUMMARY_SKILLS])
        parts.append(f"- Skills: {names}")
    return "\n".join(parts) if parts else "No profile data available"


def build_checkbox_prompt(
    *,
    question: str,
    options: Sequence[CheckboxOption],
    context: UserContext,
) -> str:
    option_lines = "\n".join(f"{i}. {opt.label}" for i, opt in enumerate(options, start=1))

    return (
        "You are helping select the best checkbox/radio option for a Naukri.com job application.\n"
        "\n"
        f"QUESTION: {question}\n"
        "\n"
        "OPTIONS:\n"
        f"{option_lines}\n"
        "\n"
        "USER PROFILE:\n"
        f"{build_profile_summary(context)}\n"
        "\n"
        "THINK STEP BY STEP:\n"
        "1. What is this question asking about?\n"
        "2. Which user profile details are relevant?\n"
        "3. Which option best matches the user's profile?\n"
        "4. If no good match, what's the safest default option?\n"
        "\n"
        "RESPOND IN THIS FORMAT:\n"
        "REASONING: [step-by-step thinking]\n"
        f"SELECTED_OPTION: [number between 1 and {len(options)}]\n"
        "CONFIDENCE: [LOW|MEDIUM|HIGH]\n"
        "\n"
        "Example:\n"
        "REASONING: Question asks about willingness to relocate. User is already in Bangalore. "
        'Option 1 "Yes" shows flexibility even though relocation not needed.\n'
        "SELECTED_OPTION: 1\n"
        "CONFIDENCE: HIGH\n"
        "\n"
        "Now analyze:"
    )
