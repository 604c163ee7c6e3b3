"""Deterministic answers straight from the user's stored data.

Used when no LLM is configured. Nothing here invents a value: when the
profile has no data for a question the answer is an empty string and the
validator flags it.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Callable, Sequence

from domain.models import CandidateProfile, Skill, UserContext
from domain.ports import ClockPort
from domain.services.agent_tools import PHONE_SENTINEL

_GREETINGS = (
    "hi",
    "hello",
    "thank you",
    "kindly answer",
    "please answer",
    "showing interest",
)
_RESIDING_RE = re.compile(
    r"(?:residing|living|staying|located|reside|live|stay)\s+(?:in|at)\s+([a-zA-Z\s]+?)(?:\?|$)",
    re.IGNORECASE,
)
_EXPERIENCE_WORDS = ("experience", "worked", "using", "years")
_RATING_WORDS = ("rate", "rating", "proficient", "good", "scale", "expertise")


def is_answerable_question(question: str) -> bool:
    """Skip greetings and chatbot filler that is not a question."""
    if not question or not question.strip():
        return False
    lower_q = question.lower()
    if any(re.search(rf"\b{re.escape(g)}\b", lower_q) for g in _GREETINGS):
        return False
    return question.strip().endswith("?")


def parse_dob(raw: str | None) -> date | None:
    if not raw:
        return None
    text = raw.strip()
    try:
        return datetime.fromisoformat(text[:10]).date()
    except ValueError:
        pass
    for fmt in ("%d/%m/%Y", "%d-%m-%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_dob(raw: str | None) -> str:
    parsed = parse_dob(raw)
    if parsed is None:
        return raw or ""
    return parsed.strftime("%d/%m/%Y")


def _with_years(value: str | None) -> str:
    if not value:
        return ""
    return value if re.search(r"[a-zA-Z]", value) else f"{value} years"


class RuleBasedAnswerer:
    def __init__(self, *, clock: ClockPort) -> None:
        self._clock = clock

    def answer(self, question: str, context: UserContext) -> str:
        lower_q = question.lower()

        skill = self.find_matching_skill(lower_q, context.skills)
        if skill is not None:
            return self.skill_answer(lower_q, skill)

        residing = _RESIDING_RE.search(question)
        if residing:
            return self._residing_answer(residing.group(1), context.profile)

        for keywords, resolve in self._rules():
            if any(re.search(k, lower_q) for k in keywords):
                return resolve(context.profile)
        return ""

    @staticmethod
    def find_matching_skill(lower_q: str, skills: Sequence[Skill]) -> Skill | None:
        for skill in skills:
            for name in (skill.skill_name, skill.display_name):
                if name and re.search(rf"(?<!\w){re.escape(name.lower())}(?!\w)", lower_q):
                    return skill
        return None

    @staticmethod
    def skill_answer(lower_q: str, skill: Skill) -> str:
        if any(word in lower_q for word in _EXPERIENCE_WORDS) and skill.experience:
            return _with_years(skill.experience)
        if any(word in lower_q for word in _RATING_WORDS) and skill.rating is not None:
            return f"{skill.rating}/{skill.out_of or 10}"
        if skill.experience:
            return _with_years(skill.experience)
        return "Working knowledge"

    @staticmethod
    def _residing_answer(asked: str, profile: CandidateProfile) -> str:
        if not profile.location or not profile.location.strip():
            return ""
        asked_city = asked.strip().lower()
        stored = profile.location.strip().lower()
        return "Yes" if asked_city in stored or stored in asked_city else "No"

    def _age(self, profile: CandidateProfile) -> str:
        born = parse_dob(profile.dob)
        if born is None:
            return ""
        today = self._clock.now().date()
        years = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
        return f"{years} years"

    def _rules(self) -> list[tuple[tuple[str, ...], Callable[[CandidateProfile], str]]]:
        return [
            ((r"date of birth", r"\bdob\b", r"birth ?date", r"birthday"), lambda p: format_dob(p.dob)),
            ((r"\bage\b", r"how old"), self._age),
            ((r"e-?mail",), lambda p: p.email or ""),
            ((r"phone", r"mobile", r"contact number"), lambda p: PHONE_SENTINEL),
            ((r"\bname\b",), lambda p: p.name or ""),
            (
                (r"expected (?:ctc|salary|package)", r"expectation"),
                lambda p: p.expected_ctc or "",
            ),
            ((r"\bctc\b", r"salary", r"package"), lambda p: p.current_ctc or ""),
            ((r"notice", r"joining", r"\bjoin\b"), lambda p: p.notice_period or ""),
            ((r"experience",), lambda p: _with_years(p.years_of_experience)),
            ((r"location", r"\bcity\b"), lambda p: p.location or ""),
            (
                (r"availab", r"face[ -]to[ -]face", r"meeting"),
                lambda p: p.availability or "",
            ),
        ]
