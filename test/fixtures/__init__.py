"""Shared candidate data for unit and integration tests."""

from __future__ import annotations

from domain.models import CandidateProfile, Skill, UserContext

USER_ID = "user-1"

SAMPLE_RESUME = "\n".join([
    "Jane Doe - Senior Software Engineer",
    "Built payment APIs in Java and Spring Boot serving 2M users",
    "Led migration of React dashboards to TypeScript",
    "Mentored 4 engineers; ran Java guild sessions",
    "Designed Kafka pipelines for order events",
    "Java performance tuning for GC pauses",
])


def sample_profile() -> CandidateProfile:
    return CandidateProfile(
        name="Jane Doe",
        email="jane.naukri@example.com",
        target_role="Backend Engineer",
        location="Bangalore",
        current_ctc="18",
        expected_ctc="25",
        notice_period="30 days",
        years_of_experience="6",
        availability="Weekdays after 6 PM",
        dob="1995-03-14",
    )


def sample_skills() -> tuple[Skill, ...]:
    return (
        Skill(skill_name="java", display_name="Java", rating=8, out_of=10, experience="5"),
        Skill(skill_name="spring boot", display_name="Spring Boot", rating=7, out_of=10, experience="4"),
        Skill(skill_name="react", display_name="React", rating=6, out_of=10, experience=None),
    )


def sample_context() -> UserContext:
    return UserContext(
        user_id=USER_ID,
        profile=sample_profile(),
        skills=sample_skills(),
        resume_text=SAMPLE_RESUME,
    )
