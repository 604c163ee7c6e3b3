"""Data tools the reasoning stage may request.

Every tool reads from an already-loaded ``UserContext``. Tools return
``None`` when the user has no data for the request; that is an answer, not
an error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from domain.models import ToolCall, ToolDefinition, UserContext
from domain.ports import LoggerPort

PHONE_SENTINEL = "Will be shared during interview"

_FIELD_SEPARATORS = re.compile(r"[_\s\-]")
_JSON_TYPES: dict[str, type | tuple[type, ...]] = {
    "string": str,
    "integer": int,
    "number": (int, float),
    "boolean": bool,
}


class ToolNotFoundError(LookupError):
    """Raised when a tool name is not part of the registry."""


class ToolArgumentError(ValueError):
    """Raised when tool arguments do not match the declared schema."""


Executor = Callable[[Mapping[str, Any], UserContext], Any]


@dataclass(frozen=True)
class AgentTool:
    definition: ToolDefinition
    execute: Executor


def get_user_profile(args: Mapping[str, Any], context: UserContext) -> Any:
    profile = context.profile
    fields = {
        "name": profile.name,
        "email": profile.email,
        "phone": PHONE_SENTINEL,
        "currentctc": profile.current_ctc,
        "expectedctc": profile.expected_ctc,
        "location": profile.location,
        "experience": profile.years_of_experience,
        "yearsofexperience": profile.years_of_experience,
        "noticeperiod": profile.notice_period,
        "availability": profile.availability,
        "dob": profile.dob,
        "dateofbirth": profile.dob,
        "targetrole": profile.target_role,
    }
    value = fields.get(_FIELD_SEPARATORS.sub("", args["field"].lower()))
    return value or None


def get_skill_info(args: Mapping[str, Any], context: UserContext) -> dict[str, Any] | None:
    if not context.skills:
        return None

    needle = args["skill_name"].lower().strip()

    def names(skill: Any) -> tuple[str, str]:
        return (skill.skill_name or "").lower(), (skill.display_name or "").lower()

    match = next((s for s in context.skills if needle in names(s)), None)
    if match is None:
        match = next(
            (s for s in context.skills if any(needle in n for n in names(s))),
            None,
        )
    if match is None:
        return None

    return {
        "name": match.label,
        "rating": match.rating,
        "out_of": match.out_of,
        "experience": match.experience,
    }


def search_resume(args: Mapping[str, Any], context: UserContext) -> str | None:
    if not context.resume_text.strip():
        return None

    needle = args["query"].lower()
    hits = [line for line in context.resume_text.split("\n") if needle in line.lower()]
    if not hits:
        return None
    return "\n".join(hits[:3])


def get_checkbox_context(args: Mapping[str, Any], context: UserContext) -> dict[str, Any]:
    profile = context.profile
    return {
        "target_role": profile.target_role or "",
        "location": profile.location or "",
        "experience": profile.years_of_experience or "0",
        "skills": [skill.label for skill in context.skills],
        "availability": profile.availability or "",
        "notice_period": profile.notice_period or "",
    }


AGENT_TOOLS: tuple[AgentTool, ...] = (
    AgentTool(
        definition=ToolDefinition(
            name="get_user_profile",
            description=(
                "Get specific user profile field (name, email, currentCTC, expectedCTC, "
                "location, experience, noticePeriod, availability, dob, targetRole)"
            ),
            parameters={
                "field": {
                    "type": "string",
                    "description": 'The profile field to retrieve (e.g., "name", "currentCTC", "location")',
                },
            },
        ),
        execute=get_user_profile,
    ),
    AgentTool(
        definition=ToolDefinition(
            name="get_skill_info",
            description="Get skill information (rating, experience) with fuzzy matching on skill name",
            parameters={
                "skill_name": {
                    "type": "string",
                    "description": 'The skill name to search for (e.g., "Java", "React", "Spring Boot")',
                },
            },
        ),
        execute=get_skill_info,
    ),
    AgentTool(
        definition=ToolDefinition(
            name="search_resume",
            description="Search resume text for keywords and return relevant lines",
            parameters={
                "query": {
                    "type": "string",
                    "description": "The keyword to search for in the resume",
                },
            },
        ),
        execute=search_resume,
    ),
    AgentTool(
        definition=ToolDefinition(
            name="get_checkbox_context",
            description="Get user preferences context for checkbox/radio button selection",
            parameters={},
        ),
        execute=get_checkbox_context,
    ),
)


class ToolRegistry:
    """Name-keyed registry that validates arguments before dispatch."""

    def __init__(self, *, logger: LoggerPort, tools: tuple[AgentTool, ...] = AGENT_TOOLS) -> None:
        self._logger = logger
        self._tools = {tool.definition.name: tool for tool in tools}

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[ToolDefinition]:
        return [tool.definition for tool in self._tools.values()]

    def get_definition(self, name: str) -> ToolDefinition | None:
        tool = self._tools.get(name)
        return tool.definition if tool else None

    def describe(self) -> str:
        """Numbered one-line summaries, as shown to the reasoning stage."""
        return "\n".join(
            f"{i}. {d.name}({', '.join(d.parameters)}) - {d.description}"
            for i, d in enumerate(self.definitions(), start=1)
        )

    def execute(self, call: ToolCall, context: UserContext) -> Any:
        tool = self._tools.get(call.name)
        if tool is None:
            raise ToolNotFoundError(f'Tool "{call.name}" not found')

        try:
            self._validate_arguments(tool.definition, call.arguments)
            result = tool.execute(call.arguments, context)
        except Exception as exc:
            self._logger.error(
                "tool_failed",
                tool=call.name,
                arguments=call.arguments,
                error=str(exc),
            )
            return None

        self._logger.info("tool_executed", tool=call.name, arguments=call.arguments, found=result is not None)
        return result

    @staticmethod
    def _validate_arguments(definition: ToolDefinition, arguments: Mapping[str, Any]) -> None:
        for name, schema in definition.parameters.items():
            if name not in arguments:
                if "default" in schema:
                    continue
                raise ToolArgumentError(f"{definition.name}: missing argument '{name}'")
            expected = _JSON_TYPES.get(schema.get("type", ""))
            if expected is not None and not isinstance(arguments[name], expected):
                raise ToolArgumentError(
                    f"{definition.name}: argument '{name}' must be {schema['type']}",
                )
