"""Line grammars for free-text LLM output.

Reasoning output::

    THOUGHT: <text, may continue on following lines>
    CATEGORY: personal|skill|experience|salary|availability|complex
    ACTIONS:
      - tool_name("argument")
    ANSWER_FORMAT: <text>

Checkbox analysis output::

    REASONING: <text>
    SELECTED_OPTION: <1-based number>
    CONFIDENCE: LOW|MEDIUM|HIGH

Parsing never raises. Missing or malformed sections fall back to the
defaults of ``ReasoningTrace`` and ``OptionSelection``.
"""

from __future__ import annotations

import re
from enum import Enum

from domain.models import (
    OptionSelection,
    QuestionCategory,
    ReasoningTrace,
    SelectionConfidence,
    ToolCall,
)
from domain.services.agent_tools import ToolRegistry

_HEADER_RE = re.compile(
    r"^(?P<key>THOUGHT|CATEGORY|ACTIONS|ANSWER_FORMAT)\s*:\s*(?P<value>.*)$",
    re.IGNORECASE,
)
_CALL_RE = re.compile(
    r"^(?:(?:[-*•]|\d+[.)])\s*)?"
    r"(?P<tool>[A-Za-z_]\w*)\(\s*(?P<quote>[\"']?)(?P<arg>.*?)(?P=quote)\s*\)"
    r"(?:[\s.,;].*)?$"
)
_BULLET_RE = re.compile(r"^(?:[-*•]|\d+[.)])\s*")
_ANALYSIS_RE = re.compile(
    r"^(?P<key>REASONING|SELECTED_OPTION|CONFIDENCE)\s*:\s*(?P<value>.*)$",
    re.IGNORECASE,
)
_NUMBER_RE = re.compile(r"\d+")


class _Section(Enum):
    NONE = "none"
    THOUGHT = "thought"
    CATEGORY = "category"
    ACTIONS = "actions"
    ANSWER_FORMAT = "answer_format"


def _clean(line: str) -> str:
    return line.replace("**", "").strip()


def parse_category(raw: str) -> QuestionCategory:
    token = re.sub(r"[^a-z]", "", raw.lower())
    try:
        return QuestionCategory(token)
    except ValueError:
        return QuestionCategory.COMPLEX


def parse_tool_call(line: str, registry: ToolRegistry) -> ToolCall | None:
    """Turn ``- name("arg")`` into a call bound to the tool's first parameter."""
    match = _CALL_RE.match(line)
    if match is None:
        return None

    name = match.group("tool")
    arg = match.group("arg")
    definition = registry.get_definition(name)
    if definition is None:
        arguments = {"value": arg} if arg else {}
    elif definition.parameters:
        arguments = {next(iter(definition.parameters)): arg}
    else:
        arguments = {}
    return ToolCall(name=name, arguments=arguments)


def parse_reasoning(text: str, registry: ToolRegistry) -> ReasoningTrace:
    thought: list[str] = []
    answer_format: list[str] = []
    category = QuestionCategory.COMPLEX
    actions: list[ToolCall] = []
    section = _Section.NONE

    for raw_line in text.splitlines():
        line = _clean(raw_line)
        if not line:
            continue

        header = _HEADER_RE.match(line)
        if header is not None:
            section = _Section(header.group("key").lower())
            value = header.group("value").strip()
            if section is _Section.THOUGHT and value:
                thought.append(value)
            elif section is _Section.CATEGORY:
                category = parse_category(value)
            elif section is _Section.ANSWER_FORMAT and value:
                answer_format.append(value)
            elif section is _Section.ACTIONS and value:
                call = parse_tool_call(value, registry)
                if call is not None:
                    actions.append(call)
            continue

        if section is _Section.THOUGHT:
            thought.append(line)
        elif section is _Section.ACTIONS:
            call = parse_tool_call(line, registry)
            if call is not None:
                actions.append(call)
        elif section is _Section.ANSWER_FORMAT and not _BULLET_RE.match(line):
            answer_format.append(line)

    thought_text = " ".join(thought)
    return ReasoningTrace(
        thought=thought_text,
        category=category,
        actions=tuple(actions),
        answer_format=" ".join(answer_format),
        steps=(thought_text,) if thought_text else (),
    )


def parse_option_analysis(text: str, option_count: int) -> OptionSelection:
    reasoning = ""
    selected = 1
    confidence = SelectionConfidence.MEDIUM

    for raw_line in text.splitlines():
        match = _ANALYSIS_RE.match(_clean(raw_line))
        if match is None:
            continue
        key = match.group("key").upper()
        value = match.group("value").strip()
        if key == "REASONING":
            reasoning = value
        elif key == "SELECTED_OPTION":
            number = _NUMBER_RE.search(value)
            if number is not None:
                selected = int(number.group())
        else:
            try:
                confidence = SelectionConfidence(re.sub(r"[^A-Z]", "", value.upper()))
            except ValueError:
                confidence = SelectionConfidence.MEDIUM

    if selected < 1 or selected > option_count:
        selected = 1

    return OptionSelection(
        selected_index=selected - 1,
        reasoning=reasoning,
        confidence=confidence,
    )
