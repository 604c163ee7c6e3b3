"""Prompt builders for the reason, generate and validate stages."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Sequence

from domain.models import CandidateProfile, ReasoningTrace, ToolResult


def build_reasoning_prompt(*, question: str, tool_descriptions: str) -> str:
    """Ask the model to classify the question and plan its tool calls."""

    return (
        "You are answering a Naukri.com job application question. "
        "Think step by step about what data you need.\n"
        "\n"
        f"QUESTION: {question}\n"
        "\n"
        "AVAILABLE TOOLS:\n"
        f"{tool_descriptions}\n"
        "\n"
        "THINK STEP BY STEP:\n"
        "1. What category is this question? (personal/skill/experience/salary/availability/complex)\n"
        "2. What specific data do I need to answer this?\n"
        "3. Which tool(s) should I call to get this data?\n"
        "4. What format should the answer be? (number/date/yes-no/short-text)\n"
        "\n"
        "FORMAT YOUR RESPONSE:\n"
        "THOUGHT: [your reasoning about the question]\n"
        "CATEGORY: [personal|skill|experience|salary|availability|complex]\n"
        "ACTIONS: [list of tool calls needed, one per line]\n"
        "  - tool_name(arg_value)\n"
        "  - tool_name(arg_value)\n"
        "ANSWER_FORMAT: [how the final answer should look]\n"
        "\n"
        "Example:\n"
        "THOUGHT: This asks about Java programming experience\n"
        "CATEGORY: skill\n"
        "ACTIONS:\n"
        '  - get_skill_info("Java")\n'
        'ANSWER_FORMAT: Number of years (e.g., "3 years")\n'
        "\n"
        "Now analyze the question:"
    )


def build_generation_prompt(
    *,
    question: str,
    trace: ReasoningTrace,
    tool_results: Sequence[ToolResult],
) -> str:
    """Ask for a form-field sized answer grounded in the tool results only."""

    tool_lines = "\n".join(
        f"{r.tool_name}({json.dumps(r.arguments)}) -> {json.dumps(r.result, default=str)}"
        for r in tool_results
    ) or "(no tools were called)"

    return (
        "You are answering a Naukri.com job application question. "
        "Give a VERY SHORT answer (like filling a form field).\n"
        "\n"
        f"QUESTION: {question}\n"
        "\n"
        "YOUR REASONING:\n"
        f"{trace.thought}\n"
        "\n"
        "TOOL RESULTS:\n"
        f"{tool_lines}\n"
        "\n"
        "ANSWER FORMAT REQUIREMENT:\n"
        f"{trace.answer_format}\n"
        "\n"
        "CRITICAL RULES:\n"
        "1. Answer MUST be very short (1-10 words maximum)\n"
        "2. Use ONLY information from tool results above; never invent facts\n"
        "3. If tool results are null/empty, give the best possible answer or empty string\n"
        "4. No explanations, just the answer\n"
        '5. Examples of good answers: "3 years", "Yes", "12 LPA", "Immediate"\n'
        "\n"
        "ANSWER:"
    )


def build_relevance_prompt(*, question: str, answer: str) -> str:
    return (
        f'Does the answer "{answer}" properly address the question "{question}"?\n'
        "\n"
        "Answer with just YES or NO."
    )


def build_correction_prompt(
    *,
    question: str,
    answer: str,
    issues: Sequence[str],
    profile: CandidateProfile,
) -> str:
    """Re-prompt with the previous answer and the validation issues it hit."""

    issue_lines = "\n".join(f"{i}. {issue}" for i, issue in enumerate(issues, start=1))
    if profile.is_empty():
        context_block = "No context available"
    else:
        context_block = json.dumps(
            {k: v for k, v in asdict(profile).items() if v not in (None, "")},
            indent=2,
        )

    return (
        "You gave this answer to a Naukri.com job application question, but it has issues.\n"
        "\n"
        f"QUESTION: {question}\n"
        "\n"
        f"YOUR ANSWER: {answer}\n"
        "\n"
        "ISSUES:\n"
        f"{issue_lines}\n"
        "\n"
        "USER CONTEXT:\n"
        f"{context_block}\n"
        "\n"
        "Please provide a CORRECTED answer that:\n"
        "1. Addresses the issues above\n"
        "2. Is very short (1-10 words)\n"
        "3. Uses ONLY information from user context\n"
        "4. Follows Naukri.com format (short, form-field style)\n"
        "\n"
        "CORRECTED ANSWER:"
    )
